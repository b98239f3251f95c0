# certgen/services/validator.py

"""
Configuration validator.

Turns raw request models into their frozen, fully-defaulted counterparts.
Only *absence* of a value triggers defaulting; an explicit value outside the
class (or root) bounds is rejected with a ConfigValidationError naming the
field and the computed limit. Referenced files are checked for existence
only, parsing is left to the signer.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from certgen.constants import DEFAULT_OUTPUT_DIR
from certgen.models.requests import (
    CARequest,
    CertificateClass,
    CertificateType,
    IssuerReference,
    LeafRequest,
    SignRequest,
    Subject,
    TrustRequest,
    ValidatedCARequest,
    ValidatedLeafRequest,
    ValidatedSignRequest,
    ValidatedTrustRequest,
)
from certgen.services.cert_errors import ConfigValidationError
from certgen.services.policy import (
    ROOT_MIN_CLASS,
    ROOT_MIN_KEY_SIZE,
    ROOT_MIN_VALIDITY_DAYS,
    PolicyRequirements,
    resolve,
    resolve_class,
)

log = logging.getLogger(__name__)


# ---------------------
# Public API
# ---------------------

def validate_ca(request: CARequest) -> ValidatedCARequest:
    """
    Validate a root or intermediate CA request.

    Raises:
        ConfigValidationError
    """
    if request.cert_type is CertificateType.LEAF:
        raise ConfigValidationError("type", "CA certificates must be of type root or intermediate")

    subject = _validate_subject(request)
    cert_class = _resolve_class(request.cert_class)
    requirements = resolve(cert_class)
    is_root = request.cert_type is CertificateType.ROOT
    kind = "CA"

    key_size = _validate_key_size(request.key_size, requirements, cert_class, kind)
    validity_days = _default_validity(request.validity_days, requirements)

    if is_root:
        # Root floors raise the defaults; explicit values are checked as given
        if not request.key_size or request.key_size <= 0:
            key_size = max(key_size, ROOT_MIN_KEY_SIZE)
        if not request.validity_days or request.validity_days <= 0:
            validity_days = max(validity_days, ROOT_MIN_VALIDITY_DAYS)
        _validate_root(cert_class, key_size, validity_days)
    else:
        _check_validity_ceiling(validity_days, requirements, cert_class, kind)

    issuer = None
    if not is_root:
        issuer = _validate_issuer_paths(request.ca_cert, request.ca_key, "caCert", "caKey")

    extras = request.class3_extras
    if not extras.is_empty() and cert_class is not CertificateClass.CLASS_3:
        log.warning("Class 3 extras are ignored for Class %d certificates", cert_class)

    return ValidatedCARequest(
        subject=subject,
        cert_class=cert_class,
        cert_type=request.cert_type,
        key_size=key_size,
        validity_days=validity_days,
        output_dir=normalise_output_dir(request.output_dir),
        crl_distribution_points=_ascii_urls("crlDistributionPoints", extras.crl_distribution_points),
        ocsp_servers=_ascii_urls("ocspServers", extras.ocsp_servers),
        issuing_certificate_urls=_ascii_urls("issuingCertificateUrls", extras.issuing_certificate_urls),
        issuer=issuer,
        trust=bool(request.trust and is_root),
    )


def validate_leaf(request: LeafRequest) -> ValidatedLeafRequest:
    """
    Validate an end-entity certificate request.

    Raises:
        ConfigValidationError
    """
    subject = _validate_subject(request)
    cert_class = _resolve_class(request.cert_class)
    requirements = resolve(cert_class)
    kind = "certificate"

    key_size = _validate_key_size(request.key_size, requirements, cert_class, kind)
    validity_days = _default_validity(request.validity_days, requirements)
    _check_validity_ceiling(validity_days, requirements, cert_class, kind)

    dns_names = tuple(name.strip() for name in request.dns_names if name and name.strip())
    if not dns_names:
        dns_names = (subject.common_name,)
    dns_names = tuple(_ascii_dns_name("dnsNames", name) for name in dns_names)

    output_dir = normalise_output_dir(request.output_dir)
    issuer = _validate_issuer_paths(request.ca_cert, request.ca_key, "caCert", "caKey")

    return ValidatedLeafRequest(
        subject=subject,
        cert_class=cert_class,
        key_size=key_size,
        validity_days=validity_days,
        dns_names=dns_names,
        issuer=issuer,
        output_dir=output_dir,
    )


def validate_sign(request: SignRequest) -> ValidatedSignRequest:
    """
    Validate a counter-signing request.

    All four path fields must be present before any of them is checked on disk.

    Raises:
        ConfigValidationError
    """
    fields = (
        ("certPath", request.cert_path, "certificate"),
        ("keyPath", request.key_path, "certificate key"),
        ("caCertPath", request.ca_cert_path, "CA certificate"),
        ("caKeyPath", request.ca_key_path, "CA private key"),
    )

    for name, value, _ in fields:
        _require(name, value)

    for name, value, label in fields:
        _require_file(name, value, label)

    return ValidatedSignRequest(
        cert_path=request.cert_path,
        key_path=request.key_path,
        issuer=IssuerReference(cert_path=request.ca_cert_path, key_path=request.ca_key_path),
        output_dir=normalise_output_dir(request.output_dir),
    )


def validate_trust(request: TrustRequest) -> ValidatedTrustRequest:
    """
    Validate a trust-store installation request.

    Raises:
        ConfigValidationError
    """
    _require("certPath", request.cert_path)
    _require_file("certPath", request.cert_path, "certificate")

    return ValidatedTrustRequest(
        cert_path=request.cert_path,
        output_dir=normalise_output_dir(request.output_dir),
    )


def normalise_output_dir(output_dir: Optional[str]) -> str:
    """
    Shared output directory normalisation: default then clean the path
    """
    if output_dir is None or not str(output_dir).strip():
        output_dir = DEFAULT_OUTPUT_DIR
    return os.path.normpath(str(output_dir).strip())


# ---------------------
# Helpers
# ---------------------

def _require(field: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise ConfigValidationError(field, f"{field} is required")
    return str(value).strip()


def _require_file(field: str, path: str, label: str) -> None:
    if not os.path.exists(path):
        raise ConfigValidationError(field, f"{label} not found at {path}")


def _validate_subject(request) -> Subject:
    common_name = _require("commonName", request.common_name)
    organization = _require("organization", request.organization)
    country = _require("country", request.country)

    if len(country) != 2:
        raise ConfigValidationError("country", "country must be a two-letter country code")

    return Subject(
        common_name=common_name,
        organization=organization,
        country=country.upper(),
        organizational_unit=(request.organizational_unit or "").strip(),
        province=(request.province or "").strip(),
        locality=(request.locality or "").strip(),
    )


def _resolve_class(value: Optional[int]) -> CertificateClass:
    if not value:
        return CertificateClass.CLASS_1

    cert_class = resolve_class(value)

    if cert_class is None:
        log.warning("Unknown certificate class %r, falling back to Class 1 requirements", value)
        return CertificateClass.CLASS_1

    return cert_class


def _validate_key_size(
        key_size: Optional[int],
        requirements: PolicyRequirements,
        cert_class: CertificateClass,
        kind: str
    ) -> int:
    if key_size is None or key_size <= 0:
        return requirements.min_key_size

    if key_size < requirements.min_key_size:
        raise ConfigValidationError(
            "keySize",
            f"keySize must be at least {requirements.min_key_size} bits "
            f"for Class {int(cert_class)} {kind}",
            limit=requirements.min_key_size,
        )

    return key_size


def _default_validity(validity_days: Optional[int], requirements: PolicyRequirements) -> int:
    if validity_days is None or validity_days <= 0:
        return requirements.max_validity_days
    return validity_days


def _check_validity_ceiling(
        validity_days: int,
        requirements: PolicyRequirements,
        cert_class: CertificateClass,
        kind: str
    ) -> None:
    if validity_days > requirements.max_validity_days:
        raise ConfigValidationError(
            "validityDays",
            f"validity period cannot exceed {requirements.max_validity_days} days "
            f"for Class {int(cert_class)} {kind}",
            limit=requirements.max_validity_days,
        )


def _validate_root(cert_class: CertificateClass, key_size: int, validity_days: int) -> None:
    if cert_class < ROOT_MIN_CLASS:
        raise ConfigValidationError(
            "class", "root certificates must be Class 2 or higher", limit=int(ROOT_MIN_CLASS)
        )

    if key_size < ROOT_MIN_KEY_SIZE:
        raise ConfigValidationError(
            "keySize",
            f"root certificates must use at least {ROOT_MIN_KEY_SIZE}-bit keys",
            limit=ROOT_MIN_KEY_SIZE,
        )

    if validity_days < ROOT_MIN_VALIDITY_DAYS:
        raise ConfigValidationError(
            "validityDays",
            "root certificates should have at least 5 years validity",
            limit=ROOT_MIN_VALIDITY_DAYS,
        )


def _validate_issuer_paths(
        cert_path: Optional[str],
        key_path: Optional[str],
        cert_field: str,
        key_field: str
    ) -> IssuerReference:
    cert_path = _require(cert_field, cert_path)
    key_path = _require(key_field, key_path)

    _require_file(cert_field, cert_path, "CA certificate")
    _require_file(key_field, key_path, "CA private key")

    return IssuerReference(cert_path=cert_path, key_path=key_path)


# Characters left alone when percent-encoding the non-host parts of a URL
_URL_SAFE = "/:@!$&'()*+,;=%?~"


def _ascii_dns_name(field: str, name: str) -> str:
    """
    A-label form of a DNS name. ASCII labels, including a leading wildcard,
    pass through unchanged; other labels are IDNA encoded.
    """
    labels = []

    for label in name.split("."):
        if label.isascii():
            labels.append(label)
            continue
        try:
            labels.append(label.encode("idna").decode("ascii"))
        except UnicodeError as e:
            raise ConfigValidationError(field, f"{field} entry {name!r} is not a valid domain name") from e

    return ".".join(labels)


def _ascii_url(field: str, url: str) -> str:
    if url.isascii():
        return url

    parts = urlsplit(url)

    try:
        hostname, port = parts.hostname, parts.port
    except ValueError as e:
        raise ConfigValidationError(field, f"{field} entry {url!r} is not a valid URL") from e

    if not parts.scheme or not hostname:
        raise ConfigValidationError(field, f"{field} entry {url!r} is not a valid URL")

    host = _ascii_dns_name(field, hostname)
    if ":" in host:
        host = f"[{host}]"

    netloc = host if port is None else f"{host}:{port}"
    userinfo, at, _ = parts.netloc.rpartition("@")
    if at:
        netloc = f"{quote(userinfo, safe=':%')}@{netloc}"

    return urlunsplit((
        parts.scheme,
        netloc,
        quote(parts.path, safe=_URL_SAFE),
        quote(parts.query, safe=_URL_SAFE),
        quote(parts.fragment, safe=_URL_SAFE),
    ))


def _ascii_urls(field: str, urls: Iterable[str]) -> Tuple[str, ...]:
    """ Stripped, non-empty URLs in ASCII form with IDNA hosts """
    return tuple(_ascii_url(field, url.strip()) for url in urls if url and url.strip())
