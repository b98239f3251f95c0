# certgen/services/issuer.py

"""
Issuance service.

The four end-to-end operations behind the CLI. Every operation validates its
request first; no key is generated and nothing is signed until validation and
the output directory check have passed. Progress is reported as a stream of
IssuanceEvent values handed to an optional callable; this module never prints.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa

from certgen.constants import ARTIFACT_PREFIX
from certgen.models.requests import (
    CARequest,
    IssuerReference,
    LeafRequest,
    SignRequest,
    TrustRequest,
)
from certgen.services.cert_errors import ArtifactIOError, ChainError
from certgen.services.signer import sign, sign_existing
from certgen.services.storage import write_artifact
from certgen.services.template import build_ca_template, build_leaf_template
from certgen.services.trust import TrustInstaller, select_trust_installer
from certgen.services.validator import validate_ca, validate_leaf, validate_sign, validate_trust
from certgen.utils.crypto import generate_key_pair, load_certificate_pem, load_private_key_pem
from certgen.utils.files import ensure_writable_directory, read_bytes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuanceEvent:
    """
    One progress notification.

    `stage` is emitted twice: once with done=False when it starts and once
    with done=True when it completes. A stage that fails never reports done.
    """
    operation: str
    stage: str
    done: bool


@dataclass(frozen=True)
class IssuanceResult:
    certificate: x509.Certificate
    certificate_path: Path
    key_path: Optional[Path] = None


EventSink = Callable[[IssuanceEvent], None]


# ---------------------
# Operations
# ---------------------

def issue_ca(
        request: CARequest,
        *,
        on_event: Optional[EventSink] = None,
        trust_installer: Optional[TrustInstaller] = None
    ) -> IssuanceResult:
    """
    Issue a root (self-signed) or intermediate (parent-signed) CA certificate.

    Args:
        request: Raw CA request.
        on_event: Optional progress sink.
        trust_installer: Used when the request asks for the new root to be
            trusted. Defaults to the installer for the running platform.

    Returns:
        IssuanceResult

    Raises:
        ConfigValidationError, ChainError, CryptoError, ArtifactIOError, TrustInstallError
    """
    operation = "ca"

    with _stage(on_event, operation, "validate"):
        validated = validate_ca(request)

    with _stage(on_event, operation, "prepare_output"):
        ensure_writable_directory(validated.output_dir)

    if not validated.is_root:
        with _stage(on_event, operation, "load_issuer"):
            issuer_certificate, issuer_key = _load_issuer(validated.issuer)

    with _stage(on_event, operation, "generate_key"):
        key_pair = generate_key_pair(validated.key_size)
        log.debug("Generated a %d-bit RSA key", key_pair.key_size)

    with _stage(on_event, operation, "sign"):
        template = build_ca_template(validated)
        if validated.is_root:
            issued = sign(template, template, key_pair.public_key, key_pair.private_key)
        else:
            issued = sign(template, issuer_certificate, key_pair.public_key, issuer_key)

    with _stage(on_event, operation, "write"):
        paths = write_artifact(
            validated.output_dir,
            ARTIFACT_PREFIX[validated.cert_type.value],
            issued.pem,
            key_pair.private_key_pem(),
        )

    if validated.trust:
        with _stage(on_event, operation, "trust"):
            installer = trust_installer or select_trust_installer()
            installer.install_root_certificate(paths.certificate_path)

    log.info("Issued %s CA %s", validated.cert_type.value, validated.subject.common_name)

    return IssuanceResult(
        certificate=issued.certificate,
        certificate_path=paths.certificate_path,
        key_path=paths.key_path,
    )


def issue_leaf(request: LeafRequest, *, on_event: Optional[EventSink] = None) -> IssuanceResult:
    """
    Issue an end-entity certificate signed by an existing CA.

    Raises:
        ConfigValidationError, ChainError, CryptoError, ArtifactIOError
    """
    operation = "cert"

    with _stage(on_event, operation, "validate"):
        validated = validate_leaf(request)

    with _stage(on_event, operation, "prepare_output"):
        ensure_writable_directory(validated.output_dir)

    with _stage(on_event, operation, "load_issuer"):
        issuer_certificate, issuer_key = _load_issuer(validated.issuer)

    with _stage(on_event, operation, "generate_key"):
        key_pair = generate_key_pair(validated.key_size)
        log.debug("Generated a %d-bit RSA key", key_pair.key_size)

    with _stage(on_event, operation, "sign"):
        template = build_leaf_template(validated)
        issued = sign(template, issuer_certificate, key_pair.public_key, issuer_key)

    with _stage(on_event, operation, "write"):
        paths = write_artifact(
            validated.output_dir,
            ARTIFACT_PREFIX["leaf"],
            issued.pem,
            key_pair.private_key_pem(),
        )

    log.info("Issued certificate %s", validated.subject.common_name)

    return IssuanceResult(
        certificate=issued.certificate,
        certificate_path=paths.certificate_path,
        key_path=paths.key_path,
    )


def sign_certificate(request: SignRequest, *, on_event: Optional[EventSink] = None) -> IssuanceResult:
    """
    Counter-sign an existing certificate with a CA. Only the certificate is written.

    Raises:
        ConfigValidationError, ChainError, CryptoError, ArtifactIOError
    """
    operation = "sign"

    with _stage(on_event, operation, "validate"):
        validated = validate_sign(request)

    with _stage(on_event, operation, "prepare_output"):
        ensure_writable_directory(validated.output_dir)

    with _stage(on_event, operation, "load_issuer"):
        certificate = load_certificate_pem(_read_material(validated.cert_path), validated.cert_path)
        subject_key = load_private_key_pem(_read_material(validated.key_path), validated.key_path)
        issuer_certificate, issuer_key = _load_issuer(validated.issuer)

    with _stage(on_event, operation, "sign"):
        issued = sign_existing(certificate, issuer_certificate, issuer_key, subject_key.public_key())

    with _stage(on_event, operation, "write"):
        paths = write_artifact(validated.output_dir, ARTIFACT_PREFIX["signed"], issued.pem)

    return IssuanceResult(certificate=issued.certificate, certificate_path=paths.certificate_path)


def trust_certificate(
        request: TrustRequest,
        *,
        trust_installer: TrustInstaller,
        on_event: Optional[EventSink] = None
    ) -> IssuanceResult:
    """
    Copy a CA certificate into the output directory and install the copy
    into the operating system trust store.

    Raises:
        ConfigValidationError, ChainError, ArtifactIOError, TrustInstallError
    """
    operation = "trust"

    with _stage(on_event, operation, "validate"):
        validated = validate_trust(request)

    with _stage(on_event, operation, "prepare_output"):
        ensure_writable_directory(validated.output_dir)

    with _stage(on_event, operation, "load_certificate"):
        pem = _read_material(validated.cert_path)
        certificate = load_certificate_pem(pem, validated.cert_path)

    with _stage(on_event, operation, "write"):
        paths = write_artifact(validated.output_dir, ARTIFACT_PREFIX["trusted"], pem)

    with _stage(on_event, operation, "trust"):
        trust_installer.install_root_certificate(paths.certificate_path)

    return IssuanceResult(certificate=certificate, certificate_path=paths.certificate_path)


# ---------------------
# Helpers
# ---------------------

@contextmanager
def _stage(on_event: Optional[EventSink], operation: str, stage: str) -> Iterator[None]:
    log.debug("%s: %s", operation, stage)
    _emit(on_event, IssuanceEvent(operation, stage, False))
    yield
    _emit(on_event, IssuanceEvent(operation, stage, True))


def _emit(on_event: Optional[EventSink], event: IssuanceEvent) -> None:
    if on_event is not None:
        on_event(event)


def _read_material(path: str) -> bytes:
    try:
        return read_bytes(path)
    except ArtifactIOError as exc:
        raise ChainError("Unable to read certificate material", path) from exc


def _load_issuer(reference: IssuerReference) -> Tuple[x509.Certificate, rsa.RSAPrivateKey]:
    certificate = load_certificate_pem(_read_material(reference.cert_path), reference.cert_path)
    private_key = load_private_key_pem(_read_material(reference.key_path), reference.key_path)
    return certificate, private_key
