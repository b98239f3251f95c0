# certgen/services/signer.py

"""
Signer.

Turns a certificate template (or an existing certificate) plus an issuer into
a signed, re-parsed certificate. Roots are signed by their own key with the
template acting as issuer; everything else is signed by a parent CA, whose
subject key identifier becomes the child's authority key identifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import AuthorityInformationAccessOID, ExtensionOID

from certgen.services.cert_errors import ChainError, CryptoError
from certgen.services.template import CertificateTemplate
from certgen.utils.crypto import certificate_to_pem

log = logging.getLogger(__name__)

Issuer = Union[CertificateTemplate, x509.Certificate]


@dataclass(frozen=True)
class IssuedCertificate:
    """ Immutable result of a signing operation """
    serial_number: int
    der_bytes: bytes
    certificate: x509.Certificate

    @property
    def pem(self) -> bytes:
        return certificate_to_pem(self.certificate)

    @property
    def subject(self) -> x509.Name:
        return self.certificate.subject

    @property
    def issuer(self) -> x509.Name:
        return self.certificate.issuer


# ---------------------
# Public API
# ---------------------

def sign(
        template: CertificateTemplate,
        issuer: Issuer,
        subject_public_key: rsa.RSAPublicKey,
        issuer_private_key: rsa.RSAPrivateKey,
    ) -> IssuedCertificate:
    """
    Sign a certificate template.

    Args:
        template: The unsigned certificate description.
        issuer: The template itself for self-signed roots, otherwise the
            parent CA certificate.
        subject_public_key: Public key to bind into the certificate.
        issuer_private_key: Key that produces the signature.

    Returns:
        IssuedCertificate

    Raises:
        ChainError: The parent CA cannot issue this certificate.
        CryptoError: The template holds values the certificate cannot carry,
            signing failed or the result does not re-parse.
    """
    if issuer is template:
        issuer_name = template.subject
        authority_key_id = template.authority_key_id or template.subject_key_id
    else:
        _check_issuer(issuer, issuer_private_key, issuing_ca=template.is_ca)
        issuer_name = issuer.subject
        authority_key_id = _issuer_key_identifier(issuer)

    try:
        builder = _template_builder(template, issuer_name, authority_key_id, subject_public_key)
    except (ValueError, TypeError) as exc:
        raise CryptoError(f"Invalid certificate contents: {exc}") from exc

    return _sign_builder(builder, issuer_private_key)


def sign_existing(
        certificate: x509.Certificate,
        issuer_certificate: x509.Certificate,
        issuer_private_key: rsa.RSAPrivateKey,
        subject_public_key: rsa.RSAPublicKey,
    ) -> IssuedCertificate:
    """
    Counter-sign an existing certificate with a CA.

    The existing certificate's subject, serial number, validity and extensions
    are reused as-is; only the issuer name and authority key identifier are
    replaced with the issuer's.

    Raises:
        ChainError: The issuer cannot issue this certificate.
        CryptoError: The subject key does not belong to the certificate, or signing failed.
    """
    if not _same_public_key(subject_public_key, certificate.public_key()):
        raise CryptoError("Certificate private key does not match the certificate.")

    is_ca = _basic_constraints(certificate).ca if _has_basic_constraints(certificate) else False
    _check_issuer(issuer_certificate, issuer_private_key, issuing_ca=is_ca)

    try:
        builder = _existing_builder(certificate, issuer_certificate, subject_public_key)
    except (ValueError, TypeError) as exc:
        raise CryptoError(f"Invalid certificate contents: {exc}") from exc

    return _sign_builder(builder, issuer_private_key)


def is_issued_by(certificate: x509.Certificate, issuer_certificate: x509.Certificate) -> bool:
    """
    True if `certificate` names `issuer_certificate` as issuer and its
    signature verifies with the issuer's public key.
    """
    try:
        certificate.verify_directly_issued_by(issuer_certificate)
    except (ValueError, TypeError, InvalidSignature) as exc:
        log.debug("Issuer check failed: %s", exc)
        return False

    return True


# ---------------------
# Helpers
# ---------------------

def _template_builder(
        template: CertificateTemplate,
        issuer_name: x509.Name,
        authority_key_id: Optional[bytes],
        subject_public_key: rsa.RSAPublicKey,
    ) -> x509.CertificateBuilder:
    builder = (
        x509.CertificateBuilder()
        .subject_name(template.subject)
        .issuer_name(issuer_name)
        .public_key(subject_public_key)
        .serial_number(template.serial_number)
        .not_valid_before(template.not_before)
        .not_valid_after(template.not_after)
    )

    builder = builder.add_extension(
        x509.BasicConstraints(
            ca=template.is_ca,
            path_length=template.path_length if template.is_ca else None
        ),
        critical=True
    )
    builder = builder.add_extension(template.key_usage.to_extension(), critical=True)

    if template.extended_key_usages:
        builder = builder.add_extension(
            x509.ExtendedKeyUsage(list(template.extended_key_usages)),
            critical=False
        )

    # SKI: from the template, or from the SUBJECT public key
    if template.subject_key_id is not None:
        ski = x509.SubjectKeyIdentifier(template.subject_key_id)
    else:
        ski = x509.SubjectKeyIdentifier.from_public_key(subject_public_key)
    builder = builder.add_extension(ski, critical=False)

    # AKI: from the ISSUER
    if authority_key_id is not None:
        builder = builder.add_extension(_authority_key_identifier(authority_key_id), critical=False)

    if template.dns_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(name) for name in template.dns_names]),
            critical=False
        )

    if template.policy_oids:
        builder = builder.add_extension(
            x509.CertificatePolicies([
                x509.PolicyInformation(oid, None) for oid in template.policy_oids
            ]),
            critical=False
        )

    if template.crl_distribution_points:
        builder = builder.add_extension(
            x509.CRLDistributionPoints([
                x509.DistributionPoint(
                    full_name=[x509.UniformResourceIdentifier(url)],
                    relative_name=None,
                    reasons=None,
                    crl_issuer=None
                )
                for url in template.crl_distribution_points
            ]),
            critical=False
        )

    access_descriptions = [
        x509.AccessDescription(AuthorityInformationAccessOID.OCSP,
                               x509.UniformResourceIdentifier(url))
        for url in template.ocsp_servers
    ] + [
        x509.AccessDescription(AuthorityInformationAccessOID.CA_ISSUERS,
                               x509.UniformResourceIdentifier(url))
        for url in template.issuing_certificate_urls
    ]
    if access_descriptions:
        builder = builder.add_extension(
            x509.AuthorityInformationAccess(access_descriptions),
            critical=False
        )

    return builder


def _existing_builder(
        certificate: x509.Certificate,
        issuer_certificate: x509.Certificate,
        subject_public_key: rsa.RSAPublicKey,
    ) -> x509.CertificateBuilder:
    builder = (
        x509.CertificateBuilder()
        .subject_name(certificate.subject)
        .issuer_name(issuer_certificate.subject)
        .public_key(subject_public_key)
        .serial_number(certificate.serial_number)
        .not_valid_before(certificate.not_valid_before_utc)
        .not_valid_after(certificate.not_valid_after_utc)
    )

    for extension in certificate.extensions:
        if extension.oid == ExtensionOID.AUTHORITY_KEY_IDENTIFIER:
            continue
        builder = builder.add_extension(extension.value, critical=extension.critical)

    return builder.add_extension(
        _authority_key_identifier(_issuer_key_identifier(issuer_certificate)),
        critical=False
    )


def _sign_builder(builder: x509.CertificateBuilder, private_key: rsa.RSAPrivateKey) -> IssuedCertificate:
    try:
        certificate = builder.sign(
            private_key=private_key, algorithm=hashes.SHA256(),
            backend=default_backend()
        )
    except (ValueError, TypeError) as exc:
        raise CryptoError(f"Failed to sign certificate: {exc}") from exc

    der_bytes = certificate.public_bytes(Encoding.DER)

    try:
        parsed = x509.load_der_x509_certificate(der_bytes, default_backend())
    except ValueError as exc:
        raise CryptoError("Signed certificate failed to re-parse.") from exc

    log.debug("Signed certificate serial %x for %s",
              parsed.serial_number, parsed.subject.rfc4514_string())

    return IssuedCertificate(
        serial_number=parsed.serial_number,
        der_bytes=der_bytes,
        certificate=parsed,
    )


def _check_issuer(
        issuer_certificate: x509.Certificate,
        issuer_private_key: rsa.RSAPrivateKey,
        *,
        issuing_ca: bool
    ) -> None:
    if not _same_public_key(issuer_private_key.public_key(), issuer_certificate.public_key()):
        raise ChainError("CA private key does not match the CA certificate")

    if not _has_basic_constraints(issuer_certificate) or not _basic_constraints(issuer_certificate).ca:
        raise ChainError("Issuer certificate is not a CA")

    if issuing_ca and _basic_constraints(issuer_certificate).path_length == 0:
        raise ChainError("Issuer path length constraint does not allow intermediate CAs")


def _issuer_key_identifier(issuer_certificate: x509.Certificate) -> bytes:
    """
    The parent's subject key identifier, or a hash of its public key when the
    parent carries no SKI extension
    """
    try:
        return issuer_certificate.extensions.get_extension_for_class(
            x509.SubjectKeyIdentifier
        ).value.digest
    except x509.ExtensionNotFound:
        return x509.SubjectKeyIdentifier.from_public_key(issuer_certificate.public_key()).digest


def _authority_key_identifier(key_id: bytes) -> x509.AuthorityKeyIdentifier:
    return x509.AuthorityKeyIdentifier(
        key_identifier=key_id,
        authority_cert_issuer=None,
        authority_cert_serial_number=None
    )


def _has_basic_constraints(certificate: x509.Certificate) -> bool:
    try:
        certificate.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return False
    return True


def _basic_constraints(certificate: x509.Certificate) -> x509.BasicConstraints:
    return certificate.extensions.get_extension_for_class(x509.BasicConstraints).value


def _same_public_key(left, right) -> bool:
    spki = serialization.PublicFormat.SubjectPublicKeyInfo
    return left.public_bytes(Encoding.DER, spki) == right.public_bytes(Encoding.DER, spki)
