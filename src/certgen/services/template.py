# certgen/services/template.py

"""
Certificate template builder.

Produces the unsigned description of a certificate from a validated request.
Every class-dependent value is looked up in the policy table; the only
type-dependent decisions made here are the CA flag, key usage shape, key
identifiers and the root EKU broadening.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from cryptography import x509
from cryptography.x509.oid import NameOID

from certgen.models.requests import (
    CertificateClass,
    CertificateType,
    Subject,
    ValidatedCARequest,
    ValidatedLeafRequest,
)
from certgen.services.policy import resolve, root_extended_key_usages
from certgen.utils.crypto import generate_key_identifier, generate_serial
from certgen.utils.datetime import validity_window

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyUsageFlags:
    digital_signature: bool = False
    key_encipherment: bool = False
    key_cert_sign: bool = False
    crl_sign: bool = False

    def to_extension(self) -> x509.KeyUsage:
        return x509.KeyUsage(
            digital_signature=self.digital_signature,
            content_commitment=False,
            key_encipherment=self.key_encipherment,
            data_encipherment=False,
            key_agreement=False,
            key_cert_sign=self.key_cert_sign,
            crl_sign=self.crl_sign,
            encipher_only=False,
            decipher_only=False
        )


CA_KEY_USAGE = KeyUsageFlags(digital_signature=True, key_cert_sign=True, crl_sign=True)
LEAF_KEY_USAGE = KeyUsageFlags(digital_signature=True, key_encipherment=True)


@dataclass(frozen=True)
class CertificateTemplate:
    """
    Unsigned certificate descriptor.

    ``path_length`` is only meaningful for CA templates: None means "no
    constraint", 0 is an explicit constraint of zero. ``subject_key_id`` left
    as None is derived from the subject public key at signing time, and
    ``authority_key_id`` left as None is taken from the issuer by the signer.
    """
    cert_type: CertificateType
    cert_class: CertificateClass
    serial_number: int
    subject: x509.Name
    not_before: datetime
    not_after: datetime
    is_ca: bool
    key_usage: KeyUsageFlags
    extended_key_usages: Tuple[x509.ObjectIdentifier, ...]
    path_length: Optional[int] = None
    subject_key_id: Optional[bytes] = None
    authority_key_id: Optional[bytes] = None
    dns_names: Tuple[str, ...] = ()
    policy_oids: Tuple[x509.ObjectIdentifier, ...] = ()
    crl_distribution_points: Tuple[str, ...] = ()
    ocsp_servers: Tuple[str, ...] = ()
    issuing_certificate_urls: Tuple[str, ...] = ()

    @property
    def is_self_signed(self) -> bool:
        return self.cert_type is CertificateType.ROOT


def build_subject(subject: Subject) -> x509.Name:
    """
    Build an x509 Name from the request subject. Empty optional attributes are omitted.
    """
    x509_attributes = [x509.NameAttribute(NameOID.COMMON_NAME, subject.common_name)]

    optional = (
        (NameOID.ORGANIZATION_NAME, subject.organization),
        (NameOID.ORGANIZATIONAL_UNIT_NAME, subject.organizational_unit),
        (NameOID.COUNTRY_NAME, subject.country),
        (NameOID.STATE_OR_PROVINCE_NAME, subject.province),
        (NameOID.LOCALITY_NAME, subject.locality),
    )

    for oid, value in optional:
        if value:
            x509_attributes.append(x509.NameAttribute(oid, value))

    return x509.Name(x509_attributes)


def build_ca_template(request: ValidatedCARequest) -> CertificateTemplate:
    """
    Build the template for a root or intermediate CA certificate
    """
    requirements = resolve(request.cert_class)
    not_before, not_after = validity_window(request.validity_days)
    subject_key_id = generate_key_identifier()

    if request.is_root:
        # Self-signed: the authority key is our own key
        authority_key_id = subject_key_id
        extended_key_usages = root_extended_key_usages()
    else:
        authority_key_id = None
        extended_key_usages = requirements.extended_key_usages

    class3 = request.cert_class is CertificateClass.CLASS_3

    template = CertificateTemplate(
        cert_type=request.cert_type,
        cert_class=request.cert_class,
        serial_number=generate_serial(),
        subject=build_subject(request.subject),
        not_before=not_before,
        not_after=not_after,
        is_ca=True,
        key_usage=CA_KEY_USAGE,
        extended_key_usages=extended_key_usages,
        path_length=requirements.max_path_length,
        subject_key_id=subject_key_id,
        authority_key_id=authority_key_id,
        policy_oids=requirements.policy_oids,
        crl_distribution_points=request.crl_distribution_points if class3 else (),
        ocsp_servers=request.ocsp_servers if class3 else (),
        issuing_certificate_urls=request.issuing_certificate_urls if class3 else (),
    )

    log.debug("Built %s CA template for %s (serial %x)",
              request.cert_type.value, request.subject.common_name, template.serial_number)

    return template


def build_leaf_template(request: ValidatedLeafRequest) -> CertificateTemplate:
    """
    Build the template for an end-entity certificate
    """
    requirements = resolve(request.cert_class)
    not_before, not_after = validity_window(request.validity_days)

    template = CertificateTemplate(
        cert_type=CertificateType.LEAF,
        cert_class=request.cert_class,
        serial_number=generate_serial(),
        subject=build_subject(request.subject),
        not_before=not_before,
        not_after=not_after,
        is_ca=False,
        key_usage=LEAF_KEY_USAGE,
        extended_key_usages=requirements.extended_key_usages,
        dns_names=request.dns_names,
        policy_oids=requirements.policy_oids,
    )

    log.debug("Built leaf template for %s (serial %x)",
              request.subject.common_name, template.serial_number)

    return template
