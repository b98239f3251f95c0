# certgen/services/policy.py

"""
Certificate class policy table.

A single data-driven table consulted by both the validator and the template
builder. Lookups are total: anything that is not a known class resolves to
Class 1, the most lenient tier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from cryptography import x509
from cryptography.x509.oid import CertificatePoliciesOID, ExtendedKeyUsageOID

from certgen.models.requests import CertificateClass

# Root certificates tighten the generic class bounds
ROOT_MIN_CLASS = CertificateClass.CLASS_2
ROOT_MIN_KEY_SIZE = 4096
ROOT_MIN_VALIDITY_DAYS = 365 * 5

ANY_POLICY = CertificatePoliciesOID.ANY_POLICY


@dataclass(frozen=True)
class PolicyRequirements:
    """ Everything a certificate class fixes """
    min_key_size: int
    max_validity_days: int
    extended_key_usages: Tuple[x509.ObjectIdentifier, ...]
    max_path_length: int
    policy_oids: Tuple[x509.ObjectIdentifier, ...] = ()
    description: str = ""


POLICY_TABLE: Dict[CertificateClass, PolicyRequirements] = {
    CertificateClass.CLASS_1: PolicyRequirements(
        min_key_size=2048,
        max_validity_days=365 * 5,
        extended_key_usages=(
            ExtendedKeyUsageOID.CLIENT_AUTH,
            ExtendedKeyUsageOID.EMAIL_PROTECTION,
        ),
        max_path_length=0,
        description="Low-assurance certificates for personal use and email protection",
    ),
    CertificateClass.CLASS_2: PolicyRequirements(
        min_key_size=3072,
        max_validity_days=365 * 3,
        extended_key_usages=(
            ExtendedKeyUsageOID.SERVER_AUTH,
            ExtendedKeyUsageOID.CLIENT_AUTH,
        ),
        max_path_length=1,
        description="Medium-assurance certificates with organization validation",
    ),
    CertificateClass.CLASS_3: PolicyRequirements(
        min_key_size=4096,
        max_validity_days=365 * 2,
        extended_key_usages=(
            ExtendedKeyUsageOID.SERVER_AUTH,
            ExtendedKeyUsageOID.CLIENT_AUTH,
            ExtendedKeyUsageOID.CODE_SIGNING,
        ),
        max_path_length=2,
        policy_oids=(ANY_POLICY,),
        description="High-assurance certificates with extended validation and code signing capability",
    ),
}

EKU_NAMES: Dict[x509.ObjectIdentifier, str] = {
    ExtendedKeyUsageOID.SERVER_AUTH: "Server Auth",
    ExtendedKeyUsageOID.CLIENT_AUTH: "Client Auth",
    ExtendedKeyUsageOID.CODE_SIGNING: "Code Signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION: "Email Protection",
    ExtendedKeyUsageOID.TIME_STAMPING: "Time Stamping",
}


def resolve_class(value: Optional[int]) -> Optional[CertificateClass]:
    """
    Map a raw class value onto CertificateClass.

    Returns None when the value is not one of the known classes so callers
    can tell a fallback apart from an exact match.
    """
    try:
        return CertificateClass(int(value))
    except (TypeError, ValueError):
        return None


def resolve(cert_class: Optional[int]) -> PolicyRequirements:
    """
    Return the policy requirements for a certificate class.

    Args:
        cert_class: 1, 2 or 3. Anything else yields Class 1's requirements.

    Returns:
        PolicyRequirements
    """
    return POLICY_TABLE[resolve_class(cert_class) or CertificateClass.CLASS_1]


def all_extended_key_usages() -> Tuple[x509.ObjectIdentifier, ...]:
    """ Union of every class's extended key usages, in table order """
    seen = []
    for requirements in POLICY_TABLE.values():
        for oid in requirements.extended_key_usages:
            if oid not in seen:
                seen.append(oid)
    return tuple(seen)


def root_extended_key_usages() -> Tuple[x509.ObjectIdentifier, ...]:
    """ Roots carry every class EKU plus time stamping """
    return all_extended_key_usages() + (ExtendedKeyUsageOID.TIME_STAMPING,)


def describe_usages(oids: Tuple[x509.ObjectIdentifier, ...]) -> str:
    return ", ".join(EKU_NAMES.get(oid, oid.dotted_string) for oid in oids)


def describe(cert_class: Optional[int]) -> str:
    """ Human description of a class, for reports """
    return resolve(cert_class).description
