# certgen/models/requests.py

"""
Request models.

Issuance is a two-stage affair. The raw request models (pydantic) are what
the configuration layer and the CLI construct; they are permissive and carry
no defaults beyond "unset". The validator turns them into the frozen
``Validated*`` dataclasses, which are the only types the template builder,
signer and issuance service accept.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CertificateClass(IntEnum):
    """ Assurance class. Ordinal comparable: CLASS_3 > CLASS_2 > CLASS_1 """
    CLASS_1 = 1
    CLASS_2 = 2
    CLASS_3 = 3


class CertificateType(str, Enum):
    """ Position of a CA certificate in the chain """
    ROOT = "root"
    INTERMEDIATE = "intermediate"
    LEAF = "leaf"


# Integer encoding used by configuration files (0 root, 1 intermediate, 2 leaf)
_TYPE_ORDINALS = {
    0: CertificateType.ROOT,
    1: CertificateType.INTERMEDIATE,
    2: CertificateType.LEAF,
}


_CLASS3_EXTRA_KEYS = (
    "crlDistributionPoints", "crl_distribution_points",
    "ocspServers", "ocsp_servers",
    "issuingCertificateUrls", "issuing_certificate_urls",
)


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Class3Extras(_RequestModel):
    """ Optional revocation / AIA URLs embedded into Class 3 CA certificates """
    crl_distribution_points: List[str] = Field(default_factory=list, alias="crlDistributionPoints")
    ocsp_servers: List[str] = Field(default_factory=list, alias="ocspServers")
    issuing_certificate_urls: List[str] = Field(default_factory=list, alias="issuingCertificateUrls")

    def is_empty(self) -> bool:
        return not (self.crl_distribution_points or self.ocsp_servers or self.issuing_certificate_urls)


class _SubjectRequest(_RequestModel):
    common_name: Optional[str] = Field(default=None, alias="commonName")
    organization: Optional[str] = None
    organizational_unit: Optional[str] = Field(default=None, alias="organizationalUnit")
    country: Optional[str] = None
    province: Optional[str] = None
    locality: Optional[str] = None
    validity_days: Optional[int] = Field(default=None, alias="validityDays")
    key_size: Optional[int] = Field(default=None, alias="keySize")
    cert_class: Optional[int] = Field(default=None, alias="class")
    output_dir: Optional[str] = Field(default=None, alias="outputDir")


class CARequest(_SubjectRequest):
    """ Raw request for a root or intermediate CA certificate """
    cert_type: CertificateType = Field(default=CertificateType.ROOT, alias="type")
    class3_extras: Class3Extras = Field(default_factory=Class3Extras)
    ca_cert: Optional[str] = Field(default=None, alias="caCert")
    ca_key: Optional[str] = Field(default=None, alias="caKey")
    trust: bool = False

    @model_validator(mode="before")
    @classmethod
    def _collect_class3_extras(cls, data: Any) -> Any:
        # Configuration files keep the extras at the top level
        if not isinstance(data, dict):
            return data
        keys = [k for k in _CLASS3_EXTRA_KEYS if k in data]
        if not keys or "class3_extras" in data:
            return data
        data = dict(data)
        data["class3_extras"] = {k: data.pop(k) for k in keys}
        return data

    @field_validator("cert_type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return _TYPE_ORDINALS.get(value, value)
        if isinstance(value, str):
            return value.strip().lower()
        return value


class LeafRequest(_SubjectRequest):
    """ Raw request for an end-entity certificate """
    dns_names: List[str] = Field(default_factory=list, alias="dnsNames")
    ca_cert: Optional[str] = Field(default=None, alias="caCert")
    ca_key: Optional[str] = Field(default=None, alias="caKey")


class SignRequest(_RequestModel):
    """ Raw request to counter-sign an existing certificate """
    cert_path: Optional[str] = Field(default=None, alias="certPath")
    key_path: Optional[str] = Field(default=None, alias="keyPath")
    ca_cert_path: Optional[str] = Field(default=None, alias="caCertPath")
    ca_key_path: Optional[str] = Field(default=None, alias="caKeyPath")
    output_dir: Optional[str] = Field(default=None, alias="outputDir")


class TrustRequest(_RequestModel):
    """ Raw request to install a CA certificate into the OS trust store """
    cert_path: Optional[str] = Field(default=None, alias="certPath")
    output_dir: Optional[str] = Field(default=None, alias="outputDir")


# ---------------------
# Validated requests
# ---------------------

@dataclass(frozen=True)
class Subject:
    common_name: str
    organization: str
    country: str
    organizational_unit: str = ""
    province: str = ""
    locality: str = ""


@dataclass(frozen=True)
class IssuerReference:
    """ Paths to the parent CA certificate and private key """
    cert_path: str
    key_path: str


@dataclass(frozen=True)
class ValidatedCARequest:
    subject: Subject
    cert_class: CertificateClass
    cert_type: CertificateType
    key_size: int
    validity_days: int
    output_dir: str
    crl_distribution_points: Tuple[str, ...] = ()
    ocsp_servers: Tuple[str, ...] = ()
    issuing_certificate_urls: Tuple[str, ...] = ()
    issuer: Optional[IssuerReference] = None
    trust: bool = False

    @property
    def is_root(self) -> bool:
        return self.cert_type is CertificateType.ROOT


@dataclass(frozen=True)
class ValidatedLeafRequest:
    subject: Subject
    cert_class: CertificateClass
    key_size: int
    validity_days: int
    dns_names: Tuple[str, ...]
    issuer: IssuerReference
    output_dir: str


@dataclass(frozen=True)
class ValidatedSignRequest:
    cert_path: str
    key_path: str
    issuer: IssuerReference
    output_dir: str


@dataclass(frozen=True)
class ValidatedTrustRequest:
    cert_path: str
    output_dir: str
