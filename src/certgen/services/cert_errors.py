# certgen/services/cert_errors.py

from __future__ import annotations

from typing import Optional


class CertgenError(Exception):
    """Base class for certificate generation errors."""


class ConfigValidationError(CertgenError):
    """
    Raised when a request fails validation.

    Always raised before any cryptographic work begins. `field` names the
    offending request field and `limit` carries the computed bound, if any.
    """

    def __init__(self, field: str, message: str, limit: Optional[int] = None):
        super().__init__(message)
        self.field = field
        self.limit = limit


class CryptoError(CertgenError):
    """Raised when key generation, signing or certificate re-parsing fails."""


class ChainError(CertgenError):
    """Raised when issuer certificate/key material is unreadable or inconsistent."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path


class ArtifactIOError(CertgenError):
    """Raised when the output directory is unusable or an artifact write fails."""

    def __init__(self, message: str, path: str):
        super().__init__(f"{message}: {path}")
        self.path = path
