# certgen/services/trust_errors.py

class TrustInstallError(Exception):
    """Base class for errors raised while installing into the OS trust store."""


class UnsupportedPlatformError(TrustInstallError):
    """The current operating system has no trust installer. Never retried."""


class TrustPermissionDeniedError(TrustInstallError):
    """The platform tool refused the operation, even after elevation."""
