# certgen/utils/crypto.py

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Union

from cryptography import x509
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import Encoding

from certgen.constants import KEY_IDENTIFIER_BYTES, RSA_PUBLIC_EXPONENT, SERIAL_NUMBER_BITS
from certgen.services.cert_errors import ChainError, CryptoError

PEM_CERT_HEADER = b"-----BEGIN CERTIFICATE-----"
PEM_CERT_FOOTER = b"-----END CERTIFICATE-----"


@dataclass(frozen=True)
class KeyPair:
    """ RSA key pair owned by exactly one request """
    private_key: rsa.RSAPrivateKey

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.private_key.public_key()

    @property
    def key_size(self) -> int:
        return self.private_key.key_size

    def private_key_pem(self) -> bytes:
        """
        Returns the private key as an unencrypted PKCS#8 "PRIVATE KEY" PEM block
        """
        return self.private_key.private_bytes(
            Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption()
        )


def generate_key_pair(key_size: int) -> KeyPair:
    """
    Generate an RSA key pair of exactly the requested modulus size

    Args:
        key_size (int): Modulus size in bits

    Returns:
        KeyPair

    Raises:
        CryptoError: The primitive rejected the size or key generation failed
    """
    try:
        private_key = rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=key_size,
            backend=default_backend()
        )
    except (ValueError, TypeError) as exc:
        raise CryptoError(f"Failed to generate a {key_size}-bit RSA key: {exc}") from exc

    return KeyPair(private_key=private_key)


def generate_serial() -> int:
    """
    Uniform random serial number in [0, 2**128)
    """
    return secrets.randbits(SERIAL_NUMBER_BITS)


def generate_key_identifier() -> bytes:
    """
    Fresh random subject key identifier
    """
    return secrets.token_bytes(KEY_IDENTIFIER_BYTES)


def certificate_to_pem(certificate: x509.Certificate) -> bytes:
    return certificate.public_bytes(Encoding.PEM)


def pem_to_der(pem: Union[str, bytes]) -> bytes:
    """
    Decode a PEM certificate back into DER bytes
    """
    return load_certificate_pem(pem).public_bytes(Encoding.DER)


def load_certificate_pem(pem: Union[str, bytes], source: str | None = None) -> x509.Certificate:
    """
    Load a PEM-encoded certificate into a cryptography.x509.Certificate.

    Args:
        pem: Certificate bytes or UTF-8 string containing a PEM block.
        source: Where the data came from, reported on failure.

    Returns:
        x509.Certificate

    Raises:
        ChainError: If the data is missing, not PEM, or cannot be parsed.
    """
    if pem is None:
        raise ChainError("No certificate data provided", source)

    data = pem.encode("utf-8") if isinstance(pem, str) else pem
    data = data.strip()

    if PEM_CERT_HEADER not in data or PEM_CERT_FOOTER not in data:
        raise ChainError("Certificate must be PEM with BEGIN/END CERTIFICATE markers", source)

    try:
        return x509.load_pem_x509_certificate(data, default_backend())
    except ValueError as exc:
        raise ChainError("Failed to parse PEM certificate", source) from exc


def load_private_key_pem(pem: bytes, source: str | None = None) -> rsa.RSAPrivateKey:
    """
    Load an unencrypted PEM private key (PKCS#8 or traditional RSA)

    Raises:
        ChainError: The key cannot be parsed or is not an RSA key.
    """
    try:
        private_key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError) as exc:
        raise ChainError("Failed to parse PEM private key", source) from exc

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise ChainError(f"Unsupported private key type {type(private_key).__name__}", source)

    return private_key
