"""
Certificate and private key loading.

Supports PEM and DER files, PEM content passed inline in the configuration
(``use_certificate_content``) and PKCS#12 key stores.
"""

import logging
from pathlib import Path
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from ..errors import ConfigurationError
from ..models.config import EncryptionConfig
from .wire_codec import encode_value

logger = logging.getLogger(__name__)

PEM_MARKER = b"-----BEGIN"


def _read_file(path: str, what: str) -> bytes:
    try:
        content = Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read {what} '{path}': {e}") from e
    if len(content) <= 1:
        raise ConfigurationError(f"{what} content is empty")
    return content


def _sha256(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def parse_certificate(content: bytes) -> x509.Certificate:
    """Parse a PEM or DER X.509 certificate."""
    try:
        if PEM_MARKER in content:
            return x509.load_pem_x509_certificate(content)
        return x509.load_der_x509_certificate(content)
    except ValueError as e:
        raise ConfigurationError("Public certificate content is not valid") from e


def parse_private_key(content: bytes, password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """Parse a PEM or DER (PKCS#1 or PKCS#8) RSA private key."""
    try:
        if PEM_MARKER in content:
            key = serialization.load_pem_private_key(content, password=password)
        else:
            key = serialization.load_der_private_key(content, password=password)
    except (ValueError, TypeError) as e:
        raise ConfigurationError("Private key content not valid") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError("Private key must be an RSA key")
    return key


def load_encryption_certificate(config: EncryptionConfig) -> x509.Certificate:
    """
    Load the public certificate used to wrap content encryption keys.

    Raises:
        ConfigurationError: If the certificate is missing or unreadable
    """
    if not config.encryption_certificate:
        raise ConfigurationError("Public certificate content is not valid")
    if config.use_certificate_content:
        return parse_certificate(config.encryption_certificate.encode("utf-8"))
    return parse_certificate(_read_file(config.encryption_certificate, "Public certificate"))


def _load_pkcs12_key(path: str, alias: Optional[str], password: Optional[str]) -> rsa.RSAPrivateKey:
    content = _read_file(path, "p12 keystore")
    if not alias:
        raise ConfigurationError("Key alias is not set")
    if not password:
        raise ConfigurationError("Keystore password is not set")
    try:
        store = pkcs12.load_pkcs12(content, password.encode("utf-8"))
    except ValueError as e:
        raise ConfigurationError(f"Cannot open p12 keystore '{path}'") from e

    friendly_name = store.cert.friendly_name if store.cert else None
    if store.key is None or (friendly_name is not None and friendly_name.decode("utf-8") != alias):
        raise ConfigurationError(f"No key found for alias [{alias}]")
    if not isinstance(store.key, rsa.RSAPrivateKey):
        raise ConfigurationError("Private key must be an RSA key")
    return store.key


def load_private_key(config: EncryptionConfig) -> Optional[rsa.RSAPrivateKey]:
    """
    Load the private key used to unwrap content encryption keys.

    Returns:
        The RSA private key, or None when the configuration has none
        (encryption-only clients)

    Raises:
        ConfigurationError: If a configured key cannot be loaded
    """
    if config.use_certificate_content:
        if config.private_key:
            return parse_private_key(config.private_key.encode("utf-8"))
        return None
    if config.private_key:
        return parse_private_key(_read_file(config.private_key, "Private key"))
    if config.key_store:
        if ".p12" in config.key_store:
            return _load_pkcs12_key(config.key_store, config.key_store_alias, config.key_store_password)
        if ".pem" in config.key_store or ".der" in config.key_store:
            return parse_private_key(_read_file(config.key_store, "Key store"))
        raise ConfigurationError(f"Unsupported key store '{config.key_store}'")
    logger.debug("No private key configured, decryption is disabled")
    return None


def compute_public_key_fingerprint(
    config: EncryptionConfig, certificate: x509.Certificate, encoding: Optional[str]
) -> Optional[str]:
    """
    Compute the fingerprint identifying the encryption key.

    ``certificate`` type hashes the DER certificate and encodes it with
    ``encoding``; ``publicKey`` type hashes the SubjectPublicKeyInfo and is
    always hex.

    Returns:
        Fingerprint string, or None when no fingerprint type is configured
    """
    if config.public_key_fingerprint_type == "certificate":
        der = certificate.public_bytes(serialization.Encoding.DER)
        return encode_value(_sha256(der), encoding)
    if config.public_key_fingerprint_type == "publicKey":
        spki = certificate.public_key().public_bytes(
            serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
        )
        return _sha256(spki).hex()
    return None
