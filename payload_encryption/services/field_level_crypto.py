"""
Field level cipher: AES-CBC content encryption with an RSA-OAEP wrapped key.

Encrypted values, IVs and wrapped keys are hex or base64 encoded according to
the configured ``data_encoding``.
"""

import json
import logging
import os
from typing import Any, Optional

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.asymmetric import padding as asymmetric_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import EncryptionError, WireFormatError
from ..models.config import EncryptionConfig
from ..models.envelope import EncryptedElement, EncryptionParams
from ..utils.key_loader import (
    compute_public_key_fingerprint,
    load_encryption_certificate,
    load_private_key,
)
from ..utils.wire_codec import decode_value, encode_value

logger = logging.getLogger(__name__)

IV_SIZE = 16
SECRET_KEY_SIZE = 16


def hash_algorithm(name: str) -> hashes.HashAlgorithm:
    """
    Map a configured digest name (SHA-256, SHA256, SHA-512, SHA512) to a hash.

    Raises:
        EncryptionError: If the digest is not supported
    """
    normalized = name.upper().replace("-", "")
    if normalized == "SHA256":
        return hashes.SHA256()
    if normalized == "SHA512":
        return hashes.SHA512()
    raise EncryptionError(f"Unsupported OAEP digest '{name}'", code="UNSUPPORTED_ALGORITHM")


def oaep_padding(name: str) -> asymmetric_padding.OAEP:
    """OAEP padding using the same digest for OAEP and MGF1."""
    algorithm = hash_algorithm(name)
    return asymmetric_padding.OAEP(
        mgf=asymmetric_padding.MGF1(algorithm=algorithm), algorithm=algorithm, label=None
    )


def serialize_payload(data: Any) -> bytes:
    """Compact JSON encoding of the element being encrypted."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def deserialize_payload(plaintext: bytes) -> Any:
    """Parse decrypted JSON, falling back to the raw string."""
    try:
        text = plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncryptionError("Decrypted payload is not UTF-8", code="DECRYPTION_FAILED") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class FieldLevelCrypto:
    """Cipher collaborator for legacy field level encryption."""

    def __init__(self, config: EncryptionConfig):
        """
        Load key material for field level encryption.

        Args:
            config: Validated encryption configuration

        Raises:
            ConfigurationError: If the certificate or private key cannot be loaded
        """
        self.encryption_certificate = load_encryption_certificate(config)
        self.private_key = load_private_key(config)
        self.encoding = config.data_encoding
        self.oaep_hashing_algorithm = config.oaep_padding_digest_algorithm or "SHA-256"
        self.public_key_fingerprint = config.public_key_fingerprint or compute_public_key_fingerprint(
            config, self.encryption_certificate, self.encoding
        )

    def new_encryption_params(
        self, iv: Optional[bytes] = None, secret_key: Optional[bytes] = None
    ) -> EncryptionParams:
        """
        Generate a content key and IV and wrap the key with the certificate's public key.

        Args:
            iv: IV to use instead of a random one
            secret_key: AES key to use instead of a random one

        Returns:
            EncryptionParams with raw and encoded values
        """
        iv = iv or os.urandom(IV_SIZE)
        secret_key = secret_key or os.urandom(SECRET_KEY_SIZE)
        try:
            encrypted_key = self.encryption_certificate.public_key().encrypt(
                secret_key, oaep_padding(self.oaep_hashing_algorithm)
            )
        except ValueError as e:
            raise EncryptionError(f"Cannot wrap content key: {e}", code="ENCRYPTION_FAILED") from e
        return EncryptionParams(
            iv=iv,
            secret_key=secret_key,
            encrypted_key=encrypted_key,
            oaep_hashing_algorithm=self.oaep_hashing_algorithm,
            public_key_fingerprint=self.public_key_fingerprint,
            encoded_iv=encode_value(iv, self.encoding),
            encoded_encrypted_key=encode_value(encrypted_key, self.encoding),
        )

    def encrypt_data(self, data: Any, params: Optional[EncryptionParams] = None) -> EncryptedElement:
        """
        Encrypt one JSON element.

        Args:
            data: JSON value to encrypt
            params: Shared key material (header transport), generated when omitted

        Returns:
            EncryptedElement with encoded ciphertext and metadata
        """
        params = params or self.new_encryption_params()
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(serialize_payload(data)) + padder.finalize()
        encryptor = Cipher(algorithms.AES(params.secret_key), modes.CBC(params.iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return EncryptedElement(
            encrypted_value=encode_value(ciphertext, self.encoding),
            iv=params.encoded_iv,
            encrypted_key=params.encoded_encrypted_key,
            oaep_hashing_algorithm=params.oaep_hashing_algorithm.replace("-", ""),
            public_key_fingerprint=params.public_key_fingerprint,
        )

    def decrypt_data(
        self,
        encrypted_value: str,
        iv: Optional[str],
        oaep_hashing_algorithm: Optional[str],
        encrypted_key: Optional[str],
    ) -> Any:
        """
        Decrypt one element.

        Args:
            encrypted_value: Encoded ciphertext
            iv: Encoded IV
            oaep_hashing_algorithm: Digest used to wrap the key, config default when None
            encrypted_key: Encoded wrapped key

        Returns:
            Decrypted JSON value (raw string if the plaintext is not JSON)

        Raises:
            WireFormatError: If a value is missing or badly encoded
            EncryptionError: If decryption fails
        """
        if self.private_key is None:
            raise EncryptionError("No private key configured", code="DECRYPTION_FAILED")
        if not iv or not encrypted_key:
            raise WireFormatError("Encrypted element has no IV or encrypted key")
        ciphertext = decode_value(encrypted_value, self.encoding)
        raw_iv = decode_value(iv, self.encoding)
        wrapped_key = decode_value(encrypted_key, self.encoding)
        try:
            secret_key = self.private_key.decrypt(
                wrapped_key, oaep_padding(oaep_hashing_algorithm or self.oaep_hashing_algorithm)
            )
            decryptor = Cipher(algorithms.AES(secret_key), modes.CBC(raw_iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            logger.error("Field level decryption failed")
            raise EncryptionError(f"Decryption failed: {e}", code="DECRYPTION_FAILED") from e
        return deserialize_payload(plaintext)
