"""
JWE cipher: A256GCM content encryption with an RSA-OAEP-256 wrapped key.

Decryption also accepts A128CBC-HS256 tokens produced by other JWE libraries.
"""

import json
import logging
import os
import struct
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import constant_time, hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import EncryptionError, WireFormatError
from ..models.config import EncryptionConfig
from ..models.envelope import CipherParts
from ..utils.key_loader import (
    compute_public_key_fingerprint,
    load_encryption_certificate,
    load_private_key,
)
from ..utils.wire_codec import encode_segment
from .field_level_crypto import deserialize_payload, oaep_padding, serialize_payload

logger = logging.getLogger(__name__)

KEY_ALGORITHM = "RSA-OAEP-256"
CONTENT_ENCRYPTION = "A256GCM"
CBC_HMAC_ENCRYPTION = "A128CBC-HS256"
CONTENT_KEY_SIZE = 32
GCM_IV_SIZE = 12
GCM_TAG_SIZE = 16


def _decrypt_cbc_hmac(key: bytes, parts: CipherParts, aad: bytes) -> bytes:
    mac_key, enc_key = key[:16], key[16:32]
    signer = hmac.HMAC(mac_key, hashes.SHA256())
    signer.update(aad + parts.iv + parts.ciphertext + struct.pack(">Q", len(aad) * 8))
    if not constant_time.bytes_eq(signer.finalize()[:16], parts.tag):
        raise EncryptionError("Authentication tag mismatch", code="DECRYPTION_FAILED")
    decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(parts.iv)).decryptor()
    padded = decryptor.update(parts.ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


class JweCrypto:
    """Cipher collaborator for compact JWE encryption."""

    def __init__(self, config: EncryptionConfig):
        """
        Load key material for JWE encryption.

        Raises:
            ConfigurationError: If the certificate or private key cannot be loaded
        """
        self.encryption_certificate = load_encryption_certificate(config)
        self.private_key = load_private_key(config)
        self.public_key_fingerprint = config.public_key_fingerprint or compute_public_key_fingerprint(
            config, self.encryption_certificate, "base64"
        )

    def _protected_header(self) -> bytes:
        header = {
            "kid": self.public_key_fingerprint,
            "cty": "application/json",
            "alg": KEY_ALGORITHM,
            "enc": CONTENT_ENCRYPTION,
        }
        if header["kid"] is None:
            del header["kid"]
        return json.dumps(header, separators=(",", ":")).encode("utf-8")

    def encrypt_data(self, data: Any) -> CipherParts:
        """
        Encrypt one JSON element.

        The base64url form of the protected header is the additional
        authenticated data, as required by the compact serialization.

        Args:
            data: JSON value to encrypt

        Returns:
            CipherParts ready to be framed
        """
        header = self._protected_header()
        aad = encode_segment(header).encode("ascii")
        secret_key = os.urandom(CONTENT_KEY_SIZE)
        iv = os.urandom(GCM_IV_SIZE)
        try:
            sealed = AESGCM(secret_key).encrypt(iv, serialize_payload(data), aad)
            encrypted_key = self.encryption_certificate.public_key().encrypt(
                secret_key, oaep_padding("SHA-256")
            )
        except ValueError as e:
            raise EncryptionError(f"Encryption failed: {e}", code="ENCRYPTION_FAILED") from e
        return CipherParts(
            header=header,
            encrypted_key=encrypted_key,
            iv=iv,
            ciphertext=sealed[:-GCM_TAG_SIZE],
            tag=sealed[-GCM_TAG_SIZE:],
        )

    def decrypt_data(self, parts: CipherParts) -> Any:
        """
        Decrypt one element.

        Args:
            parts: Unframed token

        Returns:
            Decrypted JSON value (raw string if the plaintext is not JSON)

        Raises:
            WireFormatError: If the protected header is not a JSON object
            EncryptionError: If the algorithm is unsupported or decryption fails
        """
        if self.private_key is None:
            raise EncryptionError("No private key configured", code="DECRYPTION_FAILED")
        try:
            header = json.loads(parts.header.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise WireFormatError("JWE header is not valid JSON") from e
        if not isinstance(header, dict):
            raise WireFormatError("JWE header must be a JSON object")

        encryption = header.get("enc")
        if encryption not in (CONTENT_ENCRYPTION, CBC_HMAC_ENCRYPTION):
            raise EncryptionError(
                f"Unsupported decryption encoding: {encryption}", code="UNSUPPORTED_ALGORITHM"
            )

        aad = encode_segment(parts.header).encode("ascii")
        try:
            secret_key = self.private_key.decrypt(parts.encrypted_key, oaep_padding("SHA-256"))
            if encryption == CONTENT_ENCRYPTION:
                plaintext = AESGCM(secret_key).decrypt(parts.iv, parts.ciphertext + parts.tag, aad)
            else:
                plaintext = _decrypt_cbc_hmac(secret_key, parts, aad)
        except (ValueError, InvalidTag) as e:
            logger.error("JWE decryption failed")
            raise EncryptionError(f"Decryption failed: {e!r}", code="DECRYPTION_FAILED") from e
        return deserialize_payload(plaintext)
