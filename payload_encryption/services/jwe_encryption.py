"""
JWE encryption of HTTP payloads.

Each encrypted element becomes a single compact JWE token stored under
``encrypted_value_field_name`` at the destination.
"""

from typing import Any, Dict

from ..models.config import EncryptionConfig
from ..utils.config_validator import validate_jwe_config
from ..utils.wire_codec import frame, unframe
from .jwe_crypto import JweCrypto
from .payload_encryption import PayloadEncryption


class JweEncryption(PayloadEncryption):
    """Compact JWE encryption (A256GCM, RSA-OAEP-256)."""

    crypto: JweCrypto

    def _validate_config(self, config: EncryptionConfig) -> None:
        validate_jwe_config(config)

    def _create_crypto(self, config: EncryptionConfig) -> JweCrypto:
        return JweCrypto(config)

    def _encrypt_element(self, node: Any, params: Any) -> Dict[str, Any]:
        return {self.config.encrypted_value_field_name: frame(self.crypto.encrypt_data(node))}

    def _decrypt_element(self, envelope: Any, headers: Any) -> Any:
        if isinstance(envelope, dict):
            envelope = envelope.get(self.config.encrypted_value_field_name)
        return self.crypto.decrypt_data(unframe(envelope))
