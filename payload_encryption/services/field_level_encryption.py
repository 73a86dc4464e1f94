"""
Field level (legacy) encryption of HTTP payloads.

Each encrypted element becomes a set of sibling fields (ciphertext, IV,
wrapped key, OAEP digest, key fingerprint) in the body. In header transport a
single set of key material is shared by every element of the request and
travels in HTTP headers, leaving only the ciphertext in the body.
"""

from typing import Any, Dict, List, Tuple

from ..errors import WireFormatError
from ..models.config import EncryptionConfig
from ..utils.config_validator import validate_legacy_config
from ..utils.wire_codec import frame_fields, frame_headers, parse_fields, parse_headers
from .field_level_crypto import FieldLevelCrypto
from .payload_encryption import PayloadEncryption


class FieldLevelEncryption(PayloadEncryption):
    """Field level encryption with body or header carried metadata."""

    crypto: FieldLevelCrypto

    def _validate_config(self, config: EncryptionConfig) -> None:
        validate_legacy_config(config)

    def _create_crypto(self, config: EncryptionConfig) -> FieldLevelCrypto:
        return FieldLevelCrypto(config)

    @property
    def is_with_header(self) -> bool:
        """Whether key material travels in HTTP headers."""
        return self.config.is_with_header

    def _envelope_fields(self) -> List[str]:
        if self.is_with_header:
            return [self.config.encrypted_value_field_name]
        return self.config.envelope_field_names

    def _begin_encrypt(self, headers: Any) -> Tuple[Any, Any]:
        if not self.is_with_header:
            return headers, None
        params = self.crypto.new_encryption_params()
        if headers is None:
            headers = {}
        headers.update(frame_headers(params, self.config))
        return headers, params

    def _encrypt_element(self, node: Any, params: Any) -> Dict[str, Any]:
        element = self.crypto.encrypt_data(node, params)
        if self.is_with_header:
            return {self.config.encrypted_value_field_name: element.encrypted_value}
        return frame_fields(element, self.config)

    def _decrypt_element(self, envelope: Any, headers: Any) -> Any:
        if self.is_with_header:
            if isinstance(envelope, str):
                value = envelope
            else:
                value = parse_fields(envelope, self.config).encrypted_value
            element = parse_headers(headers, value, self.config)
        elif isinstance(envelope, dict):
            element = parse_fields(envelope, self.config)
        else:
            raise WireFormatError("Encrypted envelope must be an object")

        return self.crypto.decrypt_data(
            element.encrypted_value,
            element.iv,
            element.oaep_hashing_algorithm,
            element.encrypted_key,
        )
