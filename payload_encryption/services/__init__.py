"""Service implementations for the payload encryption SDK."""

from typing import Any, Dict, Union

from ..models.config import EncryptionConfig
from ..utils.config_loader import parse_config
from .field_level_crypto import FieldLevelCrypto
from .field_level_encryption import FieldLevelEncryption
from .jwe_crypto import JweCrypto
from .jwe_encryption import JweEncryption
from .payload_encryption import PayloadEncryption


def create_encryption(config: Union[EncryptionConfig, Dict[str, Any]]) -> PayloadEncryption:
    """
    Build the encryption service matching ``config.mode``.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if isinstance(config, dict):
        config = parse_config(config)
    if config.mode == "JWE":
        return JweEncryption(config)
    return FieldLevelEncryption(config)


__all__ = [
    "FieldLevelCrypto",
    "FieldLevelEncryption",
    "JweCrypto",
    "JweEncryption",
    "PayloadEncryption",
    "create_encryption",
]
