"""
Payload encryption SDK - selective encryption of JSON HTTP payload fields.

This package encrypts and decrypts designated fields of JSON request and
response bodies according to a declarative, per-endpoint path mapping, so
calling code never handles cryptography itself.
"""

from .client import EncryptionClient
from .errors import (
    ConfigurationError,
    ConnectionError,
    DocumentMutationError,
    EncryptionError,
    PathSyntaxError,
    PayloadEncryptionError,
    WireFormatError,
)
from .models.config import EncryptionConfig, FieldRule, PathRule
from .models.envelope import EncryptedRequest, ResponsePayload, ResponseRequest
from .services import FieldLevelEncryption, JweEncryption, PayloadEncryption, create_encryption
from .utils.config_loader import load_config
from .utils.http_client import EncryptionHttpClient

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "EncryptionClient",
    "EncryptionHttpClient",
    "EncryptionConfig",
    "FieldRule",
    "PathRule",
    "EncryptedRequest",
    "ResponsePayload",
    "ResponseRequest",
    "FieldLevelEncryption",
    "JweEncryption",
    "PayloadEncryption",
    "create_encryption",
    "load_config",
    "PayloadEncryptionError",
    "ConfigurationError",
    "PathSyntaxError",
    "DocumentMutationError",
    "WireFormatError",
    "EncryptionError",
    "ConnectionError",
]
