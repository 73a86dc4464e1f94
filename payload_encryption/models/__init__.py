"""Pydantic models for payload encryption configuration and runtime data."""

from .config import (
    DataEncoding,
    EncryptionConfig,
    EncryptionMode,
    FieldRule,
    FingerprintType,
    PathRule,
)
from .envelope import (
    CipherParts,
    EncryptedElement,
    EncryptedRequest,
    EncryptionParams,
    Resolution,
    ResponsePayload,
    ResponseRequest,
)

__all__ = [
    "DataEncoding",
    "EncryptionConfig",
    "EncryptionMode",
    "FieldRule",
    "FingerprintType",
    "PathRule",
    "CipherParts",
    "EncryptedElement",
    "EncryptedRequest",
    "EncryptionParams",
    "Resolution",
    "ResponsePayload",
    "ResponseRequest",
]
