"""
SDK exceptions and error handling.

This module defines custom exceptions for the payload encryption SDK.
"""

from typing import Literal, Optional

EncryptionErrorCode = Literal[
    "ENCRYPTION_FAILED",
    "DECRYPTION_FAILED",
    "UNSUPPORTED_ALGORITHM",
]


class PayloadEncryptionError(Exception):
    """Base exception for payload encryption SDK errors."""

    def __init__(
        self, message: str, status_code: int | None = None, error_body: dict | None = None
    ):
        """
        Initialize payload encryption error.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
            error_body: Error response body returned by the remote API, if any
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_body = error_body


class ConfigurationError(PayloadEncryptionError):
    """Raised when configuration is invalid."""

    pass


class PathSyntaxError(PayloadEncryptionError):
    """Raised when a path expression is malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class DocumentMutationError(PayloadEncryptionError):
    """Raised when a value cannot be written at a destination path."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class WireFormatError(PayloadEncryptionError):
    """Raised when an encrypted envelope cannot be parsed."""

    pass


class EncryptionError(PayloadEncryptionError):
    """Raised when a cipher operation fails."""

    def __init__(
        self,
        message: str,
        code: EncryptionErrorCode = "ENCRYPTION_FAILED",
        status_code: int | None = None,
    ):
        """
        Initialize encryption error.

        Args:
            message: Error message
            code: Machine readable failure code
            status_code: HTTP status code if applicable
        """
        super().__init__(message, status_code=status_code)
        self.code = code


class ConnectionError(PayloadEncryptionError):
    """Raised when the HTTP transport fails."""

    pass
