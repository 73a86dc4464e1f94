"""
Unit tests for SDK exceptions.
"""

import pytest

from payload_encryption.errors import (
    ConfigurationError,
    ConnectionError,
    DocumentMutationError,
    EncryptionError,
    PathSyntaxError,
    PayloadEncryptionError,
    WireFormatError,
)


class TestPayloadEncryptionError:
    """Test cases for the base exception."""

    def test_basic_error(self):
        """Test error with message only."""
        error = PayloadEncryptionError("Test error")

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.status_code is None
        assert error.error_body is None

    def test_error_with_status_and_body(self):
        """Test error carrying an HTTP status and body."""
        error = PayloadEncryptionError("HTTP 400", status_code=400, error_body={"error": "bad"})

        assert error.status_code == 400
        assert error.error_body == {"error": "bad"}

    @pytest.mark.parametrize(
        "error_class",
        [ConfigurationError, WireFormatError, EncryptionError, ConnectionError],
    )
    def test_subclasses(self, error_class):
        """Test every SDK error derives from the base exception."""
        with pytest.raises(PayloadEncryptionError):
            raise error_class("boom")


class TestPathErrors:
    """Test cases for path related errors."""

    def test_path_syntax_error_keeps_path(self):
        """Test the offending expression is kept."""
        error = PathSyntaxError("bad path", path="a..b")

        assert error.path == "a..b"
        assert error.message == "bad path"
        assert isinstance(error, PayloadEncryptionError)

    def test_document_mutation_error_keeps_path(self):
        """Test the destination path is kept."""
        error = DocumentMutationError("cannot write", path="items.3")

        assert error.path == "items.3"


class TestEncryptionError:
    """Test cases for EncryptionError."""

    def test_default_code(self):
        """Test the default failure code."""
        assert EncryptionError("failed").code == "ENCRYPTION_FAILED"

    def test_custom_code(self):
        """Test an explicit failure code."""
        error = EncryptionError("no such algorithm", code="UNSUPPORTED_ALGORITHM")

        assert error.code == "UNSUPPORTED_ALGORITHM"
        assert error.status_code is None

    def test_connection_error_is_sdk_error(self):
        """Test the SDK connection error is distinct from the builtin one."""
        import builtins

        assert ConnectionError is not builtins.ConnectionError
