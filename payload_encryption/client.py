"""
EncryptionClient - Main SDK class bundling configuration, encryption and HTTP.
"""

from typing import Any, Dict, Optional, Union

from .models.config import EncryptionConfig
from .models.envelope import EncryptedRequest
from .services import create_encryption
from .utils.config_loader import load_config
from .utils.http_client import EncryptionHttpClient


class EncryptionClient:
    """
    Main SDK class for transparent payload encryption.

    This client provides a unified interface for:
    - Encrypting request payloads and decrypting responses by hand
    - Calling a remote API with encryption applied automatically
    """

    def __init__(
        self,
        config: Optional[Union[EncryptionConfig, Dict[str, Any]]] = None,
        base_url: str = "",
        **client_kwargs: Any,
    ):
        """
        Initialize the client.

        Args:
            config: Encryption configuration; loaded from the environment when None
            base_url: Base URL of the remote API
            **client_kwargs: Additional EncryptionHttpClient / httpx parameters

        Raises:
            ConfigurationError: If the configuration is missing or invalid
        """
        if not isinstance(config, EncryptionConfig):
            config = load_config(config)
        self.config = config
        self.encryption = create_encryption(config)
        self.http_client = EncryptionHttpClient(self.encryption, base_url=base_url, **client_kwargs)

    def encrypt(self, endpoint: str, headers: Any = None, body: Any = None) -> EncryptedRequest:
        """Encrypt a request payload for ``endpoint``."""
        return self.encryption.encrypt(endpoint, headers, body)

    def decrypt(self, response: Any) -> Any:
        """Decrypt a response exposing ``body``, ``headers`` and ``request.url``."""
        return self.encryption.decrypt(response)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.http_client.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
