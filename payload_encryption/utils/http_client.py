"""
HTTP client utility with transparent payload encryption.

Request bodies are encrypted before they leave the process and response
bodies are decrypted before they are returned, according to the rules of the
wrapped encryption service. Callers only ever see plaintext JSON.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ConnectionError, PayloadEncryptionError
from ..services.payload_encryption import PayloadEncryption
from .data_masker import DataMasker

logger = logging.getLogger(__name__)


class EncryptionHttpClient:
    """
    Async HTTP client encrypting requests and decrypting responses.

    Wraps an ``httpx.AsyncClient`` created on first use. Headers are masked
    with DataMasker before debug logging; bodies are never logged.
    """

    def __init__(
        self,
        encryption: PayloadEncryption,
        base_url: str = "",
        timeout: float = 30.0,
        **client_kwargs: Any,
    ):
        """
        Initialize the HTTP client.

        Args:
            encryption: Encryption service applied to requests and responses
            base_url: Base URL of the remote API
            timeout: Request timeout in seconds
            **client_kwargs: Additional httpx.AsyncClient parameters (e.g. transport=)
        """
        self.encryption = encryption
        self.base_url = base_url
        self.timeout = timeout
        self._client_kwargs = client_kwargs
        self.client: Optional[httpx.AsyncClient] = None

    async def _initialize_client(self) -> None:
        """Initialize HTTP client if not already initialized."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                **self._client_kwargs,
            )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self.client:
            try:
                await self.client.aclose()
            except (RuntimeError, asyncio.CancelledError):
                # Event loop closed or cancelled - that's okay during teardown
                pass
            finally:
                self.client = None

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _masked_names(self) -> List[str]:
        config = self.encryption.config
        names = [
            config.iv_header_name,
            config.encrypted_key_header_name,
            config.oaep_hashing_algorithm_header_name,
            config.public_key_fingerprint_header_name,
        ]
        return [name for name in names if name] + config.envelope_field_names

    def _create_error_from_http_status(self, error: httpx.HTTPStatusError) -> PayloadEncryptionError:
        error_body: Optional[Dict[str, Any]] = None
        if error.response.headers.get("content-type", "").startswith("application/json"):
            try:
                parsed = error.response.json()
                if isinstance(parsed, dict):
                    error_body = parsed
            except ValueError:
                pass
        return PayloadEncryptionError(
            f"HTTP {error.response.status_code}: {error.response.text}",
            status_code=error.response.status_code,
            error_body=error_body,
        )

    async def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request with an encrypted body and return the decrypted response body.

        Args:
            method: HTTP method
            url: Request URL (relative to base_url or absolute)
            json: JSON body to encrypt and send
            headers: Extra request headers
            **kwargs: Additional httpx request parameters

        Returns:
            Decrypted response JSON, the raw text for non-JSON responses, or
            None for an empty body

        Raises:
            PayloadEncryptionError: If the server answers with an error status
            ConnectionError: If the request cannot be sent
            EncryptionError: If encryption or decryption fails
        """
        await self._initialize_client()
        assert self.client is not None

        encrypted = self.encryption.encrypt(url, dict(headers or {}), json)
        logger.debug(
            f"{method} {url} headers="
            f"{DataMasker.mask_sensitive_data(dict(encrypted.headers or {}), self._masked_names())}"
        )
        try:
            response = await self.client.request(
                method, url, json=encrypted.body, headers=encrypted.headers, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._create_error_from_http_status(e)
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {str(e)}")

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError:
            return response.text
        return self.encryption.decrypt_payload(str(response.request.url), response.headers, body)

    async def get(self, url: str, **kwargs: Any) -> Any:
        """Make GET request."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, data: Any = None, **kwargs: Any) -> Any:
        """Make POST request with ``data`` as the JSON body."""
        return await self.request("POST", url, json=data, **kwargs)

    async def put(self, url: str, data: Any = None, **kwargs: Any) -> Any:
        """Make PUT request with ``data`` as the JSON body."""
        return await self.request("PUT", url, json=data, **kwargs)

    async def patch(self, url: str, data: Any = None, **kwargs: Any) -> Any:
        """Make PATCH request with ``data`` as the JSON body."""
        return await self.request("PATCH", url, json=data, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> Any:
        """Make DELETE request."""
        return await self.request("DELETE", url, **kwargs)
