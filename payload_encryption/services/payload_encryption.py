"""
Encryption orchestration shared by the field level and JWE services.

A service is built once from a validated configuration and is stateless
afterwards: ``encrypt`` and ``decrypt`` only read the configuration, so one
instance can serve concurrent calls as long as each call owns its document.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..models.config import EncryptionConfig
from ..models.envelope import EncryptedRequest, Resolution
from ..utils.config_loader import parse_config
from ..utils.document_mutator import delete_node, write_value
from ..utils.path_matcher import match_path_rule
from ..utils.path_resolver import pair_resolutions

logger = logging.getLogger(__name__)


class PayloadEncryption:
    """
    Selective encryption of JSON payload fields driven by per-endpoint rules.

    Subclasses provide the cipher and the envelope shape:
    - ``_validate_config``: construction-time checks
    - ``_create_crypto``: cipher collaborator
    - ``_encrypt_element`` / ``_decrypt_element``: one element to/from its envelope
    """

    def __init__(self, config: Union[EncryptionConfig, Dict[str, Any]]):
        """
        Initialize the encryption service.

        Args:
            config: Encryption configuration, or a dict to validate into one

        Raises:
            ConfigurationError: If the configuration is invalid or key material
                cannot be loaded
        """
        if isinstance(config, dict):
            config = parse_config(config)
        self._validate_config(config)
        self.config = config
        self.crypto = self._create_crypto(config)

    def _validate_config(self, config: EncryptionConfig) -> None:
        raise NotImplementedError

    def _create_crypto(self, config: EncryptionConfig) -> Any:
        raise NotImplementedError

    def _begin_encrypt(self, headers: Any) -> Tuple[Any, Any]:
        """Per-call setup, returns (headers, shared cipher params)."""
        return headers, None

    def _encrypt_element(self, node: Any, params: Any) -> Dict[str, Any]:
        raise NotImplementedError

    def _decrypt_element(self, envelope: Any, headers: Any) -> Any:
        raise NotImplementedError

    def _envelope_fields(self) -> List[str]:
        """Body fields stripped from the document once an envelope is decrypted."""
        return [self.config.encrypted_value_field_name]

    @staticmethod
    def _relocate(
        body: Any,
        source: Sequence[str],
        destination: Sequence[str],
        value: Any,
        delete_keys: Optional[List[str]] = None,
    ) -> Any:
        """Move ``value`` from the ``source`` segments to ``destination``, returning the new root."""
        if not destination:
            return write_value(destination, value, body)
        if list(source) == list(destination):
            delete_node(source, body, delete_keys)
            return write_value(destination, value, body)
        return write_value(destination, value, body, src_to_delete=source, delete_keys=delete_keys)

    def _locate_envelope(self, source: Resolution) -> Tuple[Optional[List[str]], Any]:
        """
        Find the object holding an envelope.

        The source either points at the envelope object, or at the ciphertext
        string itself with the metadata in its parent object.

        Returns:
            (segments of the envelope object or None for a bare token, envelope)
        """
        if isinstance(source.node, dict):
            return source.segments, source.node
        if (
            isinstance(source.node, str)
            and isinstance(source.parent, dict)
            and source.segments
            and source.segments[-1] == self.config.encrypted_value_field_name
        ):
            return source.segments[:-1], source.parent
        return None, source.node

    def encrypt(self, endpoint: Optional[str], headers: Any = None, body: Any = None) -> EncryptedRequest:
        """
        Encrypt the configured fields of an outgoing request.

        Args:
            endpoint: Request URL or path used to pick the rule set
            headers: Request headers (dict or httpx.Headers), updated in header transport
            body: JSON body, mutated in place where possible

        Returns:
            EncryptedRequest with the headers and the body to send; both are
            returned unchanged when no rule matches the endpoint

        Raises:
            PathSyntaxError: If a configured path is malformed
            DocumentMutationError: If a destination cannot be written
            EncryptionError: If the cipher fails
        """
        path_rule = match_path_rule(self.config.paths, endpoint)
        if path_rule is None:
            logger.debug("No encryption rule matches the endpoint")
            return EncryptedRequest(headers=headers, body=body)

        headers, params = self._begin_encrypt(headers)
        for rule in path_rule.to_encrypt:
            pairs = pair_resolutions(rule.element, rule.obj, body)
            logger.debug(f"Encrypting {len(pairs)} element(s) for '{rule.element}'")
            for source, destination in pairs:
                envelope = self._encrypt_element(source.node, params)
                body = self._relocate(body, source.segments, destination, envelope)
        return EncryptedRequest(headers=headers, body=body)

    def decrypt_payload(self, url: Optional[str], headers: Any, body: Any) -> Any:
        """
        Decrypt the configured fields of a response body.

        Args:
            url: URL of the request the response belongs to
            headers: Response headers (metadata source in header transport)
            body: JSON body, mutated in place where possible

        Returns:
            The decrypted body, unchanged when no rule matches the URL

        Raises:
            PathSyntaxError: If a configured path is malformed
            WireFormatError: If an envelope cannot be parsed
            EncryptionError: If the cipher fails
        """
        path_rule = match_path_rule(self.config.paths, url)
        if path_rule is None:
            logger.debug("No decryption rule matches the URL")
            return body

        for rule in path_rule.to_decrypt:
            pairs = pair_resolutions(rule.element, rule.obj, body)
            logger.debug(f"Decrypting {len(pairs)} element(s) for '{rule.element}'")
            for source, destination in pairs:
                envelope_path, envelope = self._locate_envelope(source)
                plaintext = self._decrypt_element(envelope, headers)
                if envelope_path is None:
                    body = self._relocate(body, source.segments, destination, plaintext)
                else:
                    body = self._relocate(
                        body, envelope_path, destination, plaintext, self._envelope_fields()
                    )
        return body

    def decrypt(self, response: Any) -> Any:
        """
        Decrypt a response.

        Args:
            response: Object exposing ``body``, ``headers`` and ``request.url``
                (for instance a ResponsePayload)

        Returns:
            The decrypted body
        """
        return self.decrypt_payload(response.request.url, getattr(response, "headers", None), response.body)
