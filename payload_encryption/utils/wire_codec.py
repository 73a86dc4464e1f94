"""
Wire framing for encrypted elements.

Two framings are supported:

- compact: JOSE compact serialization, five unpadded base64url segments
  ``header.encryptedKey.iv.ciphertext.tag`` (interoperable with JWE consumers)
- legacy: sibling fields in the JSON body with configurable names, or, in
  header transport, key/iv/digest/fingerprint in HTTP headers and only the
  ciphertext in the body
"""

import base64
import binascii
import re
from typing import Any, Dict, Optional

from jwt.utils import base64url_decode, base64url_encode

from ..errors import WireFormatError
from ..models.config import EncryptionConfig
from ..models.envelope import CipherParts, EncryptedElement, EncryptionParams

COMPACT_SEGMENTS = 5
BASE64URL_PATTERN = re.compile(r"^[A-Za-z0-9_-]*$")


def encode_segment(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64url_encode(data).decode("ascii")


def decode_segment(segment: str) -> bytes:
    """
    Decode one unpadded base64url segment.

    Raises:
        WireFormatError: If the segment is not valid base64url
    """
    if not BASE64URL_PATTERN.match(segment):
        raise WireFormatError(f"Invalid base64url segment: '{segment[:16]}'")
    try:
        return base64url_decode(segment)
    except (binascii.Error, ValueError) as e:
        raise WireFormatError(f"Invalid base64url segment: {e}") from e


def frame(parts: CipherParts) -> str:
    """Serialize cipher parts as a compact token."""
    return ".".join(
        encode_segment(part)
        for part in (parts.header, parts.encrypted_key, parts.iv, parts.ciphertext, parts.tag)
    )


def unframe(token: Any) -> CipherParts:
    """
    Parse a compact token into its five parts.

    Args:
        token: Compact serialized token

    Returns:
        CipherParts with raw bytes

    Raises:
        WireFormatError: If the token is empty, does not have exactly five
            segments or holds invalid base64url
    """
    if not isinstance(token, str) or not token:
        raise WireFormatError("Encrypted token is empty")
    segments = token.split(".")
    if len(segments) != COMPACT_SEGMENTS:
        raise WireFormatError(
            f"Encrypted token must have {COMPACT_SEGMENTS} segments, got {len(segments)}"
        )
    header, encrypted_key, iv, ciphertext, tag = (decode_segment(s) for s in segments)
    return CipherParts(
        header=header, encrypted_key=encrypted_key, iv=iv, ciphertext=ciphertext, tag=tag
    )


def frame_fields(element: EncryptedElement, config: EncryptionConfig) -> Dict[str, str]:
    """Express a legacy encrypted element as body fields named by the config."""
    fields = {config.encrypted_value_field_name: element.encrypted_value}
    optional = (
        (config.iv_field_name, element.iv),
        (config.encrypted_key_field_name, element.encrypted_key),
        (config.public_key_fingerprint_field_name, element.public_key_fingerprint),
        (config.oaep_hashing_algorithm_field_name, element.oaep_hashing_algorithm),
    )
    for name, value in optional:
        if name and value is not None:
            fields[name] = value
    return fields


def parse_fields(envelope: Any, config: EncryptionConfig) -> EncryptedElement:
    """
    Read a legacy encrypted element from body fields.

    Raises:
        WireFormatError: If the envelope is not an object or has no ciphertext
    """
    if not isinstance(envelope, dict):
        raise WireFormatError("Encrypted envelope must be an object")
    value = envelope.get(config.encrypted_value_field_name)
    if not isinstance(value, str) or not value:
        raise WireFormatError(
            f"Encrypted envelope has no '{config.encrypted_value_field_name}' value"
        )

    def field(name: Optional[str]) -> Optional[str]:
        return envelope.get(name) if name else None

    return EncryptedElement(
        encrypted_value=value,
        iv=field(config.iv_field_name),
        encrypted_key=field(config.encrypted_key_field_name),
        oaep_hashing_algorithm=field(config.oaep_hashing_algorithm_field_name),
        public_key_fingerprint=field(config.public_key_fingerprint_field_name),
    )


def frame_headers(params: EncryptionParams, config: EncryptionConfig) -> Dict[str, str]:
    """HTTP headers carrying the shared key material in header transport."""
    headers: Dict[str, str] = {}
    if config.encrypted_key_header_name:
        headers[config.encrypted_key_header_name] = params.encoded_encrypted_key
    if config.iv_header_name:
        headers[config.iv_header_name] = params.encoded_iv
    if config.oaep_hashing_algorithm_header_name:
        headers[config.oaep_hashing_algorithm_header_name] = params.oaep_hashing_algorithm.replace(
            "-", ""
        )
    if config.public_key_fingerprint_header_name and params.public_key_fingerprint:
        headers[config.public_key_fingerprint_header_name] = params.public_key_fingerprint
    return headers


def get_header(headers: Any, name: Optional[str]) -> Optional[str]:
    """Case-insensitive header lookup on a dict or httpx.Headers."""
    if not headers or not name:
        return None
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def parse_headers(headers: Any, encrypted_value: str, config: EncryptionConfig) -> EncryptedElement:
    """
    Combine a ciphertext from the body with key material from HTTP headers.

    Raises:
        WireFormatError: If the IV or encrypted key header is missing
    """
    iv = get_header(headers, config.iv_header_name)
    encrypted_key = get_header(headers, config.encrypted_key_header_name)
    if not iv or not encrypted_key:
        raise WireFormatError(
            f"Missing '{config.iv_header_name}' or '{config.encrypted_key_header_name}' header"
        )
    return EncryptedElement(
        encrypted_value=encrypted_value,
        iv=iv,
        encrypted_key=encrypted_key,
        oaep_hashing_algorithm=get_header(headers, config.oaep_hashing_algorithm_header_name),
        public_key_fingerprint=get_header(headers, config.public_key_fingerprint_header_name),
    )


def encode_value(data: bytes, encoding: Optional[str]) -> str:
    """Encode raw bytes as hex or standard base64 for legacy fields."""
    if encoding == "hex":
        return data.hex()
    return base64.b64encode(data).decode("ascii")


def decode_value(value: Any, encoding: Optional[str]) -> bytes:
    """
    Decode a hex or standard base64 legacy value.

    Raises:
        WireFormatError: If the value is missing or not valid for the encoding
    """
    if not isinstance(value, str) or not value:
        raise WireFormatError("Encrypted value is missing")
    try:
        if encoding == "hex":
            return bytes.fromhex(value)
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise WireFormatError(f"Invalid {encoding or 'base64'} value: {e}") from e
