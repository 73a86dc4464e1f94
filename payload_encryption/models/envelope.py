"""
Runtime types created per encrypt/decrypt call.

None of these outlive a single call: resolutions point into the document being
transformed, cipher parts and encrypted elements are the framed or unframed
form of one encrypted element.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Resolution(BaseModel):
    """A concrete location produced by resolving a path expression."""

    path: str = Field(..., description="Concrete dotted path for display, '$' for the whole document")
    segments: List[str] = Field(
        default_factory=list, description="Concrete keys from the root to the node, empty for '$'"
    )
    node: Any = Field(default=None, description="Value found at the path")
    parent: Any = Field(default=None, description="Container holding the node, None for '$'")
    bindings: List[str] = Field(
        default_factory=list, description="Concrete keys chosen for each '*' segment, in order"
    )


class CipherParts(BaseModel):
    """The five raw parts of a compact (JWE) envelope."""

    header: bytes
    encrypted_key: bytes
    iv: bytes
    ciphertext: bytes
    tag: bytes


class EncryptedElement(BaseModel):
    """One legacy encrypted element, every value already encoded (hex or base64)."""

    encrypted_value: str
    iv: Optional[str] = None
    encrypted_key: Optional[str] = None
    oaep_hashing_algorithm: Optional[str] = None
    public_key_fingerprint: Optional[str] = None


class EncryptionParams(BaseModel):
    """Key material for legacy encryption, shared by all elements in header mode."""

    iv: bytes
    secret_key: bytes
    encrypted_key: bytes
    oaep_hashing_algorithm: str
    public_key_fingerprint: Optional[str] = None
    encoded_iv: str
    encoded_encrypted_key: str


class EncryptedRequest(BaseModel):
    """Result of encrypting an outgoing request."""

    headers: Any = None
    body: Any = None


class ResponseRequest(BaseModel):
    """The request side of a response, only the URL is needed for rule matching."""

    url: str


class ResponsePayload(BaseModel):
    """Response handed to ``decrypt``: body, headers and the originating request."""

    body: Any = None
    headers: Any = None
    request: ResponseRequest
