"""
Configuration types for the payload encryption SDK.

This module contains Pydantic models that define the declarative, per-endpoint
encryption configuration. Attribute names are snake_case; every field also
accepts the camelCase key used by existing JSON configuration files
(``toEncrypt``, ``encryptedValueFieldName`` and so on).
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

EncryptionMode = Literal["legacy", "JWE"]
DataEncoding = Literal["hex", "base64"]
FingerprintType = Literal["certificate", "publicKey"]


class FieldRule(BaseModel):
    """Source/destination mapping for one encrypted element."""

    element: str = Field(..., description="Source path (plaintext or envelope)")
    obj: str = Field(..., description="Destination path")

    class Config:
        frozen = True


class PathRule(BaseModel):
    """Rule set applied to endpoints matching ``path``."""

    path: str = Field(..., alias="pattern", description="Regex matched against the endpoint")
    to_encrypt: Tuple[FieldRule, ...] = Field(default_factory=tuple, alias="toEncrypt")
    to_decrypt: Tuple[FieldRule, ...] = Field(default_factory=tuple, alias="toDecrypt")

    class Config:
        populate_by_name = True
        frozen = True


class EncryptionConfig(BaseModel):
    """Main encryption configuration.

    Required fields:
    - paths: Endpoint rule sets
    - encrypted_value_field_name: Name of the field carrying the ciphertext

    Metadata transport (legacy mode) is either body-embedded
    (``iv_field_name``/``encrypted_key_field_name``) or header-carried
    (``iv_header_name``/``encrypted_key_header_name``/
    ``oaep_hashing_algorithm_header_name``). Semantic checks live in
    ``utils.config_validator`` and run when an encryption service is built.
    """

    paths: Tuple[PathRule, ...] = Field(..., description="Endpoint rule sets, first match wins")
    mode: EncryptionMode = Field(default="legacy", description="Envelope framing")
    encrypted_value_field_name: str = Field(..., alias="encryptedValueFieldName")

    iv_field_name: Optional[str] = Field(default=None, alias="ivFieldName")
    encrypted_key_field_name: Optional[str] = Field(default=None, alias="encryptedKeyFieldName")
    oaep_hashing_algorithm_field_name: Optional[str] = Field(
        default=None, alias="oaepHashingAlgorithmFieldName"
    )
    public_key_fingerprint_field_name: Optional[str] = Field(
        default=None, alias="publicKeyFingerprintFieldName"
    )

    iv_header_name: Optional[str] = Field(default=None, alias="ivHeaderName")
    encrypted_key_header_name: Optional[str] = Field(default=None, alias="encryptedKeyHeaderName")
    oaep_hashing_algorithm_header_name: Optional[str] = Field(
        default=None, alias="oaepHashingAlgorithmHeaderName"
    )
    public_key_fingerprint_header_name: Optional[str] = Field(
        default=None, alias="publicKeyFingerprintHeaderName"
    )

    oaep_padding_digest_algorithm: Optional[str] = Field(
        default=None, alias="oaepPaddingDigestAlgorithm", description="SHA-256 or SHA-512"
    )
    data_encoding: Optional[DataEncoding] = Field(default=None, alias="dataEncoding")
    encryption_certificate: Optional[str] = Field(
        default=None,
        alias="encryptionCertificate",
        description="Certificate path, or PEM content when use_certificate_content is set",
    )
    private_key: Optional[str] = Field(default=None, alias="privateKey")
    key_store: Optional[str] = Field(default=None, alias="keyStore")
    key_store_alias: Optional[str] = Field(default=None, alias="keyStoreAlias")
    key_store_password: Optional[str] = Field(default=None, alias="keyStorePassword")
    use_certificate_content: bool = Field(default=False, alias="useCertificateContent")
    public_key_fingerprint: Optional[str] = Field(default=None, alias="publicKeyFingerprint")
    public_key_fingerprint_type: Optional[FingerprintType] = Field(
        default=None, alias="publicKeyFingerprintType"
    )

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def is_with_header(self) -> bool:
        """Whether encryption metadata travels in HTTP headers instead of the body."""
        return bool(self.iv_header_name and self.encrypted_key_header_name)

    @property
    def envelope_field_names(self) -> List[str]:
        """Body field names making up one envelope, ciphertext field first."""
        names = [
            self.encrypted_value_field_name,
            self.iv_field_name,
            self.encrypted_key_field_name,
            self.public_key_fingerprint_field_name,
            self.oaep_hashing_algorithm_field_name,
        ]
        return [name for name in names if name]
