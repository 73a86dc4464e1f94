"""
Construction-time checks of an encryption configuration.

Pydantic covers the shape of the configuration; the rules here are the
cross-field invariants the encryption services rely on. Every violation is a
ConfigurationError so no service is ever built from a bad configuration.
"""

import re
from typing import Optional, Sequence

from ..errors import ConfigurationError, PathSyntaxError
from ..models.config import EncryptionConfig, FieldRule
from .path_resolver import count_wildcards, is_root

LEGACY_REQUIRED = (
    "oaep_padding_digest_algorithm",
    "data_encoding",
    "encryption_certificate",
    "encrypted_value_field_name",
)
BODY_TRANSPORT = ("iv_field_name", "encrypted_key_field_name")
HEADER_TRANSPORT = (
    "iv_header_name",
    "encrypted_key_header_name",
    "oaep_hashing_algorithm_header_name",
)
SUPPORTED_OAEP_DIGESTS = ("SHA-256", "SHA256", "SHA-512", "SHA512")


def _all_set(config: EncryptionConfig, names) -> bool:
    return all(getattr(config, name) is not None for name in names)


def _has_multiple_roots(rules: Sequence[FieldRule]) -> bool:
    return len(rules) > 1 and any(is_root(rule.obj) or is_root(rule.element) for rule in rules)


def _validate_field_rule(rule: FieldRule, where: str) -> None:
    try:
        source_wildcards = count_wildcards(rule.element)
        destination_wildcards = count_wildcards(rule.obj)
    except PathSyntaxError as e:
        raise ConfigurationError(f"Config not valid: {where}: {e.message}") from e
    if source_wildcards != destination_wildcards:
        raise ConfigurationError(
            f"Config not valid: {where}: element '{rule.element}' and obj '{rule.obj}' "
            "must use the same number of wildcards"
        )


def validate_root_mapping(config: EncryptionConfig) -> None:
    """
    Reject rule lists mixing a root mapping with other rules.

    Raises:
        ConfigurationError: If a to_encrypt or to_decrypt list with more than
            one rule uses '$' anywhere
    """
    for path_rule in config.paths:
        if _has_multiple_roots(path_rule.to_encrypt) or _has_multiple_roots(path_rule.to_decrypt):
            raise ConfigurationError(
                "Config not valid: found multiple configurations encrypt/decrypt with root mapping"
            )


def validate_paths(config: EncryptionConfig) -> None:
    """Check that path rules exist, compile and hold well-formed field rules."""
    if not config.paths:
        raise ConfigurationError("Config not valid: paths should be not empty.")
    for path_rule in config.paths:
        try:
            re.compile(path_rule.path)
        except re.error as e:
            raise ConfigurationError(
                f"Config not valid: path '{path_rule.path}' is not a valid regex: {e}"
            ) from e
        for rule in path_rule.to_encrypt:
            _validate_field_rule(rule, f"{path_rule.path} toEncrypt")
        for rule in path_rule.to_decrypt:
            _validate_field_rule(rule, f"{path_rule.path} toDecrypt")
    validate_root_mapping(config)


def validate_fingerprint(config: EncryptionConfig, fingerprint_target: Optional[str]) -> None:
    """
    Require a usable fingerprint type when a fingerprint has to be computed.

    Args:
        config: Configuration to check
        fingerprint_target: Field or header that will carry the fingerprint,
            None when the fingerprint is not transported
    """
    if config.public_key_fingerprint is not None or not fingerprint_target:
        return
    if config.public_key_fingerprint_type not in ("certificate", "publicKey"):
        raise ConfigurationError(
            "Config not valid: propertiesFingerprint should be: 'certificate' or 'publicKey'"
        )


def validate_legacy_config(config: EncryptionConfig) -> None:
    """
    Validate a configuration for field level (legacy) encryption.

    Raises:
        ConfigurationError: If any invariant does not hold
    """
    if not _all_set(config, LEGACY_REQUIRED):
        raise ConfigurationError(
            "Config not valid: please check that all the properties are defined."
        )
    transport = HEADER_TRANSPORT if config.is_with_header else BODY_TRANSPORT
    if not _all_set(config, transport):
        raise ConfigurationError(
            "Config not valid: please check that all the properties are defined."
        )
    if config.oaep_padding_digest_algorithm.upper() not in SUPPORTED_OAEP_DIGESTS:
        raise ConfigurationError(
            "Config not valid: oaepPaddingDigestAlgorithm should be 'SHA-256' or 'SHA-512'"
        )
    validate_paths(config)
    validate_fingerprint(
        config,
        config.public_key_fingerprint_header_name
        if config.is_with_header
        else config.public_key_fingerprint_field_name,
    )


def validate_jwe_config(config: EncryptionConfig) -> None:
    """
    Validate a configuration for JWE encryption.

    Raises:
        ConfigurationError: If any invariant does not hold
    """
    if config.encryption_certificate is None:
        raise ConfigurationError(
            "Config not valid: please check that all the properties are defined."
        )
    validate_paths(config)
    validate_fingerprint(config, "kid")
