"""
Data masker utility for debug logging.

Key material (wrapped keys, IVs, fingerprints) and credentials must never
reach the logs, neither as headers nor as body fields.
"""

from typing import Any, Iterable, Set


class DataMasker:
    """Static class for masking sensitive data."""

    MASKED_VALUE = "***MASKED***"

    # Names too short to match as substrings (e.g. "iv" in "private")
    _exact_fields: Set[str] = {"iv"}

    # Set of sensitive field names (normalized)
    _sensitive_fields: Set[str] = {
        "password",
        "secret",
        "token",
        "key",
        "authorization",
        "cookie",
        "fingerprint",
        "encrypted",
        "ciphertext",
        "accountnumber",
    }

    @classmethod
    def is_sensitive_field(cls, key: str, extra: Iterable[str] = ()) -> bool:
        """
        Check if a field name indicates sensitive data.

        Args:
            key: Field name to check
            extra: Additional exact names to treat as sensitive (case-insensitive),
                typically the configured envelope field and header names

        Returns:
            True if field is sensitive, False otherwise
        """
        normalized_key = key.lower().replace("_", "").replace("-", "")

        exact = cls._exact_fields | {name.lower().replace("_", "").replace("-", "") for name in extra}
        if normalized_key in exact:
            return True

        for sensitive_field in cls._sensitive_fields:
            if sensitive_field in normalized_key:
                return True

        return False

    @classmethod
    def mask_sensitive_data(cls, data: Any, extra: Iterable[str] = ()) -> Any:
        """
        Mask sensitive data in objects, arrays, or primitives.

        Returns a masked copy without modifying the original.

        Args:
            data: Data to mask (dict, list, or primitive)
            extra: Additional exact field names to mask

        Returns:
            Masked copy of the data
        """
        extra = list(extra)
        if isinstance(data, list):
            return [cls.mask_sensitive_data(item, extra) for item in data]
        if not isinstance(data, dict):
            return data

        masked: dict[str, Any] = {}
        for key, value in data.items():
            if cls.is_sensitive_field(str(key), extra):
                masked[key] = cls.MASKED_VALUE
            elif isinstance(value, (dict, list)):
                masked[key] = cls.mask_sensitive_data(value, extra)
            else:
                masked[key] = value
        return masked
