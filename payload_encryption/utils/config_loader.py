"""
Configuration loader utility.

Builds an EncryptionConfig from a dict, a JSON file or environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from ..models.config import EncryptionConfig

CONFIG_ENV_VAR = "PAYLOAD_ENCRYPTION_CONFIG"

# Environment variables overriding key material locations
ENV_OVERRIDES = {
    "PAYLOAD_ENCRYPTION_CERTIFICATE": "encryption_certificate",
    "PAYLOAD_ENCRYPTION_PRIVATE_KEY": "private_key",
    "PAYLOAD_ENCRYPTION_KEYSTORE_PASSWORD": "key_store_password",
}


def _read_json_file(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file '{path}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{path}' must hold a JSON object")
    return data


def parse_config(data: Dict[str, Any]) -> EncryptionConfig:
    """
    Validate a configuration dict.

    Raises:
        ConfigurationError: If the dict does not describe a valid configuration
    """
    try:
        return EncryptionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Config not valid: {e}") from e


def load_config(source: Optional[Union[Dict[str, Any], str, Path]] = None) -> EncryptionConfig:
    """
    Load configuration with environment overrides.

    Sources:
    - dict: used as-is (camelCase or snake_case keys)
    - str / Path: JSON file
    - None: JSON file named by PAYLOAD_ENCRYPTION_CONFIG

    Optional environment variables (a .env file is honoured):
    - PAYLOAD_ENCRYPTION_CERTIFICATE
    - PAYLOAD_ENCRYPTION_PRIVATE_KEY
    - PAYLOAD_ENCRYPTION_KEYSTORE_PASSWORD

    Returns:
        EncryptionConfig instance

    Raises:
        ConfigurationError: If no source is available or the configuration is invalid
    """
    load_dotenv()

    if source is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if not config_path:
            raise ConfigurationError(f"{CONFIG_ENV_VAR} environment variable is required")
        data = _read_json_file(config_path)
    elif isinstance(source, dict):
        data = dict(source)
    else:
        data = _read_json_file(source)

    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.pop(EncryptionConfig.model_fields[field_name].alias, None)
            data[field_name] = value

    return parse_config(data)
