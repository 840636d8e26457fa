import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from salary_ranges.exceptions import ConfigLoadError

from .models import EngineSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SALARY_RANGES_CONFIG"

# Structural check run before the pydantic models see the data
SETTINGS_SCHEMA: Dict[str, Any] = {
    "region_tables": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string"},
        "valuesrules": {"type": "string"},
    },
    "cache_ttl_seconds": {"type": "integer", "required": False, "min": 1},
    "engineering_prefixes": {"type": "list", "required": False, "schema": {"type": "string"}},
    "finance_prefixes": {"type": "list", "required": False, "schema": {"type": "string"}},
    "default_alias": {
        "type": "list",
        "required": False,
        "minlength": 2,
        "maxlength": 2,
        "schema": {"type": "string"},
    },
    "site_aliases": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string"},
        "valuesrules": {"type": "string"},
    },
    "allowed_employment_types": {
        "type": "list",
        "required": False,
        "schema": {"type": "string"},
    },
    "exec_level_threshold": {"type": "integer", "required": False},
    "exec_number_offset": {"type": "integer", "required": False},
    "tables": {"type": "dict", "required": False},
    "columns": {"type": "dict", "required": False},
}


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads configuration data from a YAML file.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    if not isinstance(config_path, Path):
        config_path = Path(config_path)

    logger.info(f"Attempting to load settings from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Settings file not found at path: {config_path}")
        raise ConfigLoadError(f"Settings file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML settings file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e
    except OSError as e:
        raise ConfigLoadError(f"Could not read settings file {config_path}: {e}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigLoadError(
            f"Invalid settings format in {config_path}: Expected a dictionary."
        )
    return config_data


def settings_from_dict(config_data: Dict[str, Any]) -> EngineSettings:
    """Validate a raw settings mapping and build :class:`EngineSettings`."""
    v = Validator(SETTINGS_SCHEMA)
    if not v.validate(config_data):
        raise ConfigLoadError(f"Settings validation failed: {v.errors}")
    try:
        return EngineSettings(**config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid settings: {e}") from e


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    config_dict: Optional[Dict[str, Any]] = None,
) -> EngineSettings:
    """
    Resolve engine settings.

    Priority: ``config_dict``, then ``config_path``, then the file named by
    ``SALARY_RANGES_CONFIG``, then built-in defaults.
    """
    if config_dict is not None:
        logger.info("Loaded settings from config dictionary")
        return settings_from_dict(config_dict)

    path = config_path or os.getenv(CONFIG_ENV_VAR)
    if path:
        settings = settings_from_dict(load_yaml_config(path))
        logger.info("Loaded settings from file: %s", path)
        return settings

    logger.info("Using default settings")
    return EngineSettings()


__all__ = [
    "CONFIG_ENV_VAR",
    "load_settings",
    "load_yaml_config",
    "settings_from_dict",
]
