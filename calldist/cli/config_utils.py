"""
Configuration Utilities Module - Provides configuration loading and result saving functionalities.
"""

import json
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from calldist.analysis.errors import ConfigurationError
from calldist.logger import debug
from calldist.models import SearchSettings


def load_configuration(config_path: Optional[str]) -> SearchSettings:
    """
    Load search settings from a JSON or YAML configuration file.

    The file may either hold the settings at top level or under a "search"
    key. Without a path the defaults are returned.

    Args:
        config_path: Path to the configuration file, or None

    Returns:
        Validated search settings

    Raises:
        ConfigurationError: if the file is missing, unparsable or invalid
    """
    if not config_path:
        debug("[Config] No configuration file given, using defaults")
        return SearchSettings()

    debug(f"[Config] Loading configuration file: {config_path}")
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Configuration file {config_path} could not be parsed: {e}"
        ) from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
    if "search" in data:
        data = data["search"] or {}

    try:
        settings = SearchSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    debug(f"[Config] Loaded settings: {settings.model_dump()}")
    return settings


def apply_overrides(settings: SearchSettings, overrides: Dict[str, Any]) -> SearchSettings:
    """
    Return a copy of ``settings`` with the non-None ``overrides`` applied.

    Overrides are validated the same way as file settings.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return settings
    try:
        return SearchSettings.model_validate({**settings.model_dump(), **changes})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command-line setting: {e}") from e
