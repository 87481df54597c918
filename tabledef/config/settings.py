"""CLI configuration management."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

SUPPORTED_DIALECTS = ["mysql", "postgres", "sqlite", "snowflake", "bigquery", "duckdb"]
FAIL_ON_CHOICES = ["HIGH", "MEDIUM", "LOW", "NONE"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

DEFAULTS: Dict[str, Any] = {
    'dialect': 'mysql',
    'indent': 2,
    'fail_on': 'HIGH',
    'log_level': 'WARNING',
}


class ConfigError(ValueError):
    """Raised when CLI configuration loading fails."""


def load_cli_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load CLI configuration.

    Loads configuration with the following priority:
    1. Explicit --config path (highest priority)
    2. ~/.tabledef/config.yaml
    3. TABLEDEF_* environment variables
    4. Defaults

    Values found are merged over the defaults.

    Args:
        config_file: Optional explicit config file path

    Returns:
        Dictionary with dialect, indent, fail_on and log_level

    Raises:
        ConfigError: If the configuration file is invalid
    """
    # Try explicit file first
    if config_file:
        config = _load_yaml_config(config_file)
        logger.info("Loaded config from: %s", config_file)
        return {**DEFAULTS, **config}

    # Try default location
    default_path = Path.home() / '.tabledef' / 'config.yaml'
    if default_path.exists():
        config = _load_yaml_config(str(default_path))
        logger.info("Loaded config from: %s", default_path)
        return {**DEFAULTS, **config}

    # Try environment variables
    env_config = _load_from_env()
    if env_config:
        logger.info("Loaded config from environment variables")
        return {**DEFAULTS, **env_config}

    logger.debug("No config found. Using defaults.")
    return dict(DEFAULTS)


def _load_yaml_config(file_path: str) -> Dict[str, Any]:
    """Load YAML configuration file.

    Raises:
        ConfigError: If file is invalid or missing
    """
    try:
        if not os.path.exists(file_path):
            raise ConfigError(f"Configuration file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)

        if config is None:
            return {}

        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration file must contain a YAML dictionary: {file_path}"
            )

        return config

    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML configuration: {file_path}\n{e}"
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Error reading configuration file: {file_path}\n{e}"
        ) from e


def _load_from_env() -> Optional[Dict[str, Any]]:
    """Load configuration from TABLEDEF_* environment variables.

    Returns:
        Configuration dictionary or None if no env vars found
    """
    config: Dict[str, Any] = {}

    for key in DEFAULTS:
        value = os.getenv(f"TABLEDEF_{key.upper()}")
        if value:
            config[key] = value

    return config if config else None


def validate_cli_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and normalize a configuration dictionary.

    Args:
        config: Configuration dictionary

    Returns:
        Normalized configuration (indent as int, upper-case fail_on/log_level)

    Raises:
        ConfigError: If a key is unknown or a value is not acceptable
    """
    unknown = [key for key in config if key not in DEFAULTS]
    if unknown:
        raise ConfigError(
            f"Unknown config key(s): {', '.join(repr(k) for k in unknown)}. "
            f"Supported: {', '.join(DEFAULTS)}"
        )

    normalized = dict(config)

    dialect = str(normalized.get('dialect', '')).lower()
    if dialect not in SUPPORTED_DIALECTS:
        raise ConfigError(
            f"Unsupported dialect: {normalized.get('dialect')}. "
            f"Supported: {', '.join(SUPPORTED_DIALECTS)}"
        )
    normalized['dialect'] = dialect

    try:
        indent = int(normalized.get('indent'))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"indent must be an integer, got {normalized.get('indent')!r}") from e
    if indent < 0:
        raise ConfigError(f"indent must be >= 0, got {indent}")
    normalized['indent'] = indent

    for key, choices in (('fail_on', FAIL_ON_CHOICES), ('log_level', LOG_LEVELS)):
        value = str(normalized.get(key, '')).upper()
        if value not in choices:
            raise ConfigError(
                f"Invalid {key}: {normalized.get(key)}. Choose from: {', '.join(choices)}"
            )
        normalized[key] = value

    return normalized
