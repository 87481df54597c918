"""Configuration management."""
from tabledef.config.settings import (
    ConfigError,
    load_cli_config,
    validate_cli_config,
)

__all__ = [
    'ConfigError',
    'load_cli_config',
    'validate_cli_config',
]
