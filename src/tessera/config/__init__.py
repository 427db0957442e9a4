"""Tessera configuration.

This module provides the public API for adapter configuration: the typed
models, TOML/environment loading, and the merge helpers they use.

Example:
    >>> from tessera.config import load_config
    >>> config = load_config(include_env=False, overrides={"import_context": True})
    >>> config.handle_prefix
    '@'
"""

from tessera.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._load import load_config
from ._loader import (
    copy_value,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    AdapterConfig,
    EnvironmentConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "AdapterConfig",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "EnvironmentConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "copy_value",
    "deep_merge",
    "load_config",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "set_nested_key",
]
