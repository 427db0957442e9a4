# pyright: reportAny=false, reportExplicitAny=false
"""Configuration loading with source precedence."""

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from tessera.exceptions import ConfigValidationError

from ._loader import deep_merge, parse_env_vars, read_toml_file
from ._models import AdapterConfig

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


def load_config(
    path: "Path | None" = None,
    *,
    include_env: bool = True,
    overrides: "Mapping[str, Any] | None" = None,
) -> AdapterConfig:
    """Load adapter configuration.

    Sources are merged in order (later values override earlier):
    1. Model defaults
    2. TOML file at `path`, if given
    3. TESSERA_* environment variables, if `include_env`
    4. Explicit `overrides`

    Args:
        path: Optional TOML config file. Must exist when given.
        include_env: Whether to read TESSERA_* environment variables.
        overrides: Highest-precedence values (may hold callables for the
            functions/filters/tests sections).

    Returns:
        Validated, frozen AdapterConfig.

    Raises:
        ConfigLoadError: If the file cannot be read or parsed.
        ConfigValidationError: If the merged values fail validation.
    """
    merged: dict[str, Any] = {}
    source = "default"

    if path is not None:
        merged = deep_merge(merged, read_toml_file(path))
        source = str(path)

    if include_env:
        env_values = parse_env_vars()
        if env_values:
            merged = deep_merge(merged, env_values)
            source = "env"

    if overrides:
        merged = deep_merge(merged, dict(overrides))
        source = "overrides"

    try:
        return AdapterConfig.model_validate(merged)
    except ValidationError as e:
        error = e.errors()[0]
        key = ".".join(str(part) for part in error.get("loc", ()))
        ctx = error.get("ctx") or {}
        expected = str(ctx.get("expected", error.get("type", "valid value")))
        msg = f"Invalid configuration value for {key}: {error.get('msg')}"
        raise ConfigValidationError(
            msg,
            key=key,
            value=error.get("input"),
            expected=expected,
            source=source,
        ) from e
