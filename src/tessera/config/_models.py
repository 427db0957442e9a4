"""Configuration models.

This module provides the frozen Pydantic models for adapter configuration,
including the logging and Jinja2 environment sections.
"""

from collections.abc import Callable
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
        max_bytes: Rotate the log file after this many bytes (0 disables).
        backup_count: Number of rotated files to keep.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
    max_bytes: int = Field(default=0, ge=0)
    backup_count: int = Field(default=0, ge=0)


class EnvironmentConfig(BaseModel):
    """Configuration for the Jinja2 Environment.

    Attributes:
        autoescape: Enable autoescaping (default: False, component markup is
            trusted library content).
        trim_blocks: Remove first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before block tags.
        keep_trailing_newline: Preserve trailing newline in templates.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = False


TemplateCallable = Callable[..., Any]  # pyright: ignore[reportExplicitAny]


class AdapterConfig(BaseModel):
    """Root adapter configuration.

    Attributes:
        pristine: Disable context patching and reserved key injection, giving
            stock Jinja2 behavior.
        handle_prefix: Marker that identifies handle references.
        import_context: Merge the rendering component's own context into the
            render context of every component template.
        categories: Top-level library folder names used as anchors when
            resolving rooted references.
        environment: Jinja2 environment options.
        logging: Logging options.
        functions: Extra global functions exposed to templates.
        filters: Extra filters.
        tests: Extra tests.
        extensions: Jinja2 extensions (classes or dotted import paths).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, extra="ignore", arbitrary_types_allowed=True
    )

    pristine: bool = False
    handle_prefix: str = Field(default="@", min_length=1)
    import_context: bool = False
    categories: tuple[str, ...] = Field(
        default=("atoms", "molecules", "organisms"), min_length=1
    )
    environment: EnvironmentConfig = EnvironmentConfig()
    logging: LoggingConfig = LoggingConfig()
    functions: dict[str, TemplateCallable] = Field(default_factory=dict)
    filters: dict[str, TemplateCallable] = Field(default_factory=dict)
    tests: dict[str, TemplateCallable] = Field(default_factory=dict)
    extensions: tuple[str | type, ...] = ()
