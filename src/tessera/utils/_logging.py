"""Logging utilities for Tessera.

This module provides a standalone structlog logger factory that writes
JSON-formatted or text-formatted logs to a file or to stderr. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from tessera.config import LoggingConfig

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str | None) -> int:
    """Convert a log level string to a logging level integer.

    TESSERA_DEBUG overrides to DEBUG. When `level` is None, TESSERA_LOG_LEVEL
    is used, defaulting to INFO.
    """
    if getenv("TESSERA_DEBUG", None):
        return logging.DEBUG

    if level is None:
        level = getenv("TESSERA_LOG_LEVEL", "info")

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":
    """Create a standalone structlog logger.

    Args:
        level: Log level threshold (debug, info, warning, error). Uses
            TESSERA_LOG_LEVEL when omitted; TESSERA_DEBUG always wins.
        log_format: Output format, either "json" or "text".
        log_file: Path to the log file (opened in append mode). Empty logs
            to stderr.
        max_bytes: Maximum size in bytes before rotation. Must be set with
            backup_count for rotation to be enabled.
        backup_count: Number of rotated log files to keep.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = _log_level_from_string(level)

    raw_logger: object
    if log_file and max_bytes and backup_count:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Rotation goes through a private stdlib logger per file
        stdlib_logger = logging.getLogger(f"tessera.{log_path.stem}.{id(log_path)}")
        stdlib_logger.handlers.clear()
        stdlib_logger.propagate = False
        stdlib_logger.setLevel(effective_level)

        handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        handler.setLevel(effective_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        stdlib_logger.addHandler(handler)
        raw_logger = stdlib_logger
    elif log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        raw_logger = structlog.WriteLoggerFactory(file=log_path.open("a"))()
    else:
        raw_logger = structlog.PrintLoggerFactory(file=sys.stderr)()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )


def create_adapter_logger(config: "LoggingConfig") -> "FilteringBoundLogger":
    """Create the logger used by a template adapter.

    Args:
        config: Logging configuration section.

    Returns:
        A FilteringBoundLogger bound with ``component="tessera"``.
    """
    logger = create_logger(
        level=config.level.value,
        log_format=cast("LogFormatType", config.format.value),
        log_file=config.file,
        max_bytes=config.max_bytes or None,
        backup_count=config.backup_count or None,
    )
    return logger.bind(component="tessera")
