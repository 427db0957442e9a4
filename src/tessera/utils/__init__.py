"""Shared utilities."""

from ._logging import create_adapter_logger, create_logger

__all__ = ["create_adapter_logger", "create_logger"]
