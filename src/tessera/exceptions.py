"""Tessera exceptions."""

from typing import TYPE_CHECKING, Any

from jinja2 import TemplateNotFound

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


ROOTED_REFERENCE_HINT = (
    "make sure you add a leading forward slash to your path if you're trying "
    "to include a component -> include /atoms/button/button.j2 for instance"
)


class TesseraError(Exception):
    """Base exception for Tessera errors."""


# =============================================================================
# Template Exceptions
# =============================================================================


class ResolutionError(TesseraError):
    """Raised when a rooted location contains no known category segment."""

    def __init__(self, location: str, *, categories: "Sequence[str]") -> None:
        """Initialize with the unresolvable location and the known categories."""
        names = ", ".join(categories)
        super().__init__(
            f"Cannot resolve {location}: no path segment matches a category ({names})"
        )
        self.location: str = location
        self.categories: tuple[str, ...] = tuple(categories)


class TemplateNotFoundError(TesseraError, TemplateNotFound):
    """Raised when no view can be located for a template reference.

    Subclasses Jinja2's TemplateNotFound so that ``ignore missing`` includes
    and other Jinja2 error handling keep working.

    Attributes:
        location: The reference as written by the including template.
        cause: The resolution failure that led here, if any.
    """

    def __init__(
        self,
        location: str,
        *,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with the missing location and optional cause."""
        super().__init__(
            location, f"Template {location} not found; {ROOTED_REFERENCE_HINT}"
        )
        self.location: str = location
        self.cause: Exception | None = cause


class RenderError(TesseraError):
    """Raised when the template engine fails while compiling or rendering.

    The message of the underlying exception is preserved verbatim.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with the original message and render context."""
        super().__init__(message)
        self.name: str | None = name
        self.cause: Exception | None = cause


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(TesseraError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: "Path | None" = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
