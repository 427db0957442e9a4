# ruff: noqa: TC003  # Path needed at runtime for Protocol method bodies
"""Component library protocol.

This module defines the runtime-checkable Protocol the template adapter
depends on. ComponentCollection implements it; hosts can supply their own.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from ._events import EventEmitter
from ._models import Component, Variant, View


@runtime_checkable
class ComponentLibrary(Protocol):
    """Protocol for the component library collaborator.

    Example:
        >>> def count_views(library: ComponentLibrary) -> int:
        ...     return len(library.views)
    """

    @property
    def full_path(self) -> Path:
        """Root directory of the library, used only as a join base."""
        ...

    @property
    def views(self) -> Sequence[View]:
        """All views, in a stable order."""
        ...

    @property
    def events(self) -> EventEmitter:
        """Emitter delivering the library's change events."""
        ...

    def set_handle_prefix(self, prefix: str) -> None:
        """Set the prefix carried by every view handle."""
        ...

    def find(self, identifier: str) -> Component | Variant | None:
        """Find a component or variant.

        Args:
            identifier: Entity marker followed by a component handle, or by
                ``<component>--<variant>`` for a specific variant.

        Returns:
            The entity, or None when nothing matches.
        """
        ...
