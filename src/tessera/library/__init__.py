"""Component library collaborator.

This package defines what the template adapter needs from a component
library and ships an in-memory implementation.

Classes:
    ComponentLibrary: Runtime-checkable protocol consumed by the adapter.
    ComponentCollection: In-memory library, optionally scanned from disk.
    EventEmitter: Ordered, synchronous change event delivery.
    Subscription: Unsubscribe handle returned by EventEmitter.on.

Models:
    View: One template entry (path, handle, content, variants).
    Component: A library component with its variants.
    Variant: One configured rendering of a component.

Example:
    >>> from tessera.library import ComponentCollection
    >>> library = ComponentCollection.from_directory(Path("components"))
    >>> library.find("@button")
"""

from ._collection import ComponentCollection, read_component_config
from ._events import (
    EventEmitter,
    EventHandler,
    EventPayload,
    LibraryEvent,
    Subscription,
)
from ._models import (
    DEFAULT_VARIANT_NAME,
    ENTITY_MARKER,
    VARIANT_SEPARATOR,
    Component,
    Entity,
    Variant,
    View,
)
from ._protocol import ComponentLibrary

__all__ = [
    "DEFAULT_VARIANT_NAME",
    "ENTITY_MARKER",
    "VARIANT_SEPARATOR",
    "Component",
    "ComponentCollection",
    "ComponentLibrary",
    "Entity",
    "EventEmitter",
    "EventHandler",
    "EventPayload",
    "LibraryEvent",
    "Subscription",
    "Variant",
    "View",
    "read_component_config",
]
