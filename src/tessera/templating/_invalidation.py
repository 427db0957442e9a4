"""Registry invalidation driven by library change events."""

from pathlib import Path
from typing import TYPE_CHECKING

from tessera.library import VARIANT_SEPARATOR, LibraryEvent, View

from ._paths import relative_key

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from tessera.library import ComponentLibrary, EventPayload, Subscription

    from ._registry import TemplateRegistry

INVALIDATING_EVENTS = (
    LibraryEvent.VIEW_UPDATED,
    LibraryEvent.VIEW_REMOVED,
    LibraryEvent.WRAPPER_UPDATED,
    LibraryEvent.WRAPPER_REMOVED,
)


class CacheInvalidator:
    """Evict compiled templates when the library reports a change.

    The root-relative path key is removed and, when the payload is a View,
    its handle key and the handle keys of its variants as well. Evicting a
    key that is not cached is a no-op, so duplicate or early events are
    harmless.
    """

    def __init__(
        self,
        library: "ComponentLibrary",
        registry: "TemplateRegistry",
        logger: "FilteringBoundLogger",
    ) -> None:
        self.library: ComponentLibrary = library
        self.registry: TemplateRegistry = registry
        self._logger: FilteringBoundLogger = logger
        self._subscriptions: list[Subscription] = []

    @property
    def attached(self) -> bool:
        return bool(self._subscriptions)

    def attach(self) -> None:
        """Subscribe to the library's change events. Idempotent."""
        if self.attached:
            return
        events = self.library.events
        self._subscriptions = [
            events.on(event, self.invalidate) for event in INVALIDATING_EVENTS
        ]
        self._logger.debug("invalidator_attached")

    def detach(self) -> None:
        """Unsubscribe from all events. Idempotent."""
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        if self._subscriptions:
            self._logger.debug("invalidator_detached")
        self._subscriptions = []

    def invalidate(self, payload: "EventPayload") -> list[str]:
        """Evict the registry entries for a view or path.

        Args:
            payload: The changed View, or the path of the changed file.

        Returns:
            The keys that were actually evicted.
        """
        path = payload.path if isinstance(payload, View) else Path(payload)
        keys = [relative_key(path, self.library.full_path)]
        if isinstance(payload, View) and payload.handle:
            keys.append(payload.handle)
            keys.extend(
                f"{payload.handle}{VARIANT_SEPARATOR}{variant.name}"
                for variant in payload.variants
            )

        evicted = [key for key in keys if self.registry.evict(key)]
        if evicted:
            self._logger.debug("template_evicted", keys=evicted)
        return evicted
