"""Library change events.

The library announces view and wrapper changes through an EventEmitter.
Subscribers receive the affected View, or only its path when the library
has no View object for it (wrappers, deleted files).
"""

from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from ._models import View


class LibraryEvent(StrEnum):
    """Change events emitted by a component library."""

    VIEW_UPDATED = "view:updated"
    VIEW_REMOVED = "view:removed"
    WRAPPER_UPDATED = "wrapper:updated"
    WRAPPER_REMOVED = "wrapper:removed"


type EventPayload = View | Path | str
type EventHandler = Callable[[EventPayload], None]


@dataclass(slots=True)
class Subscription:
    """Handle returned by ``EventEmitter.on``.

    Attributes:
        emitter: The emitter the handler is registered with.
        event: The subscribed event.
        handler: The registered handler.
        active: False once unsubscribed.
    """

    emitter: "EventEmitter"
    event: LibraryEvent
    handler: EventHandler
    active: bool = field(default=True)

    def unsubscribe(self) -> None:
        """Remove the handler. Safe to call more than once."""
        if self.active:
            self.emitter.off(self.event, self.handler)
            self.active = False


class EventEmitter:
    """Synchronous observer registry for library events.

    Handlers run in subscription order. Events emitted from inside a handler
    are queued and delivered after the current event, so delivery always
    follows the order in which events were emitted.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[LibraryEvent, list[EventHandler]] = defaultdict(
            list
        )
        self._pending: deque[tuple[LibraryEvent, EventPayload]] = deque()
        self._dispatching: bool = False

    def on(self, event: LibraryEvent | str, handler: EventHandler) -> Subscription:
        """Register a handler for an event.

        Args:
            event: Event to subscribe to.
            handler: Callable receiving the event payload.

        Returns:
            A Subscription that can be used to unsubscribe.

        Raises:
            ValueError: If the event name is unknown.
        """
        library_event = LibraryEvent(event)
        self._handlers[library_event].append(handler)
        return Subscription(emitter=self, event=library_event, handler=handler)

    def off(self, event: LibraryEvent | str, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(LibraryEvent(event), [])
        if handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event: LibraryEvent | str) -> int:
        """Number of handlers registered for an event."""
        return len(self._handlers.get(LibraryEvent(event), []))

    def emit(self, event: LibraryEvent | str, payload: EventPayload) -> None:
        """Deliver an event to its handlers.

        If a handler raises, the exception propagates and any events still
        queued are delivered on the next ``emit``.
        """
        self._pending.append((LibraryEvent(event), payload))
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending:
                current, current_payload = self._pending.popleft()
                for handler in tuple(self._handlers.get(current, [])):
                    handler(current_payload)
        finally:
            self._dispatching = False
