"""Input activity events and an in-process activity source."""

import threading
from collections.abc import Callable
from enum import Enum
from typing import Protocol


class ActivityEvent(Enum):
    """Input event classes that count as evidence the user is present."""

    MOUSE_MOVE = "mousemove"
    MOUSE_DOWN = "mousedown"
    KEY_DOWN = "keydown"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"
    CLICK = "click"

    @classmethod
    def parse(cls, name: str) -> "ActivityEvent | None":
        """Map a host event name to an ActivityEvent.

        Args:
            name: Event name as reported by the host (e.g. "keydown").

        Returns:
            The matching event, or None if the name is not recognised.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


QUALIFYING_EVENTS: frozenset[ActivityEvent] = frozenset(ActivityEvent)

ActivityListener = Callable[[ActivityEvent], None]


class ActivitySource(Protocol):
    """Something the monitor can subscribe to for activity events."""

    def subscribe(self, listener: ActivityListener) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Called with each activity event.

        Returns:
            Callable that removes the listener.
        """
        ...


class ActivityHub:
    """Fans activity events out to subscribed listeners.

    Listeners observe passively: a failing listener is reported and skipped,
    and never affects the emitter or the other listeners.
    """

    def __init__(self) -> None:
        self._listeners: list[ActivityListener] = []
        self._lock = threading.Lock()

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: ActivityListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: ActivityEvent) -> None:
        """Deliver an event to every listener."""
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                print(f"[Activity] Listener failed on {event.value}: {e}")

    def emit_name(self, name: str) -> bool:
        """Deliver a host event by name.

        Returns:
            True if the name was a qualifying event and was delivered.
        """
        event = ActivityEvent.parse(name)
        if event is None:
            return False
        self.emit(event)
        return True
