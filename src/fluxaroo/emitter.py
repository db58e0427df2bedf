"""EventEmitter — named events with synchronous listeners.

Stores use this to announce "change" after an action updates their state.
"""

from __future__ import annotations

from typing import Any, Callable

Listener = Callable[..., None]
Disposer = Callable[[], None]


class EventEmitter:
    """Listener registry keyed by event name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, event: str, callback: Listener) -> Disposer:
        """Register callback for event. Returns a function that removes it."""
        self._listeners.setdefault(event, []).append(callback)

        def _remove() -> None:
            self.remove_listener(event, callback)

        return _remove

    def remove_listener(self, event: str, callback: Listener) -> None:
        """Remove one registration of callback. No-op if it isn't registered."""
        listeners = self._listeners.get(event)
        if not listeners:
            return
        try:
            listeners.remove(callback)
        except ValueError:
            pass  # already removed
        if not listeners:
            del self._listeners[event]

    def emit(self, event: str, *args: Any) -> None:
        """Call every listener for event, in registration order."""
        # Snapshot: listeners may unsubscribe while being notified.
        for callback in list(self._listeners.get(event, ())):
            callback(*args)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
