"""Store — state reduced from dispatched actions, with change notification.

A Store registers exactly one dispatcher callback. When an action arrives
whose type has a handler, the handler computes the next state from the
current one and the store emits "change". Listeners re-read get_state().
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from fluxaroo.dispatcher import Dispatcher, action_type
from fluxaroo.emitter import EventEmitter
from fluxaroo.errors import StoreConfigError

logger = logging.getLogger("fluxaroo.store")

Reducer = Callable[[Any, Any], Any]

_MISSING = object()


class Store(EventEmitter):
    """Holds one state value and replaces it as actions are dispatched."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        initial_state: Any,
        action_handlers: Mapping[str, Reducer] | None = None,
    ) -> None:
        super().__init__()
        self._dispatcher = dispatcher
        self._state = initial_state
        # Public so handlers can be exercised without a dispatcher.
        self.action_handlers: dict[str, Reducer] = dict(action_handlers or {})
        # Pass the store (or this key) to Dispatcher.wait_for().
        self.store_key = dispatcher.register(self._on_action)

    def get_state(self) -> Any:
        return self._state

    def _on_action(self, action: Any) -> None:
        kind = action_type(action)
        handler = self.action_handlers.get(kind)
        if handler is None:
            return
        self._state = handler(self._state, action)
        logger.debug("%r handled %r", self.store_key, kind)
        self.emit("change")

    def dispose(self) -> None:
        """Stop receiving actions and drop all listeners."""
        self._dispatcher.unregister(self.store_key)
        self._listeners.clear()

    def __repr__(self) -> str:
        return f"Store({self._state!r})"


def create_store(
    dispatcher: Dispatcher,
    initial_state: Any = _MISSING,
    action_handlers: Mapping[str, Reducer] | None = None,
) -> Store:
    """Create a Store bound to dispatcher.

    initial_state may be any value, including None, but must be given.

    Usage:
        dispatcher = Dispatcher()
        counter = create_store(
            dispatcher,
            initial_state=0,
            action_handlers={"increment": lambda state, action: state + action["by"]},
        )
        counter.add_listener("change", lambda: print(counter.get_state()))
        dispatcher.dispatch({"type": "increment", "by": 2})  # prints 2
    """
    if initial_state is _MISSING:
        raise StoreConfigError("An initial_state must be given when creating a store")
    return Store(dispatcher, initial_state, action_handlers)
