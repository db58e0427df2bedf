"""Dispatcher — synchronous broadcast of payloads to registered callbacks.

Every payload passed to dispatch() reaches every registered callback exactly
once. A callback may call wait_for() to make other callbacks finish with the
current payload before it carries on, so callbacks are ordered by declared
dependency rather than by registration order.

A callable payload is a deferred action: dispatch() hands it the bound
dispatch method and returns. The deferred action decides when, and whether,
to dispatch ordinary payloads.

Bookkeeping for one cycle:
    _is_pending[token]  the callback has started with the current payload
    _is_handled[token]  the callback has finished with the current payload
    _running            callbacks currently on the call stack

Marking pending before the call is what keeps wait_for() from running a
callback twice.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from fluxaroo.errors import (
    CircularDependencyError,
    InvalidPayloadError,
    NotDispatchingError,
    UnknownTokenError,
)

logger = logging.getLogger("fluxaroo.dispatcher")

Callback = Callable[[Any], None]
DispatchFn = Callable[[Any], None]

# Owner ids outlive their dispatchers, unlike id(dispatcher).
_owner_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class CallbackToken:
    """Opaque handle for one registered callback.

    Serials are never reused by a dispatcher, and tokens minted by different
    dispatchers never compare equal.
    """

    owner: int
    serial: int

    def __repr__(self) -> str:
        return f"CallbackToken({self.serial})"


@dataclass(frozen=True, slots=True)
class Deferred:
    """A payload that is a procedure instead of a value.

    Usage:
        def load_user(dispatch):
            dispatch({"type": "user/loading"})
            fetch_user(on_done=lambda u: dispatch({"type": "user/loaded", "user": u}))

        dispatcher.dispatch(Deferred(load_user))
    """

    procedure: Callable[[DispatchFn], None]

    def __call__(self, dispatch: DispatchFn) -> None:
        self.procedure(dispatch)


def action_type(payload: Any) -> Any:
    """The payload's ``type`` discriminator, from a mapping key or an attribute."""
    if isinstance(payload, Mapping):
        return payload.get("type")
    return getattr(payload, "type", None)


class Dispatcher:
    """Registry of callbacks that all receive every dispatched payload.

    strict=True makes a circular wait_for() raise CircularDependencyError.
    Otherwise the waiting callback carries on without the other's result and
    a warning is logged.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._callbacks: dict[CallbackToken, Callback] = {}
        self._is_pending: dict[CallbackToken, bool] = {}
        self._is_handled: dict[CallbackToken, bool] = {}
        self._is_dispatching = False
        self._pending_payload: Any = None
        self._running: set[CallbackToken] = set()
        self._owner = next(_owner_ids)
        self._serials = itertools.count(1)

    def register(self, callback: Callback) -> CallbackToken:
        """Register a callback for every dispatched payload.

        Returns a token for unregister() and wait_for().
        """
        token = CallbackToken(self._owner, next(self._serials))
        self._callbacks[token] = callback
        logger.debug("Registered %r", token)
        return token

    def unregister(self, token: CallbackToken) -> None:
        """Remove a callback. Unknown tokens are ignored.

        Takes effect at once, even in the middle of a cycle.
        """
        if token in self._callbacks:
            del self._callbacks[token]
            logger.debug("Unregistered %r", token)

    def wait_for(self, tokens: Iterable[Any]) -> None:
        """Run the given callbacks now, unless they have already started.

        Only valid from inside a callback while a payload is being
        dispatched. Accepts tokens, or objects with a ``store_key`` token.
        """
        if not self._is_dispatching:
            raise NotDispatchingError("wait_for() must be called by a callback during dispatch()")
        for item in tokens:
            token = getattr(item, "store_key", item)
            if self._is_pending.get(token):
                if token in self._running:
                    self._circular_wait(token)
                continue
            if token not in self._callbacks:
                raise UnknownTokenError(token)
            self._invoke_callback(token)

    def dispatch(self, payload: Any) -> None:
        """Dispatch a payload to all registered callbacks.

        A callable payload is called with this dispatch method instead.
        """
        if callable(payload):
            payload(self.dispatch)
            return
        if not action_type(payload):
            raise InvalidPayloadError(
                f"Actions must be a mapping or object with a 'type', got {payload!r}"
            )
        self._start_dispatching(payload)
        try:
            # Snapshot: callbacks may register or unregister while we iterate.
            for token in list(self._callbacks):
                if token not in self._callbacks or self._is_pending.get(token):
                    continue
                self._invoke_callback(token)
        finally:
            self._stop_dispatching()

    def is_dispatching(self) -> bool:
        """Is this dispatcher in the middle of a dispatch cycle."""
        return self._is_dispatching

    def _invoke_callback(self, token: CallbackToken) -> None:
        self._is_pending[token] = True
        self._running.add(token)
        try:
            self._callbacks[token](self._pending_payload)
        finally:
            self._running.discard(token)
        self._is_handled[token] = True

    def _circular_wait(self, token: CallbackToken) -> None:
        if self.strict:
            raise CircularDependencyError(
                f"wait_for() on {token!r}, which is still running further up the stack"
            )
        logger.warning("Circular wait_for() on %r; continuing without its result", token)

    def _start_dispatching(self, payload: Any) -> None:
        # Rebuilt every cycle so unregistered tokens do not linger.
        self._is_pending = dict.fromkeys(self._callbacks, False)
        self._is_handled = dict.fromkeys(self._callbacks, False)
        self._running.clear()
        self._pending_payload = payload
        self._is_dispatching = True
        logger.debug("Dispatching %r to %d callbacks", action_type(payload), len(self._callbacks))

    def _stop_dispatching(self) -> None:
        self._pending_payload = None
        self._is_dispatching = False

    def __repr__(self) -> str:
        state = "dispatching" if self._is_dispatching else "idle"
        return f"Dispatcher({len(self._callbacks)} callbacks, {state})"
