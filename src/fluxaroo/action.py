"""Action creators — functions that build payloads for a dispatcher.

bind_actions() wraps creators so calling them dispatches what they return.
@deferred marks a creator whose result is a procedure taking dispatch,
for work that dispatches later (after I/O completes, for example).
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Mapping, ParamSpec

from fluxaroo.dispatcher import Deferred, Dispatcher, DispatchFn, action_type

P = ParamSpec("P")

__all__ = ["action_type", "bind_actions", "deferred"]


def deferred(fn: Callable[P, Callable[[DispatchFn], None]]) -> Callable[P, Deferred]:
    """Decorator: wrap the procedure fn returns in Deferred.

    Usage:
        @deferred
        def save(item):
            def run(dispatch):
                dispatch({"type": "save/started", "item": item})
                api.save(item)
                dispatch({"type": "save/done", "item": item})
            return run

        dispatcher.dispatch(save(item))
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Deferred:
        return Deferred(fn(*args, **kwargs))

    return wrapper


def bind_actions(
    dispatcher: Dispatcher, actions: Mapping[str, Callable[..., Any]]
) -> dict[str, Callable[..., None]]:
    """Wrap each action creator so calling it dispatches its result.

    Usage:
        bound = bind_actions(dispatcher, {"add": lambda text: {"type": "add", "text": text}})
        bound["add"]("milk")  # dispatches {"type": "add", "text": "milk"}
    """
    return {name: _bind(dispatcher, creator) for name, creator in actions.items()}


def _bind(dispatcher: Dispatcher, creator: Callable[..., Any]) -> Callable[..., None]:
    @functools.wraps(creator)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        dispatcher.dispatch(creator(*args, **kwargs))

    return wrapper
