"""Textual integration for Fluxaroo. Opt-in — requires textual.

bind() connects store "change" notifications to a Textual app: on every
change it re-reads state through select() and hands the result to effect().
The pause guard, NoMatches handling and thread marshaling all live here
so callsites stay plain.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterable

from textual.css.query import NoMatches

from fluxaroo.emitter import Disposer
from fluxaroo.store import Store

# Keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Hold back store bindings for app while the block runs."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Can bindings touch app's widgets right now?"""
    return app.is_running and id(app) not in _paused_apps


class Binding:
    """Subscription of one effect to a set of stores. Call dispose() to stop."""

    __slots__ = ("_disposers",)

    def __init__(self, disposers: list[Disposer]) -> None:
        self._disposers = disposers

    @property
    def disposed(self) -> bool:
        return not self._disposers

    def dispose(self) -> None:
        for remove in self._disposers:
            remove()
        self._disposers = []


def bind(
    app,
    stores: Iterable[Store],
    select: Callable[[], Any],
    effect: Callable[[Any], None],
    *,
    fire_immediately: bool = False,
) -> Binding:
    """Call effect(select()) whenever any of stores changes.

    Guards against firing during pause/not-running, catches NoMatches
    from widget queries, and marshals cross-thread calls via call_from_thread.

    Usage:
        binding = bind(
            app,
            [todo_store],
            lambda: len(todo_store.get_state()),
            lambda n: app.query_one("#count", Label).update(str(n)),
        )
        ...
        binding.dispose()
    """
    _main = threading.get_ident()

    def _on_change() -> None:
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe)
        else:
            _safe()

    def _safe() -> None:
        try:
            effect(select())
        except NoMatches:
            pass

    binding = Binding([store.add_listener("change", _on_change) for store in stores])
    if fire_immediately:
        _on_change()
    return binding
