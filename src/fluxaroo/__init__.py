"""Fluxaroo: a Flux-style dispatcher and stores for Python."""

from importlib.metadata import version as _version

__version__ = _version("fluxaroo")

from fluxaroo.errors import (
    FluxarooError,
    InvalidPayloadError,
    UnknownTokenError,
    NotDispatchingError,
    CircularDependencyError,
    StoreConfigError,
)
from fluxaroo.dispatcher import Dispatcher, CallbackToken, Deferred, action_type
from fluxaroo.emitter import EventEmitter
from fluxaroo.store import Store, create_store
from fluxaroo.action import bind_actions, deferred
# textual NOT auto-imported — opt-in only

__all__ = [
    "Dispatcher",
    "CallbackToken",
    "Deferred",
    "action_type",
    "EventEmitter",
    "Store",
    "create_store",
    "bind_actions",
    "deferred",
    "FluxarooError",
    "InvalidPayloadError",
    "UnknownTokenError",
    "NotDispatchingError",
    "CircularDependencyError",
    "StoreConfigError",
]
