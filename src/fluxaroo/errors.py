"""Exceptions raised by Fluxaroo.

Every error derives from FluxarooError and from the built-in exception
family it belongs to, so callers can catch either.
"""

from __future__ import annotations


class FluxarooError(Exception):
    """Base class for all Fluxaroo errors."""


class InvalidPayloadError(FluxarooError, ValueError):
    """dispatch() got something that is neither callable nor typed."""


class UnknownTokenError(FluxarooError, KeyError):
    """wait_for() named a token that is not registered."""


class NotDispatchingError(FluxarooError, RuntimeError):
    """wait_for() was called outside a dispatch cycle."""


class CircularDependencyError(FluxarooError, RuntimeError):
    """A strict dispatcher saw a callback wait on one that is still running."""


class StoreConfigError(FluxarooError, ValueError):
    """create_store() was called without an initial state."""
