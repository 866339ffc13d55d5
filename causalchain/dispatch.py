# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import inspect
import logging
import threading
import weakref
from typing import TYPE_CHECKING, Any

from ._errors import NullArgumentError
from .config import settings
from .sentinel import MaybeUnset, Unset, is_null

if TYPE_CHECKING:
    from collections.abc import Callable

    from .occurrence import Occurrence

__all__ = (
    "EventManager",
    "get_event_manager",
    "set_event_manager",
)

logger = logging.getLogger(__name__)


class _StrongRef:
    """Ref-like holder for callables that cannot be weakly referenced."""

    __slots__ = ("_callback",)

    def __init__(self, callback: Callable[[Any], None]) -> None:
        self._callback = callback

    def __call__(self) -> Callable[[Any], None]:
        return self._callback


def _weak(callback: Callable[[Any], None]) -> weakref.ref | _StrongRef:
    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback)
    try:
        return weakref.ref(callback)
    except TypeError:
        # builtins and bound C methods, e.g. print or some_list.append
        return _StrongRef(callback)


class EventManager:
    """Synchronous pub/sub for occurrences, keyed by occurrence type.

    Subscribers are stored as weakrefs (WeakMethod for bound methods) so
    they are dropped once the referenced object is garbage collected.
    Callables that do not support weak references, such as builtins and
    bound C methods like ``some_list.append``, are held strongly until
    unsubscribed.
    A subscriber registered for a type receives every posted occurrence
    that is an instance of it, subclasses included.

    Example::

        manager = EventManager()
        manager.subscribe(BlockBreak, on_block_break)
        BlockBreak(causes=CausalChain.of(player)).post(manager)
    """

    def __init__(self, *, propagate_errors: MaybeUnset[bool] = Unset) -> None:
        """
        Args:
            propagate_errors: Re-raise subscriber exceptions instead of
                logging them. Defaults to
                ``settings.PROPAGATE_SUBSCRIBER_ERRORS``.
        """
        if propagate_errors is Unset:
            propagate_errors = settings.PROPAGATE_SUBSCRIBER_ERRORS
        self.propagate_errors: bool = bool(propagate_errors)
        self._subscribers: list[tuple[type, weakref.ref | _StrongRef]] = []
        self._lock = threading.RLock()

    def subscribe(self, occurrence_type: type, callback: Callable[[Any], None]) -> None:
        """Add subscriber callback (idempotent, stored as weakref).

        Args:
            occurrence_type: Occurrence class to listen for.
            callback: Sync callable receiving the occurrence.

        Raises:
            NullArgumentError: If either argument is None.
            TypeError: If `callback` is a coroutine function.
        """
        if is_null(occurrence_type):
            raise NullArgumentError.from_argument("Occurrence type", occurrence_type)
        if is_null(callback):
            raise NullArgumentError.from_argument("Callback", callback)
        if inspect.iscoroutinefunction(callback):
            raise TypeError(f"Callback must be synchronous: {callback!r}")

        with self._lock:
            for typ, weak_ref in self._subscribers:
                if typ is occurrence_type and weak_ref() == callback:
                    return
            # copy-on-write so post() can iterate without holding the lock
            self._subscribers = [
                *self._subscribers,
                (occurrence_type, _weak(callback)),
            ]
        logger.debug("Subscribed %r to %s", callback, occurrence_type.__name__)

    def unsubscribe(self, occurrence_type: type, callback: Callable[[Any], None]) -> bool:
        """Remove subscriber callback.

        Returns:
            True if the callback was registered for `occurrence_type`.
        """
        with self._lock:
            for entry in self._subscribers:
                typ, weak_ref = entry
                if typ is occurrence_type and weak_ref() == callback:
                    self._subscribers = [e for e in self._subscribers if e is not entry]
                    return True
        return False

    def _live_subscribers(self) -> list[tuple[type, Callable[[Any], None]]]:
        """Prune dead weakrefs, return live (type, callback) pairs."""
        with self._lock:
            live, alive_refs = [], []
            for typ, weak_ref in self._subscribers:
                if (cb := weak_ref()) is not None:
                    live.append((typ, cb))
                    alive_refs.append((typ, weak_ref))
            if len(alive_refs) != len(self._subscribers):
                self._subscribers = alive_refs
        return live

    def post(self, occurrence: Occurrence) -> None:
        """Deliver an occurrence to every matching subscriber, in order.

        Raises:
            NullArgumentError: If `occurrence` is None.

        Note:
            Callback exceptions are logged and suppressed to prevent one
            failing subscriber from blocking others, unless
            `propagate_errors` is set.
        """
        if is_null(occurrence):
            raise NullArgumentError.from_argument("Occurrence", occurrence)

        logger.debug(
            "Posting %s caused by %s", type(occurrence).__name__, occurrence.cause()
        )
        for typ, callback in self._live_subscribers():
            if not isinstance(occurrence, typ):
                continue
            try:
                callback(occurrence)
            except Exception as e:
                if self.propagate_errors:
                    raise
                logger.error(f"Error in subscriber callback: {e}", exc_info=True)

    def subscriber_count(self, occurrence_type: type | None = None) -> int:
        """Count live subscribers, optionally only those for one type."""
        live = self._live_subscribers()
        if occurrence_type is None:
            return len(live)
        return sum(1 for typ, _ in live if typ is occurrence_type)


_manager: EventManager | None = None
_manager_lock = threading.Lock()


def get_event_manager() -> EventManager:
    """Gets the process-wide event manager, creating it on first use."""
    global _manager
    if _manager is None:
        with _manager_lock:
            if _manager is None:
                _manager = EventManager()
    return _manager


def set_event_manager(manager: EventManager | None) -> None:
    """Replaces the process-wide event manager. None restores a lazy default."""
    global _manager
    with _manager_lock:
        _manager = manager
