"""Guarded registry of tick callbacks, removable by id.

Usage:
    registry = CallbackRegistry()
    callback_id = registry.register(lambda snapshot: print(snapshot.frame))
    registry.dispatch(snapshot)
    registry.remove(callback_id)
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class CallbackRegistry(Generic[T]):
    """Maps monotonic registration ids to callbacks.

    Each callback is invoked while the registry lock is held, so ``remove()``
    from another thread blocks until an in-flight invocation of that callback
    returns. Once ``remove()`` returns, the callback is never invoked again.
    The lock is reentrant: a callback may register or remove callbacks
    (including itself) from inside a dispatch. A callback must not wait on
    another thread that is itself calling ``remove()``.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._callbacks: dict[int, Callable[[T], None]] = {}
        self._ids = itertools.count(1)

    def register(self, callback: Callable[[T], None]) -> int:
        """Register a callback and return its id. Ids are never reused."""
        with self._lock:
            callback_id = next(self._ids)
            self._callbacks[callback_id] = callback
        logger.debug("Registered tick callback {}", callback_id)
        return callback_id

    def remove(self, callback_id: int) -> bool:
        """Remove a callback. Returns True if it was registered."""
        with self._lock:
            removed = self._callbacks.pop(callback_id, None) is not None
        if removed:
            logger.debug("Removed tick callback {}", callback_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._callbacks.clear()

    def __contains__(self, callback_id: int) -> bool:
        with self._lock:
            return callback_id in self._callbacks

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def dispatch(self, value: T) -> None:
        """Invoke every currently registered callback with ``value``.

        Callbacks registered during the dispatch are not invoked for this
        value. A callback that raises is logged and the remaining callbacks
        still run.
        """
        with self._lock:
            pending = list(self._callbacks)

        for callback_id in pending:
            with self._lock:
                callback = self._callbacks.get(callback_id)
                if callback is None:
                    continue
                try:
                    callback(value)
                except Exception:
                    logger.exception("Tick callback {} raised", callback_id)
