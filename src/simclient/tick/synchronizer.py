"""Tick synchronization between a session's stepping thread and its callers.

A session publishes every completed step here. Callers block on the
synchronizer until the next snapshot (``wait_for_tick``) or a specific frame
(``wait_for_frame``) arrives, and registered callbacks receive each snapshot.

Usage:
    sync = TickSynchronizer()
    sync.on_tick(lambda snapshot: print(snapshot.frame))

    # stepping thread
    sync.publish(WorldSnapshot(frame=1))

    # caller thread
    snapshot = sync.wait_for_tick(timeout=2.0)
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from loguru import logger

from simclient.core.errors import TickTimeout
from simclient.tick.callbacks import CallbackRegistry
from simclient.tick.models import WorldSnapshot


def _check_timeout(timeout: float) -> None:
    if timeout < 0:
        raise ValueError(f"Timeout must be non-negative, got {timeout}")


class TickSynchronizer:
    """Latest-snapshot holder with blocking waits and a callback registry.

    Snapshots must be published with strictly increasing frame numbers.
    Publishing is serialized: callbacks for frame N all run before any
    callback sees frame N + 1. Waits never register callbacks, so an
    expired wait leaves nothing behind.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._latest: WorldSnapshot | None = None
        self._callbacks: CallbackRegistry[WorldSnapshot] = CallbackRegistry()
        self._publish_lock = threading.Lock()
        self._local = threading.local()

    @property
    def latest(self) -> WorldSnapshot | None:
        """Most recently published snapshot, or None before the first one."""
        with self._condition:
            return self._latest

    @property
    def dispatching(self) -> bool:
        """True when called from inside a tick callback on this thread."""
        return getattr(self._local, "dispatching", False)

    def publish(self, snapshot: WorldSnapshot) -> None:
        """Make ``snapshot`` the latest one, wake waiters, run callbacks.

        Raises:
            ValueError: If the frame does not advance past the latest one.
            RuntimeError: If called from inside a tick callback.
        """
        if self.dispatching:
            raise RuntimeError("Cannot publish a snapshot from inside a tick callback")

        with self._publish_lock:
            with self._condition:
                if self._latest is not None and snapshot.frame <= self._latest.frame:
                    raise ValueError(
                        f"Frame {snapshot.frame} does not advance past {self._latest.frame}"
                    )
                self._latest = snapshot
                self._condition.notify_all()

            self._local.dispatching = True
            try:
                self._callbacks.dispatch(snapshot)
            finally:
                self._local.dispatching = False

    def wait_for_tick(self, timeout: float) -> WorldSnapshot:
        """Block until a snapshot newer than the current one is published.

        Raises:
            TickTimeout: If nothing new is published within ``timeout`` seconds.
        """
        _check_timeout(timeout)
        with self._condition:
            start = self._latest.frame if self._latest is not None else None

            def arrived() -> bool:
                return self._latest is not None and (start is None or self._latest.frame > start)

            if not self._condition.wait_for(arrived, timeout):
                logger.debug("wait_for_tick expired after {:.3f}s", timeout)
                raise TickTimeout(timeout)
            assert self._latest is not None
            return self._latest

    def wait_for_frame(self, frame: int, timeout: float) -> WorldSnapshot:
        """Block until a snapshot with at least ``frame`` is published.

        Returns immediately if that frame was already published.

        Raises:
            TickTimeout: If the frame is not reached within ``timeout`` seconds.
        """
        _check_timeout(timeout)
        with self._condition:

            def reached() -> bool:
                return self._latest is not None and self._latest.frame >= frame

            if not self._condition.wait_for(reached, timeout):
                logger.debug("Frame {} not reached after {:.3f}s", frame, timeout)
                raise TickTimeout(timeout, frame=frame)
            assert self._latest is not None
            return self._latest

    def on_tick(self, callback: Callable[[WorldSnapshot], None]) -> int:
        """Register a callback for every published snapshot. Returns its id."""
        return self._callbacks.register(callback)

    def remove_on_tick(self, callback_id: int) -> bool:
        """Unregister a callback. Safe to call during a dispatch."""
        return self._callbacks.remove(callback_id)

    def clear_callbacks(self) -> None:
        self._callbacks.clear()

    @property
    def callback_count(self) -> int:
        return len(self._callbacks)
