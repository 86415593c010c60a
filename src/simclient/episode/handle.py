"""Episode handle: the single choke point for session access.

Usage:
    handle = EpisodeHandle(session)
    session = handle.lock()  # raises InvalidEpisode once the episode is gone
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from simclient.core.errors import InvalidEpisode
from simclient.core.identity import EpisodeId

if TYPE_CHECKING:
    from simclient.episode.protocol import EpisodeSession
    from simclient.tick.models import WorldSnapshot


class EpisodeHandle:
    """Reference to a session, pinned to the episode it was created for.

    Holds no episode state: only the session, the episode id, a validity
    flag and the ids of tick callbacks registered through it. ``lock()``
    fails once the handle is invalidated, the session is closed, or the
    session has moved on to another episode. A handle is never
    reused across episodes.

    Args:
        session: Session to reference.
        episode_id: Episode to pin to. Defaults to the session's current one.
    """

    def __init__(self, session: EpisodeSession, episode_id: EpisodeId | None = None):
        self._session = session
        self._episode_id = session.episode_id if episode_id is None else episode_id
        self._valid = threading.Event()
        self._valid.set()
        self._callbacks_lock = threading.Lock()
        self._callback_ids: set[int] = set()

    @property
    def episode_id(self) -> EpisodeId:
        return self._episode_id

    def lock(self) -> EpisodeSession:
        """Resolve the session for one call.

        Returns:
            The live session.

        Raises:
            InvalidEpisode: If the session ended or the episode changed.
        """
        if not self._valid.is_set():
            raise InvalidEpisode(self._episode_id, "handle was invalidated")
        session = self._session
        if session.closed:
            logger.debug("Lock failed on episode {}: session closed", self._episode_id)
            raise InvalidEpisode(self._episode_id, "session is closed")
        if session.episode_id != self._episode_id:
            logger.debug(
                "Lock failed on episode {}: session moved to {}",
                self._episode_id,
                session.episode_id,
            )
            raise InvalidEpisode(self._episode_id, f"session moved to episode {session.episode_id}")
        return session

    def on_tick(self, callback: Callable[[WorldSnapshot], None]) -> int:
        """Register a tick callback owned by this handle.

        The registration is dropped again when the handle is invalidated.
        """
        session = self.lock()
        callback_id = session.register_on_tick(callback)
        with self._callbacks_lock:
            if self._valid.is_set():
                self._callback_ids.add(callback_id)
                return callback_id
        session.remove_on_tick(callback_id)
        raise InvalidEpisode(self._episode_id, "handle was invalidated")

    def remove_on_tick(self, callback_id: int) -> None:
        session = self.lock()
        with self._callbacks_lock:
            self._callback_ids.discard(callback_id)
        session.remove_on_tick(callback_id)

    def invalidate(self) -> None:
        """Mark the handle unusable and drop the tick callbacks it registered.

        Idempotent.
        """
        with self._callbacks_lock:
            self._valid.clear()
            callback_ids, self._callback_ids = self._callback_ids, set()
        if callback_ids and not self._session.closed:
            for callback_id in callback_ids:
                self._session.remove_on_tick(callback_id)
            logger.debug(
                "Dropped {} tick callbacks of episode {}", len(callback_ids), self._episode_id
            )

    @property
    def is_valid(self) -> bool:
        """Non-raising check of what ``lock()`` would do right now."""
        return (
            self._valid.is_set()
            and not self._session.closed
            and self._session.episode_id == self._episode_id
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EpisodeHandle):
            return NotImplemented
        return self._session is other._session and self._episode_id == other._episode_id

    def __hash__(self) -> int:
        return hash((id(self._session), self._episode_id))

    def __repr__(self) -> str:
        return f"EpisodeHandle(episode_id={self._episode_id}, valid={self.is_valid})"
