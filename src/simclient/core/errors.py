"""Exception hierarchy shared by every layer of the client.

Lookups never raise for "not found"; these exceptions are reserved for an
ended episode, an expired wait, or a rejected spawn.
"""

from __future__ import annotations


class SimClientError(Exception):
    """Base class for all client errors."""

    pass


class InvalidEpisode(SimClientError):
    """Raised when the session behind an episode handle has ended.

    Fatal to the current call. The caller must reconnect and fetch a new world.
    """

    def __init__(self, episode_id: int | None = None, reason: str = "episode is no longer valid"):
        self.episode_id = episode_id
        self.reason = reason
        if episode_id is None:
            super().__init__(reason)
        else:
            super().__init__(f"episode {episode_id}: {reason}")


class TickTimeout(SimClientError, TimeoutError):
    """Raised when a tick or a wait for a tick did not complete in time."""

    def __init__(self, timeout: float, frame: int | None = None):
        self.timeout = timeout
        self.frame = frame
        if frame is None:
            super().__init__(f"no simulation step completed within {timeout:.3f}s")
        else:
            super().__init__(f"frame {frame} was not reached within {timeout:.3f}s")


class SpawnFailure(SimClientError):
    """Raised when the session rejects a spawn request.

    Collisions, invalid blueprints and ended episodes are all reported as
    this one kind.
    """

    pass


class SynchronousModeError(SimClientError):
    """Raised when a fixed-step operation is used on a free-running session."""

    pass
