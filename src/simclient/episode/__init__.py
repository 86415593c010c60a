"""Episode access: the lockable handle, the session protocol, and the local session."""

from simclient.episode.handle import EpisodeHandle
from simclient.episode.local import LocalEpisode
from simclient.episode.protocol import EpisodeSession

__all__ = [
    "EpisodeHandle",
    "EpisodeSession",
    "LocalEpisode",
]
