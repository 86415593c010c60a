"""Actor and episode identity."""

from simclient.core.identity.models import ActorId, EpisodeId

__all__ = [
    "ActorId",
    "EpisodeId",
]
