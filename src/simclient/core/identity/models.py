"""Identity models.

Actor ids are opaque unsigned integers handed out by the session. They are
unique within one episode and carry no meaning across episodes, so every
lookup pairs them with the episode they came from.
"""

from typing import TypeAlias

ActorId: TypeAlias = int
"""Actor identifier, unique within one episode."""

EpisodeId: TypeAlias = int
"""Identifier of one live run of the simulation."""
