"""Actor handles.

An Actor is a lightweight handle: an id, a type id, and the episode it came
from. Every operation on it goes back through the episode handle, so a handle
from an ended episode fails with InvalidEpisode instead of touching stale
state.

Usage:
    actor = world.get_actor(actor_id)
    if actor is not None and actor.is_alive:
        print(actor.type_id, actor.get_location())

    light = world.get_traffic_light(landmark)
    if isinstance(light, TrafficLight):
        light.set_state(TrafficLightState.GREEN)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from simclient.core.errors import InvalidEpisode
from simclient.core.geometry import Location, Transform
from simclient.core.identity import ActorId
from simclient.core.models import ActorDescription, TrafficLightState

if TYPE_CHECKING:
    from simclient.episode.handle import EpisodeHandle


class Actor:
    """Handle to a live actor in one episode.

    Args:
        description: What the session reported about the actor.
        episode: Handle of the episode the actor belongs to.
    """

    def __init__(self, description: ActorDescription, episode: EpisodeHandle):
        self._description = description
        self._episode = episode

    @property
    def id(self) -> ActorId:
        return self._description.id

    @property
    def type_id(self) -> str:
        return self._description.type_id

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self._description.attributes)

    @property
    def parent_id(self) -> ActorId | None:
        return self._description.parent_id

    @property
    def episode(self) -> EpisodeHandle:
        return self._episode

    @property
    def is_alive(self) -> bool:
        """True while the episode is valid and the session still has this actor."""
        try:
            session = self._episode.lock()
        except InvalidEpisode:
            return False
        return session.is_actor_alive(self.id)

    def get_parent(self) -> Actor | None:
        """Actor this one is attached to, or None."""
        if self.parent_id is None:
            return None
        from simclient.actors.factory import make_actor

        description = self._episode.lock().get_actor_by_id(self.parent_id)
        return make_actor(description, self._episode) if description is not None else None

    def get_transform(self) -> Transform:
        return self._episode.lock().get_actor_transform(self.id)

    def get_location(self) -> Location:
        return self.get_transform().location

    def set_transform(self, transform: Transform) -> None:
        """Move the actor. For rigidly attached actors the transform is parent-relative."""
        self._episode.lock().set_actor_transform(self.id, transform)

    def destroy(self) -> bool:
        """Remove the actor from the episode. Returns False if it was already gone."""
        return self._episode.lock().destroy_actor(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Actor):
            return NotImplemented
        return self.id == other.id and self._episode == other._episode

    def __hash__(self) -> int:
        return hash((self.id, self._episode))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, type_id={self.type_id!r})"


class TrafficSign(Actor):
    """Traffic-control actor bound to a map landmark through ``sign_id``."""

    @property
    def sign_id(self) -> str | None:
        return self._description.sign_id


class TrafficLight(TrafficSign):
    """Traffic sign whose state changes over time."""

    @property
    def state(self) -> TrafficLightState:
        return self._episode.lock().get_traffic_light_state(self.id)

    def set_state(self, state: TrafficLightState) -> None:
        self._episode.lock().set_traffic_light_state(self.id, state)

    def is_frozen(self) -> bool:
        return self._episode.lock().is_traffic_light_frozen(self.id)
