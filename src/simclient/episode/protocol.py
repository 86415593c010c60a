"""Session protocol for swappable backends.

The session is the world facade's only collaborator. It wraps whatever
actually talks to the simulation (an RPC client, or the in-process
LocalEpisode) and reports everything in terms of plain value types.

Usage:
    session = LocalEpisode()
    world = World.connect(session)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from simclient.core.geometry import (
    BoundingBox,
    CityObjectLabel,
    LabelledPoint,
    Location,
    Transform,
    Vector3D,
)
from simclient.core.identity import ActorId, EpisodeId
from simclient.core.models import (
    ActorDescription,
    AttachmentType,
    EnvironmentObject,
    EpisodeSettings,
    TrafficLightState,
    VehicleLightState,
    WeatherParameters,
)

if TYPE_CHECKING:
    from simclient.actors.blueprint import ActorBlueprint, BlueprintLibrary
    from simclient.tick.models import WorldSnapshot


@runtime_checkable
class EpisodeSession(Protocol):
    """Abstract session interface. Implementations own all episode state."""

    @property
    def episode_id(self) -> EpisodeId:
        """Id of the episode currently running in the session."""
        ...

    @property
    def closed(self) -> bool:
        """True once the session has disconnected."""
        ...

    # Actors

    def get_actor_by_id(self, actor_id: ActorId) -> ActorDescription | None:
        """Describe one actor, None if it does not exist."""
        ...

    def get_actors_by_id(self, actor_ids: Sequence[ActorId]) -> list[ActorDescription]:
        """Describe the existing actors among ``actor_ids``, in the given order."""
        ...

    def get_all_actors(self) -> list[ActorDescription]:
        """Describe every actor in the episode, in session order."""
        ...

    def is_actor_alive(self, actor_id: ActorId) -> bool:
        ...

    def get_actor_transform(self, actor_id: ActorId) -> Transform:
        ...

    def set_actor_transform(self, actor_id: ActorId, transform: Transform) -> None:
        ...

    def spawn_actor(
        self,
        blueprint: ActorBlueprint,
        transform: Transform,
        parent_id: ActorId | None = None,
        attachment: AttachmentType = AttachmentType.RIGID,
    ) -> ActorDescription:
        """Spawn an actor. Raises SpawnFailure if the session rejects it."""
        ...

    def destroy_actor(self, actor_id: ActorId) -> bool:
        """Destroy an actor. Returns True if it existed and was removed."""
        ...

    def get_spectator(self) -> ActorDescription:
        ...

    def get_blueprint_library(self) -> BlueprintLibrary:
        ...

    # Ticking

    def get_world_snapshot(self) -> WorldSnapshot:
        ...

    def wait_for_tick(self, timeout: float) -> WorldSnapshot:
        """Block for the next snapshot. Raises TickTimeout."""
        ...

    def tick(self, timeout: float) -> int:
        """Advance one step and wait for it. Returns its frame. Raises TickTimeout."""
        ...

    def register_on_tick(self, callback: Callable[[WorldSnapshot], None]) -> int:
        ...

    def remove_on_tick(self, callback_id: int) -> None:
        ...

    # Episode state

    def get_episode_settings(self) -> EpisodeSettings:
        ...

    def set_episode_settings(self, settings: EpisodeSettings) -> int:
        """Apply settings. Returns the frame at which they took effect."""
        ...

    def get_weather_parameters(self) -> WeatherParameters:
        ...

    def set_weather_parameters(self, weather: WeatherParameters) -> None:
        ...

    def get_vehicles_light_states(self) -> dict[ActorId, VehicleLightState]:
        ...

    def get_random_location_from_navigation(self) -> Location | None:
        ...

    def set_pedestrians_cross_factor(self, percentage: float) -> None:
        ...

    # Traffic lights

    def get_traffic_light_state(self, actor_id: ActorId) -> TrafficLightState:
        ...

    def set_traffic_light_state(self, actor_id: ActorId, state: TrafficLightState) -> None:
        ...

    def is_traffic_light_frozen(self, actor_id: ActorId) -> bool:
        ...

    def reset_all_traffic_lights(self) -> None:
        ...

    def freeze_all_traffic_lights(self, frozen: bool) -> None:
        ...

    # Level geometry

    def get_level_bbs(self, label: CityObjectLabel = CityObjectLabel.ANY) -> list[BoundingBox]:
        ...

    def get_environment_objects(
        self, label: CityObjectLabel = CityObjectLabel.ANY
    ) -> list[EnvironmentObject]:
        ...

    def enable_environment_objects(self, object_ids: Sequence[int], enable: bool) -> None:
        ...

    def project_point(
        self, location: Location, direction: Vector3D, search_distance: float
    ) -> LabelledPoint | None:
        """First hit along ``direction`` within ``search_distance``, or None."""
        ...

    def cast_ray(self, start: Location, end: Location) -> list[LabelledPoint]:
        """Every hit along the segment from ``start`` to ``end``."""
        ...
