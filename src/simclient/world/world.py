"""World: the single entry point to a live simulation episode.

Usage:
    session = LocalEpisode(ClientSettings(synchronous_mode=True))
    world = World.connect(session)

    # Spawn actors
    blueprint = world.get_blueprint_library().find("vehicle.tesla.model3")
    vehicle = world.spawn_actor(blueprint, Transform(Location(0.0, 0.0, 0.5)))
    camera = world.try_spawn_actor(camera_bp, Transform(), parent=vehicle)

    # Advance and observe
    callback_id = world.on_tick(lambda snapshot: print(snapshot.frame))
    frame = world.tick(timeout=2.0)
    world.remove_on_tick(callback_id)

    # Resolve map landmarks to live controllers
    light = world.get_traffic_light(landmark)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from loguru import logger

from simclient.actors.actor import Actor
from simclient.actors.actor_list import ActorList
from simclient.actors.factory import make_actor, make_actors
from simclient.config.settings import ClientSettings
from simclient.core.errors import SimClientError, SpawnFailure
from simclient.core.geometry import (
    BoundingBox,
    CityObjectLabel,
    LabelledPoint,
    Location,
    Transform,
    Vector3D,
)
from simclient.core.identity import ActorId, EpisodeId
from simclient.core.landmark import ControllerKind, Landmark
from simclient.core.models import (
    AttachmentType,
    EnvironmentObject,
    EpisodeSettings,
    VehicleLightState,
    WeatherParameters,
)
from simclient.episode.handle import EpisodeHandle
from simclient.world.landmarks import find_controller
from simclient.world.result import SpawnResult

if TYPE_CHECKING:
    from simclient.actors.blueprint import ActorBlueprint, BlueprintLibrary
    from simclient.episode.protocol import EpisodeSession
    from simclient.tick.models import WorldSnapshot

DOWN = Vector3D(0.0, 0.0, -1.0)


class World:
    """Facade over one episode of a session.

    Owns nothing but its episode handle. Every method locks the handle first,
    so once the episode ends every call raises InvalidEpisode. Lookups return
    None or an empty list for "not found"; blocking calls raise TickTimeout.

    Args:
        episode: Handle of the episode to operate on.
        settings: Client settings (default timeout).
    """

    def __init__(self, episode: EpisodeHandle, settings: ClientSettings | None = None):
        self._episode = episode
        self._settings = settings or ClientSettings()

    @classmethod
    def connect(cls, session: EpisodeSession, settings: ClientSettings | None = None) -> World:
        """World for the session's current episode."""
        return cls(EpisodeHandle(session), settings)

    @property
    def id(self) -> EpisodeId:
        return self._episode.episode_id

    @property
    def episode(self) -> EpisodeHandle:
        return self._episode

    def _timeout(self, timeout: float | None) -> float:
        return self._settings.timeout if timeout is None else timeout

    # Snapshots and ticking

    def get_snapshot(self) -> WorldSnapshot:
        """Latest snapshot published by the session."""
        return self._episode.lock().get_world_snapshot()

    def wait_for_tick(self, timeout: float | None = None) -> WorldSnapshot:
        """Block until the session publishes its next snapshot.

        Does not advance the simulation; for free-running sessions.

        Raises:
            TickTimeout: If no step completes within ``timeout`` seconds.
        """
        return self._episode.lock().wait_for_tick(self._timeout(timeout))

    def tick(self, timeout: float | None = None) -> int:
        """Advance exactly one step and wait for its snapshot.

        Returns:
            Frame number of the new step.

        Raises:
            TickTimeout: If the step does not complete within ``timeout`` seconds.
        """
        return self._episode.lock().tick(self._timeout(timeout))

    def on_tick(self, callback: Callable[[WorldSnapshot], None]) -> int:
        """Call ``callback`` with every new snapshot. Returns a registration id.

        The callback is dropped when this world's episode handle is invalidated.
        """
        return self._episode.on_tick(callback)

    def remove_on_tick(self, callback_id: int) -> None:
        """Stop calling a callback. Once this returns it is never invoked again."""
        self._episode.remove_on_tick(callback_id)

    # Actor directory

    def get_actor(self, actor_id: ActorId) -> Actor | None:
        session = self._episode.lock()
        description = session.get_actor_by_id(actor_id)
        return make_actor(description, self._episode) if description is not None else None

    def get_actors(self, actor_ids: Sequence[ActorId] | None = None) -> ActorList:
        """All actors in session order, or the given ids in caller order.

        Ids that do not resolve are left out.
        """
        session = self._episode.lock()
        if actor_ids is None:
            descriptions = session.get_all_actors()
        else:
            descriptions = session.get_actors_by_id(list(actor_ids))
        return ActorList(make_actors(descriptions, self._episode))

    def get_spectator(self) -> Actor:
        return make_actor(self._episode.lock().get_spectator(), self._episode)

    def get_blueprint_library(self) -> BlueprintLibrary:
        return self._episode.lock().get_blueprint_library()

    # Spawning

    def spawn(
        self,
        blueprint: ActorBlueprint,
        transform: Transform,
        parent: Actor | None = None,
        attachment: AttachmentType = AttachmentType.RIGID,
    ) -> SpawnResult:
        """Spawn an actor and report the outcome as a value.

        Collisions, invalid blueprints, a dead or foreign parent, an ended
        episode and any other session error come back as a SpawnFailure in the
        result. Non-spawn errors are kept as ``__cause__``.
        """
        if parent is not None and parent.episode != self._episode:
            failure = SpawnFailure(f"Parent actor {parent.id} does not belong to episode {self.id}")
            logger.debug("Spawn of {} failed: {}", blueprint.id, failure)
            return SpawnResult(error=failure)

        try:
            session = self._episode.lock()
            description = session.spawn_actor(
                blueprint,
                transform,
                parent.id if parent is not None else None,
                attachment,
            )
        except SpawnFailure as e:
            logger.debug("Spawn of {} failed: {}", blueprint.id, e)
            return SpawnResult(error=e)
        except SimClientError as e:
            failure = SpawnFailure(f"Cannot spawn {blueprint.id!r}: {e}")
            failure.__cause__ = e
            logger.debug("Spawn of {} failed: {}", blueprint.id, failure)
            return SpawnResult(error=failure)
        return SpawnResult(actor=make_actor(description, self._episode))

    def spawn_actor(
        self,
        blueprint: ActorBlueprint,
        transform: Transform,
        parent: Actor | None = None,
        attachment: AttachmentType = AttachmentType.RIGID,
    ) -> Actor:
        """Spawn an actor.

        Args:
            blueprint: Catalog entry from get_blueprint_library().
            transform: Spawn pose; relative to ``parent`` when one is given.
            parent: Actor to attach to.
            attachment: How the new actor follows ``parent``.

        Raises:
            SpawnFailure: If the session rejects the spawn.
        """
        return self.spawn(blueprint, transform, parent, attachment).unwrap()

    def try_spawn_actor(
        self,
        blueprint: ActorBlueprint,
        transform: Transform,
        parent: Actor | None = None,
        attachment: AttachmentType = AttachmentType.RIGID,
    ) -> Actor | None:
        """Same as spawn_actor, but returns None instead of raising SpawnFailure."""
        return self.spawn(blueprint, transform, parent, attachment).actor

    # Traffic control

    def resolve_controller(self, landmark: Landmark, kind: ControllerKind) -> Actor | None:
        """Live traffic sign or light bound to ``landmark``, or None."""
        return find_controller(self.get_actors(), landmark, kind)

    def get_traffic_sign(self, landmark: Landmark) -> Actor | None:
        return self.resolve_controller(landmark, ControllerKind.SIGN)

    def get_traffic_light(self, landmark: Landmark) -> Actor | None:
        return self.resolve_controller(landmark, ControllerKind.LIGHT)

    def reset_all_traffic_lights(self) -> None:
        self._episode.lock().reset_all_traffic_lights()

    def freeze_all_traffic_lights(self, frozen: bool) -> None:
        self._episode.lock().freeze_all_traffic_lights(frozen)

    # Episode state

    def get_settings(self) -> EpisodeSettings:
        return self._episode.lock().get_episode_settings()

    def apply_settings(self, settings: EpisodeSettings) -> int:
        """Apply episode settings. Returns the frame at which they took effect."""
        return self._episode.lock().set_episode_settings(settings)

    def get_weather(self) -> WeatherParameters:
        return self._episode.lock().get_weather_parameters()

    def set_weather(self, weather: WeatherParameters) -> None:
        self._episode.lock().set_weather_parameters(weather)

    def get_vehicles_light_states(self) -> dict[ActorId, VehicleLightState]:
        return self._episode.lock().get_vehicles_light_states()

    def get_random_location_from_navigation(self) -> Location | None:
        return self._episode.lock().get_random_location_from_navigation()

    def set_pedestrians_cross_factor(self, percentage: float) -> None:
        """Fraction (0.0 to 1.0) of pedestrians allowed to cross roads anywhere."""
        self._episode.lock().set_pedestrians_cross_factor(percentage)

    # Level geometry and spatial queries

    def get_level_bbs(self, label: CityObjectLabel = CityObjectLabel.ANY) -> list[BoundingBox]:
        return self._episode.lock().get_level_bbs(label)

    def get_environment_objects(
        self, label: CityObjectLabel = CityObjectLabel.ANY
    ) -> list[EnvironmentObject]:
        return self._episode.lock().get_environment_objects(label)

    def enable_environment_objects(self, object_ids: Sequence[int], enable: bool) -> None:
        self._episode.lock().enable_environment_objects(list(object_ids), enable)

    def project_point(
        self, location: Location, direction: Vector3D, search_distance: float
    ) -> LabelledPoint | None:
        """First geometry hit from ``location`` along ``direction``, None if nothing
        is hit within ``search_distance``."""
        return self._episode.lock().project_point(location, direction, search_distance)

    def ground_projection(self, location: Location, search_distance: float) -> LabelledPoint | None:
        """project_point straight down."""
        return self.project_point(location, DOWN, search_distance)

    def cast_ray(self, start: Location, end: Location) -> list[LabelledPoint]:
        """Every hit on the segment, in the order the session reports them."""
        return self._episode.lock().cast_ray(start, end)

    def __repr__(self) -> str:
        return f"World(id={self.id})"
