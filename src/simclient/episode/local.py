"""Local in-process session implementation.

Simple dict-based simulation suitable for single-process use and testing. It
implements the full EpisodeSession protocol without a server: actors live in
a dict, every step publishes a WorldSnapshot through a TickSynchronizer, and
ray queries run against environment boxes, actor boxes and a ground plane.

Usage:
    with LocalEpisode(ClientSettings(synchronous_mode=True)) as session:
        world = World.connect(session)
        vehicle = world.spawn_actor(blueprint, transform)
        frame = world.tick()

    # Free-running mode: steps every fixed_delta_seconds on a daemon thread
    session = LocalEpisode()
    session.start()
    snapshot = World.connect(session).wait_for_tick(timeout=1.0)
    session.stop()
"""

from __future__ import annotations

import itertools
import random
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace

from loguru import logger

from simclient.actors.blueprint import ActorBlueprint, BlueprintLibrary, default_blueprints
from simclient.config.settings import ClientSettings
from simclient.core.errors import (
    InvalidEpisode,
    SimClientError,
    SpawnFailure,
    SynchronousModeError,
    TickTimeout,
)
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
from simclient.episode.raycast import trace
from simclient.tick.models import ActorSnapshot, WorldSnapshot
from simclient.tick.synchronizer import TickSynchronizer

SPECTATOR_TYPE_ID = "spectator"

LIGHT_CYCLE: dict[TrafficLightState, tuple[float, TrafficLightState]] = {
    TrafficLightState.GREEN: (10.0, TrafficLightState.YELLOW),
    TrafficLightState.YELLOW: (3.0, TrafficLightState.RED),
    TrafficLightState.RED: (10.0, TrafficLightState.GREEN),
}
"""state -> (seconds spent in state, next state)"""


@dataclass(slots=True)
class _ActorRecord:
    description: ActorDescription
    transform: Transform  # parent-relative while rigidly attached
    extent: Vector3D | None = None
    attachment: AttachmentType | None = None
    light_state: VehicleLightState = VehicleLightState.NONE


@dataclass(slots=True)
class _TrafficLightRecord:
    state: TrafficLightState = TrafficLightState.RED
    elapsed: float = 0.0
    frozen: bool = False


def _label_for(type_id: str) -> CityObjectLabel:
    if type_id.startswith("vehicle."):
        return CityObjectLabel.VEHICLES
    if type_id.startswith("walker."):
        return CityObjectLabel.PEDESTRIANS
    if type_id.startswith("traffic.traffic_light"):
        return CityObjectLabel.TRAFFIC_LIGHT
    if type_id.startswith("traffic."):
        return CityObjectLabel.TRAFFIC_SIGNS
    return CityObjectLabel.OTHER


class LocalEpisode:
    """In-memory session implementing EpisodeSession.

    Args:
        settings: Client settings (mode, step size, ground plane, seed).
        blueprints: Blueprint catalog. Defaults to default_blueprints().
        environment_objects: Static level geometry.
        navigation_points: Candidate locations for random navigation queries.
        step_delay: Seconds before a tick request is served, to model server
            latency. 0 serves the step inline.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        blueprints: Iterable[ActorBlueprint] | None = None,
        environment_objects: Iterable[EnvironmentObject] = (),
        navigation_points: Iterable[Location] = (),
        step_delay: float = 0.0,
    ):
        if step_delay < 0:
            raise ValueError(f"step_delay must be non-negative, got {step_delay}")
        self._config = settings or ClientSettings()
        self._step_delay = step_delay

        self._lock = threading.RLock()
        self._step_lock = threading.Lock()
        self._sync = TickSynchronizer()

        self._episode_ids = itertools.count(1)
        self._episode_id: EpisodeId = next(self._episode_ids)
        self._closed = False
        self._frame = 0
        self._elapsed = 0.0
        self._last_step = time.monotonic()

        self._settings = EpisodeSettings(
            synchronous_mode=self._config.synchronous_mode,
            fixed_delta_seconds=self._config.fixed_delta_seconds,
        )
        self._weather = WeatherParameters()
        self._library = BlueprintLibrary(
            blueprints if blueprints is not None else default_blueprints()
        )
        self._environment: dict[int, EnvironmentObject] = {o.id: o for o in environment_objects}
        self._disabled_objects: set[int] = set()
        self._navigation = list(navigation_points)
        self._random = random.Random(self._config.seed)
        self._cross_factor = 0.0

        self._actor_ids = itertools.count(1)
        self._actors: dict[ActorId, _ActorRecord] = {}
        self._traffic_lights: dict[ActorId, _TrafficLightRecord] = {}
        self._spectator_id = self._add_spectator()

        self._timers: list[threading.Timer] = []
        self._runner: threading.Thread | None = None
        self._stop = threading.Event()

        self._sync.publish(self._build_snapshot(0.0))

    # Session lifecycle

    @property
    def episode_id(self) -> EpisodeId:
        return self._episode_id

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def frame(self) -> int:
        with self._lock:
            return self._frame

    @property
    def running(self) -> bool:
        """True while the free-running stepping thread is active."""
        return self._runner is not None

    def close(self) -> None:
        """Disconnect. Every handle on this session becomes invalid."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
        self.stop()
        self._sync.clear_callbacks()
        logger.info("Local session closed at episode {}", self._episode_id)

    def __enter__(self) -> LocalEpisode:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reload_episode(self) -> EpisodeId:
        """Start a new episode: clears actors and tick callbacks, keeps the frame counter.

        Handles pinned to the previous episode fail from now on.
        """
        with self._lock:
            self._ensure_open()
            self._episode_id = next(self._episode_ids)
            self._actors.clear()
            self._traffic_lights.clear()
            self._disabled_objects.clear()
            self._spectator_id = self._add_spectator()
        self._sync.clear_callbacks()
        logger.info("Loaded episode {}", self._episode_id)
        return self._episode_id

    def _ensure_open(self) -> None:
        if self._closed:
            raise InvalidEpisode(self._episode_id, "session is closed")

    # Stepping

    def step(self) -> WorldSnapshot:
        """Advance one simulation step and publish its snapshot.

        Raises:
            RuntimeError: If called from inside a tick callback.
            InvalidEpisode: If the session is closed.
        """
        if self._sync.dispatching:
            raise RuntimeError("Cannot advance the simulation from inside a tick callback")
        with self._step_lock:
            with self._lock:
                self._ensure_open()
                delta = self._step_delta()
                self._frame += 1
                self._elapsed += delta
                self._advance_traffic_lights(delta)
                snapshot = self._build_snapshot(delta)
            self._sync.publish(snapshot)
        return snapshot

    def _step_delta(self) -> float:
        now = time.monotonic()
        wall_delta, self._last_step = now - self._last_step, now
        if self._settings.fixed_delta_seconds is not None:
            return self._settings.fixed_delta_seconds
        return wall_delta

    def _build_snapshot(self, delta: float) -> WorldSnapshot:
        return WorldSnapshot.from_actors(
            self._frame,
            (ActorSnapshot(i, self._world_transform(r)) for i, r in self._actors.items()),
            elapsed_seconds=self._elapsed,
            delta_seconds=delta,
            platform_timestamp=time.time(),
        )

    def tick(self, timeout: float) -> int:
        """Request exactly one step and wait for it.

        A delayed step that has not started when the wait expires is cancelled,
        so a timed-out tick never advances the simulation later on.
        """
        with self._lock:
            self._ensure_open()
            if not self._settings.synchronous_mode:
                raise SynchronousModeError("tick() requires synchronous mode; use wait_for_tick()")
            target = self._frame + 1

        timer: threading.Timer | None = None
        if self._step_delay > 0:
            timer = threading.Timer(self._step_delay, self._serve_delayed_step)
            timer.daemon = True
            with self._lock:
                self._timers = [t for t in self._timers if t.is_alive()]
                self._timers.append(timer)
            timer.start()
        else:
            self.step()

        try:
            self._sync.wait_for_frame(target, timeout)
        except TickTimeout:
            if timer is not None:
                timer.cancel()
                with self._lock:
                    self._timers = [t for t in self._timers if t is not timer]
                logger.debug("Cancelled pending step for frame {}", target)
            raise
        logger.debug("Tick reached frame {}", target)
        return target

    def _serve_delayed_step(self) -> None:
        try:
            self.step()
        except InvalidEpisode:
            logger.debug("Delayed step dropped: session closed")

    def wait_for_tick(self, timeout: float) -> WorldSnapshot:
        with self._lock:
            self._ensure_open()
        return self._sync.wait_for_tick(timeout)

    def get_world_snapshot(self) -> WorldSnapshot:
        snapshot = self._sync.latest
        assert snapshot is not None  # published in __init__
        return snapshot

    def register_on_tick(self, callback: Callable[[WorldSnapshot], None]) -> int:
        return self._sync.on_tick(callback)

    def remove_on_tick(self, callback_id: int) -> None:
        self._sync.remove_on_tick(callback_id)

    def start(self) -> None:
        """Step every ``fixed_delta_seconds`` on a daemon thread until stop().

        Raises:
            SynchronousModeError: If the episode is in synchronous mode.
        """
        with self._lock:
            self._ensure_open()
            if self._settings.synchronous_mode:
                raise SynchronousModeError("Free-running steps require asynchronous mode")
            if self._runner is not None:
                return
            self._stop.clear()
            self._runner = threading.Thread(
                target=self._run,
                daemon=True,
                name="local-episode-steps",
            )
            self._runner.start()
        logger.debug("Free-running stepping started")

    def stop(self) -> None:
        with self._lock:
            runner, self._runner = self._runner, None
        self._stop.set()
        if runner is not None and runner is not threading.current_thread():
            runner.join()
            logger.debug("Free-running stepping stopped")

    def _run(self) -> None:
        while not self._stop.wait(self._settings.fixed_delta_seconds or 0.05):
            with self._lock:
                if self._closed or self._settings.synchronous_mode:
                    return
            try:
                self.step()
            except InvalidEpisode:
                return

    # Actors

    def _add_spectator(self) -> ActorId:
        actor_id = next(self._actor_ids)
        self._actors[actor_id] = _ActorRecord(
            ActorDescription(actor_id, SPECTATOR_TYPE_ID), Transform()
        )
        return actor_id

    def _record(self, actor_id: ActorId) -> _ActorRecord:
        record = self._actors.get(actor_id)
        if record is None:
            raise SimClientError(f"Actor {actor_id} is not alive")
        return record

    def _world_transform(self, record: _ActorRecord) -> Transform:
        parent_id = record.description.parent_id
        if record.attachment is AttachmentType.RIGID and parent_id in self._actors:
            return self._world_transform(self._actors[parent_id]).compose(record.transform)
        return record.transform

    def get_actor_by_id(self, actor_id: ActorId) -> ActorDescription | None:
        with self._lock:
            record = self._actors.get(actor_id)
            return record.description if record is not None else None

    def get_actors_by_id(self, actor_ids: Sequence[ActorId]) -> list[ActorDescription]:
        with self._lock:
            return [self._actors[i].description for i in actor_ids if i in self._actors]

    def get_all_actors(self) -> list[ActorDescription]:
        with self._lock:
            return [record.description for record in self._actors.values()]

    def is_actor_alive(self, actor_id: ActorId) -> bool:
        with self._lock:
            return actor_id in self._actors

    def get_actor_transform(self, actor_id: ActorId) -> Transform:
        with self._lock:
            return self._world_transform(self._record(actor_id))

    def set_actor_transform(self, actor_id: ActorId, transform: Transform) -> None:
        with self._lock:
            self._record(actor_id).transform = transform

    def get_spectator(self) -> ActorDescription:
        with self._lock:
            return self._actors[self._spectator_id].description

    def get_blueprint_library(self) -> BlueprintLibrary:
        return self._library

    def spawn_actor(
        self,
        blueprint: ActorBlueprint,
        transform: Transform,
        parent_id: ActorId | None = None,
        attachment: AttachmentType = AttachmentType.RIGID,
    ) -> ActorDescription:
        """Spawn an actor.

        With a parent, ``transform`` is relative to the parent. RIGID children
        keep following the parent; spring-arm children are only placed
        relative to it. Root actors with a collision extent must not overlap
        other root actors or enabled environment objects.

        Raises:
            SpawnFailure: Unknown blueprint, dead parent, collision, or closed session.
        """
        with self._lock:
            if self._closed:
                raise SpawnFailure("Session is closed")
            if blueprint.id not in self._library:
                raise SpawnFailure(f"Unknown blueprint {blueprint.id!r}")

            if parent_id is not None:
                parent = self._actors.get(parent_id)
                if parent is None:
                    raise SpawnFailure(f"Parent actor {parent_id} is not alive")
                if attachment is AttachmentType.RIGID:
                    stored = transform
                else:
                    stored = self._world_transform(parent).compose(transform)
            else:
                stored = transform
                if blueprint.extent is not None:
                    self._check_collision(BoundingBox(transform.location, blueprint.extent))

            actor_id = next(self._actor_ids)
            description = ActorDescription(
                actor_id, blueprint.id, dict(blueprint.attributes), parent_id
            )
            self._actors[actor_id] = _ActorRecord(
                description,
                stored,
                extent=blueprint.extent,
                attachment=attachment if parent_id is not None else None,
            )
            if blueprint.id.startswith("traffic.traffic_light"):
                self._traffic_lights[actor_id] = _TrafficLightRecord()

        logger.debug("Spawned {} as actor {}", blueprint.id, actor_id)
        return description

    def _check_collision(self, box: BoundingBox) -> None:
        for actor_id, record in self._actors.items():
            if record.extent is None or record.description.parent_id is not None:
                continue
            if box.overlaps(BoundingBox(self._world_transform(record).location, record.extent)):
                raise SpawnFailure(f"Collision with actor {actor_id} at spawn point")
        for obj in self._enabled_objects():
            if box.overlaps(obj.bounding_box):
                raise SpawnFailure(f"Collision with environment object {obj.name!r} at spawn point")

    def destroy_actor(self, actor_id: ActorId) -> bool:
        """Destroy an actor. Rigid children are detached in place.

        The spectator cannot be destroyed.
        """
        with self._lock:
            if actor_id == self._spectator_id or actor_id not in self._actors:
                return False
            parent_transform = self._world_transform(self._actors[actor_id])
            del self._actors[actor_id]
            self._traffic_lights.pop(actor_id, None)
            for child in self._actors.values():
                if child.description.parent_id != actor_id:
                    continue
                if child.attachment is AttachmentType.RIGID:
                    child.transform = parent_transform.compose(child.transform)
                child.attachment = None
                child.description = replace(child.description, parent_id=None)
        logger.debug("Destroyed actor {}", actor_id)
        return True

    # Episode state

    def get_episode_settings(self) -> EpisodeSettings:
        with self._lock:
            return self._settings.model_copy()

    def set_episode_settings(self, settings: EpisodeSettings) -> int:
        with self._lock:
            self._ensure_open()
            self._settings = settings.model_copy()
            frame = self._frame
        if settings.synchronous_mode and self.running:
            self.stop()
        logger.debug("Applied {} at frame {}", settings, frame)
        return frame

    def get_weather_parameters(self) -> WeatherParameters:
        with self._lock:
            return self._weather.model_copy()

    def set_weather_parameters(self, weather: WeatherParameters) -> None:
        with self._lock:
            self._weather = weather.model_copy()

    def get_vehicles_light_states(self) -> dict[ActorId, VehicleLightState]:
        with self._lock:
            return {
                actor_id: record.light_state
                for actor_id, record in self._actors.items()
                if record.description.type_id.startswith("vehicle.")
            }

    def get_random_location_from_navigation(self) -> Location | None:
        with self._lock:
            return self._random.choice(self._navigation) if self._navigation else None

    @property
    def pedestrians_cross_factor(self) -> float:
        return self._cross_factor

    def set_pedestrians_cross_factor(self, percentage: float) -> None:
        if not 0.0 <= percentage <= 1.0:
            raise ValueError(f"Cross factor must be between 0.0 and 1.0, got {percentage}")
        with self._lock:
            self._cross_factor = percentage

    # Traffic lights

    def _light(self, actor_id: ActorId) -> _TrafficLightRecord:
        light = self._traffic_lights.get(actor_id)
        if light is None:
            raise SimClientError(f"Actor {actor_id} is not a live traffic light")
        return light

    def get_traffic_light_state(self, actor_id: ActorId) -> TrafficLightState:
        with self._lock:
            return self._light(actor_id).state

    def set_traffic_light_state(self, actor_id: ActorId, state: TrafficLightState) -> None:
        with self._lock:
            light = self._light(actor_id)
            light.state = state
            light.elapsed = 0.0

    def is_traffic_light_frozen(self, actor_id: ActorId) -> bool:
        with self._lock:
            return self._light(actor_id).frozen

    def reset_all_traffic_lights(self) -> None:
        with self._lock:
            for light in self._traffic_lights.values():
                light.state = TrafficLightState.RED
                light.elapsed = 0.0

    def freeze_all_traffic_lights(self, frozen: bool) -> None:
        with self._lock:
            for light in self._traffic_lights.values():
                light.frozen = frozen

    def _advance_traffic_lights(self, delta: float) -> None:
        for light in self._traffic_lights.values():
            if light.frozen or light.state not in LIGHT_CYCLE:
                continue
            light.elapsed += delta
            duration, next_state = LIGHT_CYCLE[light.state]
            while light.elapsed >= duration:
                light.elapsed -= duration
                light.state = next_state
                duration, next_state = LIGHT_CYCLE[light.state]

    # Level geometry

    def _enabled_objects(self) -> list[EnvironmentObject]:
        return [o for o in self._environment.values() if o.id not in self._disabled_objects]

    def get_level_bbs(self, label: CityObjectLabel = CityObjectLabel.ANY) -> list[BoundingBox]:
        with self._lock:
            return [o.bounding_box for o in self._environment.values() if label.matches(o.label)]

    def get_environment_objects(
        self, label: CityObjectLabel = CityObjectLabel.ANY
    ) -> list[EnvironmentObject]:
        with self._lock:
            return [o for o in self._environment.values() if label.matches(o.label)]

    def enable_environment_objects(self, object_ids: Sequence[int], enable: bool) -> None:
        """Toggle objects for collision and ray queries. Unknown ids are ignored."""
        with self._lock:
            for object_id in object_ids:
                if object_id not in self._environment:
                    continue
                if enable:
                    self._disabled_objects.discard(object_id)
                else:
                    self._disabled_objects.add(object_id)

    def _ray_targets(self) -> list[tuple[BoundingBox, CityObjectLabel]]:
        targets = [(o.bounding_box, o.label) for o in self._enabled_objects()]
        for record in self._actors.values():
            if record.extent is not None:
                box = BoundingBox(self._world_transform(record).location, record.extent)
                targets.append((box, _label_for(record.description.type_id)))
        return targets

    def project_point(
        self, location: Location, direction: Vector3D, search_distance: float
    ) -> LabelledPoint | None:
        with self._lock:
            targets = self._ray_targets()
        ground = self._config.ground_plane
        hits = trace(location, direction, search_distance, targets, ground=ground)
        return hits[0] if hits else None

    def cast_ray(self, start: Location, end: Location) -> list[LabelledPoint]:
        segment = end - start
        length = segment.length()
        if length == 0.0:
            return []
        with self._lock:
            targets = self._ray_targets()
        return trace(start, segment, length, targets, ground=self._config.ground_plane)
