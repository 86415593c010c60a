"""simclient: client-side proxy for a live simulation episode.

Usage:
    from simclient import ClientSettings, LocalEpisode, Location, Transform, World

    session = LocalEpisode(ClientSettings(synchronous_mode=True))
    world = World.connect(session)

    blueprint = world.get_blueprint_library().find("vehicle.tesla.model3")
    vehicle = world.spawn_actor(blueprint, Transform(Location(0.0, 0.0, 0.5)))

    frame = world.tick()
    snapshot = world.get_snapshot()
"""

from loguru import logger

__version__ = "0.1.0"

# Actors
from simclient.actors import (
    Actor,
    ActorBlueprint,
    ActorList,
    BlueprintLibrary,
    TrafficLight,
    TrafficSign,
)

# Configuration
from simclient.config import ClientSettings, LogSettings, configure_logging

# Core primitives
from simclient.core import (
    ActorId,
    AttachmentType,
    BoundingBox,
    CityObjectLabel,
    ControllerKind,
    EnvironmentObject,
    EpisodeSettings,
    InvalidEpisode,
    LabelledPoint,
    Landmark,
    Location,
    Rotation,
    SimClientError,
    SpawnFailure,
    SynchronousModeError,
    TickTimeout,
    TrafficLightState,
    Transform,
    Vector3D,
    VehicleLightState,
    WeatherParameters,
)

# Episode access
from simclient.episode import EpisodeHandle, EpisodeSession, LocalEpisode

# Ticking
from simclient.tick import ActorSnapshot, WorldSnapshot

# World
from simclient.world import SpawnResult, World

logger.disable("simclient")

__all__ = [
    # Version
    "__version__",
    # World
    "World",
    "SpawnResult",
    # Episode
    "EpisodeHandle",
    "EpisodeSession",
    "LocalEpisode",
    # Actors
    "Actor",
    "TrafficSign",
    "TrafficLight",
    "ActorList",
    "ActorBlueprint",
    "BlueprintLibrary",
    # Ticking
    "WorldSnapshot",
    "ActorSnapshot",
    # Core
    "ActorId",
    "AttachmentType",
    "BoundingBox",
    "CityObjectLabel",
    "ControllerKind",
    "EnvironmentObject",
    "EpisodeSettings",
    "LabelledPoint",
    "Landmark",
    "Location",
    "Rotation",
    "TrafficLightState",
    "Transform",
    "Vector3D",
    "VehicleLightState",
    "WeatherParameters",
    # Errors
    "SimClientError",
    "InvalidEpisode",
    "TickTimeout",
    "SpawnFailure",
    "SynchronousModeError",
    # Configuration
    "ClientSettings",
    "LogSettings",
    "configure_logging",
]
