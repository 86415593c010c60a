"""Core value types: stateless primitives shared by every layer.

Architecture Note:
    core/ holds immutable values and the error hierarchy. Stateful services
    live in episode/, tick/ and world/.
"""

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
    Rotation,
    Transform,
    Vector3D,
)
from simclient.core.identity import ActorId, EpisodeId
from simclient.core.landmark import ControllerKind, Landmark
from simclient.core.models import (
    ActorDescription,
    AttachmentType,
    EnvironmentObject,
    EpisodeSettings,
    TrafficLightState,
    VehicleLightState,
    WeatherParameters,
)

__all__ = [
    # Errors
    "SimClientError",
    "InvalidEpisode",
    "TickTimeout",
    "SpawnFailure",
    "SynchronousModeError",
    # Geometry
    "Vector3D",
    "Location",
    "Rotation",
    "Transform",
    "BoundingBox",
    "CityObjectLabel",
    "LabelledPoint",
    # Identity
    "ActorId",
    "EpisodeId",
    # Landmarks
    "Landmark",
    "ControllerKind",
    # Models
    "ActorDescription",
    "AttachmentType",
    "EnvironmentObject",
    "EpisodeSettings",
    "TrafficLightState",
    "VehicleLightState",
    "WeatherParameters",
]
