"""Value models exchanged between the world facade and a session.

Usage:
    settings = world.get_settings()
    settings.synchronous_mode = True
    settings.fixed_delta_seconds = 0.05
    frame = world.apply_settings(settings)

    weather = WeatherParameters(cloudiness=80.0, precipitation=30.0)
    world.set_weather(weather)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag

from pydantic import BaseModel, ConfigDict, Field

from simclient.core.geometry import BoundingBox, CityObjectLabel, Transform
from simclient.core.identity import ActorId


class AttachmentType(Enum):
    """How a spawned actor's transform relates to its parent."""

    RIGID = "rigid"
    """Transform stays locked to the parent; follows it every frame."""

    SPRING_ARM = "spring_arm"
    """Placed relative to the parent at spawn time, then moves on its own."""

    SPRING_ARM_GHOST = "spring_arm_ghost"
    """Like SPRING_ARM, without collision against the parent."""


class TrafficLightState(Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    OFF = "off"
    UNKNOWN = "unknown"


class VehicleLightState(IntFlag):
    NONE = 0
    POSITION = 0x1
    LOW_BEAM = 0x2
    HIGH_BEAM = 0x4
    BRAKE = 0x8
    RIGHT_BLINKER = 0x10
    LEFT_BLINKER = 0x20
    REVERSE = 0x40
    FOG = 0x80
    INTERIOR = 0x100
    SPECIAL1 = 0x200
    SPECIAL2 = 0x400


class EpisodeSettings(BaseModel):
    """Runtime settings of the current episode.

    Attributes:
        synchronous_mode: Session only advances on explicit tick requests.
        fixed_delta_seconds: Simulated time per step (None = wall-clock).
        no_rendering_mode: Skip rendering on the server.
    """

    model_config = ConfigDict(validate_assignment=True)

    synchronous_mode: bool = False
    fixed_delta_seconds: float | None = Field(default=None, gt=0.0)
    no_rendering_mode: bool = False


class WeatherParameters(BaseModel):
    """Weather of the current episode. Percentages are in [0, 100]."""

    model_config = ConfigDict(validate_assignment=True)

    cloudiness: float = Field(default=0.0, ge=0.0, le=100.0)
    precipitation: float = Field(default=0.0, ge=0.0, le=100.0)
    precipitation_deposits: float = Field(default=0.0, ge=0.0, le=100.0)
    wind_intensity: float = Field(default=0.0, ge=0.0, le=100.0)
    fog_density: float = Field(default=0.0, ge=0.0, le=100.0)
    wetness: float = Field(default=0.0, ge=0.0, le=100.0)
    sun_azimuth_angle: float = Field(default=0.0, ge=0.0, le=360.0)
    sun_altitude_angle: float = Field(default=45.0, ge=-90.0, le=90.0)


@dataclass(frozen=True, slots=True)
class ActorDescription:
    """What a session reports about one actor.

    Attributes:
        id: Actor id, unique within the episode.
        type_id: Dot-delimited type taxonomy (e.g. ``traffic.traffic_light``).
        attributes: Blueprint attributes the actor was spawned with.
        parent_id: Id of the actor this one is attached to, if any.
    """

    id: ActorId
    type_id: str
    attributes: dict[str, str] = field(default_factory=dict, hash=False)
    parent_id: ActorId | None = None

    @property
    def sign_id(self) -> str | None:
        """Stable map identifier of a traffic-control actor."""
        return self.attributes.get("sign_id")


@dataclass(frozen=True, slots=True)
class EnvironmentObject:
    """A static piece of level geometry."""

    id: int
    name: str
    bounding_box: BoundingBox
    label: CityObjectLabel = CityObjectLabel.OTHER
    transform: Transform = field(default_factory=Transform)
