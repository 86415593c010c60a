"""Snapshot models published once per simulation step.

A WorldSnapshot is immutable: every tick callback receives the same value, and
holding on to one never observes later frames.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from simclient.core.geometry import Rotation, Transform, Vector3D
from simclient.core.identity import ActorId


@dataclass(frozen=True, slots=True)
class ActorSnapshot:
    """State of one actor at one frame.

    Attributes:
        id: Actor id.
        transform: World transform.
        velocity: Linear velocity (m/s).
        angular_velocity: Angular velocity (deg/s).
        acceleration: Linear acceleration (m/s^2).
    """

    id: ActorId
    transform: Transform = field(default_factory=Transform)
    velocity: Vector3D = field(default_factory=Vector3D)
    angular_velocity: Vector3D = field(default_factory=Vector3D)
    acceleration: Vector3D = field(default_factory=Vector3D)


@dataclass(frozen=True, slots=True)
class WorldSnapshot:
    """Every actor's state at one simulation frame.

    Attributes:
        frame: Monotonically increasing frame number.
        elapsed_seconds: Simulated time since the episode started.
        delta_seconds: Simulated time since the previous frame.
        platform_timestamp: Wall-clock time the frame was produced.
        actors: Actor states keyed by id, in session order.

    Example:
        snapshot = world.wait_for_tick()
        state = snapshot.find(vehicle.id)
        if state is not None:
            print(state.transform.location)
    """

    frame: int
    elapsed_seconds: float = 0.0
    delta_seconds: float = 0.0
    platform_timestamp: float = 0.0
    actors: Mapping[ActorId, ActorSnapshot] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "actors", MappingProxyType(dict(self.actors)))

    @classmethod
    def from_actors(
        cls,
        frame: int,
        actors: Iterable[ActorSnapshot],
        *,
        elapsed_seconds: float = 0.0,
        delta_seconds: float = 0.0,
        platform_timestamp: float = 0.0,
    ) -> WorldSnapshot:
        return cls(
            frame=frame,
            elapsed_seconds=elapsed_seconds,
            delta_seconds=delta_seconds,
            platform_timestamp=platform_timestamp,
            actors={actor.id: actor for actor in actors},
        )

    def has_actor(self, actor_id: ActorId) -> bool:
        return actor_id in self.actors

    def find(self, actor_id: ActorId) -> ActorSnapshot | None:
        """Get the state of one actor, or None if it was not alive at this frame."""
        return self.actors.get(actor_id)

    def __iter__(self) -> Iterator[ActorSnapshot]:
        return iter(self.actors.values())

    def __len__(self) -> int:
        return len(self.actors)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "frame": self.frame,
            "elapsed_seconds": self.elapsed_seconds,
            "delta_seconds": self.delta_seconds,
            "platform_timestamp": self.platform_timestamp,
            "actors": [_actor_to_dict(actor) for actor in self.actors.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorldSnapshot:
        """Create from dictionary (for deserialization)."""
        return cls.from_actors(
            data["frame"],
            (_actor_from_dict(item) for item in data.get("actors", [])),
            elapsed_seconds=data.get("elapsed_seconds", 0.0),
            delta_seconds=data.get("delta_seconds", 0.0),
            platform_timestamp=data.get("platform_timestamp", 0.0),
        )


def _vector_to_list(vector: Vector3D) -> list[float]:
    return [vector.x, vector.y, vector.z]


def _actor_to_dict(actor: ActorSnapshot) -> dict[str, Any]:
    rotation = actor.transform.rotation
    return {
        "id": actor.id,
        "location": _vector_to_list(actor.transform.location),
        "rotation": [rotation.pitch, rotation.yaw, rotation.roll],
        "velocity": _vector_to_list(actor.velocity),
        "angular_velocity": _vector_to_list(actor.angular_velocity),
        "acceleration": _vector_to_list(actor.acceleration),
    }


def _actor_from_dict(data: dict[str, Any]) -> ActorSnapshot:
    return ActorSnapshot(
        id=data["id"],
        transform=Transform(Vector3D(*data["location"]), Rotation(*data["rotation"])),
        velocity=Vector3D(*data.get("velocity", (0.0, 0.0, 0.0))),
        angular_velocity=Vector3D(*data.get("angular_velocity", (0.0, 0.0, 0.0))),
        acceleration=Vector3D(*data.get("acceleration", (0.0, 0.0, 0.0))),
    )
