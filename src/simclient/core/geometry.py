"""Geometry value types.

Usage:
    origin = Location(0.0, 0.0, 10.0)
    down = Vector3D(0.0, 0.0, -1.0)
    transform = Transform(origin, Rotation(yaw=90.0))
    world_point = transform.transform_point(Vector3D(1.0, 0.0, 0.0))

Angles are in degrees; rotations follow the pitch/yaw/roll convention of the
simulator (yaw around Z, pitch around Y, roll around X).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Vector3D:
    """Immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3D) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def distance(self, other: Vector3D) -> float:
        return (self - other).length()

    def normalized(self) -> Vector3D:
        """Unit vector with the same direction.

        Raises:
            ValueError: If the vector has zero length.
        """
        norm = self.length()
        if norm == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vector3D(self.x / norm, self.y / norm, self.z / norm)


Location = Vector3D
"""A point in world space."""


@dataclass(frozen=True, slots=True)
class Rotation:
    """Euler rotation in degrees."""

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0

    def rotate_vector(self, vector: Vector3D) -> Vector3D:
        """Rotate a vector from local to world orientation."""
        cy, sy = math.cos(math.radians(self.yaw)), math.sin(math.radians(self.yaw))
        cr, sr = math.cos(math.radians(self.roll)), math.sin(math.radians(self.roll))
        cp, sp = math.cos(math.radians(self.pitch)), math.sin(math.radians(self.pitch))
        x, y, z = vector.x, vector.y, vector.z
        return Vector3D(
            x * (cp * cy) + y * (cy * sp * sr - sy * cr) + z * (-cy * sp * cr - sy * sr),
            x * (cp * sy) + y * (sy * sp * sr + cy * cr) + z * (-sy * sp * cr + cy * sr),
            x * sp + y * (-cp * sr) + z * (cp * cr),
        )

    def __add__(self, other: Rotation) -> Rotation:
        return Rotation(self.pitch + other.pitch, self.yaw + other.yaw, self.roll + other.roll)


@dataclass(frozen=True, slots=True)
class Transform:
    """Location plus rotation."""

    location: Vector3D = field(default_factory=Vector3D)
    rotation: Rotation = field(default_factory=Rotation)

    def transform_point(self, point: Vector3D) -> Vector3D:
        """Map a point expressed in this transform's frame into world space."""
        return self.location + self.rotation.rotate_vector(point)

    def compose(self, relative: Transform) -> Transform:
        """World transform of a child placed at ``relative`` inside this frame."""
        return Transform(self.transform_point(relative.location), self.rotation + relative.rotation)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned box given by its center and half-size."""

    location: Vector3D = field(default_factory=Vector3D)
    extent: Vector3D = field(default_factory=Vector3D)

    @property
    def min(self) -> Vector3D:
        return self.location - self.extent

    @property
    def max(self) -> Vector3D:
        return self.location + self.extent

    def contains(self, point: Vector3D) -> bool:
        lo, hi = self.min, self.max
        return lo.x <= point.x <= hi.x and lo.y <= point.y <= hi.y and lo.z <= point.z <= hi.z

    def overlaps(self, other: BoundingBox) -> bool:
        """Check for a strictly positive-volume intersection; touching faces do not count."""
        a_lo, a_hi = self.min, self.max
        b_lo, b_hi = other.min, other.max
        return (
            a_lo.x < b_hi.x
            and b_lo.x < a_hi.x
            and a_lo.y < b_hi.y
            and b_lo.y < a_hi.y
            and a_lo.z < b_hi.z
            and b_lo.z < a_hi.z
        )

    def moved_to(self, location: Vector3D) -> BoundingBox:
        return BoundingBox(location=location, extent=self.extent)


class CityObjectLabel(Enum):
    """Semantic tag of a piece of world geometry."""

    ANY = "any"
    NONE = "none"
    ROADS = "roads"
    SIDEWALKS = "sidewalks"
    BUILDINGS = "buildings"
    WALLS = "walls"
    FENCES = "fences"
    POLES = "poles"
    TRAFFIC_LIGHT = "traffic_light"
    TRAFFIC_SIGNS = "traffic_signs"
    VEGETATION = "vegetation"
    TERRAIN = "terrain"
    GROUND = "ground"
    VEHICLES = "vehicles"
    PEDESTRIANS = "pedestrians"
    OTHER = "other"

    def matches(self, label: CityObjectLabel) -> bool:
        """True if ``label`` is selected by this filter (ANY selects everything)."""
        return self is CityObjectLabel.ANY or self is label


@dataclass(frozen=True, slots=True)
class LabelledPoint:
    """A hit point together with the semantic tag of the geometry hit."""

    location: Vector3D
    label: CityObjectLabel
