"""Ray intersection against axis-aligned boxes and the ground plane.

Used by LocalEpisode to answer point projection and ray casting queries.
Hits are reported as (distance along the ray, label), nearest first.
"""

from __future__ import annotations

from collections.abc import Iterable

from simclient.core.geometry import BoundingBox, CityObjectLabel, LabelledPoint, Vector3D

_EPSILON = 1e-9


def intersect_box(origin: Vector3D, direction: Vector3D, box: BoundingBox) -> float | None:
    """Distance to the first point of ``box`` along the ray, None if missed.

    ``direction`` must be a unit vector. A ray starting inside the box hits
    it at distance 0.
    """
    t_near = 0.0
    t_far = float("inf")
    lo, hi = box.min, box.max
    for o, d, a, b in (
        (origin.x, direction.x, lo.x, hi.x),
        (origin.y, direction.y, lo.y, hi.y),
        (origin.z, direction.z, lo.z, hi.z),
    ):
        if abs(d) < _EPSILON:
            if o < a or o > b:
                return None
            continue
        t1 = (a - o) / d
        t2 = (b - o) / d
        if t1 > t2:
            t1, t2 = t2, t1
        t_near = max(t_near, t1)
        t_far = min(t_far, t2)
        if t_near > t_far:
            return None
    return t_near


def intersect_ground(origin: Vector3D, direction: Vector3D, height: float = 0.0) -> float | None:
    """Distance to the horizontal plane ``z = height``, None if parallel or behind."""
    if abs(direction.z) < _EPSILON:
        return None
    t = (height - origin.z) / direction.z
    return t if t >= 0.0 else None


def trace(
    origin: Vector3D,
    direction: Vector3D,
    max_distance: float,
    boxes: Iterable[tuple[BoundingBox, CityObjectLabel]],
    ground: bool = True,
) -> list[LabelledPoint]:
    """Every hit within ``max_distance`` along the ray, nearest first.

    Args:
        origin: Ray start.
        direction: Ray direction (normalized here).
        max_distance: Hits farther than this are ignored.
        boxes: Geometry to test, each with its semantic label.
        ground: Also test the ground plane at z = 0.

    Raises:
        ValueError: If ``direction`` has zero length or ``max_distance`` is negative.
    """
    if max_distance < 0:
        raise ValueError(f"Search distance must be non-negative, got {max_distance}")
    unit = direction.normalized()

    hits: list[tuple[float, CityObjectLabel]] = []
    for box, label in boxes:
        t = intersect_box(origin, unit, box)
        if t is not None and t <= max_distance:
            hits.append((t, label))
    if ground:
        t = intersect_ground(origin, unit)
        if t is not None and t <= max_distance:
            hits.append((t, CityObjectLabel.GROUND))

    hits.sort(key=lambda hit: hit[0])
    return [LabelledPoint(origin + unit * t, label) for t, label in hits]
