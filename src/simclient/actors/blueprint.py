"""Actor blueprints and the catalog that hands them out.

Usage:
    library = world.get_blueprint_library()
    blueprint = library.find("traffic.stop")
    blueprint.set_attribute("sign_id", "42")
    actor = world.spawn_actor(blueprint, Transform(Location(10.0, 0.0, 0.0)))

    for blueprint in library.filter("vehicle.*"):
        ...
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from simclient.core.geometry import Vector3D


@dataclass(slots=True)
class ActorBlueprint:
    """Recipe for spawning one kind of actor.

    Attributes:
        id: Type id the spawned actor will carry.
        tags: Search tags.
        attributes: Attributes copied onto the spawned actor.
        extent: Collision half-size, or None for actors without collision.
    """

    id: str
    tags: frozenset[str] = frozenset()
    attributes: dict[str, str] = field(default_factory=dict)
    extent: Vector3D | None = None

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def match_tags(self, pattern: str) -> bool:
        """True if the id or any tag matches a wildcard pattern."""
        return fnmatch.fnmatchcase(self.id, pattern) or any(
            fnmatch.fnmatchcase(tag, pattern) for tag in self.tags
        )

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def copy(self) -> ActorBlueprint:
        return replace(self, attributes=dict(self.attributes))


class BlueprintLibrary:
    """Read-only catalog of blueprints.

    ``find`` and iteration return copies, so editing a blueprint's attributes
    never changes the catalog.
    """

    def __init__(self, blueprints: Iterable[ActorBlueprint]):
        self._blueprints: dict[str, ActorBlueprint] = {bp.id: bp for bp in blueprints}

    def find(self, blueprint_id: str) -> ActorBlueprint | None:
        blueprint = self._blueprints.get(blueprint_id)
        return blueprint.copy() if blueprint is not None else None

    def filter(self, pattern: str) -> BlueprintLibrary:
        """Sub-library of blueprints whose id or tags match ``pattern``."""
        return BlueprintLibrary(bp for bp in self._blueprints.values() if bp.match_tags(pattern))

    def __contains__(self, blueprint_id: object) -> bool:
        return blueprint_id in self._blueprints

    def __iter__(self) -> Iterator[ActorBlueprint]:
        return (bp.copy() for bp in self._blueprints.values())

    def __len__(self) -> int:
        return len(self._blueprints)

    def __getitem__(self, index: int) -> ActorBlueprint:
        return list(self._blueprints.values())[index].copy()


def default_blueprints() -> list[ActorBlueprint]:
    """Catalog used by LocalEpisode when none is given."""
    return [
        ActorBlueprint(
            "vehicle.tesla.model3",
            tags=frozenset({"vehicle", "car"}),
            attributes={"number_of_wheels": "4", "role_name": "autopilot"},
            extent=Vector3D(2.4, 1.0, 0.8),
        ),
        ActorBlueprint(
            "vehicle.audi.tt",
            tags=frozenset({"vehicle", "car"}),
            attributes={"number_of_wheels": "4", "role_name": "autopilot"},
            extent=Vector3D(2.1, 0.9, 0.7),
        ),
        ActorBlueprint(
            "walker.pedestrian.0001",
            tags=frozenset({"walker", "pedestrian"}),
            attributes={"speed": "1.4"},
            extent=Vector3D(0.3, 0.3, 0.9),
        ),
        ActorBlueprint("sensor.camera.rgb", tags=frozenset({"sensor", "camera"})),
        ActorBlueprint("sensor.other.collision", tags=frozenset({"sensor"})),
        ActorBlueprint(
            "static.prop.streetbarrier",
            tags=frozenset({"static", "prop"}),
            extent=Vector3D(0.6, 0.2, 0.5),
        ),
        ActorBlueprint(
            "traffic.traffic_light",
            tags=frozenset({"traffic", "traffic_light"}),
            extent=Vector3D(0.3, 0.3, 2.5),
        ),
        ActorBlueprint(
            "traffic.stop",
            tags=frozenset({"traffic", "sign"}),
            extent=Vector3D(0.2, 0.2, 1.2),
        ),
        ActorBlueprint(
            "traffic.yield",
            tags=frozenset({"traffic", "sign"}),
            extent=Vector3D(0.2, 0.2, 1.2),
        ),
        ActorBlueprint(
            "traffic.speed_limit.30",
            tags=frozenset({"traffic", "sign", "speed_limit"}),
            extent=Vector3D(0.2, 0.2, 1.2),
        ),
    ]
