"""Road-map landmarks and the kinds of controller they can map to."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Landmark:
    """A road-map entity that may correspond to a live traffic-control actor.

    Attributes:
        id: Stable identifier, compared against a controller's ``sign_id``.
        name: Human-readable name from the map.
        type: Map-level landmark type code.
        road_id: Road the landmark belongs to.
        distance: Position along the road (meters).
    """

    id: str
    name: str = ""
    type: str = ""
    road_id: int = 0
    distance: float = 0.0


class ControllerKind(Enum):
    """Traffic-control categories, each with the type-id pattern that selects it.

    The SIGN pattern is broad and also selects traffic lights.
    """

    SIGN = "*traffic.*"
    LIGHT = "*traffic_light*"

    @property
    def pattern(self) -> str:
        return self.value
