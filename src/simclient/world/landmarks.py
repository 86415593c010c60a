"""Landmark to traffic-controller resolution.

A landmark only names a ``sign_id``; finding the live actor behind it means
scanning the current actor population. There is no index: controller counts
are small, and the scan always sees the live population.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from typing import TypeGuard

from simclient.actors.actor import Actor, TrafficSign
from simclient.core.landmark import ControllerKind, Landmark


def is_controller(actor: Actor, kind: ControllerKind) -> TypeGuard[TrafficSign]:
    """True if ``actor`` is selected by ``kind``'s pattern and can control traffic."""
    return fnmatch.fnmatchcase(actor.type_id, kind.pattern) and isinstance(actor, TrafficSign)


def find_controller(
    actors: Iterable[Actor], landmark: Landmark, kind: ControllerKind
) -> Actor | None:
    """First controller of ``kind`` whose ``sign_id`` equals ``landmark.id``.

    Iteration order decides ties; several actors sharing a ``sign_id`` are not
    reported.
    """
    for actor in actors:
        if is_controller(actor, kind) and actor.sign_id == landmark.id:
            return actor
    return None
