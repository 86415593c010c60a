"""Ordered, read-only list of actor handles.

Usage:
    actors = world.get_actors()
    for light in actors.filter("traffic.traffic_light*"):
        ...
    vehicle = actors.find(vehicle_id)
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Iterator
from typing import overload

from simclient.actors.actor import Actor
from simclient.core.identity import ActorId


class ActorList:
    """Snapshot of actor handles taken at query time.

    The order is the order the list was built in; the list is not refreshed
    when actors spawn or die afterwards.
    """

    def __init__(self, actors: Iterable[Actor]):
        self._actors = tuple(actors)

    def find(self, actor_id: ActorId) -> Actor | None:
        """First actor with this id, or None."""
        for actor in self._actors:
            if actor.id == actor_id:
                return actor
        return None

    def filter(self, pattern: str) -> ActorList:
        """Actors whose type id matches a wildcard pattern, order preserved."""
        return ActorList(a for a in self._actors if fnmatch.fnmatchcase(a.type_id, pattern))

    @property
    def ids(self) -> list[ActorId]:
        return [actor.id for actor in self._actors]

    def __iter__(self) -> Iterator[Actor]:
        return iter(self._actors)

    def __len__(self) -> int:
        return len(self._actors)

    def __bool__(self) -> bool:
        return bool(self._actors)

    @overload
    def __getitem__(self, index: int) -> Actor: ...

    @overload
    def __getitem__(self, index: slice) -> ActorList: ...

    def __getitem__(self, index: int | slice) -> Actor | ActorList:
        if isinstance(index, slice):
            return ActorList(self._actors[index])
        return self._actors[index]

    def __repr__(self) -> str:
        return f"ActorList({list(self._actors)!r})"
