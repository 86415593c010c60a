"""Spawn results.

Usage:
    result = world.spawn(blueprint, transform)
    if result.ok:
        vehicle = result.actor
    else:
        print(result.error)

    vehicle = result.unwrap()  # raises the SpawnFailure instead
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from simclient.core.errors import SpawnFailure

if TYPE_CHECKING:
    from simclient.actors.actor import Actor


@dataclass(frozen=True, slots=True)
class SpawnResult:
    """Outcome of one spawn request: exactly one of ``actor`` and ``error`` is set."""

    actor: Actor | None = None
    error: SpawnFailure | None = None

    def __post_init__(self) -> None:
        if (self.actor is None) == (self.error is None):
            raise ValueError("SpawnResult needs exactly one of actor or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Actor:
        """Return the actor, or raise the failure."""
        if self.error is not None:
            raise self.error
        assert self.actor is not None
        return self.actor
