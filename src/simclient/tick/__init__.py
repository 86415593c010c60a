"""Tick synchronization: snapshots, callback registry, blocking waits."""

from simclient.tick.callbacks import CallbackRegistry
from simclient.tick.models import ActorSnapshot, WorldSnapshot
from simclient.tick.synchronizer import TickSynchronizer

__all__ = [
    "ActorSnapshot",
    "WorldSnapshot",
    "CallbackRegistry",
    "TickSynchronizer",
]
