"""World facade and spawn results.

Architecture Note:
    world/ is the caller-facing layer. It holds no episode state of its own:
    every call goes through the episode handle to the session.
"""

from simclient.world.landmarks import find_controller, is_controller
from simclient.world.result import SpawnResult
from simclient.world.world import World

__all__ = [
    "World",
    "SpawnResult",
    "find_controller",
    "is_controller",
]
