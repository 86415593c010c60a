"""Actor handles, actor lists and blueprints."""

from simclient.actors.actor import Actor, TrafficLight, TrafficSign
from simclient.actors.actor_list import ActorList
from simclient.actors.blueprint import ActorBlueprint, BlueprintLibrary, default_blueprints
from simclient.actors.factory import actor_class_for, make_actor, make_actors

__all__ = [
    "Actor",
    "TrafficSign",
    "TrafficLight",
    "ActorList",
    "ActorBlueprint",
    "BlueprintLibrary",
    "default_blueprints",
    "actor_class_for",
    "make_actor",
    "make_actors",
]
