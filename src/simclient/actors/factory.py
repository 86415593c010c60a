"""Builds actor handles of the right class from session descriptions."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from simclient.actors.actor import Actor, TrafficLight, TrafficSign
from simclient.core.models import ActorDescription

if TYPE_CHECKING:
    from simclient.episode.handle import EpisodeHandle


def actor_class_for(type_id: str) -> type[Actor]:
    """Pick the handle class for a type id."""
    if type_id.startswith("traffic.traffic_light"):
        return TrafficLight
    if type_id.startswith("traffic."):
        return TrafficSign
    return Actor


def make_actor(description: ActorDescription, episode: EpisodeHandle) -> Actor:
    return actor_class_for(description.type_id)(description, episode)


def make_actors(descriptions: Iterable[ActorDescription], episode: EpisodeHandle) -> list[Actor]:
    return [make_actor(description, episode) for description in descriptions]
