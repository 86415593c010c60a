"""Tests for actor lookup through the World facade."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from simclient import (
    Actor,
    ActorList,
    ClientSettings,
    InvalidEpisode,
    LocalEpisode,
    Location,
    TrafficLight,
    TrafficSign,
    Transform,
    World,
)


def spawn_row(world, count):
    """Spawn ``count`` vehicles spaced along x."""
    blueprint = world.get_blueprint_library().find("vehicle.audi.tt")
    return [
        world.spawn_actor(blueprint, Transform(Location(10.0 * i, 0.0, 0.7)))
        for i in range(count)
    ]


def test_get_actor(world):
    vehicle = spawn_row(world, 1)[0]

    found = world.get_actor(vehicle.id)
    assert found == vehicle
    assert found.type_id == "vehicle.audi.tt"
    assert world.get_actor(9999) is None


def test_get_actors_lists_everything_in_session_order(world):
    vehicles = spawn_row(world, 3)
    actors = world.get_actors()

    assert isinstance(actors, ActorList)
    assert actors.ids == [world.get_spectator().id] + [v.id for v in vehicles]


def test_get_actors_by_id_skips_unknown(world):
    a, b = spawn_row(world, 2)
    actors = world.get_actors([b.id, 12345, a.id])

    assert actors.ids == [b.id, a.id]
    assert len(world.get_actors([])) == 0


@settings(max_examples=25, deadline=None)
@given(st.lists(st.integers(min_value=1, max_value=12), max_size=10))
def test_get_actors_preserves_caller_order(requested):
    with LocalEpisode(ClientSettings(synchronous_mode=True)) as session:
        world = World.connect(session)
        live = {actor.id for actor in spawn_row(world, 5)} | {world.get_spectator().id}

        result = world.get_actors(requested).ids

        assert result == [actor_id for actor_id in requested if actor_id in live]


def test_actor_list_filter_and_slicing(world):
    spawn_row(world, 2)
    actors = world.get_actors()

    vehicles = actors.filter("vehicle.*")
    assert len(vehicles) == 2
    assert isinstance(actors[1:], ActorList)
    assert actors.find(vehicles[0].id) == vehicles[0]
    assert actors.find(9999) is None
    assert bool(actors.filter("walker.*")) is False


def test_actor_classes_follow_type_id(world, library):
    light = world.spawn_actor(library.find("traffic.traffic_light"), Transform(Location(0, 5, 0)))
    sign = world.spawn_actor(library.find("traffic.stop"), Transform(Location(0, -5, 0)))
    vehicle = spawn_row(world, 1)[0]

    assert isinstance(light, TrafficLight)
    assert isinstance(sign, TrafficSign) and not isinstance(sign, TrafficLight)
    assert type(vehicle) is Actor


def test_actor_liveness_and_destroy(world):
    vehicle = spawn_row(world, 1)[0]

    assert vehicle.is_alive
    assert vehicle.destroy() is True
    assert not vehicle.is_alive
    assert world.get_actor(vehicle.id) is None


def test_actor_parent_lookup(world, library):
    vehicle = spawn_row(world, 1)[0]
    camera = world.spawn_actor(library.find("sensor.camera.rgb"), Transform(), parent=vehicle)

    assert camera.get_parent() == vehicle
    assert vehicle.get_parent() is None


def test_actor_move(world):
    vehicle = spawn_row(world, 1)[0]
    vehicle.set_transform(Transform(Location(50.0, 0.0, 0.7)))

    assert vehicle.get_location() == Location(50.0, 0.0, 0.7)


def test_actors_from_old_episode_fail(world, session):
    vehicle = spawn_row(world, 1)[0]
    session.reload_episode()

    assert not vehicle.is_alive
    with pytest.raises(InvalidEpisode):
        vehicle.get_transform()
    with pytest.raises(InvalidEpisode):
        world.get_actors()


def test_spectator_and_blueprints(world):
    spectator = world.get_spectator()

    assert spectator.type_id == "spectator"
    assert "vehicle.tesla.model3" in world.get_blueprint_library()
    assert len(world.get_blueprint_library().filter("vehicle.*")) == 2
