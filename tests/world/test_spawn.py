"""Tests for spawning through the World facade."""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from simclient import (
    ActorBlueprint,
    AttachmentType,
    ClientSettings,
    LocalEpisode,
    Location,
    SimClientError,
    SpawnFailure,
    SpawnResult,
    TickTimeout,
    Transform,
    World,
)

ORIGIN = Transform(Location(0.0, 0.0, 0.8))


def test_spawn_actor_returns_live_actor(world, library):
    vehicle = world.spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN)

    assert vehicle.is_alive
    assert vehicle.get_location() == ORIGIN.location
    assert vehicle.episode == world.episode


def test_spawn_actor_raises_on_collision(world, library):
    blueprint = library.find("vehicle.tesla.model3")
    world.spawn_actor(blueprint, ORIGIN)

    with pytest.raises(SpawnFailure):
        world.spawn_actor(blueprint, ORIGIN)


def test_try_spawn_actor_returns_none_on_failure(world, library):
    blueprint = library.find("vehicle.tesla.model3")
    world.spawn_actor(blueprint, ORIGIN)

    assert world.try_spawn_actor(blueprint, ORIGIN) is None
    assert world.try_spawn_actor(ActorBlueprint("vehicle.unknown"), ORIGIN) is None


def test_spawn_result_carries_error(world, library):
    result = world.spawn(ActorBlueprint("vehicle.unknown"), ORIGIN)

    assert not result.ok
    assert result.actor is None
    with pytest.raises(SpawnFailure):
        result.unwrap()

    ok = world.spawn(library.find("vehicle.tesla.model3"), ORIGIN)
    assert ok.ok and ok.unwrap() is ok.actor


def test_spawn_result_needs_exactly_one_field():
    with pytest.raises(ValueError):
        SpawnResult()


def test_spawn_in_ended_episode_fails(world, session, library):
    session.reload_episode()
    result = world.spawn(library.find("vehicle.tesla.model3"), ORIGIN)

    assert isinstance(result.error, SpawnFailure)
    assert result.error.__cause__ is not None
    assert world.try_spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN) is None


def test_spawn_with_dead_parent(world, library):
    vehicle = world.spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN)
    vehicle.destroy()

    assert world.try_spawn_actor(library.find("sensor.camera.rgb"), Transform(), vehicle) is None


def test_attached_sensor_reports_parent(world, library):
    vehicle = world.spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN)
    camera = world.spawn_actor(
        library.find("sensor.camera.rgb"),
        Transform(Location(0.5, 0.0, 1.5)),
        parent=vehicle,
        attachment=AttachmentType.SPRING_ARM_GHOST,
    )

    assert camera.parent_id == vehicle.id
    assert camera.get_location().z == pytest.approx(2.3)


@settings(max_examples=40, deadline=None)
@given(st.floats(min_value=-20.0, max_value=20.0, allow_nan=False))
def test_collision_depends_on_distance(x):
    assume(abs(abs(x) - 4.8) > 1e-6)
    with LocalEpisode(ClientSettings(synchronous_mode=True)) as session:
        world = World.connect(session)
        blueprint = world.get_blueprint_library().find("vehicle.tesla.model3")
        world.spawn_actor(blueprint, ORIGIN)

        second = world.try_spawn_actor(blueprint, Transform(Location(x, 0.0, 0.8)))

        assert (second is None) == (abs(x) < 4.8)


def test_parent_from_another_session_is_rejected(world, library):
    world.spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN)
    with LocalEpisode(ClientSettings(synchronous_mode=True)) as other_session:
        other = World.connect(other_session)
        foreign = other.spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN)

        result = world.spawn(library.find("sensor.camera.rgb"), Transform(), parent=foreign)

    assert world.get_actor(foreign.id) is not None
    assert isinstance(result.error, SpawnFailure)
    assert world.try_spawn_actor(library.find("sensor.camera.rgb"), Transform(), foreign) is None
    assert len(world.get_actors().filter("sensor.*")) == 0


def test_parent_from_same_episode_other_world_is_accepted(world, session, library):
    vehicle = World.connect(session).spawn_actor(library.find("vehicle.tesla.model3"), ORIGIN)
    camera = world.try_spawn_actor(library.find("sensor.camera.rgb"), Transform(), vehicle)

    assert camera is not None
    assert camera.parent_id == vehicle.id


class DroppingEpisode(LocalEpisode):
    """Session whose spawn requests fail below the spawn layer."""

    def __init__(self, error, **kwargs):
        super().__init__(ClientSettings(synchronous_mode=True), **kwargs)
        self.error = error

    def spawn_actor(self, blueprint, transform, parent_id=None, attachment=None):
        raise self.error


@pytest.mark.parametrize(
    "error",
    [SimClientError("transport dropped"), TickTimeout(1.0)],
    ids=["session-error", "timeout"],
)
def test_session_errors_become_spawn_failures(error):
    with DroppingEpisode(error) as session:
        world = World.connect(session)
        blueprint = world.get_blueprint_library().find("vehicle.tesla.model3")

        result = world.spawn(blueprint, ORIGIN)
        assert isinstance(result.error, SpawnFailure)
        assert result.error.__cause__ is error

        assert world.try_spawn_actor(blueprint, ORIGIN) is None
        with pytest.raises(SpawnFailure):
            world.spawn_actor(blueprint, ORIGIN)
