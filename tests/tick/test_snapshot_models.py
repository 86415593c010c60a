"""Tests for WorldSnapshot and ActorSnapshot."""

import pytest

from simclient import ActorSnapshot, Location, Rotation, Transform, Vector3D, WorldSnapshot


def make_snapshot():
    return WorldSnapshot.from_actors(
        7,
        [
            ActorSnapshot(1),
            ActorSnapshot(4, Transform(Location(1.0, 2.0, 3.0), Rotation(yaw=90.0))),
        ],
        elapsed_seconds=0.35,
        delta_seconds=0.05,
    )


def test_find_returns_state_or_none():
    snapshot = make_snapshot()

    assert snapshot.find(4).transform.location == Location(1.0, 2.0, 3.0)
    assert snapshot.find(99) is None
    assert snapshot.has_actor(1)
    assert len(snapshot) == 2
    assert [actor.id for actor in snapshot] == [1, 4]


def test_snapshot_is_immutable():
    snapshot = make_snapshot()

    with pytest.raises(AttributeError):
        snapshot.frame = 8  # type: ignore[misc]
    with pytest.raises(TypeError):
        snapshot.actors[5] = ActorSnapshot(5)  # type: ignore[index]


def test_snapshot_does_not_alias_source_mapping():
    actors = {1: ActorSnapshot(1)}
    snapshot = WorldSnapshot(frame=1, actors=actors)
    actors[2] = ActorSnapshot(2)

    assert not snapshot.has_actor(2)


def test_dict_conversion_keeps_actor_state():
    snapshot = WorldSnapshot.from_actors(
        3, [ActorSnapshot(2, velocity=Vector3D(1.0, 0.0, 0.0))], elapsed_seconds=0.15
    )
    restored = WorldSnapshot.from_dict(snapshot.to_dict())

    assert restored.frame == 3
    assert restored.elapsed_seconds == pytest.approx(0.15)
    assert restored.find(2).velocity == Vector3D(1.0, 0.0, 0.0)
