"""Tests for EpisodeHandle."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from simclient import EpisodeHandle, EpisodeSession, InvalidEpisode, LocalEpisode


def test_local_episode_satisfies_protocol(session):
    assert isinstance(session, EpisodeSession)


def test_lock_returns_session(session):
    handle = EpisodeHandle(session)
    assert handle.lock() is session
    assert handle.episode_id == session.episode_id
    assert handle.is_valid


def test_lock_fails_after_close():
    session = LocalEpisode()
    handle = EpisodeHandle(session)
    session.close()

    with pytest.raises(InvalidEpisode, match="closed"):
        handle.lock()
    assert not handle.is_valid


def test_lock_fails_after_reload(session):
    handle = EpisodeHandle(session)
    new_episode = session.reload_episode()

    with pytest.raises(InvalidEpisode) as info:
        handle.lock()
    assert info.value.episode_id == handle.episode_id
    assert EpisodeHandle(session).episode_id == new_episode


def test_handle_pinned_to_old_episode_stays_invalid(session):
    old = session.episode_id
    session.reload_episode()

    assert not EpisodeHandle(session, old).is_valid


def test_invalidate_is_idempotent(session):
    handle = EpisodeHandle(session)
    handle.invalidate()
    handle.invalidate()

    with pytest.raises(InvalidEpisode, match="invalidated"):
        handle.lock()
    assert EpisodeHandle(session).is_valid


def test_concurrent_locks_resolve_same_session(session):
    handle = EpisodeHandle(session)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: handle.lock(), range(64)))

    assert all(result is session for result in results)


def test_equality_by_session_and_episode(session):
    assert EpisodeHandle(session) == EpisodeHandle(session)
    assert hash(EpisodeHandle(session)) == hash(EpisodeHandle(session))

    with LocalEpisode() as other:
        assert EpisodeHandle(session) != EpisodeHandle(other)

    old = EpisodeHandle(session)
    session.reload_episode()
    assert old != EpisodeHandle(session)


def test_invalidate_drops_callbacks_registered_through_handle(session):
    handle = EpisodeHandle(session)
    other = EpisodeHandle(session)
    dropped, kept = [], []
    handle.on_tick(dropped.append)
    other.on_tick(kept.append)

    handle.invalidate()
    session.step()

    assert dropped == []
    assert len(kept) == 1


def test_world_callbacks_stop_after_handle_invalidated(world, session):
    frames = []
    world.on_tick(lambda snapshot: frames.append(snapshot.frame))
    world.tick()

    world.episode.invalidate()
    session.step()

    assert frames == [1]
    with pytest.raises(InvalidEpisode):
        world.on_tick(frames.append)


def test_remove_through_handle(session):
    handle = EpisodeHandle(session)
    received = []
    callback_id = handle.on_tick(received.append)

    handle.remove_on_tick(callback_id)
    handle.invalidate()
    session.step()

    assert received == []
