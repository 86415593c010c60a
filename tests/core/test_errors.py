"""Tests for the error hierarchy."""

from simclient import (
    InvalidEpisode,
    SimClientError,
    SpawnFailure,
    SynchronousModeError,
    TickTimeout,
)


def test_all_errors_share_base():
    for error in (InvalidEpisode(), TickTimeout(1.0), SpawnFailure("x"), SynchronousModeError("x")):
        assert isinstance(error, SimClientError)


def test_tick_timeout_is_a_timeout_error():
    error = TickTimeout(0.5, frame=12)
    assert isinstance(error, TimeoutError)
    assert error.timeout == 0.5
    assert error.frame == 12
    assert "frame 12" in str(error)


def test_invalid_episode_message_names_episode():
    error = InvalidEpisode(3, "session is closed")
    assert error.episode_id == 3
    assert str(error) == "episode 3: session is closed"
