"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from loguru import logger

from simclient import ClientSettings, LocalEpisode, World


@pytest.fixture(autouse=True)
def quiet_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def session():
    """Fresh synchronous LocalEpisode, closed after the test."""
    with LocalEpisode(ClientSettings(synchronous_mode=True, fixed_delta_seconds=0.05)) as s:
        yield s


@pytest.fixture
def world(session):
    return World.connect(session, ClientSettings(timeout=2.0))


@pytest.fixture
def library(world):
    return world.get_blueprint_library()
