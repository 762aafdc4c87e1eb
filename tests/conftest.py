"""Shared fixtures for the lidar simulation tests."""

import matplotlib
matplotlib.use("Agg")

import pytest

from lidar_sim.env.environment import Environment
from lidar_sim.objects.primitives import square

ARENA = 1024.0
SQUARE_SIZE = 300.0
SQUARE_ORIGIN = (ARENA - SQUARE_SIZE) / 2   # 362.0


@pytest.fixture
def empty_environment():
    return Environment.empty(ARENA)


@pytest.fixture
def square_obstacle():
    """Single square centred in the arena."""
    return square(SQUARE_ORIGIN, SQUARE_ORIGIN, SQUARE_SIZE)


@pytest.fixture
def square_environment(square_obstacle):
    return Environment([square_obstacle], arena_size=ARENA)


@pytest.fixture
def isolated_goal_environment():
    """A small square swallowing the far corner grid point (index 9999 at resolution 100)."""
    return Environment([square(1000.0, 1000.0, 30.0)], arena_size=ARENA)
