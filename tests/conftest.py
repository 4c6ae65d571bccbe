"""
Shared pytest fixtures for the particle life simulation.

These fixtures provide small, seeded configurations and controllers so
tests stay fast while exercising the real numba kernels.
"""

from __future__ import annotations

import logging
import pathlib
import sys

import numpy as np
import pytest

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from controller import SimulationController  # noqa: E402
from parameters import SimulationConfig  # noqa: E402


@pytest.fixture(scope="session")
def project_root() -> pathlib.Path:
    """Return repository root directory."""
    return REPO_ROOT


@pytest.fixture
def small_config() -> SimulationConfig:
    """A population small enough to step many times in a test."""
    return SimulationConfig(
        particle_count=120,
        type_count=4,
        max_distance_fraction=0.3,
        force_factor=10.0,
        friction_half_life=0.04,
        box_size=2.0,
        time_step=0.02,
        seed=1234,
    )


@pytest.fixture
def controller(small_config: SimulationConfig) -> SimulationController:
    return SimulationController(small_config)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def restore_root_logger():
    """Remove handlers installed by setup_logging and restore the level."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
