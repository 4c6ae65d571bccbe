# controller.py
"""
Run-state machine and parameter-change protocol for the simulation.

The SimulationController owns the current generation and is the only way
to change it. Viewers read positions through snapshot() and feed parameter
edits back through reset(); they never write simulation arrays directly.
"""
import logging
from enum import Enum
from typing import NamedTuple, Optional

import numpy as np

from parameters import SimulationConfig
from simulation import Simulation

# --- Data Contracts ---
#
# class SimulationController:
#   - __init__(self, config: Optional[SimulationConfig] = None,
#              rng: Optional[np.random.Generator] = None):
#     - Side Effects: Validates config and builds the first generation.
#       The run state starts as STOPPED.
#     - Raises: InvalidConfigError.
#
#   - start(self) / stop(self) -> None: idempotent run-state transitions.
#
#   - tick(self) -> Snapshot: one step if RUNNING, then a snapshot.
#
#   - reset(self, config: SimulationConfig) -> None:
#     - Side Effects: Replaces the whole generation. Run state unchanged.
#     - Raises: InvalidConfigError, leaving the previous generation current.
#
#   - snapshot(self) -> Snapshot: read-only views of the current generation.
#     Views are only meaningful until the next reset; re-fetch afterwards.


class RunState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class Snapshot(NamedTuple):
    """Read-only view of a generation for rendering."""
    positions: np.ndarray
    types: np.ndarray
    box_size: float
    particle_count: int
    type_count: int
    step_count: int


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class SimulationController:
    """
    Owns the current generation and the run/stop/reset state machine.
    """
    def __init__(self, config: Optional[SimulationConfig] = None, rng: Optional[np.random.Generator] = None):
        config = config if config is not None else SimulationConfig()
        config.validate()

        # All randomness flows through a single generator owned here.
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.state = RunState.STOPPED
        self.simulation = Simulation(config, self.rng)

        logging.info(
            f"SimulationController ready: {config.particle_count} particles, "
            f"{config.type_count} types, box size {config.box_size}."
        )

    @property
    def config(self) -> SimulationConfig:
        return self.simulation.config

    @property
    def is_running(self) -> bool:
        return self.state is RunState.RUNNING

    def start(self) -> None:
        if self.state is RunState.RUNNING:
            return
        self.state = RunState.RUNNING
        logging.info("Simulation started.")

    def stop(self) -> None:
        if self.state is RunState.STOPPED:
            return
        self.state = RunState.STOPPED
        logging.info("Simulation stopped.")

    def toggle(self) -> None:
        if self.is_running:
            self.stop()
        else:
            self.start()

    def tick(self) -> Snapshot:
        """
        Advances one step if running and returns the state to draw.

        While stopped the particle arrays are left untouched.
        """
        if self.state is RunState.RUNNING:
            self.simulation.step()
        return self.snapshot()

    def reset(self, config: SimulationConfig) -> None:
        """
        Replaces the current generation with a fresh one built from config.

        The new generation shares nothing with the old one. The run state is
        preserved: resetting a stopped simulation does not start it.

        Raises:
            InvalidConfigError: If config is invalid. The current generation
                is kept as it was.
        """
        config.validate()
        rng = self.rng
        if config.seed is not None and config.seed != self.config.seed:
            rng = np.random.default_rng(config.seed)

        # Build completely before swapping so no partial generation is visible.
        generation = Simulation(config, rng)
        self.rng = rng
        self.simulation = generation
        logging.info(
            f"Simulation reset: {config.particle_count} particles, "
            f"{config.type_count} types, box size {config.box_size} "
            f"(run state: {self.state.value})."
        )
        logging.debug(f"Reset configuration: {config.to_dict()}")

    def snapshot(self) -> Snapshot:
        generation = self.simulation
        particles = generation.particles
        return Snapshot(
            positions=_read_only(particles.positions),
            types=_read_only(particles.types),
            box_size=generation.config.box_size,
            particle_count=particles.particle_count,
            type_count=generation.config.type_count,
            step_count=generation.step_count,
        )
