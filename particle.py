# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
initializing and storing particle data (position, velocity, type)
in contiguous NumPy arrays.
"""
import logging
import numpy as np

from parameters import SimulationConfig

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, config: SimulationConfig, rng: np.random.Generator):
#     - Inputs:
#       - config: A validated SimulationConfig.
#       - rng: The random generator owned by the caller.
#     - Outputs: None
#     - Side Effects: Allocates the particle state arrays and draws
#       positions and types from rng.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 3) of dtype float64,
#         every component within [-half_box, half_box].
#       - self.velocities is a NumPy array of shape (N, 3) of dtype float64,
#         initially zero.
#       - self.types is a NumPy array of shape (N,) of dtype int32,
#         every value within [0, type_count).
#       - The three arrays are never resized; a new ParticleSystem is
#         built instead.


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, config: SimulationConfig, rng: np.random.Generator):
        """
        Initializes the particle system.

        Args:
            config (SimulationConfig): Population size, type count and box.
            rng (np.random.Generator): Source of the initial positions and types.
        """
        self.particle_count = config.particle_count
        self.type_count = config.type_count
        half_box = config.half_box

        self.positions = rng.uniform(
            low=-half_box,
            high=half_box,
            size=(self.particle_count, 3)
        )
        self.velocities = np.zeros((self.particle_count, 3), dtype=np.float64)
        self.types = rng.integers(
            low=0,
            high=self.type_count,
            size=self.particle_count,
            dtype=np.int32
        )

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles of {self.type_count} types."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Types shape: {self.types.shape}"
        )

    def check_types(self) -> None:
        """
        Asserts that every type id indexes the interaction matrix.

        A violation means the particle arrays were corrupted after
        construction; it is a programming error, not a runtime condition.
        """
        if self.particle_count == 0:
            return
        low = int(self.types.min())
        high = int(self.types.max())
        if low < 0 or high >= self.type_count:
            msg = (
                f"Particle type ids span [{low}, {high}] but only "
                f"{self.type_count} types exist."
            )
            logging.critical(msg)
            raise IndexError(msg)
