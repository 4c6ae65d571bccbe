# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the force law, the all-pairs force kernel, and the
Simulation class: one generation of the world (configuration, interaction
matrix and particle arrays) that can be advanced by one time step. It
computes inter-particle forces and updates positions and velocities.
"""
import logging
import numpy as np
from numba import jit

from constants import BETA
from parameters import SimulationConfig
from particle import ParticleSystem

# --- Data Contracts ---
#
# force(r: float, a: float) -> float:
#   - Inputs:
#     - r: distance normalised by the interaction radius, r >= 0.
#     - a: interaction coefficient for the ordered type pair, in [-1, 1].
#   - Outputs: signed radial force magnitude. Negative pushes apart.
#   - Invariants: force(r, a) <= 0 for r < BETA, 0 for r >= 1,
#     continuous at r = BETA and r = 1.
#
# integrate(particles, interaction_matrix, config) -> None:
#   - Side Effects: Advances particles.positions and particles.velocities
#     by one time step in place. Forces are computed from the positions at
#     the start of the step for every particle before any particle moves.
#   - Invariants: Particle count remains constant. Every position
#     component lies within [-half_box, half_box] afterwards.
#
# class Simulation:
#   - __init__(self, config: SimulationConfig, rng: np.random.Generator):
#     - Side Effects: Draws a fresh interaction matrix and particle arrays.
#   - step(self) -> None: integrate() on the owned arrays.


@jit(nopython=True)
def force(r, a):
    """
    Radial force magnitude at normalised distance r for coefficient a.

    Below BETA every pair repels linearly, reaching -1 at r = 0. Between
    BETA and 1 the force is a triangular lobe peaking at (1 + BETA) / 2
    with value a. Nothing acts beyond r = 1.
    """
    if r < BETA:
        return r / BETA - 1.0
    elif r < 1.0:
        return a * (1.0 - abs(2.0 * r - 1.0 - BETA) / (1.0 - BETA))
    return 0.0


@jit(nopython=True)
def _calculate_forces_numba(positions, types, interaction_matrix, radius):
    """
    Numba-jitted brute-force accumulation of the net force on each particle.

    Every ordered pair (i, j) is visited. Interactions are not reciprocal:
    particle i is pushed by matrix[type_i, type_j] while j is pushed by
    matrix[type_j, type_i], allowing non-conservative dynamics.
    """
    particle_count = positions.shape[0]
    total_force = np.zeros_like(positions)

    for i in range(particle_count):
        type_i = types[i]
        fx = 0.0
        fy = 0.0
        fz = 0.0
        for j in range(particle_count):
            if i == j:
                continue
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            dz = positions[j, 2] - positions[i, 2]
            r = np.sqrt(dx * dx + dy * dy + dz * dz)

            # Coincident particles have no direction; skip rather than divide.
            if r > 0.0 and r < radius:
                f = force(r / radius, interaction_matrix[type_i, types[j]])
                fx += dx / r * f
                fy += dy / r * f
                fz += dz / r * f

        total_force[i, 0] = fx
        total_force[i, 1] = fy
        total_force[i, 2] = fz
    return total_force


def make_interaction_matrix(type_count: int, rng: np.random.Generator) -> np.ndarray:
    """
    Draws a type_count x type_count matrix of independent values in [-1, 1].

    The matrix is deliberately not symmetric.
    """
    return rng.uniform(-1.0, 1.0, size=(type_count, type_count))


def integrate(particles: ParticleSystem, interaction_matrix: np.ndarray, config: SimulationConfig) -> None:
    """
    Advances the particle arrays by one time step.
    """
    radius = config.interaction_radius
    time_step = config.time_step
    half_box = config.half_box

    # 1. Calculate forces for every particle from the current positions
    total_force = _calculate_forces_numba(
        particles.positions, particles.types, interaction_matrix, radius
    )

    # 2. Scale so force_factor means the same thing for any box or step size
    total_force *= radius * time_step * config.force_factor

    # 3. Apply friction once per step, then the force
    velocities = particles.velocities
    velocities *= config.friction_factor
    velocities += total_force

    # 4. Update positions with velocities, scaled by time_step
    positions = particles.positions
    positions += velocities * time_step

    # 5. Hard walls: flip the velocity component and clamp, always together
    outside_mask = (positions < -half_box) | (positions > half_box)
    velocities[outside_mask] *= -1.0
    np.clip(positions, -half_box, half_box, out=positions)


class Simulation:
    """
    One generation of the world: configuration, interaction matrix and
    particle arrays, created together and replaced together.
    """
    def __init__(self, config: SimulationConfig, rng: np.random.Generator):
        """
        Initializes a generation.

        Args:
            config (SimulationConfig): A validated configuration.
            rng (np.random.Generator): Source of the matrix and initial state.
        """
        self.config = config
        self.interaction_matrix = make_interaction_matrix(config.type_count, rng)
        self.particles = ParticleSystem(config, rng)
        self.step_count = 0

        self._check_invariants()

        logging.info("Simulation generation initialized.")
        logging.debug(
            f"Derived quantities: half_box={config.half_box:.4f}, "
            f"interaction_radius={config.interaction_radius:.4f}, "
            f"friction_factor={config.friction_factor:.6f}"
        )

    def _check_invariants(self) -> None:
        type_count = self.config.type_count
        matrix_shape = self.interaction_matrix.shape
        if matrix_shape != (type_count, type_count):
            msg = (
                f"Interaction matrix shape {matrix_shape} does not match "
                f"type_count ({type_count})."
            )
            logging.critical(msg)
            raise IndexError(msg)
        self.particles.check_types()

    def step(self):
        """
        Executes one time step of the simulation.
        """
        self._check_invariants()
        integrate(self.particles, self.interaction_matrix, self.config)
        self.step_count += 1
