# parameters.py
"""
Simulation configuration value type.

This module defines SimulationConfig, the immutable bundle of physical
constants that seeds a simulation generation, together with the quantities
derived from it and the validation applied before a generation is built.
"""
import logging
import math
import numbers
from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, Optional

import numpy as np

from constants import DEFAULT_SIMULATION_PARAMETERS

# --- Data Contracts ---
#
# class SimulationConfig:
#   - Fields: particle_count (int >= 1), type_count (int >= 1),
#     max_distance_fraction (> 0), force_factor (finite),
#     friction_half_life (> 0), box_size (> 0), time_step (> 0),
#     seed (Optional[int]).
#   - Derived: half_box, interaction_radius, friction_factor.
#
#   - validate(self) -> None:
#     - Side Effects: None.
#     - Raises: InvalidConfigError naming every offending field.
#
#   - from_params(params: Dict[str, Any]) -> SimulationConfig:
#     - Inputs: the "simulation_parameters" section of config.json.
#       Missing keys fall back to DEFAULT_SIMULATION_PARAMETERS; unknown
#       keys are ignored.


REAL_FIELDS = ("max_distance_fraction", "friction_half_life", "box_size", "time_step")


class InvalidConfigError(ValueError):
    """Raised when a configuration cannot seed a simulation generation."""


@dataclass(frozen=True)
class SimulationConfig:
    particle_count: int = DEFAULT_SIMULATION_PARAMETERS["particle_count"]
    type_count: int = DEFAULT_SIMULATION_PARAMETERS["type_count"]
    max_distance_fraction: float = DEFAULT_SIMULATION_PARAMETERS["max_distance_fraction"]
    force_factor: float = DEFAULT_SIMULATION_PARAMETERS["force_factor"]
    friction_half_life: float = DEFAULT_SIMULATION_PARAMETERS["friction_half_life"]
    box_size: float = DEFAULT_SIMULATION_PARAMETERS["box_size"]
    time_step: float = DEFAULT_SIMULATION_PARAMETERS["time_step"]
    seed: Optional[int] = DEFAULT_SIMULATION_PARAMETERS["seed"]

    def __post_init__(self):
        # Coerce NumPy and other numeric scalars to plain Python numbers;
        # anything non-numeric is left for validate() to report.
        for name in ("particle_count", "type_count", "seed"):
            value = getattr(self, name)
            if _is_integral(value):
                object.__setattr__(self, name, int(value))
        for name in REAL_FIELDS + ("force_factor",):
            value = getattr(self, name)
            if _is_real(value):
                object.__setattr__(self, name, float(value))

    @property
    def half_box(self) -> float:
        return self.box_size / 2.0

    @property
    def interaction_radius(self) -> float:
        """Absolute distance beyond which no force acts."""
        return self.box_size * self.max_distance_fraction

    @property
    def friction_factor(self) -> float:
        """Per-step velocity multiplier giving the configured half-life."""
        return 0.5 ** (self.time_step / self.friction_half_life)

    def validate(self) -> None:
        """
        Checks every field against its minimum.

        Raises:
            InvalidConfigError: If any field is out of range. The message
                lists all offending fields, not just the first.
        """
        problems = []
        for name in ("particle_count", "type_count"):
            value = getattr(self, name)
            if not _is_integral(value) or value < 1:
                problems.append(f"{name} must be an integer >= 1 (got {value!r})")

        for name in REAL_FIELDS:
            value = getattr(self, name)
            if not _is_real(value) or not math.isfinite(value) or value <= 0:
                problems.append(f"{name} must be a finite number > 0 (got {value!r})")

        if not _is_real(self.force_factor) or not math.isfinite(self.force_factor):
            problems.append(f"force_factor must be a finite number (got {self.force_factor!r})")

        if self.seed is not None and not _is_integral(self.seed):
            problems.append(f"seed must be an integer or null (got {self.seed!r})")

        if problems:
            msg = "Invalid simulation configuration: " + "; ".join(problems)
            logging.error(msg)
            raise InvalidConfigError(msg)

    def with_changes(self, **changes: Any) -> "SimulationConfig":
        """Returns a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SimulationConfig":
        merged = dict(DEFAULT_SIMULATION_PARAMETERS)
        merged.update({k: v for k, v in params.items() if k in merged})
        return cls(**merged)


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def _is_integral(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_))
