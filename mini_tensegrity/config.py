# mini_tensegrity/config.py
"""
CONFIG RECORDS: Physical Parameters for Rods and Cables
=======================================================

One config record is bound to one tag through a builder. Records are frozen
dataclasses, so a bound config cannot drift after the BuildSpec is assembled.

UNITS:
------
The defaults follow the usual decimetre scaling for tensegrity robots (gravity
98.1 dm/s^2), so lengths are in dm and density in kg/dm^3. Nothing in the
package depends on the unit system as long as it is consistent.
"""

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError


def _require_positive(value: float, name: str) -> None:
    if not value > 0.0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def _require_non_negative(value: float, name: str) -> None:
    if not value >= 0.0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class RodConfig:
    """
    Parameters of a rigid rod (solid cylinder).

    Parameters:
    -----------
    radius : float
        Cylinder radius (length)
    density : float
        Mass per unit volume; mass = density * pi * radius^2 * length
    friction : float
        Sliding friction coefficient, carried for contact-capable worlds
    roll_friction : float
        Rolling friction coefficient, carried for contact-capable worlds
    restitution : float
        Coefficient of restitution, carried for contact-capable worlds
    """
    radius: float = 0.5
    density: float = 1.0
    friction: float = 1.0
    roll_friction: float = 0.0
    restitution: float = 0.0

    def __post_init__(self):
        _require_positive(self.radius, "radius")
        _require_non_negative(self.density, "density")
        _require_non_negative(self.friction, "friction")
        _require_non_negative(self.roll_friction, "roll_friction")
        _require_non_negative(self.restitution, "restitution")

    def mass(self, length: float) -> float:
        """Mass of a rod segment of the given length."""
        return self.density * np.pi * self.radius ** 2 * length


@dataclass(frozen=True)
class CableConfig:
    """
    Parameters of a tension-only cable actuator with a motorised rest length.

    Parameters:
    -----------
    stiffness : float
        Spring constant (force / length). Must be positive.
    damping : float
        Damping coefficient (force * time / length)
    pretension : float
        Tension at the initial length; rest length starts at
        start_length - pretension / stiffness
    history : bool
        Record rest length, length and tension every step
    max_tension : float
        Upper bound on the force the cable transmits and on tension targets
    target_velocity : float
        Maximum rate of change of the rest length (length / time)
    min_actual_length : float
        The motor will not shorten the cable while its actual length is at
        or below this value
    min_rest_length : float
        Lower bound on the rest length
    """
    stiffness: float = 1000.0
    damping: float = 10.0
    pretension: float = 0.0
    history: bool = False
    max_tension: float = 1000.0
    target_velocity: float = 100.0
    min_actual_length: float = 0.1
    min_rest_length: float = 0.1

    def __post_init__(self):
        _require_positive(self.stiffness, "stiffness")
        _require_non_negative(self.damping, "damping")
        _require_non_negative(self.pretension, "pretension")
        _require_positive(self.max_tension, "max_tension")
        _require_positive(self.target_velocity, "target_velocity")
        _require_non_negative(self.min_actual_length, "min_actual_length")
        _require_non_negative(self.min_rest_length, "min_rest_length")
