# mini_tensegrity/control.py
"""
ACTUATOR CONTROL LAW: Bounded Rest-Length Commands
==================================================

PURPOSE:
--------
A controller owns one Cable and, each time control(dt, target) is called,
moves the cable's rest length one bounded increment towards what the target
asks for. There is no hidden state beyond the cable itself: the result of a
call depends only on the cable's current length/tension, dt and target.

TENSION MODE (TensionController):
---------------------------------
    target    = clamp(target, 0, max_tension)
    error     = target - T_current
    preferred = L_rest - error / k

A cable that is too slack (T < target) gets a shorter preferred length, one
that pulls too hard gets a longer one.

LENGTH MODE (LengthController):
-------------------------------
    preferred = target

MOTOR (shared by both):
-----------------------
    step  = target_velocity * dt
    diff  = preferred - L_rest
    L_rest += sign(diff) * min(|diff|, step)

The motor never shortens a cable whose actual length is at or below
min_actual_length, and never sets L_rest below min_rest_length.
"""

from typing import Optional

from .errors import check_timestep
from .kernel.cable import Cable


def move_rest_length(cable: Cable, preferred: float, dt: float) -> float:
    """
    Advance cable.rest_length towards `preferred` by at most
    target_velocity * dt. Returns the new rest length.
    """
    dt = check_timestep(dt)
    config = cable.config
    preferred = max(float(preferred), config.min_rest_length)
    cable.preferred_length = preferred

    rest = cable.rest_length
    diff = preferred - rest
    if diff < 0.0 and cable.length <= config.min_actual_length:
        return rest

    step = config.target_velocity * dt
    if abs(diff) > step:
        rest += step if diff > 0.0 else -step
    else:
        rest = preferred
    cable.set_rest_length(rest)
    return cable.rest_length


class ActuatorController:
    """Base for one-cable controllers holding a target."""

    def __init__(self, cable: Cable, target: Optional[float] = None):
        if cable is None:
            raise ValueError("A controller needs a cable")
        self.cable = cable
        self.target = target

    def preferred_length(self, target: float) -> float:
        raise NotImplementedError

    def control(self, dt: float, target: Optional[float] = None) -> float:
        """
        Apply one bounded command. A given `target` replaces the stored one.
        Returns the cable's new rest length.
        """
        dt = check_timestep(dt)
        if target is not None:
            self.target = float(target)
        if self.target is None:
            raise ValueError(f"{self.__class__.__name__} has no target to control towards")
        return move_rest_length(self.cable, self.preferred_length(self.target), dt)


class TensionController(ActuatorController):
    """Drive a cable towards a tension set point."""

    def __init__(self, cable: Cable, target: float = 0.0):
        super().__init__(cable, target)

    def preferred_length(self, target: float) -> float:
        config = self.cable.config
        target = min(max(target, 0.0), config.max_tension)
        error = target - self.cable.tension
        return self.cable.rest_length - error / config.stiffness


class LengthController(ActuatorController):
    """Drive a cable's rest length towards a length set point."""

    def preferred_length(self, target: float) -> float:
        return target
