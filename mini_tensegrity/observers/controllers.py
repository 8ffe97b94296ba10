# mini_tensegrity/observers/controllers.py
"""
CONTROLLERS: Observers That Drive the Cables
============================================

ConstantTensionController
-------------------------
Holds every actuator of the model at one tension set point, commanding each
cable every step.

SineWaveController
------------------
A periodic target generator. It accumulates simulated time and, every
1 / update_frequency seconds, computes one tension target per actuator

    target[i] = position_offset[i] + amplitude[i] * sin(t * frequency[i] + phase_offset[i])

then issues one command per cable through a TensionController, passing the
step dt so each update moves a motor by at most target_velocity * dt. The
accumulator keeps its remainder modulo the period rather than resetting to
zero, so update instants do not drift when dt does not divide the period,
and a step longer than the period still triggers a single update.

The parameters come from a JSON file:

    {
        "sin_amplitude":       [5.0, 5.0, ...],
        "sin_frequency":       [1.0, 1.0, ...],
        "sin_phase_offset":    [0.0, 1.57, ...],
        "sin_position_offset": [10.0, 10.0, ...],
        "updateFrequency":     30.0
    }

All four lists must have the same length, with at least one entry per
actuator; updateFrequency is in Hz and must be positive. The file is
validated with pydantic.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..control import TensionController
from ..errors import ConfigurationError, check_timestep
from .base import Observer
from .loggers import append_record

logger = logging.getLogger(__name__)


class ConstantTensionController(Observer):
    """Command every actuator towards the same tension each step."""

    def __init__(self, tension: float = 0.01):
        if not tension >= 0.0:
            raise ConfigurationError(f"tension must be non-negative, got {tension}")
        self.tension = float(tension)
        self.controllers: List[TensionController] = []

    def on_setup(self, model) -> None:
        self.controllers = [TensionController(c, self.tension) for c in model.actuators]

    def on_step(self, model, dt: float) -> None:
        dt = check_timestep(dt)
        for controller in self.controllers:
            controller.control(dt, self.tension)

    def on_teardown(self, model) -> None:
        self.controllers.clear()


class SineWaveConfig(BaseModel):
    """
    Per-actuator sine parameters plus the target update rate.

    Fields are read from the JSON keys shown in the module docstring; the
    Python names work as keyword arguments too. Invalid values raise
    ConfigurationError.

    Parameters:
    -----------
    amplitude : List[float]
        Sine amplitude per actuator (tension units)
    frequency : List[float]
        Angular frequency per actuator (rad / s)
    phase_offset : List[float]
        Phase per actuator (rad)
    position_offset : List[float]
        Constant offset per actuator (tension units)
    update_frequency : float
        How often targets are recomputed (Hz)
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True, allow_inf_nan=False)

    amplitude: List[float] = Field(alias="sin_amplitude", min_length=1)
    frequency: List[float] = Field(alias="sin_frequency", min_length=1)
    phase_offset: List[float] = Field(alias="sin_phase_offset", min_length=1)
    position_offset: List[float] = Field(alias="sin_position_offset", min_length=1)
    update_frequency: float = Field(alias="updateFrequency", gt=0.0)

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid controller config: {exc}") from exc

    @model_validator(mode="after")
    def _equal_lengths(self) -> "SineWaveConfig":
        lengths = [len(self.amplitude), len(self.frequency),
                   len(self.phase_offset), len(self.position_offset)]
        if len(set(lengths)) != 1:
            raise ValueError(f"sine parameter lists must have equal lengths, got {lengths}")
        return self

    @property
    def n_actuators(self) -> int:
        return len(self.amplitude)

    @property
    def period(self) -> float:
        return 1.0 / self.update_frequency

    @classmethod
    def from_dict(cls, data: dict) -> "SineWaveConfig":
        if not isinstance(data, dict):
            raise ConfigurationError(f"Controller config must be a JSON object, got {type(data).__name__}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "SineWaveConfig":
        try:
            with open(path) as f:
                data = json.load(f)
        except OSError as exc:
            raise ConfigurationError(f"Cannot read controller config {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Controller config {path} is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class SineWaveController(Observer):
    """
    Periodic tension targets for every actuator.

    Parameters:
    -----------
    config : SineWaveConfig
        Sine parameters, one entry per actuator. Entries beyond the model's
        actuator count are unused and logged as a warning at setup.
    log_path : str or Path, optional
        If given, every target update appends "t, target_0, target_1, ..."
    """

    def __init__(self, config: SineWaveConfig, log_path: Optional[Union[str, Path]] = None):
        self.config = config
        self.log_path = Path(log_path) if log_path is not None else None
        self.sim_time = 0.0
        self.update_time = 0.0
        self.n_updates = 0
        self.targets = np.zeros(0)
        self.controllers: List[TensionController] = []

    @classmethod
    def from_json(cls, path, log_path=None) -> "SineWaveController":
        return cls(SineWaveConfig.from_json(path), log_path=log_path)

    def targets_at(self, t: float, n: Optional[int] = None) -> np.ndarray:
        """Targets for the first n actuators at simulated time t."""
        c = self.config
        n = c.n_actuators if n is None else n
        amplitude = np.asarray(c.amplitude[:n])
        frequency = np.asarray(c.frequency[:n])
        phase = np.asarray(c.phase_offset[:n])
        return np.asarray(c.position_offset[:n]) + amplitude * np.sin(t * frequency + phase)

    def on_setup(self, model) -> None:
        actuators = model.actuators
        if len(actuators) > self.config.n_actuators:
            raise ConfigurationError(
                f"Sine config has {self.config.n_actuators} entries but the model "
                f"has {len(actuators)} actuators"
            )
        if len(actuators) < self.config.n_actuators:
            logger.warning(
                "sine config has %d entries but model %r has %d actuators; extra entries unused",
                self.config.n_actuators, model.name, len(actuators),
            )
        self.targets = self.targets_at(self.sim_time, len(actuators))
        self.controllers = [
            TensionController(cable, float(target)) for cable, target in zip(actuators, self.targets)
        ]
        logger.info("sine controller set up for %d actuators", len(self.controllers))

    def on_step(self, model, dt: float) -> None:
        dt = check_timestep(dt)
        self.sim_time += dt
        self.update_time += dt
        period = self.config.period
        if self.update_time < period:
            return
        # At most one update per step; whole periods beyond the first are dropped
        self.update_time %= period
        self.targets = self.targets_at(self.sim_time, len(self.controllers))
        for controller, target in zip(self.controllers, self.targets):
            controller.control(dt, float(target))
        self.n_updates += 1
        if self.log_path is not None:
            append_record(self.log_path, [self.sim_time, *self.targets])

    def on_teardown(self, model) -> None:
        logger.debug("sine controller releasing %d controllers", len(self.controllers))
        self.controllers.clear()
