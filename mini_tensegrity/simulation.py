# mini_tensegrity/simulation.py
"""
SIMULATION: Driving Models and the World Together
=================================================

The Simulation is the loop a script would otherwise write by hand:

    for each step:
        model.step(dt)    observers issue commands, entity hooks run
        world.step(dt)    the world integrates with those commands in place

Commands from a step are therefore always visible to the integration of that
same step, never retroactively to an earlier one.
"""

import logging
from typing import List

from .errors import LifecycleError, check_timestep
from .model import ModelState, TensegrityModel

logger = logging.getLogger(__name__)


class Simulation:
    """Owns the step loop over one world and any number of models."""

    def __init__(self, world):
        self.world = world
        self.models: List[TensegrityModel] = []
        self.elapsed = 0.0
        self.n_steps = 0

    def add_model(self, model: TensegrityModel) -> TensegrityModel:
        """Add a model and set it up in this simulation's world."""
        if model.state is not ModelState.UNBUILT:
            raise LifecycleError(f"Model {model.name!r} is already {model.state.value}")
        model.setup(self.world)
        self.models.append(model)
        return model

    def step(self, dt: float) -> None:
        dt = check_timestep(dt)
        for model in self.models:
            model.step(dt)
        self.world.step(dt)
        self.elapsed += dt
        self.n_steps += 1

    def run(self, n_steps: int, dt: float) -> None:
        if n_steps < 0:
            raise ValueError(f"n_steps must be non-negative, got {n_steps}")
        check_timestep(dt)
        logger.info("running %d steps of %.4g s", n_steps, dt)
        for _ in range(n_steps):
            self.step(dt)

    def reset(self) -> None:
        """Tear down every model and forget them."""
        for model in self.models:
            model.teardown()
        self.models = []
        self.elapsed = 0.0
        self.n_steps = 0
