# mini_tensegrity/kernel/world.py
"""
WORLD: Minimal Rigid-Body Integrator
====================================

PURPOSE:
--------
The World owns the integration loop the compiled model runs in. It exposes
the narrow interface the build pipeline relies on:

    add_rigid_body(body)   register a RigidBody, returns its handle
    add_actuator(cable)    register a Cable, returns its handle
    remove(entity)         unregister a body or cable
    step(dt)               advance every registered entity by dt

Each step:
    1. every cable pushes its tension into its two bodies
    2. every body integrates gravity + accumulated forces (semi-implicit Euler)

There is no contact or ground handling; a structure in free fall under
gravity simply falls.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..errors import ResourceError, check_timestep
from .bodies import RigidBody
from .cable import Cable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldConfig:
    """
    World parameters.

    gravity : Tuple[float, float, float]
        Gravitational acceleration, y up, in dm/s^2 by default
    linear_damping, angular_damping : float
        Velocity decay rates (1/s) applied to every body
    max_entities : Optional[int]
        Allocation limit; registering beyond it raises ResourceError
    """
    gravity: Tuple[float, float, float] = (0.0, -98.1, 0.0)
    linear_damping: float = 0.0
    angular_damping: float = 0.0
    max_entities: Optional[int] = None


class World:
    """Registry of rigid bodies and cables plus the integration step."""

    def __init__(self, config: Optional[WorldConfig] = None):
        self.config = config or WorldConfig()
        self.gravity = np.asarray(self.config.gravity, dtype=float).reshape(3)
        self._bodies: List[RigidBody] = []
        self._actuators: List[Cable] = []
        self._next_handle = 0
        self.time = 0.0
        self.n_steps = 0

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _check_capacity(self) -> None:
        limit = self.config.max_entities
        if limit is not None and len(self._bodies) + len(self._actuators) >= limit:
            raise ResourceError(f"World is full ({limit} entities)")

    def _issue_handle(self, entity) -> int:
        entity.handle = self._next_handle
        self._next_handle += 1
        return entity.handle

    def add_rigid_body(self, body: RigidBody) -> int:
        if self.contains(body):
            raise ResourceError(f"{body.name} is already registered")
        if not body.mass > 0.0 or not np.isfinite(body.mass):
            raise ResourceError(f"{body.name} has non-positive mass ({body.mass})")
        if np.linalg.matrix_rank(body.inertia_body) < 3:
            raise ResourceError(f"{body.name} has a singular inertia tensor")
        self._check_capacity()
        self._bodies.append(body)
        return self._issue_handle(body)

    def add_actuator(self, cable: Cable) -> int:
        if self.contains(cable):
            raise ResourceError(f"{cable.name} is already registered")
        for body in cable.bodies:
            if isinstance(body, RigidBody) and not self.contains(body):
                raise ResourceError(
                    f"{cable.name} is attached to {body.name}, which is not in this world"
                )
        self._check_capacity()
        self._actuators.append(cable)
        return self._issue_handle(cable)

    def remove(self, entity) -> None:
        """Unregister a body or cable. Unknown entities raise ResourceError."""
        for registry in (self._actuators, self._bodies):
            for k, item in enumerate(registry):
                if item is entity:
                    del registry[k]
                    entity.handle = None
                    return
        raise ResourceError(f"{entity!r} is not registered with this world")

    def contains(self, entity) -> bool:
        return any(e is entity for e in self._bodies) or any(e is entity for e in self._actuators)

    @property
    def bodies(self) -> List[RigidBody]:
        return list(self._bodies)

    @property
    def actuators(self) -> List[Cable]:
        return list(self._actuators)

    @property
    def n_entities(self) -> int:
        return len(self._bodies) + len(self._actuators)

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def step(self, dt: float) -> None:
        dt = check_timestep(dt)
        for cable in self._actuators:
            cable.apply_forces()
        for body in self._bodies:
            body.integrate(
                dt,
                self.gravity,
                self.config.linear_damping,
                self.config.angular_damping,
            )
        self.time += dt
        self.n_steps += 1
        logger.debug("world step %d: t=%.6f", self.n_steps, self.time)

    def center_of_mass(self, bodies: Optional[Sequence[RigidBody]] = None) -> np.ndarray:
        bodies = self._bodies if bodies is None else bodies
        total = sum(b.mass for b in bodies)
        if total <= 0.0:
            raise ValueError("No mass to compute a centre of mass from")
        return sum(b.mass * b.position for b in bodies) / total
