# mini_tensegrity/kernel/cable.py
"""
CABLE ACTUATOR: Tension-Only Spring-Damper with a Motorised Rest Length
=======================================================================

A Cable connects two anchors. Each anchor is a (body, local point) pair where
the body is either a RigidBody or a FixedAnchor.

FORCE LAW:
----------
    stretch = L - L_rest
    T       = k * stretch + c * dL/dt      if stretch > 0
    T       = 0                            otherwise (cables cannot push)
    T       = min(max(T, 0), T_max)

The force T * u (u = unit vector from anchor A to anchor B) pulls anchor A
towards B and anchor B towards A.

PRETENSION:
-----------
The initial rest length is chosen so the cable carries `pretension` at its
build length:

    L_rest0 = L0 - pretension / k

The rest length only changes through set_rest_length(), which the control law
in mini_tensegrity.control calls with bounded increments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

import numpy as np

from ..config import CableConfig


@dataclass(frozen=True, eq=False)
class Attachment:
    """A point fixed in a body's local frame, tagged with its structure point."""
    body: Any
    local: np.ndarray
    point_index: int

    def position(self) -> np.ndarray:
        return self.body.world_point(self.local)

    def velocity(self) -> np.ndarray:
        return self.body.point_velocity(self.local)


@dataclass
class CableHistory:
    """Per-step record kept when CableConfig.history is set."""
    time: List[float] = field(default_factory=list)
    rest_length: List[float] = field(default_factory=list)
    length: List[float] = field(default_factory=list)
    tension: List[float] = field(default_factory=list)

    def as_arrays(self) -> Dict[str, np.ndarray]:
        return {
            'time': np.asarray(self.time, dtype=float),
            'rest_length': np.asarray(self.rest_length, dtype=float),
            'length': np.asarray(self.length, dtype=float),
            'tension': np.asarray(self.tension, dtype=float),
        }


class Cable:
    """
    A cable actuator between two attachments.

    Parameters:
    -----------
    anchor_a, anchor_b : Attachment
        The two ends
    config : CableConfig
        Stiffness, damping, pretension and motor limits
    pair_id : int
        Id of the structure pair that produced this cable
    tags : FrozenSet[str]
        Tags of the source pair
    """

    def __init__(
        self,
        anchor_a: Attachment,
        anchor_b: Attachment,
        config: CableConfig,
        pair_id: int = -1,
        tags: FrozenSet[str] = frozenset(),
    ):
        self.anchor_a = anchor_a
        self.anchor_b = anchor_b
        self.config = config
        self.pair_id = pair_id
        self.tags = frozenset(tags)
        self.name = f"cable[{pair_id}]"

        start_length = self.length
        if start_length <= 0.0:
            raise ValueError(
                f"Cable from pair {pair_id} has zero length "
                f"(points {anchor_a.point_index} and {anchor_b.point_index} coincide)"
            )
        self.start_length = start_length
        self._rest_length = max(
            config.min_rest_length, start_length - config.pretension / config.stiffness
        )
        self.preferred_length = self._rest_length
        self.elapsed = 0.0
        self.history: Optional[CableHistory] = CableHistory() if config.history else None
        self.handle: Optional[int] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def bodies(self):
        return self.anchor_a.body, self.anchor_b.body

    @property
    def point_indices(self):
        return self.anchor_a.point_index, self.anchor_b.point_index

    @property
    def rest_length(self) -> float:
        return self._rest_length

    def set_rest_length(self, value: float) -> None:
        """Set the rest length, bounded below by min_rest_length."""
        self._rest_length = max(float(value), self.config.min_rest_length)

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.anchor_b.position() - self.anchor_a.position()))

    @property
    def velocity(self) -> float:
        """Rate of change of the actual length."""
        d = self.anchor_b.position() - self.anchor_a.position()
        L = np.linalg.norm(d)
        if L <= 0.0:
            return 0.0
        return float(np.dot(self.anchor_b.velocity() - self.anchor_a.velocity(), d / L))

    @property
    def tension(self) -> float:
        stretch = self.length - self._rest_length
        if stretch <= 0.0:
            return 0.0
        t = self.config.stiffness * stretch + self.config.damping * self.velocity
        return float(min(max(t, 0.0), self.config.max_tension))

    # ------------------------------------------------------------------
    # World hooks
    # ------------------------------------------------------------------

    def apply_forces(self) -> float:
        """Push the current tension into both bodies; returns the tension."""
        pa = self.anchor_a.position()
        pb = self.anchor_b.position()
        d = pb - pa
        L = np.linalg.norm(d)
        t = self.tension
        if t > 0.0 and L > 0.0:
            f = t * d / L
            self.anchor_a.body.apply_force(f, pa)
            self.anchor_b.body.apply_force(-f, pb)
        return t

    def step(self, dt: float) -> None:
        """Per-step model hook: advance the cable clock and record history."""
        self.elapsed += dt
        if self.history is not None:
            self.history.time.append(self.elapsed)
            self.history.rest_length.append(self._rest_length)
            self.history.length.append(self.length)
            self.history.tension.append(self.tension)

    def __repr__(self):
        a, b = self.point_indices
        return (f"Cable({self.name}, points=({a}, {b}), rest={self._rest_length:.4g}, "
                f"length={self.length:.4g})")
