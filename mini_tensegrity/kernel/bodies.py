# mini_tensegrity/kernel/bodies.py
"""
RIGID BODIES: Compound Rods and Fixed Anchors
=============================================

PURPOSE:
--------
A RigidBody is one or more rod segments welded together. Rods that share a
structure point are compounded by the compiler into a single body, so a
tensegrity "hub" made of several struts moves as one piece.

MASS PROPERTIES:
----------------
Each segment is a solid cylinder of radius r and length L:

    m       = density * pi * r^2 * L
    I_axial = m * r^2 / 2
    I_perp  = m * (3 r^2 + L^2) / 12

about its own centre, with tensor

    I_seg = I_perp * (1 - u u^T) + I_axial * u u^T      (u = unit axis)

Segments are combined about the compound centre of mass with the parallel
axis theorem:

    I = sum( I_seg + m * (|d|^2 * 1 - d d^T) ),   d = c_seg - com

FRAMES:
-------
The body frame is the world frame at creation time translated to the centre
of mass. Local anchor coordinates are therefore world coordinates minus the
COM at build time. The orientation is held as a scipy Rotation.

A FixedAnchor stands in for a structure point that no rod covers: it never
moves and ignores forces.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from ..config import RodConfig


@dataclass(frozen=True, eq=False)
class RodSegment:
    """
    One rod of a compound body, in world coordinates at build time.

    Parameters:
    -----------
    pair_id : int
        Id of the structure pair that produced this segment
    i, j : int
        Structure point indices of the two ends
    start, end : np.ndarray
        Initial world coordinates of the ends
    config : RodConfig
        Physical parameters bound to the segment's tag
    tags : FrozenSet[str]
        Tags of the source pair
    """
    pair_id: int
    i: int
    j: int
    start: np.ndarray
    end: np.ndarray
    config: RodConfig
    tags: FrozenSet[str]

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def mass(self) -> float:
        return self.config.mass(self.length)

    @property
    def center(self) -> np.ndarray:
        return 0.5 * (self.start + self.end)

    def inertia_about_center(self) -> np.ndarray:
        L = self.length
        if L <= 0.0:
            raise ValueError(
                f"Rod from pair {self.pair_id} has zero length "
                f"(points {self.i} and {self.j} at the same location)"
            )
        u = (self.end - self.start) / L
        m = self.mass
        r = self.config.radius
        I_axial = 0.5 * m * r * r
        I_perp = m * (3.0 * r * r + L * L) / 12.0
        uu = np.outer(u, u)
        return I_perp * (np.eye(3) - uu) + I_axial * uu


class RigidBody:
    """
    A compound rigid body built from rod segments.

    The world integrates position, velocity, orientation and angular velocity.
    Forces and torques accumulate between steps through apply_force().
    """

    def __init__(self, segments: Sequence[RodSegment], name: Optional[str] = None):
        if not segments:
            raise ValueError("A rigid body needs at least one rod segment")
        self.segments: List[RodSegment] = list(segments)
        self.name = name or f"body[{','.join(str(s.pair_id) for s in self.segments)}]"

        masses = np.array([s.mass for s in self.segments], dtype=float)
        centers = np.vstack([s.center for s in self.segments])
        self.mass = float(masses.sum())
        if self.mass > 0.0:
            com = (masses[:, None] * centers).sum(axis=0) / self.mass
        else:
            com = centers.mean(axis=0)

        inertia = np.zeros((3, 3), dtype=float)
        for seg, m, c in zip(self.segments, masses, centers):
            d = c - com
            inertia += seg.inertia_about_center() + m * (np.dot(d, d) * np.eye(3) - np.outer(d, d))
        self.inertia_body = inertia

        self.position = com.copy()
        self.orientation = Rotation.identity()
        self.velocity = np.zeros(3)
        self.angular_velocity = np.zeros(3)
        self._force = np.zeros(3)
        self._torque = np.zeros(3)

        # Structure point index -> anchor in the body frame
        self.anchors = {}
        for seg in self.segments:
            self.anchors.setdefault(seg.i, seg.start - com)
            self.anchors.setdefault(seg.j, seg.end - com)

        self.handle: Optional[int] = None

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    @property
    def point_indices(self) -> List[int]:
        return list(self.anchors.keys())

    @property
    def tags(self) -> FrozenSet[str]:
        out = set()
        for seg in self.segments:
            out |= seg.tags
        return frozenset(out)

    @property
    def pair_ids(self) -> List[int]:
        return [s.pair_id for s in self.segments]

    def world_point(self, local: Sequence[float]) -> np.ndarray:
        return self.orientation.apply(np.asarray(local, dtype=float)) + self.position

    def local_point(self, world: Sequence[float]) -> np.ndarray:
        return self.orientation.inv().apply(np.asarray(world, dtype=float) - self.position)

    def point_velocity(self, local: Sequence[float]) -> np.ndarray:
        r = self.orientation.apply(np.asarray(local, dtype=float))
        return self.velocity + np.cross(self.angular_velocity, r)

    def anchor_position(self, point_index: int) -> np.ndarray:
        return self.world_point(self.anchors[point_index])

    def segment_endpoints(self) -> List[np.ndarray]:
        """Current world coordinates of every segment, as (2, 3) arrays."""
        out = []
        for seg in self.segments:
            out.append(np.vstack([
                self.world_point(self.anchors[seg.i]),
                self.world_point(self.anchors[seg.j]),
            ]))
        return out

    def inertia_world(self) -> np.ndarray:
        R = self.orientation.as_matrix()
        return R @ self.inertia_body @ R.T

    # ------------------------------------------------------------------
    # Dynamics
    # ------------------------------------------------------------------

    def apply_force(self, force: Sequence[float], at: Sequence[float]) -> None:
        """Accumulate a world-frame force applied at a world-frame point."""
        f = np.asarray(force, dtype=float)
        self._force += f
        self._torque += np.cross(np.asarray(at, dtype=float) - self.position, f)

    def clear_forces(self) -> None:
        self._force[:] = 0.0
        self._torque[:] = 0.0

    def integrate(
        self,
        dt: float,
        gravity: np.ndarray,
        linear_damping: float = 0.0,
        angular_damping: float = 0.0,
    ) -> None:
        """
        Semi-implicit Euler update: velocities first, then pose.
        """
        acc = self._force / self.mass + gravity
        self.velocity = (self.velocity + acc * dt) * max(0.0, 1.0 - linear_damping * dt)

        I_w = self.inertia_world()
        w = self.angular_velocity
        gyro = np.cross(w, I_w @ w)
        alpha = np.linalg.solve(I_w, self._torque - gyro)
        self.angular_velocity = (w + alpha * dt) * max(0.0, 1.0 - angular_damping * dt)

        self.position = self.position + self.velocity * dt
        self.orientation = Rotation.from_rotvec(self.angular_velocity * dt) * self.orientation
        self.clear_forces()

    def kinetic_energy(self) -> float:
        w = self.angular_velocity
        return 0.5 * self.mass * float(self.velocity @ self.velocity) + 0.5 * float(w @ self.inertia_world() @ w)

    def __repr__(self):
        return f"RigidBody({self.name}, mass={self.mass:.4g}, points={self.point_indices})"


class FixedAnchor:
    """
    A static world point for a structure point that no rod covers.

    Cables attached to it pull against the world.
    """

    mass = float("inf")

    def __init__(self, point_index: int, position: Sequence[float]):
        self.point_index = point_index
        self.position = np.asarray(position, dtype=float).copy()
        self.anchors = {point_index: np.zeros(3)}

    def world_point(self, local: Sequence[float]) -> np.ndarray:
        return self.position + np.asarray(local, dtype=float)

    def point_velocity(self, local: Sequence[float]) -> np.ndarray:
        return np.zeros(3)

    def apply_force(self, force, at) -> None:
        pass

    def __repr__(self):
        return f"FixedAnchor(point={self.point_index}, position={self.position.tolist()})"
