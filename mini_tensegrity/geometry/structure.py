# mini_tensegrity/geometry/structure.py
"""
STRUCTURE: The Abstract Geometry Graph
======================================

PURPOSE:
--------
A Structure is the purely descriptive form of a tensegrity:
- Points: 3D coordinates, identified by insertion index
- Pairs: two point indices plus a set of string tags ("rod", "muscle", ...)

Nothing here is physical. A Structure only becomes rods and cables when it
is handed to the compiler together with a BuildSpec that says which builder
handles which tag.

CONVENTIONS:
------------
- Point indices are 0-based and stable: the first add_point() returns 0.
- Tags are case-sensitive. A tag string containing spaces is split, so
  "r1 rod" carries both "r1" and "rod".
- move() and rotate() act on every point currently in the structure and must
  be applied before compilation.

USAGE:
------
    s = Structure()
    a = s.add_point(0, 0, 0)
    b = s.add_point(0, 10, 0)
    s.add_pair(a, b, "rod")
    s.move((0, 5, 0))
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Union

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import PointIndexError


TagsLike = Union[str, Iterable[str]]


def parse_tags(tags: TagsLike) -> FrozenSet[str]:
    """
    Normalise a tag string or list into a frozenset of tag strings.

    >>> sorted(parse_tags("r1 rod"))
    ['r1', 'rod']
    >>> sorted(parse_tags(["muscle", "left"]))
    ['left', 'muscle']
    """
    if isinstance(tags, str):
        items = tags.split()
    else:
        items = []
        for t in tags:
            items.extend(str(t).split())
    return frozenset(items)


@dataclass(frozen=True)
class Pair:
    """
    A tagged connection between two points of a Structure.

    Parameters:
    -----------
    id : int
        Insertion index of the pair within its structure
    i : int
        Index of the first point
    j : int
        Index of the second point
    tags : FrozenSet[str]
        Tags used by the BuildSpec to pick a builder

    The pair is unordered in meaning; i/j only fix which end is "from" and
    which is "to" for anchor bookkeeping.
    """
    id: int
    i: int
    j: int
    tags: FrozenSet[str]

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def other(self, index: int) -> int:
        """Return the opposite endpoint of `index`."""
        if index == self.i:
            return self.j
        if index == self.j:
            return self.i
        raise ValueError(f"Point {index} is not an endpoint of pair {self.id}")


class Structure:
    """
    Ordered points and tagged pairs describing one tensegrity.

    Invariant: every pair references valid point indices of this structure.
    """

    def __init__(self):
        self._points: List[np.ndarray] = []
        self._pairs: List[Pair] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_point(self, x: float, y: float, z: float) -> int:
        """Append a point and return its index."""
        p = np.array([x, y, z], dtype=float)
        if not np.all(np.isfinite(p)):
            raise ValueError(f"Point coordinates must be finite, got ({x}, {y}, {z})")
        self._points.append(p)
        return len(self._points) - 1

    def add_pair(self, i: int, j: int, tags: TagsLike) -> Pair:
        """
        Connect points i and j with the given tags.

        Raises:
        -------
        PointIndexError
            If either index is out of range, or i == j. The structure is
            left unchanged.
        ValueError
            If no tag is given.
        """
        n = len(self._points)
        for idx in (i, j):
            if (isinstance(idx, (bool, np.bool_))
                    or not isinstance(idx, (int, np.integer))
                    or not 0 <= idx < n):
                raise PointIndexError(
                    f"Point index {idx} out of range for structure with {n} points"
                )
        if i == j:
            raise PointIndexError(f"Pair endpoints must differ, got ({i}, {j})")
        tag_set = parse_tags(tags)
        if not tag_set:
            raise ValueError("A pair needs at least one tag")
        pair = Pair(id=len(self._pairs), i=int(i), j=int(j), tags=tag_set)
        self._pairs.append(pair)
        return pair

    # ------------------------------------------------------------------
    # Whole-graph transforms
    # ------------------------------------------------------------------

    def move(self, offset: Sequence[float]) -> None:
        """Translate every point by offset."""
        d = np.asarray(offset, dtype=float).reshape(3)
        self._points = [p + d for p in self._points]

    def rotate(self, fixed_point: Sequence[float], axis: Sequence[float], angle: float) -> None:
        """
        Rotate every point by `angle` radians about the line through
        `fixed_point` with direction `axis` (right-hand rule).
        """
        axis = np.asarray(axis, dtype=float).reshape(3)
        norm = np.linalg.norm(axis)
        if norm <= 0.0:
            raise ValueError("Rotation axis must be non-zero")
        rot = Rotation.from_rotvec(axis / norm * float(angle))
        c = np.asarray(fixed_point, dtype=float).reshape(3)
        if not self._points:
            return
        rotated = rot.apply(np.vstack(self._points) - c) + c
        self._points = [row.copy() for row in rotated]

    def merge(self, other: "Structure", offset: Sequence[float] = (0.0, 0.0, 0.0)) -> int:
        """
        Append another structure's points (shifted by offset) and pairs.

        Returns the index of other's point 0 inside this structure, so callers
        can address merged points as base + local_index.
        """
        base = len(self._points)
        d = np.asarray(offset, dtype=float).reshape(3)
        for p in other._points:
            self._points.append(p + d)
        for pair in other._pairs:
            self._pairs.append(
                Pair(id=len(self._pairs), i=pair.i + base, j=pair.j + base, tags=pair.tags)
            )
        return base

    def copy(self) -> "Structure":
        s = Structure()
        s.merge(self)
        return s

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def n_points(self) -> int:
        return len(self._points)

    @property
    def points(self) -> np.ndarray:
        """(n_points, 3) copy of the coordinates."""
        if not self._points:
            return np.zeros((0, 3), dtype=float)
        return np.vstack(self._points)

    @property
    def pairs(self) -> List[Pair]:
        return list(self._pairs)

    def point(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self._points):
            raise PointIndexError(f"Point index {index} out of range")
        return self._points[index].copy()

    def pairs_with_tag(self, tag: str) -> List[Pair]:
        return [p for p in self._pairs if tag in p.tags]

    def __repr__(self):
        return f"Structure(n_points={self.n_points}, n_pairs={len(self._pairs)})"
