# mini_tensegrity/tree.py
"""
MODEL TREE: Ownership of Compiled Entities
==========================================

The tree owns every RigidBody and Cable the compiler created, plus any child
sub-trees. Iteration is depth-first in insertion order, so two compilations
of the same inputs walk their entities identically.

RELEASE:
--------
release(world) unregisters every owned entity from the world exactly once:
cables first (newest first), then bodies (newest first), then children.
Each entity is marked as soon as it is released, so if a removal fails the
exception propagates and a later release() call resumes with the entities
that are still live.
"""

import logging
from typing import Iterator, List, Optional

from .kernel.bodies import RigidBody
from .kernel.cable import Cable

logger = logging.getLogger(__name__)


class ModelTree:
    """A named node holding entities and child trees."""

    def __init__(self, name: str = "root"):
        self.name = name
        self._entities: List[object] = []
        self._children: List["ModelTree"] = []
        self._released_ids = set()

    def add_entity(self, entity) -> None:
        if any(e is entity for e in self._entities):
            raise ValueError(f"{entity!r} is already owned by tree {self.name!r}")
        self._entities.append(entity)

    def add_child(self, child: "ModelTree") -> "ModelTree":
        if child is self:
            raise ValueError("A model tree cannot be its own child")
        self._children.append(child)
        return child

    @property
    def entities(self) -> List[object]:
        return list(self._entities)

    @property
    def children(self) -> List["ModelTree"]:
        return list(self._children)

    def descendants(self) -> Iterator[object]:
        """Own entities, then each child's descendants, depth-first."""
        for e in self._entities:
            yield e
        for child in self._children:
            yield from child.descendants()

    @property
    def rigid_bodies(self) -> List[RigidBody]:
        return [e for e in self.descendants() if isinstance(e, RigidBody)]

    @property
    def actuators(self) -> List[Cable]:
        return [e for e in self.descendants() if isinstance(e, Cable)]

    def find(self, tag: str) -> List[object]:
        """Entities whose source pair(s) carried `tag`."""
        return [e for e in self.descendants() if tag in e.tags]

    def __len__(self):
        return sum(1 for _ in self.descendants())

    # ------------------------------------------------------------------
    # Release
    # ------------------------------------------------------------------

    def is_released(self, entity) -> bool:
        return id(entity) in self._released_ids

    @property
    def released(self) -> bool:
        return (
            all(id(e) in self._released_ids for e in self._entities)
            and all(c.released for c in self._children)
        )

    def release(self, world) -> int:
        """
        Unregister owned entities from `world`; returns how many were released
        by this call.
        """
        order = (
            [e for e in reversed(self._entities) if isinstance(e, Cable)]
            + [e for e in reversed(self._entities) if not isinstance(e, Cable)]
        )
        count = 0
        for entity in order:
            if id(entity) in self._released_ids:
                continue
            if world is not None and world.contains(entity):
                world.remove(entity)
            self._released_ids.add(id(entity))
            count += 1
        for child in self._children:
            count += child.release(world)
        if count:
            logger.debug("tree %r released %d entities", self.name, count)
        return count

    def __repr__(self):
        return (f"ModelTree({self.name!r}, bodies={len(self.rigid_bodies)}, "
                f"actuators={len(self.actuators)}, children={len(self._children)})")
