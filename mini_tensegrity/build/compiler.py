# mini_tensegrity/build/compiler.py
"""
STRUCTURE COMPILER: Structure + BuildSpec -> Live Entities
==========================================================

PURPOSE:
--------
compile_structure() walks a Structure, resolves every pair's builder through
the BuildSpec, creates the rods and cables, registers them with the world and
collects them in a ModelTree.

PHASES:
-------
    0. Resolve   every pair gets exactly one builder; the first tag error
                 aborts before anything is created
    1. Validate  zero-length rods and cables are rejected
    2. Rigid     rod pairs are grouped by shared point index (union-find);
                 each group becomes one compound RigidBody
    3. Actuator  cable ends resolve to the RigidBody owning that point, or to
                 a FixedAnchor if no rod covers it
    4. Register  bodies (ordered by each group's first pair), then cables (in
                 pair order), into the world and the tree

Rod grouping is keyed on point INDEX. Two distinct points at the same
coordinates stay on distinct bodies.

ALL OR NOTHING:
---------------
If anything fails after the first world registration, every entity this call
registered is removed again before the exception propagates. Errors that are
not already TensegrityErrors are re-raised as ResourceError.
"""

import logging
from typing import Dict, List, Tuple

import numpy as np

from ..errors import ConfigurationError, ResourceError, TensegrityError
from ..geometry.structure import Pair, Structure
from ..kernel.bodies import FixedAnchor, RigidBody
from ..kernel.cable import Attachment
from ..tree import ModelTree
from .builders import Builder, BuilderKind
from .spec import BuildSpec

logger = logging.getLogger(__name__)


def resolve_builders(structure: Structure, spec: BuildSpec) -> List[Tuple[Pair, Builder]]:
    """Resolve every pair in insertion order; raises on the first bad pair."""
    return [(pair, spec.get_builder(pair)) for pair in structure.pairs]


def group_rods(rod_pairs: List[Pair]) -> List[List[Pair]]:
    """
    Group rod pairs that share point indices.

    Groups are returned in order of their first pair; pairs keep insertion
    order inside a group.

    >>> from mini_tensegrity.geometry.structure import Pair
    >>> a = Pair(0, 0, 1, frozenset({'rod'}))
    >>> b = Pair(1, 2, 3, frozenset({'rod'}))
    >>> c = Pair(2, 1, 2, frozenset({'rod'}))
    >>> [[p.id for p in g] for g in group_rods([a, b, c])]
    [[0, 1, 2]]
    """
    parent: Dict[int, int] = {}

    def find(x: int) -> int:
        parent.setdefault(x, x)
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(a: int, b: int) -> None:
        ra, rb = find(a), find(b)
        if ra != rb:
            parent[max(ra, rb)] = min(ra, rb)

    for pair in rod_pairs:
        union(pair.i, pair.j)

    groups: Dict[int, List[Pair]] = {}
    order: List[int] = []
    for pair in rod_pairs:
        root = find(pair.i)
        if root not in groups:
            groups[root] = []
            order.append(root)
        groups[root].append(pair)
    return [groups[r] for r in order]


def _validate_lengths(points: np.ndarray, resolved: List[Tuple[Pair, Builder]]) -> None:
    for pair, builder in resolved:
        if np.linalg.norm(points[pair.j] - points[pair.i]) <= 0.0:
            kind = "rod" if builder.kind is BuilderKind.RIGID else "cable"
            raise ConfigurationError(
                f"Pair {pair.id} ({pair.i}-{pair.j}) would build a zero-length {kind}"
            )


def compile_structure(
    structure: Structure,
    spec: BuildSpec,
    world,
    name: str = "root",
) -> ModelTree:
    """
    Build every pair of `structure` into `world` and return the owning tree.

    Parameters:
    -----------
    structure : Structure
        Points and tagged pairs
    spec : BuildSpec
        Tag -> builder mapping; frozen by this call
    world : World
        Anything exposing add_rigid_body / add_actuator / remove / contains
    name : str
        Name of the returned root tree

    Returns:
    --------
    ModelTree
        Bodies first (one per rod group), then cables in pair order

    Raises:
    -------
    UnresolvedTagError, AmbiguousTagError
        Before any entity is created
    ConfigurationError
        Zero-length rod or cable, before any entity is created
    ResourceError
        If the world refuses an entity; everything registered so far is removed
    """
    spec.freeze()
    resolved = resolve_builders(structure, spec)
    points = structure.points
    _validate_lengths(points, resolved)

    rod_builders = {p.id: b for p, b in resolved if b.kind is BuilderKind.RIGID}
    rod_pairs = [p for p, b in resolved if b.kind is BuilderKind.RIGID]
    cable_pairs = [(p, b) for p, b in resolved if b.kind is BuilderKind.ACTUATOR]

    tree = ModelTree(name)
    registered = []
    try:
        owner: Dict[int, RigidBody] = {}
        for group in group_rods(rod_pairs):
            segments = [
                rod_builders[p.id].build(p, points[p.i], points[p.j]) for p in group
            ]
            body = RigidBody(segments)
            world.add_rigid_body(body)
            registered.append(body)
            tree.add_entity(body)
            for idx in body.point_indices:
                owner[idx] = body

        fixed: Dict[int, FixedAnchor] = {}

        def attachment(idx: int) -> Attachment:
            if idx in owner:
                body = owner[idx]
                return Attachment(body=body, local=body.anchors[idx].copy(), point_index=idx)
            if idx not in fixed:
                fixed[idx] = FixedAnchor(idx, points[idx])
            return Attachment(body=fixed[idx], local=np.zeros(3), point_index=idx)

        for pair, builder in cable_pairs:
            cable = builder.build(pair, attachment(pair.i), attachment(pair.j))
            world.add_actuator(cable)
            registered.append(cable)
            tree.add_entity(cable)
    except Exception as exc:
        logger.warning(
            "compilation of %r failed after %d registrations, rolling back: %s",
            name, len(registered), exc,
        )
        for entity in reversed(registered):
            if world.contains(entity):
                world.remove(entity)
        if isinstance(exc, TensegrityError):
            raise
        raise ResourceError(f"Failed to build {name!r}: {exc}") from exc

    logger.info(
        "compiled %r: %d rigid bodies, %d actuators, %d fixed anchors",
        name, len(tree.rigid_bodies), len(tree.actuators), len(fixed),
    )
    return tree
