# File: tests/test_compiler.py
"""
STRUCTURE COMPILER TESTS
========================

The compiler must:
1. Build exactly one rigid body per group of rods sharing point indices
2. Attach every cable to the body owning each endpoint (or a fixed anchor)
3. Register everything in pair order, deterministically
4. Either build everything or leave the world untouched
"""

import numpy as np
import pytest

from mini_tensegrity import (
    CableConfig,
    FixedAnchor,
    RigidBody,
    RodConfig,
    Structure,
    World,
    WorldConfig,
)
from mini_tensegrity.build import BuildSpec, CableBuilder, RodBuilder, compile_structure, group_rods
from mini_tensegrity.errors import (
    AmbiguousTagError,
    ConfigurationError,
    ResourceError,
    UnresolvedTagError,
)
from mini_tensegrity.generative import default_build_spec, planar_two_bar


ZERO_G = WorldConfig(gravity=(0.0, 0.0, 0.0))


def make_planar():
    """
    4-node planar structure: 2 rods (0-2, 1-3) and 4 cables around the edge.
    """
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(40.0, 0.0, 0.0)
    s.add_point(40.0, 0.0, 20.0)
    s.add_point(0.0, 0.0, 20.0)
    s.add_pair(0, 2, "rod")
    s.add_pair(1, 3, "rod")
    s.add_pair(0, 1, "muscle")
    s.add_pair(1, 2, "muscle")
    s.add_pair(2, 3, "muscle")
    s.add_pair(3, 0, "muscle")
    return s


def make_spec(density=0.2, stiffness=1000.0):
    return default_build_spec(
        RodConfig(radius=0.31, density=density),
        CableConfig(stiffness=stiffness, damping=10.0),
    )


def test_planar_scenario_counts_and_order():
    """
    WHAT IS THIS TEST?
    ==================
    The reference scenario: 2 rods + 4 cables, density 0.2, stiffness 1000.
    Expect exactly 2 rigid bodies and 4 actuators, in pair insertion order.
    """
    world = World(ZERO_G)
    tree = compile_structure(make_planar(), make_spec(), world)

    assert len(tree.rigid_bodies) == 2
    assert len(tree.actuators) == 4
    assert world.n_entities == 6

    assert [b.pair_ids for b in tree.rigid_bodies] == [[0], [1]]
    assert [c.pair_id for c in tree.actuators] == [2, 3, 4, 5]
    assert [c.point_indices for c in tree.actuators] == [(0, 1), (1, 2), (2, 3), (3, 0)]
    # Bodies come first in the tree, then cables
    assert tree.entities[:2] == tree.rigid_bodies
    print("✓ Planar structure compiles to 2 bodies and 4 actuators")


def test_generated_planar_matches_hand_built():
    world = World(ZERO_G)
    tree = compile_structure(planar_two_bar(), make_spec(), world)
    assert len(tree.rigid_bodies) == 2
    assert len(tree.actuators) == 4


def test_compilation_is_deterministic():
    structure = make_planar()
    spec = make_spec()

    tree_a = compile_structure(structure, spec, World(ZERO_G))
    tree_b = compile_structure(structure, spec, World(ZERO_G))

    assert len(tree_a) == len(tree_b)
    for a, b in zip(tree_a.descendants(), tree_b.descendants()):
        assert type(a) is type(b)
        if isinstance(a, RigidBody):
            assert a.pair_ids == b.pair_ids
            np.testing.assert_array_equal(a.position, b.position)
            np.testing.assert_array_equal(a.inertia_body, b.inertia_body)
        else:
            assert a.pair_id == b.pair_id
            assert a.point_indices == b.point_indices
            assert a.rest_length == b.rest_length


def test_unresolved_tag_attaches_nothing():
    s = make_planar()
    s.add_pair(0, 2, "spring")
    world = World(ZERO_G)

    with pytest.raises(UnresolvedTagError):
        compile_structure(s, make_spec(), world)
    assert world.n_entities == 0


def test_ambiguous_tag_fails_before_any_entity():
    s = make_planar()
    s.add_pair(1, 3, "rod muscle")
    world = World(ZERO_G)

    with pytest.raises(AmbiguousTagError):
        compile_structure(s, make_spec(), world)
    assert world.n_entities == 0


def test_shared_point_resolves_to_same_body_instance():
    """
    Two cables meeting at a rod end must pull on the SAME body object,
    not two equal copies.
    """
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(10.0, 0.0, 0.0)
    s.add_point(10.0, 5.0, 0.0)
    s.add_point(10.0, -5.0, 0.0)
    s.add_pair(0, 1, "rod")
    s.add_pair(1, 2, "muscle")
    s.add_pair(1, 3, "muscle")

    tree = compile_structure(s, make_spec(), World(ZERO_G))
    (body,) = tree.rigid_bodies
    c1, c2 = tree.actuators
    assert c1.anchor_a.body is body
    assert c2.anchor_a.body is body
    assert c1.anchor_a.body is c2.anchor_a.body


def test_rods_sharing_a_point_become_one_body():
    s = Structure()
    for x in (0.0, 10.0, 20.0):
        s.add_point(x, 0.0, 0.0)
    s.add_point(0.0, 5.0, 0.0)
    s.add_pair(0, 1, "rod")
    s.add_pair(1, 2, "rod")
    s.add_pair(2, 3, "muscle")

    tree = compile_structure(s, make_spec(), World(ZERO_G))
    (body,) = tree.rigid_bodies
    assert body.pair_ids == [0, 1]
    assert sorted(body.point_indices) == [0, 1, 2]


def test_colocated_points_stay_distinct_bodies():
    """De-duplication is by point index, never by coordinates."""
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(1.0, 0.0, 0.0)
    s.add_point(1.0, 0.0, 0.0)  # same place as point 1
    s.add_point(2.0, 0.0, 0.0)
    s.add_pair(0, 1, "rod")
    s.add_pair(2, 3, "rod")

    tree = compile_structure(s, make_spec(), World(ZERO_G))
    assert len(tree.rigid_bodies) == 2
    b0, b1 = tree.rigid_bodies
    assert b0 is not b1


def test_cables_before_rods_in_pair_order_still_attach_to_bodies():
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(10.0, 0.0, 0.0)
    s.add_point(0.0, 5.0, 0.0)
    s.add_point(10.0, 5.0, 0.0)
    s.add_pair(0, 2, "muscle")
    s.add_pair(1, 3, "muscle")
    s.add_pair(0, 1, "rod")
    s.add_pair(2, 3, "rod")

    tree = compile_structure(s, make_spec(), World(ZERO_G))
    assert len(tree.rigid_bodies) == 2
    for cable in tree.actuators:
        assert all(isinstance(b, RigidBody) for b in cable.bodies)


def test_uncovered_points_become_fixed_anchors():
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(10.0, 0.0, 0.0)
    s.add_point(10.0, 10.0, 0.0)
    s.add_point(0.0, 10.0, 0.0)
    s.add_pair(0, 1, "rod")
    s.add_pair(1, 2, "muscle")
    s.add_pair(0, 2, "muscle")
    s.add_pair(3, 2, "muscle")

    tree = compile_structure(s, make_spec(), World(ZERO_G))
    c12, c02, c32 = tree.actuators
    assert isinstance(c12.anchor_b.body, FixedAnchor)
    # One anchor object per uncovered point
    assert c12.anchor_b.body is c02.anchor_b.body
    np.testing.assert_allclose(c12.anchor_b.position(), [10.0, 10.0, 0.0])
    # A cable between two uncovered points is allowed
    assert all(isinstance(b, FixedAnchor) for b in c32.bodies)


def test_anchor_positions_match_structure_points():
    s = make_planar()
    s.move((0.0, 10.0, 0.0))
    tree = compile_structure(s, make_spec(), World(ZERO_G))
    for cable in tree.actuators:
        a, b = cable.point_indices
        np.testing.assert_allclose(cable.anchor_a.position(), s.point(a), atol=1e-12)
        np.testing.assert_allclose(cable.anchor_b.position(), s.point(b), atol=1e-12)


def test_world_allocation_failure_rolls_back():
    """
    If the world refuses an entity half-way through, nothing stays registered.
    """
    world = World(WorldConfig(gravity=(0.0, 0.0, 0.0), max_entities=3))
    with pytest.raises(ResourceError):
        compile_structure(make_planar(), make_spec(), world)
    assert world.n_entities == 0


def test_massless_rod_is_a_resource_error():
    world = World(ZERO_G)
    with pytest.raises(ResourceError):
        compile_structure(make_planar(), make_spec(density=0.0), world)
    assert world.n_entities == 0


def test_zero_length_pairs_rejected_before_building():
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(0.0, 0.0, 0.0)
    s.add_pair(0, 1, "rod")
    world = World(ZERO_G)
    with pytest.raises(ConfigurationError):
        compile_structure(s, make_spec(), world)
    assert world.n_entities == 0


def test_find_by_tag():
    s = make_planar()
    s.add_point(20.0, 5.0, 10.0)
    s.add_pair(4, 0, "muscle top")
    tree = compile_structure(s, make_spec(), World(ZERO_G))
    assert len(tree.find("rod")) == 2
    assert len(tree.find("muscle")) == 5
    assert [c.pair_id for c in tree.find("top")] == [6]


def test_group_rods_orders_groups_by_first_pair():
    s = Structure()
    for k in range(6):
        s.add_point(float(k), 0.0, 0.0)
    s.add_pair(4, 5, "rod")
    s.add_pair(0, 1, "rod")
    s.add_pair(3, 4, "rod")
    groups = group_rods(s.pairs)
    assert [[p.id for p in g] for g in groups] == [[0, 2], [1]]


def test_spec_is_frozen_by_compilation():
    spec = make_spec()
    compile_structure(make_planar(), spec, World(ZERO_G))
    with pytest.raises(ConfigurationError):
        spec.add_builder("strut", RodBuilder())


def test_custom_tags_and_builders():
    spec = BuildSpec()
    spec.add_builder("strut", RodBuilder(RodConfig(radius=0.1, density=1.0)))
    spec.add_builder("string", CableBuilder(CableConfig(stiffness=50.0, pretension=5.0)))

    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(0.0, 4.0, 0.0)
    s.add_point(3.0, 0.0, 0.0)
    s.add_pair(0, 1, "strut")
    s.add_pair(1, 2, "string")

    tree = compile_structure(s, spec, World(ZERO_G))
    (cable,) = tree.actuators
    assert cable.start_length == pytest.approx(5.0)
    assert cable.rest_length == pytest.approx(5.0 - 5.0 / 50.0)
    assert cable.tension == pytest.approx(5.0)
