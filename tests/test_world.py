# File: tests/test_world.py
"""
Test the rigid-body world the compiler registers into: integration,
cable forces and the registry's error handling.
"""

import numpy as np
import pytest

from mini_tensegrity import CableConfig, FixedAnchor, RodConfig, World, WorldConfig
from mini_tensegrity.errors import PreconditionError, ResourceError
from mini_tensegrity.kernel import Attachment, Cable, RigidBody, RodSegment


def make_rod(start, end, pair_id=0, i=0, j=1, config=None):
    return RodSegment(
        pair_id=pair_id,
        i=i,
        j=j,
        start=np.asarray(start, dtype=float),
        end=np.asarray(end, dtype=float),
        config=config or RodConfig(radius=0.1, density=1.0),
        tags=frozenset({"rod"}),
    )


def make_body(start, end, pair_id=0, i=0, j=1, config=None):
    return RigidBody([make_rod(start, end, pair_id, i, j, config)])


def attach(body, idx):
    return Attachment(body, body.anchors[idx].copy(), idx)


def test_free_fall_matches_semi_implicit_euler():
    """
    WHAT IS THIS TEST?
    ==================
    One body under g = -10 for 10 steps of 0.1 s. Semi-implicit Euler
    updates velocity first, so the drop is 0.1 * 0.1 * 10 * (1 + ... + 10) = 5.5
    (the exact answer, 5.0, is approached as dt -> 0).
    """
    world = World(WorldConfig(gravity=(0.0, -10.0, 0.0)))
    body = make_body((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    world.add_rigid_body(body)
    y0 = body.position[1]

    for _ in range(10):
        world.step(0.1)

    assert body.position[1] - y0 == pytest.approx(-5.5)
    assert body.velocity[1] == pytest.approx(-10.0)
    assert world.time == pytest.approx(1.0)
    assert world.n_steps == 10
    print("✓ Free fall displacement = -5.5")


def test_cable_conserves_momentum_in_zero_gravity():
    world = World(WorldConfig(gravity=(0.0, 0.0, 0.0)))
    heavy = RodConfig(radius=0.1, density=100.0)
    a = make_body((0.0, 0.0, 0.0), (0.0, 2.0, 0.0), pair_id=0, i=0, j=1, config=heavy)
    b = make_body((5.0, 0.0, 0.0), (5.0, 2.0, 1.0), pair_id=1, i=2, j=3, config=heavy)
    world.add_rigid_body(a)
    world.add_rigid_body(b)
    cable = Cable(attach(a, 1), attach(b, 2), CableConfig(stiffness=100.0, pretension=50.0))
    world.add_actuator(cable)
    start = cable.length

    for _ in range(10):
        world.step(0.001)

    momentum = a.mass * a.velocity + b.mass * b.velocity
    np.testing.assert_allclose(momentum, np.zeros(3), atol=1e-9)
    assert cable.length < start
    # Off-centre pull makes both bodies spin
    assert np.linalg.norm(a.angular_velocity) > 0.0
    assert np.linalg.norm(b.angular_velocity) > 0.0


def test_slack_cable_transmits_nothing():
    world = World(WorldConfig(gravity=(0.0, 0.0, 0.0)))
    body = make_body((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    world.add_rigid_body(body)
    anchor = FixedAnchor(5, (3.0, 0.0, 0.0))
    cable = Cable(attach(body, 1), Attachment(anchor, np.zeros(3), 5), CableConfig())
    cable.set_rest_length(5.0)
    world.add_actuator(cable)

    assert cable.tension == 0.0
    world.step(0.01)
    np.testing.assert_allclose(body.velocity, np.zeros(3))


def test_compound_body_inertia_uses_parallel_axis():
    cfg = RodConfig(radius=0.1, density=1.0)
    body = RigidBody([
        make_rod((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), 0, 0, 1, cfg),
        make_rod((2.0, 0.0, 0.0), (2.0, 2.0, 0.0), 1, 1, 2, cfg),
    ])
    m = cfg.mass(2.0)
    assert body.mass == pytest.approx(2 * m)
    np.testing.assert_allclose(body.position, [1.5, 0.5, 0.0])
    # Symmetric L shape: equal inertia about x and y
    assert body.inertia_body[0, 0] == pytest.approx(body.inertia_body[1, 1])
    np.testing.assert_allclose(body.anchor_position(2), [2.0, 2.0, 0.0])


def test_registry_errors():
    world = World()
    body = make_body((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    world.add_rigid_body(body)
    with pytest.raises(ResourceError):
        world.add_rigid_body(body)

    stranger = make_body((0.0, 1.0, 0.0), (1.0, 1.0, 0.0), pair_id=1, i=2, j=3)
    with pytest.raises(ResourceError):
        world.remove(stranger)

    cable = Cable(attach(body, 1), attach(stranger, 2), CableConfig())
    with pytest.raises(ResourceError):
        world.add_actuator(cable)

    massless = RigidBody([make_rod((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), config=RodConfig(density=0.0))])
    with pytest.raises(ResourceError):
        world.add_rigid_body(massless)

    assert world.n_entities == 1


def test_capacity_limit():
    world = World(WorldConfig(max_entities=1))
    world.add_rigid_body(make_body((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
    with pytest.raises(ResourceError):
        world.add_rigid_body(make_body((0.0, 1.0, 0.0), (1.0, 1.0, 0.0)))


def test_remove_clears_handle():
    world = World()
    body = make_body((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    handle = world.add_rigid_body(body)
    assert body.handle == handle
    world.remove(body)
    assert body.handle is None
    assert not world.contains(body)


@pytest.mark.parametrize("dt", [0.0, -0.1])
def test_world_step_rejects_bad_dt(dt):
    world = World()
    with pytest.raises(PreconditionError):
        world.step(dt)
    assert world.n_steps == 0
