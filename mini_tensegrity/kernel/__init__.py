# mini_tensegrity/kernel - Rigid bodies, cables and the world they live in
"""
KERNEL: THE PHYSICS THE BUILD PIPELINE TARGETS
==============================================

The compiler only needs a world that can register bodies and actuators and
step them. This package provides one:

    RigidBody     compound of rod segments (mass, inertia, pose, velocity)
    FixedAnchor   static point for structure points no rod covers
    Cable         tension-only spring-damper with a motorised rest length
    World         registry + semi-implicit Euler integrator

Nothing here knows about tags, builders or observers.
"""

from .bodies import RigidBody, RodSegment, FixedAnchor
from .cable import Cable, Attachment, CableHistory
from .world import World, WorldConfig

__all__ = [
    'RigidBody', 'RodSegment', 'FixedAnchor',
    'Cable', 'Attachment', 'CableHistory',
    'World', 'WorldConfig',
]
