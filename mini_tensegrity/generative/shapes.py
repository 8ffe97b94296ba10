# mini_tensegrity/generative/shapes.py
"""
STRUCTURE GENERATORS: Classic Tensegrity Topologies
===================================================

PURPOSE:
--------
Generate ready-to-compile Structures for the usual test subjects:

- planar_two_bar: 4 points in the xz-plane, 2 crossing rods, 4 perimeter cables
- prism:          3-strut triangular prism, 3 rods, 9 cables
- six_bar:        12-point icosahedral "T6", 6 rods, 24 cables

Each generator takes a params dataclass (with defaults taken from physical
prototypes) and returns a Structure. default_build_spec() gives the matching
"rod"/"muscle" BuildSpec.

The generators only describe geometry. Lift the result off the ground with
Structure.move() and orient it with Structure.rotate() before compiling.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..build.builders import CableBuilder, RodBuilder
from ..build.spec import BuildSpec
from ..config import CableConfig, RodConfig
from ..geometry.structure import Structure


ROD_TAG = "rod"
CABLE_TAG = "muscle"


def default_build_spec(
    rod_config: Optional[RodConfig] = None,
    cable_config: Optional[CableConfig] = None,
    rod_tag: str = ROD_TAG,
    cable_tag: str = CABLE_TAG,
) -> BuildSpec:
    """BuildSpec with one rod builder and one cable builder."""
    spec = BuildSpec()
    spec.add_builder(rod_tag, RodBuilder(rod_config or RodConfig()))
    spec.add_builder(cable_tag, CableBuilder(cable_config or CableConfig()))
    return spec


# =============================================================================
# PLANAR TWO-BAR
# =============================================================================

@dataclass
class PlanarParams:
    """
    Planar two-bar tensegrity.

    length : float
        Extent along x (length)
    width : float
        Extent along z (length)
    lift : float
        Distance the structure is moved up (+y) after generation
    """
    length: float = 40.0
    width: float = 20.0
    lift: float = 10.0
    rod_config: RodConfig = field(default_factory=lambda: RodConfig(
        radius=0.31, density=0.2, friction=0.99, roll_friction=0.01, restitution=0.0))
    cable_config: CableConfig = field(default_factory=lambda: CableConfig(
        stiffness=1000.0, damping=10.0, pretension=0.0,
        max_tension=100000.0, target_velocity=10000.0))


def planar_two_bar(params: Optional[PlanarParams] = None) -> Structure:
    """
    Four corners of a rectangle, two rods along the diagonals, four cables
    around the perimeter.

        3 ----- 2          rods:   0-2, 1-3
        |  \\ /  |          cables: 0-1, 1-2, 2-3, 3-0
        |  / \\  |
        0 ----- 1
    """
    p = params or PlanarParams()
    if p.length <= 0 or p.width <= 0:
        raise ValueError(f"length and width must be positive, got {p.length}, {p.width}")
    s = Structure()
    s.add_point(0.0, 0.0, 0.0)
    s.add_point(p.length, 0.0, 0.0)
    s.add_point(p.length, 0.0, p.width)
    s.add_point(0.0, 0.0, p.width)

    s.add_pair(0, 2, ROD_TAG)
    s.add_pair(1, 3, ROD_TAG)

    s.add_pair(0, 1, CABLE_TAG)
    s.add_pair(1, 2, CABLE_TAG)
    s.add_pair(2, 3, CABLE_TAG)
    s.add_pair(3, 0, CABLE_TAG)

    s.move((0.0, p.lift, 0.0))
    return s


# =============================================================================
# PRISM
# =============================================================================

@dataclass
class PrismParams:
    """
    Three-strut prism.

    edge : float
        Width of the triangle base along x (length)
    depth : float
        Apex distance of the triangle along z (length)
    height : float
        Prism height along y (length)
    """
    edge: float = 10.0
    depth: float = 10.0
    height: float = 20.0
    lift: float = 10.0
    rod_config: RodConfig = field(default_factory=lambda: RodConfig(radius=0.31, density=0.2))
    cable_config: CableConfig = field(default_factory=lambda: CableConfig(
        stiffness=1000.0, damping=10.0, pretension=500.0))


def prism(params: Optional[PrismParams] = None) -> Structure:
    """
    Bottom triangle 0-1-2, top triangle 3-4-5 directly above it.

    rods:   0-4, 1-5, 2-3 (tagged "r1 rod", "r2 rod", "r3 rod")
    cables: both triangles plus the three verticals
    """
    p = params or PrismParams()
    if p.edge <= 0 or p.depth <= 0 or p.height <= 0:
        raise ValueError("edge, depth and height must be positive")
    s = Structure()
    for y in (0.0, p.height):
        s.add_point(-p.edge / 2.0, y, 0.0)
        s.add_point(p.edge / 2.0, y, 0.0)
        s.add_point(0.0, y, p.depth)

    s.add_pair(0, 4, "r1 rod")
    s.add_pair(1, 5, "r2 rod")
    s.add_pair(2, 3, "r3 rod")

    for a, b in [(0, 1), (1, 2), (2, 0), (3, 4), (4, 5), (5, 3), (0, 3), (1, 4), (2, 5)]:
        s.add_pair(a, b, CABLE_TAG)

    s.move((0.0, p.lift, 0.0))
    return s


# =============================================================================
# SIX-BAR (T6)
# =============================================================================

@dataclass
class SixBarParams:
    """
    Icosahedral six-bar tensegrity, three pairs of parallel rods.

    rod_length : float
        Length of every rod (length)
    rod_space : float
        Half distance between the two rods of a parallel pair (length)
    """
    rod_length: float = 6.0
    rod_space: float = 1.5
    lift: float = 10.0
    rod_config: RodConfig = field(default_factory=lambda: RodConfig(
        radius=0.1, density=2.855, friction=0.99, roll_friction=0.01, restitution=0.0))
    cable_config: CableConfig = field(default_factory=lambda: CableConfig(
        stiffness=206.19, damping=100.0, pretension=206.19,
        max_tension=100000.0, target_velocity=10000.0))


SIX_BAR_CABLES = [
    (0, 4), (0, 5), (0, 8), (0, 10),
    (1, 6), (1, 7), (1, 8), (1, 10),
    (2, 4), (2, 5), (2, 9), (2, 11),
    (3, 7), (3, 6), (3, 9), (3, 11),
    (4, 10), (4, 11),
    (5, 8), (5, 9),
    (6, 10), (6, 11),
    (7, 8), (7, 9),
]


def six_bar(params: Optional[SixBarParams] = None) -> Structure:
    """
    12 points, rods 0-1, 2-3, ..., 10-11 (tagged "r1 rod" .. "r6 rod"),
    24 cables.
    """
    p = params or SixBarParams()
    if p.rod_length <= 0 or p.rod_space <= 0:
        raise ValueError("rod_length and rod_space must be positive")
    h = p.rod_length / 2.0
    sp = p.rod_space
    coords = [
        (-sp, -h, 0.0), (-sp, h, 0.0),
        (sp, -h, 0.0), (sp, h, 0.0),
        (0.0, -sp, -h), (0.0, -sp, h),
        (0.0, sp, -h), (0.0, sp, h),
        (-h, 0.0, sp), (h, 0.0, sp),
        (-h, 0.0, -sp), (h, 0.0, -sp),
    ]
    s = Structure()
    for x, y, z in coords:
        s.add_point(x, y, z)
    for k in range(6):
        s.add_pair(2 * k, 2 * k + 1, f"r{k + 1} {ROD_TAG}")
    for a, b in SIX_BAR_CABLES:
        s.add_pair(a, b, CABLE_TAG)

    s.move((0.0, p.lift, 0.0))
    return s
