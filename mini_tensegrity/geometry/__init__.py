# mini_tensegrity/geometry - Abstract structure description
"""
GEOMETRY: POINTS, PAIRS AND TAGS
================================

The Structure is the researcher-facing description of a tensegrity: it holds
coordinates and tagged connections only. Builders and the compiler turn it
into rods and cables later.

USAGE:
------
    from mini_tensegrity.geometry import Structure

    s = Structure()
    s.add_point(0, 0, 0)
    s.add_point(10, 0, 0)
    s.add_pair(0, 1, "rod")
"""

from .structure import Structure, Pair, parse_tags

__all__ = ['Structure', 'Pair', 'parse_tags']
