# mini_tensegrity/build - From tagged structure to live entities
"""
BUILD: TAGS, BUILDERS AND THE COMPILER
======================================

    spec = BuildSpec()
    spec.add_builder("rod", RodBuilder(RodConfig(radius=0.31, density=0.2)))
    spec.add_builder("muscle", CableBuilder(CableConfig(stiffness=1000.0)))

    tree = compile_structure(structure, spec, world)

Every pair must match exactly one registered tag.
"""

from .builders import Builder, BuilderKind, RodBuilder, CableBuilder
from .spec import BuildSpec
from .compiler import compile_structure, group_rods, resolve_builders

__all__ = [
    'Builder', 'BuilderKind', 'RodBuilder', 'CableBuilder',
    'BuildSpec',
    'compile_structure', 'group_rods', 'resolve_builders',
]
