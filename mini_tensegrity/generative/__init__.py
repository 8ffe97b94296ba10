# mini_tensegrity/generative - Parametric structure generators
"""
GENERATIVE: READY-MADE TENSEGRITY STRUCTURES
============================================

    from mini_tensegrity.generative import six_bar, SixBarParams, default_build_spec

    params = SixBarParams(rod_length=6.0, rod_space=1.5)
    structure = six_bar(params)
    spec = default_build_spec(params.rod_config, params.cable_config)
"""

from .shapes import (
    CABLE_TAG,
    ROD_TAG,
    PlanarParams,
    PrismParams,
    SixBarParams,
    default_build_spec,
    planar_two_bar,
    prism,
    six_bar,
)

__all__ = [
    'CABLE_TAG', 'ROD_TAG',
    'PlanarParams', 'PrismParams', 'SixBarParams',
    'default_build_spec', 'planar_two_bar', 'prism', 'six_bar',
]
