# mini_tensegrity - Tensegrity structure compilation and cable control
"""
MINI-TENSEGRITY: From Tagged Geometry to Controlled Tensegrity Robots
=====================================================================

This package provides:
- A Structure description (points + tagged pairs)
- A BuildSpec mapping tags to rod/cable builders
- A compiler turning both into rigid bodies and cable actuators in a World
- An observable model with setup/step/teardown notifications
- Controllers and loggers that attach to a model as observers

ARCHITECTURE:
-------------
    geometry/       Structure, Pair, tag parsing
    config.py       RodConfig, CableConfig records
    build/          Builders, BuildSpec, compile_structure
    kernel/         RigidBody, Cable, World (the physics the compiler targets)
    tree.py         ModelTree: ownership and release of compiled entities
    model.py        TensegrityModel: lifecycle and observer notification
    control.py      Bounded tension/length control law for one cable
    observers/      Sine-wave and constant-tension controllers, CSV loggers
    generative/     Planar, prism and six-bar structure generators
    simulation.py   Step loop over models and a world
    post.py         Log loading and summaries (pandas)

QUICK START:
------------
    from mini_tensegrity import Simulation, TensegrityModel, World
    from mini_tensegrity.generative import six_bar, SixBarParams, default_build_spec

    params = SixBarParams()
    model = TensegrityModel(six_bar(params),
                            default_build_spec(params.rod_config, params.cable_config))
    sim = Simulation(World())
    sim.add_model(model)
    sim.run(1000, 0.001)
"""

from .errors import (
    AmbiguousTagError,
    ConfigurationError,
    LifecycleError,
    PointIndexError,
    PreconditionError,
    ResourceError,
    TensegrityError,
    UnresolvedTagError,
)
from .config import CableConfig, RodConfig
from .geometry import Pair, Structure
from .kernel import Cable, FixedAnchor, RigidBody, World, WorldConfig
from .tree import ModelTree
from .build import BuildSpec, CableBuilder, RodBuilder, compile_structure
from .control import LengthController, TensionController
from .model import ModelState, TensegrityModel
from .observers import Observer
from .simulation import Simulation

__version__ = "0.1.0"
