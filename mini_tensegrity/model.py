# mini_tensegrity/model.py
"""
OBSERVABLE MODEL: Lifecycle and Observer Notification
=====================================================

PURPOSE:
--------
A TensegrityModel is the runtime face of one compiled structure. It owns the
ModelTree the compiler produced and forwards three lifecycle events to any
attached observers (controllers, loggers):

    setup(world)   UNBUILT -> BUILT      compile, then on_setup(model)
    step(dt)       BUILT                 on_step(model, dt), then cable clocks
    teardown()     BUILT -> TORN_DOWN    on_teardown(model), then release

STATE RULES:
------------
- setup() is only valid from UNBUILT. A failed compilation, child setup or
  observer on_setup() leaves the model UNBUILT with nothing registered in the
  world; observers that had already been set up receive on_teardown().
- step() never moves bodies. Integration belongs to World.step(), which the
  Simulation calls once every model has stepped.
- step() rejects dt <= 0 with PreconditionError before doing anything, and
  raises LifecycleError outside BUILT.
- teardown() is a no-op outside BUILT. If releasing fails part-way the error
  propagates; calling teardown() again releases what is left without
  notifying observers a second time.

OBSERVERS:
----------
Observers are held by weak reference and notified in attachment order. An
observer attached while the model is already BUILT receives on_setup()
immediately, so every observer sees exactly one setup before its first step.
Attaching to a TORN_DOWN model raises LifecycleError.

SUBCLASSING:
------------
Either pass a Structure and BuildSpec to the constructor, or override
build_structure() to return them (useful when the geometry depends on the
model's own parameters).
"""

from enum import Enum
import logging
import weakref
from typing import List, Optional, Tuple

import numpy as np

from .build.compiler import compile_structure
from .build.spec import BuildSpec
from .errors import ConfigurationError, LifecycleError, check_timestep
from .geometry.structure import Structure
from .kernel.bodies import RigidBody
from .kernel.cable import Cable
from .tree import ModelTree

logger = logging.getLogger(__name__)


class ModelState(Enum):
    UNBUILT = "unbuilt"
    BUILT = "built"
    TORN_DOWN = "torn_down"


class TensegrityModel:
    """
    A compiled structure plus its observers.

    Parameters:
    -----------
    structure : Structure, optional
        Geometry to compile at setup()
    spec : BuildSpec, optional
        Tag -> builder mapping used at setup()
    name : str
        Name of the model and of its ModelTree
    """

    def __init__(
        self,
        structure: Optional[Structure] = None,
        spec: Optional[BuildSpec] = None,
        name: str = "model",
    ):
        self.name = name
        self._structure = structure
        self._spec = spec
        self._state = ModelState.UNBUILT
        self._observers: List[weakref.ref] = []
        self._children: List["TensegrityModel"] = []
        self._tree: Optional[ModelTree] = None
        self._world = None
        self._teardown_notified = False
        self.elapsed = 0.0

    # ------------------------------------------------------------------
    # Construction hooks
    # ------------------------------------------------------------------

    def build_structure(self) -> Tuple[Structure, BuildSpec]:
        if self._structure is None or self._spec is None:
            raise ConfigurationError(
                f"Model {self.name!r} has no structure/build spec; pass them to the "
                f"constructor or override build_structure()"
            )
        return self._structure, self._spec

    def add_child(self, child: "TensegrityModel") -> "TensegrityModel":
        """Add a sub-model that is set up, stepped and torn down with this one."""
        if self._state is not ModelState.UNBUILT:
            raise LifecycleError("Children can only be added before setup()")
        if child is self or child in self._children:
            raise ValueError(f"Cannot add {child.name!r} as a child of {self.name!r}")
        self._children.append(child)
        return child

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    @property
    def observers(self) -> list:
        """Live observers in attachment order."""
        live = []
        for ref in self._observers:
            obs = ref()
            if obs is not None:
                live.append(obs)
        return live

    def attach(self, observer) -> None:
        if self._state is ModelState.TORN_DOWN:
            raise LifecycleError(f"Cannot attach to torn-down model {self.name!r}")
        if any(ref() is observer for ref in self._observers):
            return
        if self._state is ModelState.BUILT:
            observer.on_setup(self)
        self._observers.append(weakref.ref(observer))
        logger.debug("attached %r to %r", observer, self.name)

    def detach(self, observer) -> None:
        self._observers = [ref for ref in self._observers if ref() is not observer and ref() is not None]

    def _notify(self, event: str, *args) -> None:
        self._observers = [ref for ref in self._observers if ref() is not None]
        for obs in self.observers:
            getattr(obs, event)(self, *args)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> ModelState:
        return self._state

    def setup(self, world) -> None:
        if self._state is not ModelState.UNBUILT:
            raise LifecycleError(f"setup() called on model {self.name!r} in state {self._state.value}")
        structure, spec = self.build_structure()
        tree = compile_structure(structure, spec, world, name=self.name)

        built_children = []
        try:
            for child in self._children:
                child.setup(world)
                built_children.append(child)
                tree.add_child(child.tree)
        except Exception:
            logger.warning("setup of %r failed in a child model, rolling back", self.name)
            try:
                for child in reversed(built_children):
                    child._unbuild(child.observers)
            finally:
                tree.release(world)
            raise

        self._tree = tree
        self._world = world
        self._state = ModelState.BUILT
        logger.info("model %r built: %s", self.name, tree)

        self._observers = [ref for ref in self._observers if ref() is not None]
        notified = []
        try:
            for obs in self.observers:
                obs.on_setup(self)
                notified.append(obs)
        except Exception:
            logger.warning("observer setup failed on %r, rolling back", self.name)
            self._unbuild(notified)
            raise

    def _unbuild(self, notified) -> None:
        """Undo a completed setup(): BUILT -> UNBUILT, world left as before."""
        try:
            for obs in reversed(notified):
                obs.on_teardown(self)
        finally:
            try:
                for child in reversed(self._children):
                    if child.state is ModelState.BUILT:
                        child._unbuild(child.observers)
            finally:
                self._tree.release(self._world)
                self._tree = None
                self._world = None
                self._state = ModelState.UNBUILT
                logger.debug("model %r rolled back to unbuilt", self.name)

    def step(self, dt: float) -> None:
        dt = check_timestep(dt)
        if self._state is not ModelState.BUILT or self._teardown_notified:
            raise LifecycleError(f"step() called on model {self.name!r} in state {self._state.value}")
        self._notify('on_step', dt)
        # Bodies are integrated by World.step; only cables keep a per-step clock
        for entity in self._tree.entities:
            if isinstance(entity, Cable):
                entity.step(dt)
        for child in self._children:
            child.step(dt)
        self.elapsed += dt

    def teardown(self) -> None:
        if self._state is not ModelState.BUILT:
            return
        if self._teardown_notified:
            self._release()
            return
        self._teardown_notified = True
        logger.info("tearing down model %r", self.name)
        try:
            self._notify('on_teardown')
        finally:
            self._release()

    def _release(self) -> None:
        for child in self._children:
            child.teardown()
        self._tree.release(self._world)
        self._state = ModelState.TORN_DOWN
        logger.debug("model %r released", self.name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _require_tree(self) -> ModelTree:
        if self._tree is None:
            raise LifecycleError(f"Model {self.name!r} has not been set up")
        return self._tree

    @property
    def tree(self) -> ModelTree:
        return self._require_tree()

    @property
    def world(self):
        return self._world

    @property
    def actuators(self) -> List[Cable]:
        """All cables, own then children's, in compile order."""
        return self._require_tree().actuators

    @property
    def rigid_bodies(self) -> List[RigidBody]:
        return self._require_tree().rigid_bodies

    def find(self, tag: str) -> list:
        return self._require_tree().find(tag)

    def center_of_mass(self) -> np.ndarray:
        bodies = self.rigid_bodies
        total = sum(b.mass for b in bodies)
        if total <= 0.0:
            raise ValueError(f"Model {self.name!r} has no rigid-body mass")
        return sum(b.mass * b.position for b in bodies) / total

    def __repr__(self):
        return f"TensegrityModel({self.name!r}, state={self._state.value})"
