# mini_tensegrity/build/builders.py
"""
BUILDERS: Turning One Pair into One Physical Piece
==================================================

A builder is bound to one tag in a BuildSpec and carries the config record
for everything built under that tag. There are two kinds:

    RodBuilder     RIGID     pair + two end coordinates  -> RodSegment
    CableBuilder   ACTUATOR  pair + two Attachments      -> Cable

The compiler looks at `kind` to decide which phase a pair belongs to: all
RIGID pairs are materialised (and compounded into RigidBodies) before any
ACTUATOR pair is resolved against them.
"""

from abc import ABC, abstractmethod
from enum import Enum
import logging

import numpy as np

from ..config import CableConfig, RodConfig
from ..errors import ConfigurationError
from ..geometry.structure import Pair
from ..kernel.bodies import RodSegment
from ..kernel.cable import Attachment, Cable


class BuilderKind(Enum):
    RIGID = "rigid"
    ACTUATOR = "actuator"


class Builder(ABC):
    """Abstract base for tag-bound factories."""

    kind: BuilderKind

    def __init__(self, config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def build(self, pair: Pair, end_a, end_b):
        """Create the entity for `pair` from its two resolved ends."""
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}({self.config!r})"


class RodBuilder(Builder):
    """Rigid link builder: one rod segment per pair."""

    kind = BuilderKind.RIGID

    def __init__(self, config: RodConfig = None):
        config = RodConfig() if config is None else config
        if not isinstance(config, RodConfig):
            raise ConfigurationError(f"RodBuilder needs a RodConfig, got {type(config).__name__}")
        super().__init__(config)

    def build(self, pair: Pair, end_a, end_b) -> RodSegment:
        start = np.asarray(end_a, dtype=float).reshape(3).copy()
        end = np.asarray(end_b, dtype=float).reshape(3).copy()
        segment = RodSegment(
            pair_id=pair.id, i=pair.i, j=pair.j,
            start=start, end=end, config=self.config, tags=pair.tags,
        )
        self.logger.debug("rod segment for pair %d, length %.4g", pair.id, segment.length)
        return segment


class CableBuilder(Builder):
    """Actuator builder: one Cable per pair, between two attachments."""

    kind = BuilderKind.ACTUATOR

    def __init__(self, config: CableConfig = None):
        config = CableConfig() if config is None else config
        if not isinstance(config, CableConfig):
            raise ConfigurationError(f"CableBuilder needs a CableConfig, got {type(config).__name__}")
        super().__init__(config)

    def build(self, pair: Pair, end_a: Attachment, end_b: Attachment) -> Cable:
        cable = Cable(end_a, end_b, self.config, pair_id=pair.id, tags=pair.tags)
        self.logger.debug("cable for pair %d, rest length %.4g", pair.id, cable.rest_length)
        return cable
