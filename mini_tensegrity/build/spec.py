# mini_tensegrity/build/spec.py
"""
BUILD SPEC: Tag -> Builder Resolution
=====================================

Resolution rule for a pair:

    matches = pair.tags  ∩  registered tags

    len(matches) == 0  -> UnresolvedTagError
    len(matches) == 1  -> that builder
    len(matches) >  1  -> AmbiguousTagError

A pair tagged "r1 rod" therefore resolves to the "rod" builder as long as no
builder is registered for "r1".
"""

import logging
from typing import Dict, List

from ..errors import AmbiguousTagError, ConfigurationError, UnresolvedTagError
from ..geometry.structure import Pair
from .builders import Builder

logger = logging.getLogger(__name__)


class BuildSpec:
    """Mapping from tag to builder, at most one builder per tag."""

    def __init__(self):
        self._builders: Dict[str, Builder] = {}
        self._frozen = False

    def add_builder(self, tag: str, builder: Builder) -> "BuildSpec":
        if not isinstance(tag, str) or not tag or len(tag.split()) != 1:
            raise ConfigurationError(f"Builder tag must be a single non-empty word, got {tag!r}")
        if not isinstance(builder, Builder):
            raise ConfigurationError(f"Expected a Builder for tag {tag!r}, got {type(builder).__name__}")
        if self._frozen:
            raise ConfigurationError(f"Cannot register {tag!r}: build spec already used for compilation")
        if tag in self._builders:
            raise ConfigurationError(f"A builder is already registered for tag {tag!r}")
        self._builders[tag] = builder
        return self

    def get_builder(self, pair: Pair) -> Builder:
        matches = sorted(t for t in pair.tags if t in self._builders)
        if not matches:
            raise UnresolvedTagError(
                f"Pair {pair.id} ({pair.i}-{pair.j}) with tags {sorted(pair.tags)} "
                f"matches no registered builder (registered: {self.tags})"
            )
        if len(matches) > 1:
            raise AmbiguousTagError(
                f"Pair {pair.id} ({pair.i}-{pair.j}) with tags {sorted(pair.tags)} "
                f"matches several builders: {matches}"
            )
        return self._builders[matches[0]]

    def freeze(self) -> None:
        """Called by the compiler; later add_builder() calls are rejected."""
        if not self._frozen:
            logger.debug("build spec frozen with tags %s", self.tags)
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def tags(self) -> List[str]:
        return list(self._builders.keys())

    def __contains__(self, tag: str) -> bool:
        return tag in self._builders

    def __len__(self):
        return len(self._builders)
