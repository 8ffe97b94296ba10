# File: tests/test_build_spec.py
"""
Test tag -> builder resolution: exactly one registered tag must match.
"""

import pytest

from mini_tensegrity import CableConfig, RodConfig
from mini_tensegrity.build import BuildSpec, BuilderKind, CableBuilder, RodBuilder
from mini_tensegrity.errors import AmbiguousTagError, ConfigurationError, UnresolvedTagError
from mini_tensegrity.geometry import Pair


def make_spec():
    spec = BuildSpec()
    spec.add_builder("rod", RodBuilder(RodConfig(radius=0.31, density=0.2)))
    spec.add_builder("muscle", CableBuilder(CableConfig(stiffness=1000.0)))
    return spec


def pair(tags):
    return Pair(id=0, i=0, j=1, tags=frozenset(tags))


def test_single_match_resolves():
    spec = make_spec()
    assert spec.get_builder(pair({"rod"})).kind is BuilderKind.RIGID
    assert spec.get_builder(pair({"muscle"})).kind is BuilderKind.ACTUATOR


def test_extra_unregistered_tags_are_ignored():
    """A pair tagged "r1 rod" still resolves to the rod builder."""
    spec = make_spec()
    builder = spec.get_builder(pair({"r1", "rod"}))
    assert isinstance(builder, RodBuilder)


def test_zero_matches_is_unresolved():
    spec = make_spec()
    with pytest.raises(UnresolvedTagError):
        spec.get_builder(pair({"spring"}))


def test_two_matches_is_ambiguous():
    spec = make_spec()
    with pytest.raises(AmbiguousTagError):
        spec.get_builder(pair({"rod", "muscle"}))


def test_tag_errors_are_configuration_errors():
    assert issubclass(UnresolvedTagError, ConfigurationError)
    assert issubclass(AmbiguousTagError, ConfigurationError)


def test_one_builder_per_tag():
    spec = make_spec()
    with pytest.raises(ConfigurationError):
        spec.add_builder("rod", RodBuilder())
    assert len(spec) == 2


def test_bad_registrations_rejected():
    spec = BuildSpec()
    with pytest.raises(ConfigurationError):
        spec.add_builder("two words", RodBuilder())
    with pytest.raises(ConfigurationError):
        spec.add_builder("", RodBuilder())
    with pytest.raises(ConfigurationError):
        spec.add_builder("rod", object())


def test_frozen_spec_rejects_new_builders():
    spec = make_spec()
    spec.freeze()
    assert spec.frozen
    with pytest.raises(ConfigurationError):
        spec.add_builder("strut", RodBuilder())
    # Resolution still works after freezing
    assert isinstance(spec.get_builder(pair({"muscle"})), CableBuilder)


def test_builders_check_their_config_type():
    with pytest.raises(ConfigurationError):
        RodBuilder(CableConfig())
    with pytest.raises(ConfigurationError):
        CableBuilder(RodConfig())


def test_config_records_are_validated_and_frozen():
    with pytest.raises(ConfigurationError):
        RodConfig(radius=0.0)
    with pytest.raises(ConfigurationError):
        CableConfig(stiffness=-1.0)
    with pytest.raises(ConfigurationError):
        CableConfig(pretension=-5.0)
    cfg = CableConfig()
    with pytest.raises(Exception):  # dataclass.FrozenInstanceError
        cfg.stiffness = 1.0
