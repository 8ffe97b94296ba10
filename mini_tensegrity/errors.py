# mini_tensegrity/errors.py
"""Exception types raised by the build pipeline, the model lifecycle and the world."""


class TensegrityError(Exception):
    """Base class for every error raised by mini_tensegrity."""
    pass


class ConfigurationError(TensegrityError, ValueError):
    """Raised when a structure, build spec or config record cannot be used."""
    pass


class UnresolvedTagError(ConfigurationError):
    """Raised when none of a pair's tags has a registered builder."""
    pass


class AmbiguousTagError(ConfigurationError):
    """Raised when more than one of a pair's tags has a registered builder."""
    pass


class PointIndexError(ConfigurationError, IndexError):
    """Raised when a pair references a point index outside the structure."""
    pass


class PreconditionError(TensegrityError, ValueError):
    """Raised when a call is made with an invalid argument such as dt <= 0."""
    pass


class ResourceError(TensegrityError, RuntimeError):
    """Raised when the world refuses to allocate or register an entity."""
    pass


class LifecycleError(TensegrityError, RuntimeError):
    """Raised when a model operation is called in the wrong state."""
    pass


def check_timestep(dt: float) -> float:
    """
    Validate a simulation timestep.

    Raises PreconditionError for dt <= 0 and for NaN/inf; never clamps.
    """
    dt = float(dt)
    if not dt > 0.0 or dt == float("inf"):
        raise PreconditionError(f"dt must be a positive finite number, got {dt}")
    return dt
