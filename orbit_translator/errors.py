"""
Error Types

All failures raised by the orbit translator derive from OrbitTranslatorError
so callers can catch the whole family at the boundary. Input problems are
also ValueErrors; propagation failures carry the conventional SGP4 error code
and the time since epoch at which they occurred.
"""

from typing import Optional


# SGP4 error code meanings (numbering follows Vallado et al. 2006)
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    6: "Satellite has decayed",
}


class OrbitTranslatorError(Exception):
    """Base class for every error raised by this package."""


class InvalidDate(OrbitTranslatorError, ValueError):
    """Calendar fields do not describe a valid UTC instant."""


class ParseError(OrbitTranslatorError, ValueError):
    """A TLE line is malformed."""

    def __init__(self, reason: str, line: Optional[int] = None):
        self.reason = reason
        self.line = line
        if line is not None:
            message = f"TLE line {line}: {reason}"
        else:
            message = reason
        super().__init__(message)


class UnsupportedFrame(OrbitTranslatorError, ValueError):
    """Requested reference frame is neither inertial nor Earth-fixed."""


class InvalidStep(OrbitTranslatorError, ValueError):
    """Propagation step must be strictly positive."""


class ConvergenceError(OrbitTranslatorError, ArithmeticError):
    """Kepler's equation could not be solved within the iteration cap."""


class PropagationError(OrbitTranslatorError):
    """SGP4 produced unphysical elements at the requested time."""

    def __init__(self, code: int, tsince: float, message: Optional[str] = None):
        self.code = code
        self.tsince = tsince
        if message is None:
            message = SGP4_ERROR_CODES.get(code, f"Unknown error {code}")
        super().__init__(f"SGP4 error {code} at t={tsince:.3f} min: {message}")


class DecayedOrbit(PropagationError):
    """Computed radius fell below one Earth radius (object has re-entered)."""

    def __init__(self, tsince: float, radius_km: float):
        self.radius_km = radius_km
        super().__init__(
            6,
            tsince,
            f"orbital radius {radius_km:.3f} km is below the Earth's surface. "
            f"Physical meaning: the satellite has re-entered; propagation "
            f"beyond this instant is undefined.",
        )
