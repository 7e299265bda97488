"""
TLE Orbit Translator Package

Converts NORAD two-line element sets into time series of Cartesian state
vectors (inertial or Earth-fixed) using SGP4/SDP4, or into Keplerian elements
at the element epoch.

Modules:
    tle_parser: TLE parsing, validation and formatting
    sgp4_propagator: SGP4 propagation to TEME
    deep_space: SDP4 lunar-solar and resonance terms
    frames: TEME to ECI/ECEF rotation
    kepler: Kepler's equation solver
    time_system: Julian dates and sidereal time
    translator: OrbitTranslator facade
    records: pydantic output records
    validation: Cross-check against the sgp4 library

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

from orbit_translator.errors import (
    ConvergenceError,
    DecayedOrbit,
    InvalidDate,
    InvalidStep,
    OrbitTranslatorError,
    ParseError,
    PropagationError,
    UnsupportedFrame,
)
from orbit_translator.frames import ReferenceFrame
from orbit_translator.time_system import Duration, JulianDate, from_calendar
from orbit_translator.tle_parser import MeanElements, format_tle, parse
from orbit_translator.translator import KeplerianElements, OrbitTranslator, PropagationResult, StateVector

__version__ = "1.0.0"

__all__ = [
    "ConvergenceError",
    "DecayedOrbit",
    "Duration",
    "InvalidDate",
    "InvalidStep",
    "JulianDate",
    "KeplerianElements",
    "MeanElements",
    "OrbitTranslator",
    "OrbitTranslatorError",
    "ParseError",
    "PropagationError",
    "PropagationResult",
    "ReferenceFrame",
    "StateVector",
    "UnsupportedFrame",
    "format_tle",
    "from_calendar",
    "parse",
]
