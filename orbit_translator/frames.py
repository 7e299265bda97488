"""
Frame Transform

Rotates TEME state vectors from the propagator into the inertial (ECI) or
Earth-fixed (ECEF) output frame.

TEME is treated as ECI directly: precession and nutation between TEME and a
true inertial frame are ignored. ECEF applies the Greenwich mean sidereal
rotation only (no polar motion, no equation of the equinoxes).
"""

import math
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from orbit_translator.constants import EARTH_ROTATION_RATE
from orbit_translator.errors import UnsupportedFrame
from orbit_translator.time_system import JulianDate, greenwich_sidereal_time


class ReferenceFrame(Enum):
    INERTIAL = "ECI"
    EARTH_FIXED = "ECEF"

    @classmethod
    def from_name(cls, name) -> "ReferenceFrame":
        """Resolve "ECI"/"ECEF" (case-insensitive) or a ReferenceFrame."""
        if isinstance(name, ReferenceFrame):
            return name
        if isinstance(name, str):
            key = name.strip().upper()
            for frame in cls:
                if frame.value == key:
                    return frame
        raise UnsupportedFrame(f"unsupported reference frame {name!r}; expected 'ECI' or 'ECEF'")

    @property
    def tag(self) -> str:
        """Tag used in output records."""
        return "INERTIAL" if self is ReferenceFrame.INERTIAL else "FIXED"


def _rotation_z(angle: float) -> np.ndarray:
    """Frame rotation by ``angle`` about z (vector components in the rotated frame)."""
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([[c, s, 0.0], [-s, c, 0.0], [0.0, 0.0, 1.0]])


def teme_to_eci(vector: np.ndarray, instant: Optional[JulianDate] = None) -> np.ndarray:
    return np.array(vector, dtype=float)


def teme_to_ecef(vector: np.ndarray, instant: JulianDate) -> np.ndarray:
    """Rotate a TEME position into ECEF by GMST about the z axis."""
    return _rotation_z(greenwich_sidereal_time(instant)) @ np.asarray(vector, dtype=float)


def teme_to_ecef_velocity(position: np.ndarray, velocity: np.ndarray, instant: JulianDate) -> np.ndarray:
    """
    Rotate a TEME velocity into ECEF, removing the Earth-rotation term.

    Args:
        position: TEME position (any length unit)
        velocity: TEME velocity (same length unit per second)
        instant: Time of the state

    Returns:
        ECEF velocity, v_ecef = R (v - w x r)
    """
    omega = np.array([0.0, 0.0, EARTH_ROTATION_RATE])
    position = np.asarray(position, dtype=float)
    relative = np.asarray(velocity, dtype=float) - np.cross(omega, position)
    return _rotation_z(greenwich_sidereal_time(instant)) @ relative


def transform(
    position: np.ndarray,
    velocity: Optional[np.ndarray],
    instant: JulianDate,
    frame: ReferenceFrame,
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Express a TEME state in the requested frame.

    Raises:
        UnsupportedFrame: If ``frame`` is not a ReferenceFrame
    """
    if frame is ReferenceFrame.INERTIAL:
        v = teme_to_eci(velocity, instant) if velocity is not None else None
        return teme_to_eci(position, instant), v
    if frame is ReferenceFrame.EARTH_FIXED:
        v = teme_to_ecef_velocity(position, velocity, instant) if velocity is not None else None
        return teme_to_ecef(position, instant), v
    raise UnsupportedFrame(f"unsupported reference frame {frame!r}")
