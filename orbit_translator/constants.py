"""
Physical Constants

Gravity models used by SGP4 and the SI Earth constants used for Keplerian
element conversion and frame rotation.

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

import math
from typing import NamedTuple

DEG2RAD = math.pi / 180.0
TWOPI = 2.0 * math.pi
MINUTES_PER_DAY = 1440.0
SECONDS_PER_DAY = 86400.0
XPDOTP = MINUTES_PER_DAY / TWOPI  # rev/day to rad/min


class GravityModel(NamedTuple):
    """Earth gravity constants in SGP4 canonical form."""

    name: str
    mu: float  # km^3/s^2
    radiusearthkm: float  # km
    xke: float  # sqrt(mu) in earth radii^1.5 / min
    tumin: float  # minutes per time unit
    j2: float
    j3: float
    j4: float
    j3oj2: float


def _gravity_model(name: str, mu: float, radius: float, j2: float, j3: float, j4: float) -> GravityModel:
    xke = 60.0 / math.sqrt(radius * radius * radius / mu)
    return GravityModel(name, mu, radius, xke, 1.0 / xke, j2, j3, j4, j3 / j2)


# WGS-72 is the model the element sets are generated with
WGS72 = _gravity_model("wgs72", 398600.8, 6378.135, 0.001082616, -0.00000253881, -0.00000165597)
WGS84 = _gravity_model(
    "wgs84", 398600.5, 6378.137, 0.00108262998905, -0.00000253215306, -0.00000161098761
)

GRAVITY_MODELS = {model.name: model for model in (WGS72, WGS84)}

# SI Earth constants
EARTH_RADIUS_M = 6371000.0
GRAVITATIONAL_PARAMETER_SI = 3.986004419e14  # m^3/s^2
EARTH_ROTATION_RATE = 7.2921159e-5  # rad/s

# Deep-space branch threshold (orbital period, minutes)
DEEP_SPACE_PERIOD_MIN = 225.0
