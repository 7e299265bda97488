"""
Kepler Equation Solver

Pure functions relating mean, eccentric and true anomaly for elliptical
orbits. No state is kept, so every function is safe to call concurrently.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.),
    Algorithm 2 (KepEqtnE).
"""

import math

from orbit_translator.constants import TWOPI
from orbit_translator.errors import ConvergenceError

TOLERANCE = 1e-14
MAX_ITERATIONS = 100


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    wrapped = angle % TWOPI
    if wrapped >= TWOPI:
        wrapped -= TWOPI
    return wrapped


def solve_eccentric_anomaly(
    mean_anomaly: float,
    eccentricity: float,
    tolerance: float = TOLERANCE,
    max_iter: int = MAX_ITERATIONS,
) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly.

    Newton-Raphson starting from E0 = M. The root always lies within
    [M - e, M + e]; a Newton step that would leave that bracket is replaced by
    bisection, which keeps the iteration convergent as e approaches 1.

    Args:
        mean_anomaly: Mean anomaly (rad)
        eccentricity: Eccentricity, 0 <= e < 1
        tolerance: Convergence threshold on successive iterates (rad)
        max_iter: Maximum iterations

    Returns:
        Eccentric anomaly E (rad), in [0, 2*pi)

    Raises:
        ConvergenceError: If e is outside [0, 1) or the iteration cap is hit
    """
    if not 0.0 <= eccentricity < 1.0:
        raise ConvergenceError(
            f"eccentricity {eccentricity} is not elliptical; Kepler's equation "
            f"has no eccentric anomaly solution"
        )

    m = normalize_angle(mean_anomaly)
    e = eccentricity
    if e == 0.0:
        return m

    low = m - e
    high = m + e
    ecc_anomaly = m
    for _ in range(max_iter):
        f = ecc_anomaly - e * math.sin(ecc_anomaly) - m
        if f < 0.0:
            low = ecc_anomaly
        elif f > 0.0:
            high = ecc_anomaly
        fp = 1.0 - e * math.cos(ecc_anomaly)

        candidate = ecc_anomaly - f / fp
        if not low <= candidate <= high:
            candidate = 0.5 * (low + high)

        if abs(candidate - ecc_anomaly) < tolerance:
            return candidate
        ecc_anomaly = candidate

    raise ConvergenceError(
        f"Kepler solver did not converge after {max_iter} iterations "
        f"(M={mean_anomaly:.15g}, e={eccentricity:.15g})"
    )


def eccentric_to_true_anomaly(eccentric_anomaly: float, eccentricity: float) -> float:
    """True anomaly (rad, [0, 2*pi)) from eccentric anomaly."""
    if eccentricity == 0.0:
        return normalize_angle(eccentric_anomaly)
    half = 0.5 * eccentric_anomaly
    nu = 2.0 * math.atan2(
        math.sqrt(1.0 + eccentricity) * math.sin(half),
        math.sqrt(1.0 - eccentricity) * math.cos(half),
    )
    return normalize_angle(nu)


def true_to_eccentric_anomaly(true_anomaly: float, eccentricity: float) -> float:
    """Eccentric anomaly (rad, [0, 2*pi)) from true anomaly."""
    half = 0.5 * true_anomaly
    ecc_anomaly = 2.0 * math.atan2(
        math.sqrt(1.0 - eccentricity) * math.sin(half),
        math.sqrt(1.0 + eccentricity) * math.cos(half),
    )
    return normalize_angle(ecc_anomaly)


def eccentric_to_mean_anomaly(eccentric_anomaly: float, eccentricity: float) -> float:
    return normalize_angle(eccentric_anomaly - eccentricity * math.sin(eccentric_anomaly))


def mean_to_true_anomaly(mean_anomaly: float, eccentricity: float) -> float:
    """True anomaly (rad, [0, 2*pi)) from mean anomaly."""
    ecc_anomaly = solve_eccentric_anomaly(mean_anomaly, eccentricity)
    return eccentric_to_true_anomaly(ecc_anomaly, eccentricity)
