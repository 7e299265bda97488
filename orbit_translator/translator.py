"""
Orbit Translator

Public entry point: turns one TLE into a time series of Cartesian states in
the requested frame, or into Keplerian elements at the TLE epoch.

Usage:
    translator = OrbitTranslator(line1, line2, "ECEF")
    result = translator.propagate(start, stop, step_seconds=3600.0)
    for state in result.samples:
        print(state.instant, state.position)
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from orbit_translator.constants import GRAVITATIONAL_PARAMETER_SI, SECONDS_PER_DAY, TWOPI, WGS72, GravityModel
from orbit_translator.errors import InvalidStep, PropagationError
from orbit_translator.frames import ReferenceFrame, transform
from orbit_translator.kepler import mean_to_true_anomaly
from orbit_translator.records import EphemerisRecord, KeplerianRecord
from orbit_translator.sgp4_propagator import SGP4Propagator
from orbit_translator.time_system import JulianDate
from orbit_translator.tle_parser import MeanElements, parse

logger = logging.getLogger(__name__)

GRID_TOLERANCE_SECONDS = 1e-6


@dataclass
class StateVector:
    """Position (m) and optional velocity (m/s) at an instant, in a frame."""

    instant: JulianDate
    frame: ReferenceFrame
    position: np.ndarray
    velocity: Optional[np.ndarray] = None

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.position))


@dataclass(frozen=True)
class KeplerianElements:
    """Osculating-style Keplerian elements; angles in radians, a in metres."""

    semi_major_axis: float
    eccentricity: float
    inclination: float
    argument_of_perigee: float
    raan: float
    true_anomaly: float
    gravitational_parameter: float
    instant: JulianDate


@dataclass
class PropagationResult:
    """
    Ordered samples of a propagation run.

    Attributes:
        samples: States in ascending time
        error: Error that stopped the run early, if any
    """

    frame: ReferenceFrame
    samples: List[StateVector] = field(default_factory=list)
    error: Optional[PropagationError] = None

    @property
    def truncated(self) -> bool:
        return self.error is not None

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)


class OrbitTranslator:
    """Translates one TLE into state vectors or Keplerian elements."""

    def __init__(self, line1: str, line2: str, frame="ECEF", gravity: GravityModel = WGS72):
        """
        Args:
            line1: First line of TLE
            line2: Second line of TLE
            frame: "ECI", "ECEF" or a ReferenceFrame
            gravity: Gravity model for SGP4 (WGS-72 by default)

        Raises:
            ParseError: If the TLE is malformed
            UnsupportedFrame: If the frame is unknown
        """
        self._setup(parse(line1, line2), frame, gravity)

    @classmethod
    def from_elements(cls, elements: MeanElements, frame="ECEF", gravity: GravityModel = WGS72) -> "OrbitTranslator":
        translator = cls.__new__(cls)
        translator._setup(elements, frame, gravity)
        return translator

    def _setup(self, elements: MeanElements, frame, gravity: GravityModel):
        self.frame = ReferenceFrame.from_name(frame)
        self.elements = elements
        self.propagator = SGP4Propagator(elements, gravity)
        logger.debug(
            f"Translator ready for {elements.satellite_number} in {self.frame.tag} "
            f"(method {self.propagator.method})"
        )

    @property
    def epoch(self) -> JulianDate:
        return self.elements.epoch

    def state_at(self, instant: JulianDate) -> StateVector:
        """
        State at one instant in the translator's frame.

        Raises:
            PropagationError: If SGP4 fails at this instant
        """
        r_km, v_kms = self.propagator.propagate_to(instant)
        position, velocity = transform(r_km * 1000.0, v_kms * 1000.0, instant, self.frame)
        return StateVector(instant, self.frame, position, velocity)

    def sample_instants(self, start: JulianDate, stop: JulianDate, step_seconds: float) -> List[JulianDate]:
        """Instants start + k*step up to and including stop."""
        if not step_seconds > 0.0:
            raise InvalidStep(f"step {step_seconds} s must be strictly positive")
        span = stop.difference(start).seconds
        if span < 0.0:
            return []
        # A grid point within GRID_TOLERANCE_SECONDS of stop is taken as stop
        count = int(math.floor((span + GRID_TOLERANCE_SECONDS) / step_seconds)) + 1
        instants = [start.add_seconds(k * step_seconds) for k in range(count)]
        if (count - 1) * step_seconds > span:
            instants[-1] = stop
        return instants

    def propagate(
        self,
        start: JulianDate,
        stop: JulianDate,
        step_seconds: float,
        max_workers: Optional[int] = None,
    ) -> PropagationResult:
        """
        Sample the orbit from start to stop (inclusive) at a fixed step.

        Propagation stops at the first sample SGP4 cannot produce; the samples
        before it are returned and the error is attached to the result.

        Args:
            start: First instant
            stop: Last instant (inclusive when it falls on the grid)
            step_seconds: Sampling interval, > 0
            max_workers: Evaluate samples on a thread pool of this size

        Returns:
            PropagationResult in ascending time

        Raises:
            InvalidStep: If step_seconds <= 0
        """
        instants = self.sample_instants(start, stop, step_seconds)
        result = PropagationResult(self.frame)
        if not instants:
            return result

        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                outcomes = list(executor.map(self._try_state, instants))
        else:
            outcomes = []
            for instant in instants:
                outcome = self._try_state(instant)
                outcomes.append(outcome)
                if isinstance(outcome, PropagationError):
                    break

        for outcome in outcomes:
            if isinstance(outcome, PropagationError):
                result.error = outcome
                break
            result.samples.append(outcome)

        if result.truncated:
            logger.warning(
                f"Propagation of {self.elements.satellite_number} truncated after "
                f"{len(result.samples)} of {len(instants)} samples: {result.error}"
            )
        return result

    def _try_state(self, instant: JulianDate):
        try:
            return self.state_at(instant)
        except PropagationError as e:
            return e

    def to_keplerian_elements(self) -> KeplerianElements:
        """
        Keplerian elements at the TLE epoch.

        The semi-major axis comes from the mean motion through Kepler's third
        law; the true anomaly from the mean anomaly through Kepler's equation.
        """
        el = self.elements
        n = el.mean_motion * TWOPI / SECONDS_PER_DAY  # rad/s
        mu = GRAVITATIONAL_PARAMETER_SI
        a = (mu / (n * n)) ** (1.0 / 3.0)
        return KeplerianElements(
            semi_major_axis=a,
            eccentricity=el.eccentricity,
            inclination=el.inclination_rad,
            argument_of_perigee=el.argument_of_perigee_rad,
            raan=el.raan_rad,
            true_anomaly=mean_to_true_anomaly(el.mean_anomaly_rad, el.eccentricity),
            gravitational_parameter=mu,
            instant=el.epoch,
        )

    def to_record(
        self, start: JulianDate, stop: JulianDate, step_seconds: float, max_workers: Optional[int] = None
    ) -> EphemerisRecord:
        """Propagate and package the samples as an EphemerisRecord."""
        return EphemerisRecord.from_result(self.propagate(start, stop, step_seconds, max_workers))

    def keplerian_record(self) -> KeplerianRecord:
        return KeplerianRecord.from_elements(self.to_keplerian_elements())


def keplerian_to_cartesian(elements: KeplerianElements) -> np.ndarray:
    """Two-body position (m) in the inertial frame from Keplerian elements."""
    a = elements.semi_major_axis
    e = elements.eccentricity
    nu = elements.true_anomaly
    p = a * (1.0 - e * e)
    r = p / (1.0 + e * math.cos(nu))
    r_pqw = np.array([r * math.cos(nu), r * math.sin(nu), 0.0])

    cO, sO = math.cos(elements.raan), math.sin(elements.raan)
    ci, si = math.cos(elements.inclination), math.sin(elements.inclination)
    cw, sw = math.cos(elements.argument_of_perigee), math.sin(elements.argument_of_perigee)
    rotation = np.array([
        [cO * cw - sO * sw * ci, -cO * sw - sO * cw * ci, sO * si],
        [sO * cw + cO * sw * ci, -sO * sw + cO * cw * ci, -cO * si],
        [sw * si, cw * si, ci],
    ])
    return rotation @ r_pqw
