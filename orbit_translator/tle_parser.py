"""
TLE Parser Module

Parses and validates NORAD Two-Line Element (TLE) sets into mean orbital
elements, and formats mean elements back into TLE text.

Field positions (0-based slices):
    Line 1: [2:7] catalog number, [7] classification, [9:17] international
            designator, [18:20] epoch year, [20:32] epoch day, [33:43] ndot/2,
            [44:52] nddot/6, [53:61] B*, [62] ephemeris type,
            [64:68] element set number, [68] checksum
    Line 2: [2:7] catalog number, [8:16] inclination, [17:25] RAAN,
            [26:33] eccentricity, [34:42] argument of perigee,
            [43:51] mean anomaly, [52:63] mean motion,
            [63:68] revolution number, [68] checksum
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Tuple

from orbit_translator.constants import DEG2RAD, MINUTES_PER_DAY
from orbit_translator.errors import InvalidDate, ParseError
from orbit_translator.time_system import JulianDate, from_tle_epoch

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69
DIGITS = "0123456789"

_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)", re.ASCII)
_EXPONENT = re.compile(r"[+-]?\d", re.ASCII)


@dataclass(frozen=True)
class MeanElements:
    """Mean orbital elements of a TLE, in the units the TLE carries them."""

    satellite_number: int
    epoch: JulianDate
    epoch_year: int
    epoch_day: float
    mean_motion: float  # rev/day
    eccentricity: float
    inclination: float  # deg
    raan: float  # deg
    argument_of_perigee: float  # deg
    mean_anomaly: float  # deg
    mean_motion_dot: float = 0.0  # ndot/2, rev/day^2
    mean_motion_ddot: float = 0.0  # nddot/6, rev/day^3
    bstar: float = 0.0  # 1/earth radii
    classification: str = "U"
    international_designator: str = ""
    ephemeris_type: int = 0
    element_number: int = 0
    revolution_number: int = 0
    name: str = field(default="", compare=False)

    def __post_init__(self):
        if not 0.0 <= self.eccentricity < 1.0:
            raise ParseError(f"eccentricity {self.eccentricity} is not in [0, 1)")
        if not (self.mean_motion > 0.0 and math.isfinite(self.mean_motion)):
            raise ParseError(f"mean motion {self.mean_motion} rev/day must be positive")
        if not 0.0 <= self.inclination <= 180.0:
            raise ParseError(f"inclination {self.inclination} deg is not in [0, 180]")
        for label, value in (
            ("right ascension of ascending node", self.raan),
            ("argument of perigee", self.argument_of_perigee),
            ("mean anomaly", self.mean_anomaly),
        ):
            if not 0.0 <= value <= 360.0:
                raise ParseError(f"{label} {value} deg is not in [0, 360]")

    @property
    def period_minutes(self) -> float:
        return MINUTES_PER_DAY / self.mean_motion

    @property
    def inclination_rad(self) -> float:
        return self.inclination * DEG2RAD

    @property
    def raan_rad(self) -> float:
        return self.raan * DEG2RAD

    @property
    def argument_of_perigee_rad(self) -> float:
        return self.argument_of_perigee * DEG2RAD

    @property
    def mean_anomaly_rad(self) -> float:
        return self.mean_anomaly * DEG2RAD


def compute_checksum(line: str) -> int:
    """Mod-10 checksum of columns 1-68: digits count at face value, '-' as 1."""
    checksum = 0
    for char in line[:68]:
        if char in DIGITS:
            checksum += int(char)
        elif char == "-":
            checksum += 1
    return checksum % 10


def expand_epoch_year(two_digit_year: int) -> int:
    """Two-digit TLE year to a 4-digit year (57-99 -> 19xx, 00-56 -> 20xx)."""
    return 1900 + two_digit_year if two_digit_year >= 57 else 2000 + two_digit_year


def _check_line(line: str, number: int) -> str:
    if not isinstance(line, str):
        raise ParseError("line must be a string", number)
    line = line.rstrip()
    if len(line) != TLE_LINE_LENGTH:
        raise ParseError(f"expected {TLE_LINE_LENGTH} characters, got {len(line)}", number)
    if line[0] != str(number):
        raise ParseError(f"line number marker is {line[0]!r}, expected '{number}'", number)
    if line[68] not in DIGITS:
        raise ParseError(f"checksum character {line[68]!r} is not a digit", number)
    expected = compute_checksum(line)
    if int(line[68]) != expected:
        raise ParseError(f"checksum mismatch: field is {line[68]}, computed {expected}", number)
    return line


def _is_digits(text: str) -> bool:
    return bool(text) and all(char in DIGITS for char in text)


def _float_field(line: str, start: int, stop: int, label: str, number: int) -> float:
    # float() alone would let through inf, nan, underscores and non-ASCII digits
    text = line[start:stop].strip()
    if not _DECIMAL.fullmatch(text):
        raise ParseError(f"{label} field {line[start:stop]!r} is not numeric", number)
    return float(text)


def _int_field(line: str, start: int, stop: int, label: str, number: int, blank_ok: bool = False) -> int:
    text = line[start:stop].strip()
    if not text and blank_ok:
        return 0
    if not _is_digits(text):
        raise ParseError(f"{label} field {line[start:stop]!r} is not an integer", number)
    return int(text)


def _exponent_field(line: str, start: int, stop: int, label: str, number: int) -> float:
    """Parse TLE implied-decimal exponential notation, e.g. ' 21844-3' -> 0.21844e-3."""
    text = line[start:stop]
    mantissa_text = text[:-2].strip()
    exponent_text = text[-2:].strip()
    if not mantissa_text:
        return 0.0

    sign = 1.0
    if mantissa_text[0] in "+-":
        if mantissa_text[0] == "-":
            sign = -1.0
        mantissa_text = mantissa_text[1:]
    if not _is_digits(mantissa_text):
        raise ParseError(f"{label} mantissa {text!r} is not numeric", number)

    if exponent_text in ("", "+", "-"):
        exponent = 0
    elif _EXPONENT.fullmatch(exponent_text):
        exponent = int(exponent_text)
    else:
        raise ParseError(f"{label} exponent {text!r} is not numeric", number)

    return sign * float("0." + mantissa_text) * 10.0 ** exponent


def parse(line1: str, line2: str, name: str = "") -> MeanElements:
    """
    Parse a TLE into validated mean elements.

    Args:
        line1: First line of TLE
        line2: Second line of TLE
        name: Optional satellite name (the TLE "line 0")

    Returns:
        MeanElements for the set

    Raises:
        ParseError: On any length, marker, checksum or field violation
    """
    line1 = _check_line(line1, 1)
    line2 = _check_line(line2, 2)

    satnum = _int_field(line1, 2, 7, "catalog number", 1)
    satnum2 = _int_field(line2, 2, 7, "catalog number", 2)
    if satnum != satnum2:
        raise ParseError(f"catalog numbers differ between lines ({satnum} != {satnum2})")

    epoch_year = expand_epoch_year(_int_field(line1, 18, 20, "epoch year", 1))
    epoch_day = _float_field(line1, 20, 32, "epoch day", 1)
    if not 1.0 <= epoch_day < 367.0:
        raise ParseError(f"epoch day {epoch_day} is not in [1, 367)", 1)
    try:
        epoch = from_tle_epoch(epoch_year, epoch_day)
    except InvalidDate as e:
        raise ParseError(f"invalid epoch: {e}", 1) from e

    eccentricity_text = line2[26:33]
    if not _is_digits(eccentricity_text.strip()):
        raise ParseError(f"eccentricity field {eccentricity_text!r} is not numeric", 2)

    elements = MeanElements(
        satellite_number=satnum,
        classification=line1[7],
        international_designator=line1[9:17].strip(),
        epoch=epoch,
        epoch_year=epoch_year,
        epoch_day=epoch_day,
        mean_motion_dot=_float_field(line1, 33, 43, "mean motion derivative", 1),
        mean_motion_ddot=_exponent_field(line1, 44, 52, "mean motion second derivative", 1),
        bstar=_exponent_field(line1, 53, 61, "B*", 1),
        ephemeris_type=_int_field(line1, 62, 63, "ephemeris type", 1, blank_ok=True),
        element_number=_int_field(line1, 64, 68, "element set number", 1, blank_ok=True),
        inclination=_float_field(line2, 8, 16, "inclination", 2),
        raan=_float_field(line2, 17, 25, "right ascension", 2),
        eccentricity=float("0." + eccentricity_text.strip()),
        argument_of_perigee=_float_field(line2, 34, 42, "argument of perigee", 2),
        mean_anomaly=_float_field(line2, 43, 51, "mean anomaly", 2),
        mean_motion=_float_field(line2, 52, 63, "mean motion", 2),
        revolution_number=_int_field(line2, 63, 68, "revolution number", 2, blank_ok=True),
        name=name.strip(),
    )
    logger.debug(
        f"Parsed TLE {satnum}: epoch {epoch}, n={elements.mean_motion:.8f} rev/day, "
        f"e={elements.eccentricity:.7f}"
    )
    return elements


def _format_exponential(value: float) -> str:
    """Format a number in TLE implied-decimal exponential notation (8 chars)."""
    if value == 0.0:
        return " 00000-0"

    sign = "-" if value < 0 else " "
    magnitude = abs(value)
    exponent = int(math.floor(math.log10(magnitude))) + 1
    mantissa = int(round(magnitude / 10.0 ** exponent * 100000))
    if mantissa >= 100000:
        mantissa //= 10
        exponent += 1
    if not -9 <= exponent <= 9:
        raise ValueError(f"{value} cannot be represented in TLE exponential notation")

    exp_sign = "-" if exponent < 0 else "+"
    return f"{sign}{mantissa:05d}{exp_sign}{abs(exponent):d}"


def _format_ndot(value: float) -> str:
    if abs(value) >= 1.0:
        raise ValueError(f"mean motion derivative {value} does not fit the TLE field")
    text = f"{abs(value):.8f}"[1:]
    return ("-" if value < 0 else " ") + text


def format_tle(elements: MeanElements) -> Tuple[str, str]:
    """
    Format mean elements as TLE text with fresh checksums.

    Args:
        elements: Mean elements to format

    Returns:
        Tuple of (line1, line2) strings
    """
    if not 0 <= elements.satellite_number <= 99999:
        raise ValueError(f"catalog number {elements.satellite_number} does not fit 5 digits")

    ecc_digits = int(round(elements.eccentricity * 1e7))
    if ecc_digits > 9999999:
        raise ValueError(f"eccentricity {elements.eccentricity} does not fit the TLE field")

    line1 = f"1 {elements.satellite_number:05d}{elements.classification[:1] or 'U'} "
    line1 += f"{elements.international_designator:<8.8s} "
    line1 += f"{elements.epoch_year % 100:02d}{elements.epoch_day:012.8f} "
    line1 += _format_ndot(elements.mean_motion_dot) + " "
    line1 += _format_exponential(elements.mean_motion_ddot) + " "
    line1 += _format_exponential(elements.bstar) + " "
    line1 += f"{elements.ephemeris_type % 10:d} {elements.element_number % 10000:4d}"
    line1 += str(compute_checksum(line1))

    line2 = f"2 {elements.satellite_number:05d} "
    line2 += f"{elements.inclination:8.4f} "
    line2 += f"{elements.raan:8.4f} "
    line2 += f"{ecc_digits:07d} "
    line2 += f"{elements.argument_of_perigee:8.4f} "
    line2 += f"{elements.mean_anomaly:8.4f} "
    line2 += f"{elements.mean_motion:11.8f}"
    line2 += f"{elements.revolution_number % 100000:5d}"
    line2 += str(compute_checksum(line2))

    return line1, line2
