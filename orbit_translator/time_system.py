"""
Time System

Julian dates, durations, calendar conversion and Greenwich sidereal time.

A JulianDate is kept as an integer day number plus the seconds elapsed since
that day's noon, so adding durations and taking differences does not lose
precision to the large magnitude of the day count. All times are UTC; leap
seconds are not modelled.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.).
    Richards, E. G. (2013). Calendars. In Explanatory Supplement to the
    Astronomical Almanac (3rd ed.).
"""

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Tuple, Union

from orbit_translator.constants import SECONDS_PER_DAY, TWOPI
from orbit_translator.errors import InvalidDate

J2000_JD = 2451545.0
DAYS_PER_CENTURY = 36525.0


@dataclass(frozen=True, order=True)
class Duration:
    """Signed elapsed time in seconds."""

    seconds: float

    @classmethod
    def from_days(cls, days: float) -> "Duration":
        return cls(days * SECONDS_PER_DAY)

    @classmethod
    def from_minutes(cls, minutes: float) -> "Duration":
        return cls(minutes * 60.0)

    @property
    def minutes(self) -> float:
        return self.seconds / 60.0

    @property
    def days(self) -> float:
        return self.seconds / SECONDS_PER_DAY

    def __add__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.seconds + other.seconds)

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.seconds - other.seconds)

    def __neg__(self) -> "Duration":
        return Duration(-self.seconds)

    def __mul__(self, factor: float) -> "Duration":
        return Duration(self.seconds * factor)

    __rmul__ = __mul__


@dataclass(frozen=True, order=True)
class JulianDate:
    """
    Immutable Julian date.

    Attributes:
        day: Julian day number (the day starts at noon)
        seconds: Seconds elapsed since noon of ``day``, in [0, 86400)
    """

    day: int
    seconds: float = 0.0

    def __post_init__(self):
        day, seconds = _normalize(self.day, self.seconds)
        object.__setattr__(self, "day", day)
        object.__setattr__(self, "seconds", seconds)

    @classmethod
    def from_jd(cls, jd: float, fraction: float = 0.0) -> "JulianDate":
        """Build from a (possibly split) floating-point Julian date."""
        whole = math.floor(jd)
        return cls(int(whole), ((jd - whole) + fraction) * SECONDS_PER_DAY)

    @property
    def jd(self) -> float:
        return self.day + self.seconds / SECONDS_PER_DAY

    @property
    def centuries_since_j2000(self) -> float:
        return ((self.day - J2000_JD) + self.seconds / SECONDS_PER_DAY) / DAYS_PER_CENTURY

    def add(self, duration: Duration) -> "JulianDate":
        return JulianDate(self.day, self.seconds + duration.seconds)

    def add_seconds(self, seconds: float) -> "JulianDate":
        return JulianDate(self.day, self.seconds + seconds)

    def difference(self, other: "JulianDate") -> Duration:
        """Elapsed time from ``other`` to this date."""
        return Duration((self.day - other.day) * SECONDS_PER_DAY + (self.seconds - other.seconds))

    def __add__(self, other: Duration) -> "JulianDate":
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Union["JulianDate", Duration]):
        if isinstance(other, JulianDate):
            return self.difference(other)
        if isinstance(other, Duration):
            return self.add(-other)
        return NotImplemented

    def to_calendar(self) -> Tuple[int, int, int, int, int, float]:
        return to_calendar(self)

    def to_datetime(self) -> datetime:
        return to_datetime(self)

    def isoformat(self) -> str:
        return self.to_datetime().isoformat().replace("+00:00", "Z")

    def __str__(self) -> str:
        return self.isoformat()


def _normalize(day: int, seconds: float) -> Tuple[int, float]:
    if 0.0 <= seconds < SECONDS_PER_DAY:
        return int(day), float(seconds)
    carry = math.floor(seconds / SECONDS_PER_DAY)
    seconds = seconds - carry * SECONDS_PER_DAY
    # Rounding can land exactly on the upper bound
    if seconds >= SECONDS_PER_DAY:
        seconds -= SECONDS_PER_DAY
        carry += 1
    return int(day + carry), float(seconds)


def _day_number(year: int, month: int, day: int) -> int:
    """Gregorian calendar date to Julian day number."""
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def _civil_from_day_number(jdn: int) -> Tuple[int, int, int]:
    """Julian day number to Gregorian (year, month, day)."""
    f = jdn + 1401 + (((4 * jdn + 274277) // 146097) * 3) // 4 - 38
    e = 4 * f + 3
    g = (e % 1461) // 4
    h = 5 * g + 2
    day = (h % 153) // 5 + 1
    month = ((h // 153 + 2) % 12) + 1
    year = e // 1461 - 4716 + (12 + 2 - month) // 12
    return year, month, day


def from_calendar(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: float = 0.0
) -> JulianDate:
    """
    Create a Julian date from UTC calendar fields.

    Args:
        year: The year
        month: The month of the year, from 1 to 12
        day: The day of the month, from 1 to 31
        hour: The hour of the day, from 0 to 23
        minute: The minute of the hour, from 0 to 59
        second: Seconds of the minute, in [0, 60)

    Returns:
        The corresponding JulianDate

    Raises:
        InvalidDate: If any field is out of range
    """
    if not 1 <= month <= 12:
        raise InvalidDate(f"month {month} is not in [1, 12]")
    if year < 1:
        raise InvalidDate(f"year {year} is not supported")
    days_in_month = calendar.monthrange(year, month)[1]
    if not 1 <= day <= days_in_month:
        raise InvalidDate(f"day {day} is not valid for {year:04d}-{month:02d}")
    if not 0 <= hour <= 23:
        raise InvalidDate(f"hour {hour} is not in [0, 23]")
    if not 0 <= minute <= 59:
        raise InvalidDate(f"minute {minute} is not in [0, 59]")
    if not 0.0 <= second < 60.0:
        raise InvalidDate(f"second {second} is not in [0, 60)")

    # Calendar days start at midnight, Julian days at noon
    jdn = _day_number(year, month, day)
    return JulianDate(jdn - 1, 43200.0 + hour * 3600.0 + minute * 60.0 + second)


def to_calendar(jd: JulianDate) -> Tuple[int, int, int, int, int, float]:
    """
    Convert a Julian date to UTC calendar fields.

    Seconds are rounded to the microsecond, carrying into the next day when
    needed, so that from_calendar/to_calendar round-trip exactly.

    Returns:
        Tuple of (year, month, day, hour, minute, second)
    """
    jdn = jd.day
    seconds_of_day = round(jd.seconds + 43200.0, 6)
    if seconds_of_day >= SECONDS_PER_DAY:
        jdn += 1
        seconds_of_day -= SECONDS_PER_DAY

    year, month, day = _civil_from_day_number(jdn)
    hour = int(seconds_of_day // 3600.0)
    minute = int((seconds_of_day - hour * 3600.0) // 60.0)
    second = round(seconds_of_day - hour * 3600.0 - minute * 60.0, 6)
    return year, month, day, hour, minute, second


def from_datetime(dt: datetime) -> JulianDate:
    """Convert a datetime to a Julian date (naive datetimes are taken as UTC)."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return from_calendar(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second + dt.microsecond / 1e6)


def to_datetime(jd: JulianDate) -> datetime:
    """Convert a Julian date to a timezone-aware UTC datetime."""
    year, month, day, hour, minute, second = to_calendar(jd)
    whole = int(second)
    microsecond = int(round((second - whole) * 1e6))
    return datetime(year, month, day, hour, minute, whole, tzinfo=timezone.utc) + timedelta(
        microseconds=microsecond
    )


def from_tle_epoch(year: int, day_of_year: float) -> JulianDate:
    """Convert a 4-digit year and fractional day-of-year (Jan 1 0h = 1.0)."""
    return from_calendar(year, 1, 1).add_seconds((day_of_year - 1.0) * SECONDS_PER_DAY)


def add(jd: JulianDate, duration: Duration) -> JulianDate:
    return jd.add(duration)


def difference(a: JulianDate, b: JulianDate) -> Duration:
    """Elapsed time from ``b`` to ``a``."""
    return a.difference(b)


def greenwich_sidereal_time(jd: JulianDate) -> float:
    """
    Greenwich Mean Sidereal Time using the IAU-82 polynomial.

    Args:
        jd: Instant (UT1 is approximated by UTC)

    Returns:
        GMST in radians, normalized to [0, 2*pi)
    """
    t = jd.centuries_since_j2000
    gmst_sec = (
        67310.54841
        + (876600.0 * 3600.0 + 8640184.812866) * t
        + 0.093104 * t * t
        - 6.2e-6 * t * t * t
    )
    gmst = (gmst_sec % SECONDS_PER_DAY) * (TWOPI / SECONDS_PER_DAY)
    if gmst >= TWOPI:
        gmst -= TWOPI
    return gmst


J2000 = JulianDate(2451545, 0.0)
