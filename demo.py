"""
TLE Orbit Translator Command-Line Tool

Propagates a TLE over a time window and prints the ephemeris record as JSON,
or prints the Keplerian elements at the TLE epoch.

Usage:
    python demo.py [--line1 L1 --line2 L2] [--frame ECEF|ECI]
                   [--start ISO] [--stop ISO] [--step SECONDS]
                   [--gravity wgs72|wgs84] [--keplerian] [--workers N] [--verbose]

With no arguments, the GPS example TLE is sampled hourly in ECEF over
2015-11-26.

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

import argparse
import sys
from datetime import datetime
from typing import List, Optional

from config import DEFAULT_FRAME, DEFAULT_START, DEFAULT_STEP_SECONDS, DEFAULT_STOP, EXAMPLE_TLE
from logging_config import configure_logging, get_logger
from orbit_translator.constants import GRAVITY_MODELS
from orbit_translator.errors import InvalidDate, OrbitTranslatorError
from orbit_translator.records import EphemerisRecord
from orbit_translator.time_system import JulianDate, from_datetime
from orbit_translator.translator import OrbitTranslator

logger = get_logger(__name__)


def parse_instant(text: str) -> JulianDate:
    """
    Parse an ISO-8601 UTC timestamp.

    Parameters
    ----------
    text : str
        Timestamp such as ``2015-11-26T00:00:00`` or ``2015-11-26T00:00:00Z``

    Returns
    -------
    JulianDate
        The instant (naive timestamps are taken as UTC)
    """
    cleaned = text.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        return from_datetime(datetime.fromisoformat(cleaned))
    except ValueError as e:
        raise InvalidDate(f"cannot parse timestamp {text!r}: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate a TLE into Cartesian state vectors or Keplerian elements"
    )
    parser.add_argument("--line1", default=EXAMPLE_TLE["line1"], help="TLE line 1")
    parser.add_argument("--line2", default=EXAMPLE_TLE["line2"], help="TLE line 2")
    parser.add_argument(
        "--frame", default=DEFAULT_FRAME, help="Output frame: ECEF (Earth-fixed) or ECI (inertial)"
    )
    parser.add_argument("--start", default=DEFAULT_START, help="First sample, ISO-8601 UTC")
    parser.add_argument("--stop", default=DEFAULT_STOP, help="Last sample, ISO-8601 UTC")
    parser.add_argument(
        "--step", type=float, default=DEFAULT_STEP_SECONDS, help="Sampling interval in seconds"
    )
    parser.add_argument(
        "--gravity", choices=sorted(GRAVITY_MODELS), default="wgs72", help="Gravity model for SGP4"
    )
    parser.add_argument(
        "--keplerian", action="store_true", help="Print Keplerian elements at the TLE epoch instead"
    )
    parser.add_argument("--workers", type=int, default=None, help="Propagate on a thread pool")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    configure_logging(verbose=args.verbose)

    try:
        translator = OrbitTranslator(args.line1, args.line2, args.frame, GRAVITY_MODELS[args.gravity])
        if args.keplerian:
            record = translator.keplerian_record()
        else:
            start = parse_instant(args.start)
            stop = parse_instant(args.stop)
            result = translator.propagate(start, stop, args.step, max_workers=args.workers)
            logger.info(
                f"Propagated {translator.elements.satellite_number}: {len(result)} samples "
                f"in {translator.frame.tag}"
            )
            if result.truncated:
                logger.warning(f"Output truncated: {result.error}")
            record = EphemerisRecord.from_result(result)
    except OrbitTranslatorError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    print(record.model_dump_json(by_alias=True, exclude_none=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
