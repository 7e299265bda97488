"""
Orbit Translator Configuration

Example element sets and command-line defaults.

Example TLE Data:
    GPS BIIA-10 (20724) is the default object of the command-line tool. Its
    epoch (2002 day 173) lies well before the default sampling window, so the
    default run exercises long-range deep-space propagation.

    The ISS set is a near-Earth example used by demonstrations and tests.
    Element sets age quickly for low orbits: refresh from CelesTrak or
    Space-Track before using either for anything but examples.
"""

from typing import Any, Dict

# GPS BIIA-10, 12-hour orbit (deep-space branch)
EXAMPLE_TLE: Dict[str, Any] = {
    'name': 'GPS BIIA-10 (PRN 32)',
    'norad_id': 20724,
    'line1': '1 20724U 90068A   02173.73395695 -.00000086  00000-0  00000-0 0  1771',
    'line2': '2 20724  56.1487  21.0845 0183651 226.6216 131.8780  2.00562381 85500',
}

# ISS, low Earth orbit (near-Earth branch)
ISS_TLE: Dict[str, Any] = {
    'name': 'ISS (ZARYA)',
    'norad_id': 25544,
    'line1': '1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995',
    'line2': '2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598',
}

# Command-line defaults
DEFAULT_FRAME: str = 'ECEF'
DEFAULT_START: str = '2015-11-26T00:00:00'
DEFAULT_STOP: str = '2015-11-27T00:00:00'
DEFAULT_STEP_SECONDS: float = 3600.0
