"""
Unit Tests for TLE Parsing and Formatting

Run with:
    python -m pytest tests/test_tle_parser.py -v
"""

import unittest

from orbit_translator.errors import ParseError
from orbit_translator.time_system import from_calendar, from_tle_epoch, to_calendar
from orbit_translator.tle_parser import (
    MeanElements,
    compute_checksum,
    expand_epoch_year,
    format_tle,
    parse,
)

ISS_LINE1 = "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995"
ISS_LINE2 = "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598"

GPS_LINE1 = "1 20724U 90068A   02173.73395695 -.00000086  00000-0  00000-0 0  1771"
GPS_LINE2 = "2 20724  56.1487  21.0845 0183651 226.6216 131.8780  2.00562381 85500"

DEEP_LINE1 = "1 11801U          80230.29629788  .01431103  00000-0  14311-1 0    13"
DEEP_LINE2 = "2 11801  46.7916 230.4354 7318036  47.4722  10.4117  2.28537848    13"


def _with_checksum(line):
    return line[:68] + str(compute_checksum(line))


class TestTLEParsing(unittest.TestCase):
    """Field extraction from valid element sets."""

    def test_iss_fields(self):
        el = parse(ISS_LINE1, ISS_LINE2, "ISS (ZARYA)")
        self.assertEqual(el.satellite_number, 25544)
        self.assertEqual(el.classification, "U")
        self.assertEqual(el.international_designator, "98067A")
        self.assertEqual(el.epoch_year, 2023)
        self.assertAlmostEqual(el.epoch_day, 259.5758, places=10)
        self.assertAlmostEqual(el.mean_motion_dot, 0.00012022, places=12)
        self.assertEqual(el.mean_motion_ddot, 0.0)
        self.assertAlmostEqual(el.bstar, 0.21844e-3, places=15)
        self.assertEqual(el.ephemeris_type, 0)
        self.assertEqual(el.element_number, 999)
        self.assertAlmostEqual(el.inclination, 51.6416, places=10)
        self.assertAlmostEqual(el.raan, 220.9944, places=10)
        self.assertAlmostEqual(el.eccentricity, 0.0004263, places=12)
        self.assertAlmostEqual(el.argument_of_perigee, 122.0101, places=10)
        self.assertAlmostEqual(el.mean_anomaly, 312.2755, places=10)
        self.assertAlmostEqual(el.mean_motion, 15.49541986, places=10)
        self.assertEqual(el.revolution_number, 41559)
        self.assertEqual(el.name, "ISS (ZARYA)")

    def test_epoch(self):
        el = parse(GPS_LINE1, GPS_LINE2)
        self.assertEqual(el.epoch, from_tle_epoch(2002, 173.73395695))
        self.assertEqual(to_calendar(el.epoch)[:3], (2002, 6, 22))

    def test_negative_mean_motion_derivative(self):
        el = parse(GPS_LINE1, GPS_LINE2)
        self.assertAlmostEqual(el.mean_motion_dot, -0.00000086, places=14)
        self.assertEqual(el.bstar, 0.0)

    def test_blank_designator_and_exponent(self):
        el = parse(DEEP_LINE1, DEEP_LINE2)
        self.assertEqual(el.international_designator, "")
        self.assertEqual(el.epoch_year, 1980)
        self.assertAlmostEqual(el.bstar, 0.14311e-1, places=15)
        self.assertAlmostEqual(el.eccentricity, 0.7318036, places=12)
        self.assertEqual(el.element_number, 1)
        self.assertEqual(el.revolution_number, 1)

    def test_trailing_whitespace_is_stripped(self):
        el = parse(ISS_LINE1 + "\n", ISS_LINE2 + "  \r\n")
        self.assertEqual(el.satellite_number, 25544)

    def test_derived_views(self):
        el = parse(GPS_LINE1, GPS_LINE2)
        self.assertAlmostEqual(el.period_minutes, 1440.0 / 2.00562381, places=9)
        self.assertAlmostEqual(el.inclination_rad, 0.97998, places=4)

    def test_epoch_year_pivot(self):
        self.assertEqual(expand_epoch_year(57), 1957)
        self.assertEqual(expand_epoch_year(99), 1999)
        self.assertEqual(expand_epoch_year(0), 2000)
        self.assertEqual(expand_epoch_year(56), 2056)


class TestTLEValidation(unittest.TestCase):
    """Malformed lines raise ParseError."""

    def test_checksum_mismatch(self):
        bad = ISS_LINE1[:68] + "0"
        with self.assertRaises(ParseError) as ctx:
            parse(bad, ISS_LINE2)
        self.assertIn("checksum", ctx.exception.reason)
        self.assertEqual(ctx.exception.line, 1)

    def test_corrupted_digit_fails_checksum(self):
        """Any single changed digit after the line marker is caught by the checksum."""
        for number, line in ((1, ISS_LINE1), (2, ISS_LINE2)):
            for column in range(1, 68):
                digit = line[column]
                if not digit.isdigit():
                    continue
                corrupted = line[:column] + str((int(digit) + 1) % 10) + line[column + 1:]
                with self.subTest(line=number, column=column + 1):
                    lines = (corrupted, ISS_LINE2) if number == 1 else (ISS_LINE1, corrupted)
                    with self.assertRaises(ParseError) as ctx:
                        parse(*lines)
                    self.assertIn("checksum", ctx.exception.reason)
                    self.assertEqual(ctx.exception.line, number)

    def test_non_finite_mean_motion(self):
        for text in ("        inf", "        nan", "   Infinity"):
            with self.subTest(text=text):
                line2 = _with_checksum(ISS_LINE2[:52] + text + ISS_LINE2[63:])
                with self.assertRaises(ParseError) as ctx:
                    parse(ISS_LINE1, line2)
                self.assertIn("mean motion", ctx.exception.reason)

    def test_underscore_in_number(self):
        line2 = _with_checksum(ISS_LINE2[:8] + " 51.6_16" + ISS_LINE2[16:])
        with self.assertRaises(ParseError):
            parse(ISS_LINE1, line2)

    def test_non_ascii_digits(self):
        cases = (
            (_with_checksum(ISS_LINE1[:64] + " ²" + ISS_LINE1[66:]), ISS_LINE2),  # element set number
            (ISS_LINE1[:68] + "²", ISS_LINE2),  # checksum character
            (ISS_LINE1, _with_checksum(ISS_LINE2[:26] + "000٤263" + ISS_LINE2[33:])),  # eccentricity
            (ISS_LINE1, _with_checksum(ISS_LINE2[:8] + " 51.٦416" + ISS_LINE2[16:])),  # inclination
        )
        for line1, line2 in cases:
            with self.subTest(line1=line1, line2=line2):
                with self.assertRaises(ParseError):
                    parse(line1, line2)

    def test_non_ascii_digit_is_not_counted(self):
        self.assertEqual(compute_checksum("²" * 68), 0)

    def test_short_line(self):
        with self.assertRaises(ParseError):
            parse(ISS_LINE1[:60], ISS_LINE2)

    def test_long_line(self):
        with self.assertRaises(ParseError):
            parse(ISS_LINE1, ISS_LINE2 + "0")

    def test_wrong_line_marker(self):
        with self.assertRaises(ParseError):
            parse(_with_checksum("3" + ISS_LINE1[1:]), ISS_LINE2)
        with self.assertRaises(ParseError):
            parse(ISS_LINE2, ISS_LINE1)

    def test_catalog_numbers_disagree(self):
        line2 = _with_checksum("2 25545" + ISS_LINE2[7:])
        with self.assertRaises(ParseError) as ctx:
            parse(ISS_LINE1, line2)
        self.assertIn("catalog", ctx.exception.reason)

    def test_non_numeric_field(self):
        line2 = _with_checksum(ISS_LINE2[:8] + " 51.64X6" + ISS_LINE2[16:])
        with self.assertRaises(ParseError):
            parse(ISS_LINE1, line2)

    def test_non_numeric_eccentricity(self):
        line2 = _with_checksum(ISS_LINE2[:26] + "00A4263" + ISS_LINE2[33:])
        with self.assertRaises(ParseError):
            parse(ISS_LINE1, line2)

    def test_inclination_out_of_range(self):
        line2 = _with_checksum(ISS_LINE2[:8] + "181.0000" + ISS_LINE2[16:])
        with self.assertRaises(ParseError):
            parse(ISS_LINE1, line2)

    def test_zero_mean_motion(self):
        line2 = _with_checksum(ISS_LINE2[:52] + " 0.00000000" + ISS_LINE2[63:])
        with self.assertRaises(ParseError):
            parse(ISS_LINE1, line2)

    def test_parse_error_is_value_error(self):
        with self.assertRaises(ValueError):
            parse("", "")


class TestTLEFormatting(unittest.TestCase):
    """format_tle reproduces standard text and inverts parse."""

    def test_checksum_rules(self):
        self.assertEqual(compute_checksum(ISS_LINE1), 5)
        self.assertEqual(compute_checksum(ISS_LINE2), 8)
        self.assertEqual(compute_checksum("1-" + " " * 66), 2)

    def test_reproduces_standard_text(self):
        for line1, line2 in ((ISS_LINE1, ISS_LINE2), (GPS_LINE1, GPS_LINE2)):
            with self.subTest(satellite=line1[2:7]):
                self.assertEqual(format_tle(parse(line1, line2)), (line1, line2))

    def test_left_inverse(self):
        elements = MeanElements(
            satellite_number=99999,
            epoch=from_tle_epoch(2020, 100.5),
            epoch_year=2020,
            epoch_day=100.5,
            mean_motion=14.82,
            eccentricity=0.12,
            inclination=97.5,
            raan=10.25,
            argument_of_perigee=0.0,
            mean_anomaly=180.0,
            bstar=-0.12345e-4,
            international_designator="20001A",
        )
        line1, line2 = format_tle(elements)
        self.assertEqual(len(line1), 69)
        self.assertEqual(len(line2), 69)
        parsed = parse(line1, line2)
        self.assertEqual(parsed.satellite_number, 99999)
        self.assertEqual(parsed.epoch_year, 2020)
        self.assertAlmostEqual(parsed.epoch_day, 100.5, places=8)
        self.assertAlmostEqual(parsed.mean_motion, 14.82, places=8)
        self.assertAlmostEqual(parsed.eccentricity, 0.12, places=7)
        self.assertAlmostEqual(parsed.inclination, 97.5, places=4)
        self.assertAlmostEqual(parsed.raan, 10.25, places=4)
        self.assertAlmostEqual(parsed.mean_anomaly, 180.0, places=4)
        self.assertAlmostEqual(parsed.bstar, -0.12345e-4, places=12)

    def test_invalid_elements_rejected(self):
        with self.assertRaises(ParseError):
            MeanElements(
                satellite_number=1,
                epoch=from_calendar(2020, 1, 1),
                epoch_year=2020,
                epoch_day=1.0,
                mean_motion=15.0,
                eccentricity=1.0,
                inclination=50.0,
                raan=0.0,
                argument_of_perigee=0.0,
                mean_anomaly=0.0,
            )


if __name__ == "__main__":
    unittest.main()
