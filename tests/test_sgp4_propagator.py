"""
Unit Tests for the SGP4 Propagator

Compares this implementation with the reference sgp4 library on the Vallado
verification objects and checks error handling.

Run with:
    python -m pytest tests/test_sgp4_propagator.py -v
"""

import unittest

import numpy as np
from sgp4.api import Satrec

from orbit_translator.constants import WGS84
from orbit_translator.errors import DecayedOrbit, PropagationError
from orbit_translator.sgp4_propagator import SGP4Propagator
from orbit_translator.time_system import from_tle_epoch
from orbit_translator.tle_parser import MeanElements, parse

NEAR_EARTH_CASES = {
    "00005": (
        "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  4753",
        "2 00005  34.2682 348.7242 1859667 331.7664  19.3264 10.82419157413667",
    ),
    "06251": (
        "1 06251U 62025E   06176.82412014  .00008885  00000-0  12808-3 0  3985",
        "2 06251  58.0579  54.0425 0030035 139.1568 221.1854 14.84476164767361",
    ),
    "25544": (
        "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995",
        "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598",
    ),
}

DEEP_SPACE_CASES = {
    "11801": (
        "1 11801U          80230.29629788  .01431103  00000-0  14311-1 0    13",
        "2 11801  46.7916 230.4354 7318036  47.4722  10.4117  2.28537848    13",
    ),
    "20724": (
        "1 20724U 90068A   02173.73395695 -.00000086  00000-0  00000-0 0  1771",
        "2 20724  56.1487  21.0845 0183651 226.6216 131.8780  2.00562381 85500",
    ),
    "28626": (
        "1 28626U 05008A   06176.46683397 -.00000205  00000-0  10000-3 0  2190",
        "2 28626   0.0019 286.9433 0000335  13.7918  55.6504  1.00270176  4891",
    ),
    "08195": (
        "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813",
        "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656",
    ),
}


def reference_state(line1, line2, tsince):
    satellite = Satrec.twoline2rv(line1, line2)
    error, r, v = satellite.sgp4(satellite.jdsatepoch, satellite.jdsatepochF + tsince / 1440.0)
    return error, np.array(r), np.array(v)


def decaying_elements(mean_anomaly):
    """Elements with a perigee 220 km below the surface (a = 7000 km, e = 0.12)."""
    return MeanElements(
        satellite_number=99001,
        epoch=from_tle_epoch(2020, 100.5),
        epoch_year=2020,
        epoch_day=100.5,
        mean_motion=14.82,
        eccentricity=0.12,
        inclination=51.6,
        raan=0.0,
        argument_of_perigee=0.0,
        mean_anomaly=mean_anomaly,
    )


class TestAgainstReferenceLibrary(unittest.TestCase):
    """Positions and velocities agree with the sgp4 library."""

    def _compare(self, cases, times, position_tolerance, velocity_tolerance):
        for satnum, (line1, line2) in cases.items():
            propagator = SGP4Propagator(parse(line1, line2))
            for tsince in times:
                with self.subTest(satellite=satnum, tsince=tsince):
                    error, r_ref, v_ref = reference_state(line1, line2, tsince)
                    self.assertEqual(error, 0)
                    r, v = propagator.propagate(tsince)
                    self.assertLess(np.linalg.norm(r - r_ref), position_tolerance)
                    self.assertLess(np.linalg.norm(v - v_ref), velocity_tolerance)

    def test_near_earth(self):
        self._compare(NEAR_EARTH_CASES, [0.0, 60.0, 360.0, 720.0, 1440.0, -720.0], 1e-3, 1e-6)

    def test_deep_space(self):
        self._compare(DEEP_SPACE_CASES, [0.0, 120.0, 720.0, 1440.0, 2880.0], 1e-2, 1e-5)

    def test_deep_space_backwards(self):
        self._compare({"28626": DEEP_SPACE_CASES["28626"]}, [-1440.0, -4320.0], 1e-2, 1e-5)

    def test_long_range_resonance(self):
        """Resonance integration over ten days of 720-minute steps."""
        self._compare({"28626": DEEP_SPACE_CASES["28626"]}, [14400.0], 2e-2, 1e-5)


class TestPublishedValues(unittest.TestCase):

    def test_vanguard_at_epoch(self):
        """Published output for object 00005 at t = 0."""
        line1, line2 = NEAR_EARTH_CASES["00005"]
        r, v = SGP4Propagator(parse(line1, line2)).propagate(0.0)
        np.testing.assert_allclose(r, [7022.46529266, -1400.08296755, 0.03995155], atol=1e-4)
        np.testing.assert_allclose(v, [1.893841015, 6.405893759, 4.534807250], atol=1e-7)


class TestPropagatorBehaviour(unittest.TestCase):

    def test_branch_selection(self):
        self.assertEqual(SGP4Propagator(parse(*NEAR_EARTH_CASES["25544"])).method, "n")
        for satnum, lines in DEEP_SPACE_CASES.items():
            with self.subTest(satellite=satnum):
                self.assertEqual(SGP4Propagator(parse(*lines)).method, "d")

    def test_resonance_classes(self):
        self.assertEqual(SGP4Propagator(parse(*DEEP_SPACE_CASES["28626"])).deep_space.irez, 1)
        self.assertEqual(SGP4Propagator(parse(*DEEP_SPACE_CASES["08195"])).deep_space.irez, 2)
        self.assertEqual(SGP4Propagator(parse(*DEEP_SPACE_CASES["20724"])).deep_space.irez, 0)

    def test_results_do_not_depend_on_call_history(self):
        propagator = SGP4Propagator(parse(*DEEP_SPACE_CASES["28626"]))
        first_r, first_v = propagator.propagate(2000.0)
        propagator.propagate(10000.0)
        propagator.propagate(-3000.0)
        again_r, again_v = propagator.propagate(2000.0)
        np.testing.assert_array_equal(first_r, again_r)
        np.testing.assert_array_equal(first_v, again_v)

    def test_propagate_to_instant(self):
        elements = parse(*NEAR_EARTH_CASES["25544"])
        propagator = SGP4Propagator(elements)
        r1, _ = propagator.propagate_to(elements.epoch.add_seconds(5400.0))
        r2, _ = propagator.propagate(90.0)
        np.testing.assert_allclose(r1, r2, atol=1e-6)

    def test_iss_radius(self):
        propagator = SGP4Propagator(parse(*NEAR_EARTH_CASES["25544"]))
        for tsince in range(0, 1440, 97):
            r, v = propagator.propagate(float(tsince))
            self.assertTrue(6600.0 < np.linalg.norm(r) < 6900.0)
            self.assertTrue(7.4 < np.linalg.norm(v) < 7.9)

    def test_wgs84_gravity_model(self):
        lines = NEAR_EARTH_CASES["25544"]
        r72, _ = SGP4Propagator(parse(*lines)).propagate(60.0)
        r84, _ = SGP4Propagator(parse(*lines), WGS84).propagate(60.0)
        difference = np.linalg.norm(r72 - r84)
        self.assertGreater(difference, 0.0)
        self.assertLess(difference, 5.0)


class TestPropagationErrors(unittest.TestCase):

    def test_decay_at_epoch(self):
        propagator = SGP4Propagator(decaying_elements(mean_anomaly=0.0))
        with self.assertRaises(DecayedOrbit) as ctx:
            propagator.propagate(0.0)
        self.assertEqual(ctx.exception.code, 6)
        self.assertLess(ctx.exception.radius_km, 6378.135)
        self.assertIn("Physical meaning", str(ctx.exception))

    def test_decay_is_propagation_error(self):
        propagator = SGP4Propagator(decaying_elements(mean_anomaly=0.0))
        with self.assertRaises(PropagationError):
            propagator.propagate(0.0)

    def test_valid_before_perigee_pass(self):
        propagator = SGP4Propagator(decaying_elements(mean_anomaly=180.0))
        r, _ = propagator.propagate(0.0)
        self.assertGreater(np.linalg.norm(r), 7000.0)
        with self.assertRaises(DecayedOrbit):
            propagator.propagate(48.6)

    def test_eccentricity_error_from_drag(self):
        """Heavy drag drives the mean eccentricity negative long after epoch."""
        line1, line2 = DEEP_SPACE_CASES["11801"]
        propagator = SGP4Propagator(parse(line1, line2))
        with self.assertRaises(PropagationError) as ctx:
            propagator.propagate(1.0e6)
        self.assertIn(ctx.exception.code, (1, 2, 3, 4, 6))


if __name__ == "__main__":
    unittest.main()
