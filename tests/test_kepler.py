"""
Unit Tests for the Kepler Equation Solver

Run with:
    python -m pytest tests/test_kepler.py -v
"""

import math
import unittest

from orbit_translator.errors import ConvergenceError
from orbit_translator.kepler import (
    eccentric_to_mean_anomaly,
    eccentric_to_true_anomaly,
    mean_to_true_anomaly,
    normalize_angle,
    solve_eccentric_anomaly,
    true_to_eccentric_anomaly,
)


class TestKeplerSolver(unittest.TestCase):
    """Tests for solve_eccentric_anomaly."""

    def test_residual_over_eccentricity_grid(self):
        """E - e sin E = M to 1e-12 for e up to 0.99."""
        for e in (0.0, 0.001, 0.1, 0.5, 0.9, 0.99):
            for degrees in range(0, 360, 7):
                m = math.radians(degrees)
                with self.subTest(e=e, M=degrees):
                    ecc = solve_eccentric_anomaly(m, e)
                    self.assertAlmostEqual(ecc - e * math.sin(ecc), m, delta=1e-12)
                    self.assertGreaterEqual(ecc, 0.0)
                    self.assertLess(ecc, 2 * math.pi)

    def test_high_eccentricity_every_degree(self):
        e = 0.99
        for degrees in range(0, 360):
            m = math.radians(degrees)
            with self.subTest(M=degrees):
                ecc = solve_eccentric_anomaly(m, e)
                self.assertAlmostEqual(ecc - e * math.sin(ecc), m, delta=1e-12)

    def test_circular_orbit_is_identity(self):
        for m in (0.0, 0.5, 3.0, 6.0):
            self.assertEqual(solve_eccentric_anomaly(m, 0.0), m)
            self.assertEqual(mean_to_true_anomaly(m, 0.0), m)

    def test_mean_anomaly_is_normalized(self):
        e = 0.3
        self.assertAlmostEqual(
            solve_eccentric_anomaly(1.0 + 4 * math.pi, e), solve_eccentric_anomaly(1.0, e), places=12
        )
        self.assertAlmostEqual(
            solve_eccentric_anomaly(-1.0, e), solve_eccentric_anomaly(2 * math.pi - 1.0, e), places=12
        )

    def test_apsides(self):
        self.assertEqual(solve_eccentric_anomaly(0.0, 0.7), 0.0)
        self.assertAlmostEqual(solve_eccentric_anomaly(math.pi, 0.7), math.pi, places=12)

    def test_non_elliptical_eccentricity(self):
        for e in (1.0, 1.5, -0.1):
            with self.subTest(e=e):
                with self.assertRaises(ConvergenceError):
                    solve_eccentric_anomaly(1.0, e)

    def test_iteration_cap(self):
        with self.assertRaises(ConvergenceError):
            solve_eccentric_anomaly(1.0, 0.9, max_iter=1)

    def test_convergence_error_is_arithmetic_error(self):
        with self.assertRaises(ArithmeticError):
            solve_eccentric_anomaly(1.0, 2.0)


class TestAnomalyConversions(unittest.TestCase):
    """True/eccentric/mean anomaly conversions."""

    def test_true_anomaly_leads_mean_anomaly_before_apoapsis(self):
        e = 0.0183651
        m = math.radians(131.878)
        nu = mean_to_true_anomaly(m, e)
        self.assertGreater(nu, m)
        # nu ~ M + 2e sin M for small e
        self.assertAlmostEqual(nu, m + 2 * e * math.sin(m), delta=5 * e * e)

    def test_round_trip(self):
        for e in (0.0, 0.2, 0.8, 0.95):
            for degrees in range(5, 360, 25):
                m = math.radians(degrees)
                with self.subTest(e=e, M=degrees):
                    nu = mean_to_true_anomaly(m, e)
                    ecc = true_to_eccentric_anomaly(nu, e)
                    self.assertAlmostEqual(eccentric_to_mean_anomaly(ecc, e), m, delta=1e-10)

    def test_true_anomaly_range(self):
        for degrees in range(0, 360, 10):
            nu = eccentric_to_true_anomaly(math.radians(degrees), 0.5)
            self.assertGreaterEqual(nu, 0.0)
            self.assertLess(nu, 2 * math.pi)

    def test_normalize_angle(self):
        self.assertEqual(normalize_angle(0.0), 0.0)
        self.assertAlmostEqual(normalize_angle(-0.5), 2 * math.pi - 0.5, places=15)
        self.assertAlmostEqual(normalize_angle(7.0), 7.0 - 2 * math.pi, places=15)


if __name__ == "__main__":
    unittest.main()
