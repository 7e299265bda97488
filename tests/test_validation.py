"""
Unit Tests for Reference Validation

Run with:
    python -m pytest tests/test_validation.py -v
"""

import runpy
import unittest
from unittest import mock

from config import ISS_TLE
from orbit_translator.validation import REFERENCE_CASES, compare_with_reference, validate_reference_cases


class TestReferenceValidation(unittest.TestCase):

    def test_compare_single_state(self):
        comparison = compare_with_reference(ISS_TLE["line1"], ISS_TLE["line2"], 90.0)
        self.assertEqual(comparison["tsince"], 90.0)
        self.assertLess(comparison["position_error_km"], 1e-3)
        self.assertLess(comparison["velocity_error_kms"], 1e-6)
        self.assertEqual(comparison["position"].shape, (3,))

    def test_all_reference_cases_pass(self):
        summaries = validate_reference_cases()
        self.assertEqual(len(summaries), len(REFERENCE_CASES))
        for summary in summaries:
            with self.subTest(case=summary["name"]):
                self.assertTrue(summary["passed"], summary)

    def test_script_uses_shared_logging_setup(self):
        with mock.patch("logging_config.configure_logging") as configure:
            runpy.run_module("orbit_translator.validation", run_name="__main__")
        configure.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
