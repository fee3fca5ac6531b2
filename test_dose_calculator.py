import unittest
import math
from fractions import Fraction
from dose_calculator import DoseCalculator
from models import Selection, DerivedValues

class TestDoseCalculator(unittest.TestCase):

    def test_01_concentration_formula(self):
        """
        Math Check: concentration = mg * 1000 / mL for every configured bag.
        """
        print("\nTEST 1: Concentration Formula")
        bags = [(200, 100), (400, 250), (800, 250), (1000, 100), (2, 250), (32, 100)]
        for mass, diluent in bags:
            conc = DoseCalculator.compute_concentration(mass, diluent)
            print(f"  > {mass} mg / {diluent} mL = {conc} mcg/mL")
            self.assertAlmostEqual(conc, mass * 1000 / diluent, places=9)
            self.assertGreater(conc, 0)

    def test_02_concentration_bad_diluent(self):
        """A zero or non-finite diluent never raises."""
        self.assertEqual(DoseCalculator.compute_concentration(400, 0), 0.0)
        self.assertEqual(DoseCalculator.compute_concentration(400, -250), 0.0)
        self.assertEqual(DoseCalculator.compute_concentration(400, float("nan")), 0.0)

    def test_03_rate_zero_for_invalid_weight(self):
        """
        Fallback Check: missing, zero, negative or non-finite weight gives a zero rate.
        """
        print("\nTEST 3: Invalid Weight Fallback")
        for weight in [None, 0, 0.0, -70, float("nan"), float("inf"), float("-inf"), "70", True]:
            rate = DoseCalculator.compute_rate_ml_per_min(5, weight, 1600)
            self.assertEqual(rate, 0.0, f"Weight {weight!r} should give zero rate")

    def test_04_rate_formula(self):
        rate = DoseCalculator.compute_rate_ml_per_min(5, 70, 1600)
        self.assertAlmostEqual(rate, 0.21875, places=12)

        rate = DoseCalculator.compute_rate_ml_per_min(10, 55.5, 3200)
        self.assertAlmostEqual(rate, (10 * 55.5) / 3200, places=12)

    def test_05_rate_zero_concentration(self):
        self.assertEqual(DoseCalculator.compute_rate_ml_per_min(5, 70, 0), 0.0)
        self.assertEqual(DoseCalculator.compute_rate_ml_per_min(5, 70, float("inf")), 0.0)

    def test_06_rate_per_hour(self):
        """Math Check: mL/hr is always 60 x mL/min."""
        for x in [0.0, 0.21875, 0.2, 1.5, 12.345, -3.0]:
            self.assertAlmostEqual(DoseCalculator.compute_rate_ml_per_hr(x), 60 * x, places=9)

    def test_07_format_precision(self):
        """
        Display Check: fixed precision with half-up ties on the exact value.
        """
        print("\nTEST 7: Guarded Formatting")
        fmt = DoseCalculator.format_or_zero
        self.assertEqual(fmt(0.21875, 3), "0.219")
        self.assertEqual(fmt(13.125, 1), "13.1")
        self.assertEqual(fmt(1600.0, 0), "1600")
        self.assertEqual(fmt(0.2, 3), "0.200")
        self.assertEqual(fmt(12, 1), "12.0")
        self.assertEqual(fmt(2.5, 0), "3")
        self.assertEqual(fmt(0.1, 1), "0.1")

    def test_08_format_non_finite(self):
        """NaN and Infinity render as zero at the requested precision."""
        fmt = DoseCalculator.format_or_zero
        self.assertEqual(fmt(float("nan"), 3), "0.000")
        self.assertEqual(fmt(float("inf"), 1), "0.0")
        self.assertEqual(fmt(float("-inf"), 0), "0")
        self.assertEqual(fmt(None, 3), "0.000")
        self.assertEqual(fmt(-0.0, 3), "0.000")
        self.assertEqual(fmt(-0.0001, 3), "0.000")

    def test_09_parse_weight(self):
        parse = DoseCalculator.parse_weight
        self.assertEqual(parse(70), 70.0)
        self.assertEqual(parse("80.5"), 80.5)
        self.assertEqual(parse("  3.2 "), 3.2)
        for raw in [None, "", "   ", "abc", "0", 0, -4, "-4", "nan", "inf", float("nan"), [70]]:
            self.assertIsNone(parse(raw), f"{raw!r} should be treated as absent")

    def test_10_derive_is_finite_or_zero(self):
        derived = DoseCalculator.derive(Selection(400, 250, 5), 70)
        self.assertIsInstance(derived, DerivedValues)
        self.assertAlmostEqual(derived.concentration_mcg_ml, 1600.0)
        self.assertAlmostEqual(derived.rate_ml_min, 0.21875)
        self.assertAlmostEqual(derived.rate_ml_hr, 13.125)

        broken = DoseCalculator.derive(Selection(400, 250, float("nan")), 70)
        for value in (broken.concentration_mcg_ml, broken.rate_ml_min, broken.rate_ml_hr):
            self.assertTrue(math.isfinite(value))
        self.assertEqual(broken.rate_ml_min, 0.0)

    def test_11_format_derived(self):
        derived = DerivedValues(concentration_mcg_ml=40.0, rate_ml_min=0.2, rate_ml_hr=12.0)
        self.assertEqual(DoseCalculator.format_derived(derived), ("40", "0.200", "12.0"))

    def test_12_oversized_integer_weight(self):
        """An integer too large for a float is an absent weight, not a crash."""
        huge = 10 ** 400
        self.assertFalse(DoseCalculator.is_finite_number(huge))
        self.assertIsNone(DoseCalculator.parse_weight(huge))
        self.assertEqual(DoseCalculator.compute_rate_ml_per_min(5, huge, 1600), 0.0)
        self.assertEqual(DoseCalculator.finite_or_zero(huge), 0.0)
        self.assertEqual(DoseCalculator.format_or_zero(huge, 3), "0.000")

    def test_13_format_other_reals(self):
        """Any finite real formats, not just floats and ints."""
        self.assertEqual(DoseCalculator.format_or_zero(Fraction(7, 32), 3), "0.219")
        self.assertEqual(DoseCalculator.format_or_zero(Fraction(1, 3), 1), "0.3")

if __name__ == '__main__':
    unittest.main()
