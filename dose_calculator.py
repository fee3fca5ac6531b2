"""
VasoDrip: Dose Calculator
=========================
The mathematical core. Translates a drug card's selection and the
patient weight into concentration and pump rate.

    concentration (mcg/mL) = (drug_mg * 1000) / diluent_mL
    rate (mL/min) = [ dose (mcg/kg/min) * weight (kg) ] / concentration (mcg/mL)
    rate (mL/hr)  = rate (mL/min) * 60

Nothing in here raises for bad numbers. Invalid states fall back to zero.
"""

import math
import numbers
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional, Tuple

from models import Selection, DerivedValues
from constants import DISPLAY_PRECISION, UNIT_CONSTANTS

class DoseCalculator:
    """
    Stateless weight-based drip math.
    Every method is pure and safe to call on each keystroke.
    """

    @staticmethod
    def is_finite_number(value) -> bool:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return False
        try:
            return math.isfinite(value)
        except OverflowError:
            # Integers too large for a float
            return False

    @staticmethod
    def is_valid_weight(weight_kg) -> bool:
        """A usable weight is a finite number above zero."""
        return DoseCalculator.is_finite_number(weight_kg) and weight_kg > 0

    @staticmethod
    def parse_weight(raw) -> Optional[float]:
        """
        Converts whatever the weight box holds into kilograms.
        Empty, non-numeric, zero, negative and non-finite entries are absent (None).
        """
        if raw is None:
            return None
        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                return None
            try:
                raw = float(text)
            except ValueError:
                return None
        if not DoseCalculator.is_valid_weight(raw):
            return None
        return float(raw)

    @staticmethod
    def finite_or_zero(value) -> float:
        return float(value) if DoseCalculator.is_finite_number(value) else 0.0

    @staticmethod
    def compute_concentration(drug_mass_mg: float, diluent_volume_ml: float) -> float:
        """Drug mass per diluent volume, in mcg/mL."""
        if not DoseCalculator.is_finite_number(diluent_volume_ml) or diluent_volume_ml <= 0:
            return 0.0
        return (drug_mass_mg * UNIT_CONSTANTS.MCG_PER_MG) / diluent_volume_ml

    @staticmethod
    def compute_rate_ml_per_min(dose_mcg_kg_min: float, weight_kg, mcg_per_ml: float) -> float:
        """
        Pump rate in mL/min.
        Missing or non-positive weight gives 0 rather than an error.
        """
        if not DoseCalculator.is_valid_weight(weight_kg):
            return 0.0
        if not DoseCalculator.is_finite_number(mcg_per_ml) or mcg_per_ml <= 0:
            return 0.0
        return (dose_mcg_kg_min * weight_kg) / mcg_per_ml

    @staticmethod
    def compute_rate_ml_per_hr(ml_per_min: float) -> float:
        return ml_per_min * UNIT_CONSTANTS.MINUTES_PER_HOUR

    @staticmethod
    def derive(selection: Selection, weight_kg) -> DerivedValues:
        """Full recomputation for one card. Every field is finite or zero."""
        concentration = DoseCalculator.compute_concentration(
            selection.mass_mg, selection.diluent_ml
        )
        rate_min = DoseCalculator.compute_rate_ml_per_min(
            selection.dose_mcg_kg_min, weight_kg, concentration
        )
        rate_hr = DoseCalculator.compute_rate_ml_per_hr(rate_min)

        return DerivedValues(
            concentration_mcg_ml=DoseCalculator.finite_or_zero(concentration),
            rate_ml_min=DoseCalculator.finite_or_zero(rate_min),
            rate_ml_hr=DoseCalculator.finite_or_zero(rate_hr),
        )

    @staticmethod
    def format_or_zero(value, digits: int = 3) -> str:
        """
        Fixed-point text for display.
        Non-finite values render as 0 at the same precision. Ties round half up
        on the exact binary value, so 0.21875 shows as "0.219".
        """
        if not DoseCalculator.is_finite_number(value):
            value = 0.0

        with localcontext() as ctx:
            ctx.prec = 400  # Enough for any float at the precisions we show
            rounded = Decimal(float(value)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)

        if rounded.is_zero():
            rounded = rounded.copy_abs()
        return f"{rounded:f}"

    @staticmethod
    def format_derived(derived: DerivedValues) -> Tuple[str, str, str]:
        """(concentration, mL/min, mL/hr) text at the sheet's precision."""
        return (
            DoseCalculator.format_or_zero(derived.concentration_mcg_ml, DISPLAY_PRECISION.CONCENTRATION),
            DoseCalculator.format_or_zero(derived.rate_ml_min, DISPLAY_PRECISION.RATE_PER_MIN),
            DoseCalculator.format_or_zero(derived.rate_ml_hr, DISPLAY_PRECISION.RATE_PER_HR),
        )
