from enum import Enum
from dataclasses import dataclass, field
from typing import Tuple

VERSION = "1.0.0"

MEDICAL_DISCLAIMER = "Built for quick bedside math. Verify against local protocols before use."

WEIGHT_PROMPT = "Enter a positive weight to compute."

FORMULA_NOTES = (
    "rate (mL/min) = [ dose (mcg/kg/min) x weight (kg) ] / concentration (mcg/mL)",
    "concentration = ( drug (mg) x 1000 ) / diluent (mL)",
)

class DrugType(Enum):
    DOPAMINE = "dopamine"
    DOBUTAMINE = "dobutamine"
    NOREPINEPHRINE = "norepinephrine"

class DISPLAY_PRECISION:
    # Decimal places per displayed field
    CONCENTRATION = 0
    RATE_PER_MIN = 3
    RATE_PER_HR = 1

class UNIT_CONSTANTS:
    MCG_PER_MG = 1000.0
    MINUTES_PER_HOUR = 60.0

# Slider values are accepted when within this fraction of a step from the grid
DOSE_STEP_TOLERANCE = 1e-9

@dataclass(frozen=True)
class DrugProfile:
    drug: DrugType
    title: str
    mass_options_mg: Tuple[float, ...]
    diluent_options_ml: Tuple[float, ...]
    dose_min: float            # mcg/kg/min
    dose_max: float            # mcg/kg/min
    dose_step: float           # mcg/kg/min
    dose_unit: str = field(default="mcg/kg/min")

    @property
    def dose_decimals(self) -> int:
        """Decimal places implied by the slider step (1 -> 0, 0.1 -> 1)."""
        text = repr(float(self.dose_step))
        if "e" in text or text.endswith(".0"):
            return 0
        return len(text.split(".")[1])

class DRUG_LIBRARY:
    """
    The three preconfigured drip cards.
    Fixed domain data, reproduced exactly from the bedside sheet.
    """
    SPECS = {
        DrugType.DOPAMINE: DrugProfile(
            drug=DrugType.DOPAMINE,
            title="Dopamine",
            mass_options_mg=(200, 400, 800),
            diluent_options_ml=(100, 250),
            dose_min=0, dose_max=20, dose_step=1,
        ),
        DrugType.DOBUTAMINE: DrugProfile(
            drug=DrugType.DOBUTAMINE,
            title="Dobutamine",
            mass_options_mg=(250, 500, 1000),
            diluent_options_ml=(100, 250),
            dose_min=0, dose_max=20, dose_step=1,
        ),
        DrugType.NOREPINEPHRINE: DrugProfile(
            drug=DrugType.NOREPINEPHRINE,
            title="Norepinephrine",
            mass_options_mg=(2, 4, 8, 16, 32),
            diluent_options_ml=(100, 250),
            dose_min=0, dose_max=2, dose_step=0.1,
        ),
    }

    @staticmethod
    def get(drug_enum: DrugType) -> DrugProfile:
        return DRUG_LIBRARY.SPECS[drug_enum]

    @staticmethod
    def all() -> Tuple[DrugProfile, ...]:
        return tuple(DRUG_LIBRARY.SPECS.values())
