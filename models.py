"""
VasoDrip: Data Dictionary
=========================
Defines the values that flow through the drip calculator:
the per-drug Selection (what the clinician picks), the DerivedValues
(what the math produces) and the Outputs shown at the bedside.

NO MATH is implemented here. See dose_calculator.py.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from datetime import datetime
from constants import VERSION, DrugType

class SelectionError(ValueError):
    """Raised when a programmatic selection is not reachable from the bedside form."""
    pass

class UnknownDrugError(KeyError):
    """Raised when a drug name does not match any configured drip card."""
    pass

# --- 1. INPUT LAYER (What the Clinician Picks) ---

@dataclass
class Selection:
    """
    One drug card's current choices.
    Mutated only through DripSection, never shared between cards.
    """
    mass_mg: float            # From the profile's mass options
    diluent_ml: float         # From the profile's diluent options
    dose_mcg_kg_min: float    # On the profile's slider grid

# --- 2. DERIVED LAYER (Recomputed on every change) ---

@dataclass(frozen=True)
class DerivedValues:
    concentration_mcg_ml: float
    rate_ml_min: float
    rate_ml_hr: float

# --- 3. OUTPUT LAYER (What the Bedside Sheet Shows) ---

@dataclass
class InputAlerts:
    """Prompts for the shared inputs."""
    weight_missing: bool = False
    message: Optional[str] = None

@dataclass
class DripDisplay:
    """
    The formatted card for one drug.
    Numbers are already rounded at their fixed precision.
    """
    drug: DrugType
    title: str
    mass_mg: float
    diluent_ml: float
    dose_mcg_kg_min: float
    dose_text: str
    concentration_text: str   # 0 decimals, mcg/mL
    rate_ml_min_text: str     # 3 decimals
    rate_ml_hr_text: str      # 1 decimal
    values: DerivedValues
    summary: str = ""

@dataclass
class AuditLog:
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    action: str = "drip_sheet"
    inputs_hash: int = 0
    model_version: str = VERSION

@dataclass
class DripSheetResult:
    """Standardized response format for API/UI."""
    success: bool
    weight_kg: Optional[float]
    alerts: InputAlerts
    drips: Dict[DrugType, DripDisplay]
    errors: List[str]
    disclaimer: str
    system_failure: bool = False  # True only for unexpected crashes, not rejected picks
    audit_log: Optional[AuditLog] = None
