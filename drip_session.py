"""
VasoDrip: Bedside Session
=========================
One DripSection per drug card, each owning its own Selection, and a
DripSheet that shares the patient weight across all cards.

Selections start where the bedside form starts: first mass option,
first diluent option, lowest dose.
"""

import logging
from typing import Dict, Iterable, Optional, Union

from models import (
    Selection,
    DerivedValues,
    DripDisplay,
    InputAlerts,
    SelectionError,
    UnknownDrugError
)
from constants import DRUG_LIBRARY, DOSE_STEP_TOLERANCE, DrugType, DrugProfile
from dose_calculator import DoseCalculator
from safety import InputSupervisor

logger = logging.getLogger(__name__)

def resolve_drug(drug: Union[DrugType, str]) -> DrugType:
    """Accepts the enum, its value ("dopamine") or the card title ("Dopamine")."""
    if isinstance(drug, DrugType):
        return drug
    if isinstance(drug, str):
        key = drug.strip().lower()
        for candidate in DrugType:
            if candidate.value == key:
                return candidate
    raise UnknownDrugError(f"Unknown drug: {drug!r}")

class DripSection:
    """
    A single drug card.
    The profile is fixed; the selection changes with every pick.
    """

    def __init__(self, profile: DrugProfile):
        self.profile = profile
        self.selection = Selection(
            mass_mg=profile.mass_options_mg[0],
            diluent_ml=profile.diluent_options_ml[0],
            dose_mcg_kg_min=profile.dose_min,
        )

    def __repr__(self):
        return f"DripSection({self.profile.title}, {self.selection})"

    @property
    def drug(self) -> DrugType:
        return self.profile.drug

    def _check_option(self, value, options, unit: str):
        if isinstance(value, bool) or value not in options:
            raise SelectionError(
                f"{self.profile.title}: {value} {unit} is not one of {list(options)}"
            )
        return value

    def select_mass(self, mass_mg: float) -> None:
        self.selection.mass_mg = self._check_option(mass_mg, self.profile.mass_options_mg, "mg")

    def select_diluent(self, diluent_ml: float) -> None:
        self.selection.diluent_ml = self._check_option(diluent_ml, self.profile.diluent_options_ml, "mL")

    def set_dose(self, dose: float) -> None:
        """Moves the slider. The value is snapped onto the step grid."""
        self.selection.dose_mcg_kg_min = self.snap_dose(dose)

    def snap_dose(self, dose: float) -> float:
        p = self.profile
        if not DoseCalculator.is_finite_number(dose):
            raise SelectionError(f"{p.title}: dose must be a number, got {dose!r}")

        if dose < p.dose_min - DOSE_STEP_TOLERANCE or dose > p.dose_max + DOSE_STEP_TOLERANCE:
            raise SelectionError(
                f"{p.title}: dose {dose} {p.dose_unit} is outside {p.dose_min}-{p.dose_max}"
            )

        steps = (dose - p.dose_min) / p.dose_step
        nearest = round(steps)
        if abs(steps - nearest) > DOSE_STEP_TOLERANCE * max(1.0, abs(steps)):
            raise SelectionError(
                f"{p.title}: dose {dose} is not a multiple of the {p.dose_step} {p.dose_unit} step"
            )

        snapped = round(p.dose_min + nearest * p.dose_step, p.dose_decimals)
        return min(max(snapped, p.dose_min), p.dose_max)

    def apply(self, mass_mg=None, diluent_ml=None, dose=None) -> None:
        """Applies any subset of picks. Validates everything before changing anything."""
        p = self.profile
        mass = self._check_option(mass_mg, p.mass_options_mg, "mg") if mass_mg is not None else None
        diluent = self._check_option(diluent_ml, p.diluent_options_ml, "mL") if diluent_ml is not None else None
        snapped = self.snap_dose(dose) if dose is not None else None

        if mass is not None:
            self.selection.mass_mg = mass
        if diluent is not None:
            self.selection.diluent_ml = diluent
        if snapped is not None:
            self.selection.dose_mcg_kg_min = snapped

    def derived(self, weight_kg) -> DerivedValues:
        return DoseCalculator.derive(self.selection, weight_kg)

    def display(self, weight_kg) -> DripDisplay:
        values = self.derived(weight_kg)
        concentration_text, rate_min_text, rate_hr_text = DoseCalculator.format_derived(values)
        return DripDisplay(
            drug=self.profile.drug,
            title=self.profile.title,
            mass_mg=self.selection.mass_mg,
            diluent_ml=self.selection.diluent_ml,
            dose_mcg_kg_min=self.selection.dose_mcg_kg_min,
            dose_text=DoseCalculator.format_or_zero(
                self.selection.dose_mcg_kg_min, self.profile.dose_decimals
            ),
            concentration_text=concentration_text,
            rate_ml_min_text=rate_min_text,
            rate_ml_hr_text=rate_hr_text,
            values=values,
        )

class DripSheet:
    """
    The whole bedside calculator: one shared weight, one card per drug.
    Cards never share state with each other.
    """

    def __init__(self, profiles: Optional[Iterable[DrugProfile]] = None):
        if profiles is None:
            profiles = DRUG_LIBRARY.all()
        self.sections: Dict[DrugType, DripSection] = {
            profile.drug: DripSection(profile) for profile in profiles
        }
        self.weight_kg: Optional[float] = None

    def set_weight(self, raw) -> Optional[float]:
        self.weight_kg = DoseCalculator.parse_weight(raw)
        if self.weight_kg is None:
            logger.debug("Weight %r treated as absent", raw)
        return self.weight_kg

    def section(self, drug: Union[DrugType, str]) -> DripSection:
        key = resolve_drug(drug)
        if key not in self.sections:
            raise UnknownDrugError(f"Drug not on this sheet: {key.value}")
        return self.sections[key]

    def alerts(self) -> InputAlerts:
        return InputSupervisor.check(self.weight_kg)

    def snapshot(self) -> Dict[DrugType, DripDisplay]:
        return {drug: section.display(self.weight_kg) for drug, section in self.sections.items()}
