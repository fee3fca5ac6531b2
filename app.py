# --- METADATA & COMPLIANCE ---
__version__ = "1.0.0"
__model_date__ = "2026-10-16"
__validation_status__ = "Clinical validation pending"

"""
VasoDrip: Bedside Entry Point
=============================
Weight-based infusion calculator for Dopamine, Dobutamine and Norepinephrine.

generate_drip_sheet() is the single call the UI/API makes on every change:
it rebuilds a fresh sheet from plain data, computes every card and reports
problems as strings instead of raising.
"""

import logging
from typing import Optional

from models import (
    Selection,
    DripDisplay,
    DripSheetResult,
    AuditLog,
    SelectionError,
    UnknownDrugError
)
from constants import MEDICAL_DISCLAIMER, DrugType
from drip_session import DripSheet

logger = logging.getLogger(__name__)

def render_summary(title: str, selection: Selection, display: DripDisplay) -> str:
    """One line for the bedside: what is hung, how fast it runs."""
    return (
        f"{title} {selection.mass_mg:g} mg in {selection.diluent_ml:g} mL "
        f"({display.concentration_text} mcg/mL) at {display.dose_text} mcg/kg/min "
        f"-> {display.rate_ml_min_text} mL/min ({display.rate_ml_hr_text} mL/hr)"
    )

def generate_drip_sheet(data: dict, only: Optional[DrugType] = None) -> DripSheetResult:
    """
    SAFE FACTORY: The main entry point for the UI/API.

    data = {
        "weight_kg": 70,                      # anything the weight box can hold
        "selections": {
            "dopamine": {"mass_mg": 400, "diluent_ml": 250, "dose": 5},
            ...
        }
    }

    Drugs or fields left out keep the form's defaults.
    """
    sheet = DripSheet()
    errors = []
    audit = AuditLog(inputs_hash=hash(str(data)))

    try:
        sheet.set_weight(data.get("weight_kg"))

        for drug_name, picks in (data.get("selections") or {}).items():
            try:
                section = sheet.section(drug_name)
                picks = picks or {}
                section.apply(
                    mass_mg=picks.get("mass_mg"),
                    diluent_ml=picks.get("diluent_ml"),
                    dose=picks.get("dose"),
                )
            except (SelectionError, UnknownDrugError) as e:
                # KeyError wraps its message in quotes
                message = e.args[0] if e.args else str(e)
                logger.warning("Rejected selection for %s: %s", drug_name, message)
                errors.append(message)

        drips = sheet.snapshot()
        if only is not None:
            drips = {only: drips[only]}

        for drug, display in drips.items():
            display.summary = render_summary(
                display.title, sheet.section(drug).selection, display
            )

        return DripSheetResult(
            success=not errors,
            weight_kg=sheet.weight_kg,
            alerts=sheet.alerts(),
            drips=drips,
            errors=errors,
            disclaimer=MEDICAL_DISCLAIMER,
            audit_log=audit
        )

    except Exception as e:
        logger.error("Drip sheet failure: %s", e, exc_info=True)
        return DripSheetResult(
            success=False,
            weight_kg=None,
            alerts=sheet.alerts(),
            drips={},
            errors=[f"System Error: {str(e)}"],
            disclaimer=MEDICAL_DISCLAIMER,
            system_failure=True,
            audit_log=audit
        )
