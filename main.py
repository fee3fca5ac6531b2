# main.py

import logging
from typing import Optional, List, Dict, Union
from datetime import datetime
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

# Import Data Models & Logic
from models import DripDisplay, DripSheetResult, UnknownDrugError
from constants import (
    VERSION,
    DRUG_LIBRARY,
    FORMULA_NOTES,
    MEDICAL_DISCLAIMER,
    DrugType
)
from app import generate_drip_sheet
from drip_session import resolve_drug

# --- 1. CONFIGURATION & LOGGING ---
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("vasodrip-api")

app = FastAPI(
    title="VasoDrip API",
    version=VERSION,
    description="Weight-based infusion calculator for Dopamine, Dobutamine, and Norepinephrine. \n\n"
                "**WARNING**: Built for quick bedside math. Verify against local protocols before use.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"status": "active", "message": "VasoDrip API is running successfully!"}

@app.get("/health")
def health_check():
    """Liveness probe"""
    return {"status": "active", "version": VERSION, "module": "vasodrip-dose-calculator"}

# --- 2. INPUT SCHEMA ---
class SelectionRequest(BaseModel):
    # Options and slider grid are checked by the drip card itself
    mass_mg: Optional[float] = Field(None, gt=0, description="Drug mass in the bag (mg)")
    diluent_ml: Optional[float] = Field(None, gt=0, description="Diluent volume (mL)")
    dose: Optional[float] = Field(None, ge=0, description="Dose (mcg/kg/min)")

class DripRequest(BaseModel):
    # Any raw weight is accepted; unusable values zero the rates
    weight_kg: Optional[Union[float, str]] = Field(None, description="Patient weight in kg")
    # Keys are resolved like the card lookup: "dopamine" or "Dopamine"
    selections: Dict[str, SelectionRequest] = Field(default_factory=dict)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "weight_kg": 70,
                "selections": {
                    "dopamine": {"mass_mg": 400, "diluent_ml": 250, "dose": 5},
                    "norepinephrine": {"mass_mg": 4, "diluent_ml": 100, "dose": 0.1}
                }
            }
        }
    )

class SingleDripRequest(SelectionRequest):
    weight_kg: Optional[Union[float, str]] = Field(None, description="Patient weight in kg")

# --- 3. EXPLICIT RESPONSE SCHEMA (The Contract) ---
class DripResponse(BaseModel):
    drug: DrugType
    title: str
    mass_mg: float
    diluent_ml: float
    dose_mcg_kg_min: float

    # Numbers (finite or zero)
    concentration_mcg_ml: float
    rate_ml_min: float
    rate_ml_hr: float

    # Display (fixed precision)
    dose_text: str
    concentration_text: str
    rate_ml_min_text: str
    rate_ml_hr_text: str
    summary: str

class SheetResponse(BaseModel):
    weight_kg: Optional[float]
    weight_prompt: Optional[str]
    drips: List[DripResponse]
    disclaimer: str
    generated_at: datetime = Field(default_factory=datetime.now)

class DrugProfileResponse(BaseModel):
    drug: DrugType
    title: str
    mass_options_mg: List[float]
    diluent_options_ml: List[float]
    dose_min: float
    dose_max: float
    dose_step: float
    dose_unit: str

class LibraryResponse(BaseModel):
    drugs: List[DrugProfileResponse]
    formula: List[str]
    disclaimer: str

def _to_drip_response(display: DripDisplay) -> DripResponse:
    return DripResponse(
        drug=display.drug,
        title=display.title,
        mass_mg=display.mass_mg,
        diluent_ml=display.diluent_ml,
        dose_mcg_kg_min=display.dose_mcg_kg_min,
        concentration_mcg_ml=display.values.concentration_mcg_ml,
        rate_ml_min=display.values.rate_ml_min,
        rate_ml_hr=display.values.rate_ml_hr,
        dose_text=display.dose_text,
        concentration_text=display.concentration_text,
        rate_ml_min_text=display.rate_ml_min_text,
        rate_ml_hr_text=display.rate_ml_hr_text,
        summary=display.summary,
    )

def _to_sheet_response(result: DripSheetResult) -> SheetResponse:
    if result.system_failure:
        logger.error(f"Internal Calculator Failure: {result.errors}")
        raise HTTPException(status_code=500, detail="Internal Dose Calculator Error")
    if not result.success:
        detail = "; ".join(result.errors)
        logger.warning(f"Selection Error: {detail}")
        raise HTTPException(status_code=422, detail=f"Selection Error: {detail}")

    return SheetResponse(
        weight_kg=result.weight_kg,
        weight_prompt=result.alerts.message,
        drips=[_to_drip_response(display) for display in result.drips.values()],
        disclaimer=result.disclaimer,
    )

# --- 4. ENDPOINTS ---

@app.get("/drugs", response_model=LibraryResponse)
def list_drugs():
    """The preconfigured drip cards and the formulas behind them."""
    return LibraryResponse(
        drugs=[
            DrugProfileResponse(
                drug=p.drug,
                title=p.title,
                mass_options_mg=list(p.mass_options_mg),
                diluent_options_ml=list(p.diluent_options_ml),
                dose_min=p.dose_min,
                dose_max=p.dose_max,
                dose_step=p.dose_step,
                dose_unit=p.dose_unit,
            )
            for p in DRUG_LIBRARY.all()
        ],
        formula=list(FORMULA_NOTES),
        disclaimer=MEDICAL_DISCLAIMER,
    )

@app.post("/calculate", response_model=SheetResponse)
def calculate_sheet(request: DripRequest):
    """
    Recomputes the whole bedside sheet for the current weight and picks.
    """
    logger.info(f"Calculating drip sheet for Wt: {request.weight_kg!r}")

    data = {
        "weight_kg": request.weight_kg,
        "selections": {
            drug: picks.model_dump() for drug, picks in request.selections.items()
        },
    }
    return _to_sheet_response(generate_drip_sheet(data))

@app.post("/calculate/{drug}", response_model=SheetResponse)
def calculate_single(drug: str, request: SingleDripRequest):
    """Recomputes one drug card."""
    try:
        drug_enum = resolve_drug(drug)
    except UnknownDrugError:
        raise HTTPException(status_code=404, detail=f"Unknown drug: {drug}")

    logger.info(f"Calculating {drug_enum.value} for Wt: {request.weight_kg!r}")

    picks = request.model_dump(exclude={"weight_kg"})
    data = {"weight_kg": request.weight_kg, "selections": {drug_enum.value: picks}}
    return _to_sheet_response(generate_drip_sheet(data, only=drug_enum))
