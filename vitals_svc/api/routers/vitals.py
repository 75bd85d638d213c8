"""
Vitals router - reading ingestion and history.

Architecture:
    HTTP Request → Router (this file) → VitalsService → Repositories → Store

All endpoints require a bearer token; the authenticated user is recorded
as `recordedBy` on every new reading.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from core.auth import AuthenticatedUser, get_current_user
from core.config import DEFAULT_VITALS_LIMIT
from core.dependencies import get_vitals_service
from schemas import (
    PATIENT_ID_PATTERN,
    VitalReadingCreate,
    VitalReadingCreatedResponse,
    VitalReadingListResponse,
)
from services import VitalsService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/vitals",
    tags=["Vitals"],
    dependencies=[Depends(get_current_user)],
)

MAX_VITALS_LIMIT = 1000


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=VitalReadingCreatedResponse,
    status_code=201,
    summary="Record vital signs",
    description="Store a reading for a patient. Each vital outside its normal band produces one alert, "
                "returned alongside the reading (alerts is null for a fully normal reading)."
)
async def create_vital_reading(
    body: VitalReadingCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Record a reading.

    - **patientId**: Patient identifier (required)
    - **heartRate**, **bloodPressure** (or **systolic** + **diastolic**),
      **oxygenLevel**, **temperature** (°C): at least one is required
    - **notes**: Optional free text
    """
    reading, alerts = vitals_service.record_reading(
        patient_id=body.patient_id,
        recorded_by=user.id,
        heart_rate=body.heart_rate,
        blood_pressure=body.blood_pressure,
        oxygen_level=body.oxygen_level,
        temperature=body.temperature,
        notes=body.notes or "",
    )
    return VitalReadingCreatedResponse(vital_reading=reading, alerts=alerts or None)


@router.get(
    "/{patient_id}",
    response_model=VitalReadingListResponse,
    summary="List a patient's readings",
    description=f"Most recent readings first. Defaults to {DEFAULT_VITALS_LIMIT} results, "
                f"maximum {MAX_VITALS_LIMIT}."
)
async def list_vital_readings(
    patient_id: str = Path(..., pattern=PATIENT_ID_PATTERN),
    limit: Optional[int] = Query(
        None,
        ge=1,
        le=MAX_VITALS_LIMIT,
        description=f"Maximum readings to return (default {DEFAULT_VITALS_LIMIT})"
    ),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    effective_limit = limit if limit is not None else DEFAULT_VITALS_LIMIT
    return VitalReadingListResponse(
        vitals=vitals_service.list_readings(patient_id, effective_limit)
    )
