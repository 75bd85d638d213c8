"""
Analytics router - per-patient and all-patients summaries.

Supported periods: 7days (default), 30days, 3months, 1year. Any other value
returns all-time data. Temperatures in the daily series are reported in
the unit requested with `temperatureUnit` (C or F).
"""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Path, Query

from core.auth import get_current_user
from core.dependencies import get_analytics_service
from schemas import PATIENT_ID_PATTERN, AggregateAnalyticsResponse, PatientAnalyticsResponse
from services import AnalyticsService
from services.analytics_service import DEFAULT_PERIOD, SUPPORTED_PERIODS

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(get_current_user)],
)

TemperatureUnit = Literal["C", "F"]

_PERIOD_DESCRIPTION = f"One of {', '.join(SUPPORTED_PERIODS)}; anything else means all-time"


@router.get(
    "/aggregate/all",
    response_model=AggregateAnalyticsResponse,
    summary="All-patients analytics",
    description="Readings, alerts, stats (including totalPatients), patient list and daily series "
                "across every patient."
)
async def get_aggregate_analytics(
    period: str = Query(DEFAULT_PERIOD, description=_PERIOD_DESCRIPTION),
    temperature_unit: TemperatureUnit = Query("C", alias="temperatureUnit"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
):
    return analytics_service.aggregate(None, period, temperature_unit)


@router.get(
    "/{patient_id}",
    response_model=PatientAnalyticsResponse,
    summary="Patient analytics",
    description="Readings, alerts, stats and daily series for one patient over the period."
)
async def get_patient_analytics(
    patient_id: str = Path(..., pattern=PATIENT_ID_PATTERN),
    period: str = Query(DEFAULT_PERIOD, description=_PERIOD_DESCRIPTION),
    temperature_unit: TemperatureUnit = Query("C", alias="temperatureUnit"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
):
    return analytics_service.aggregate(patient_id, period, temperature_unit)
