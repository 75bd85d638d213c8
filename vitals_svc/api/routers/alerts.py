"""
Alerts router - listing and acknowledgement.

`/alerts/all` is declared before `/alerts/{patient_id}` so the literal path
is not captured as a patient id.
"""
import logging

from fastapi import APIRouter, Depends, Path

from core.auth import AuthenticatedUser, get_current_user
from core.dependencies import get_alert_service
from schemas import (
    PATIENT_ID_PATTERN,
    AlertAcknowledgeResponse,
    AlertListResponse,
    EnrichedAlertListResponse,
)
from services import AlertService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/alerts",
    tags=["Alerts"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/all",
    response_model=EnrichedAlertListResponse,
    summary="List every alert",
    description="All patients' alerts, newest first, labelled with patient name, age and email."
)
async def list_all_alerts(
    alert_service: AlertService = Depends(get_alert_service)
):
    return EnrichedAlertListResponse(alerts=alert_service.list_all_enriched())


@router.get(
    "/{patient_id}",
    response_model=AlertListResponse,
    summary="List a patient's alerts",
    description="Alerts for one patient, newest first."
)
async def list_patient_alerts(
    patient_id: str = Path(..., pattern=PATIENT_ID_PATTERN),
    alert_service: AlertService = Depends(get_alert_service)
):
    return AlertListResponse(alerts=alert_service.list_for_patient(patient_id))


@router.put(
    "/{alert_id}/acknowledge",
    response_model=AlertAcknowledgeResponse,
    summary="Acknowledge an alert",
    description="Mark an alert acknowledged by the caller. Acknowledging again overwrites "
                "acknowledgedBy and acknowledgedAt. Returns 404 for an unknown alert id."
)
async def acknowledge_alert(
    alert_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    alert_service: AlertService = Depends(get_alert_service)
):
    # AlertNotFoundError is handled by setup_exception_handlers()
    return AlertAcknowledgeResponse(alert=alert_service.acknowledge(alert_id, actor_id=user.id))
