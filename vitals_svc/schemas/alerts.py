"""
Pydantic schemas for alert API operations.
"""
from typing import List, Optional

from pydantic import Field

from models import Alert, CamelModel

UNKNOWN_PATIENT_NAME = "Unknown Patient"


class EnrichedAlert(Alert):
    """An alert labelled with the owning patient's profile details.

    When no profile exists for the patient the name falls back to
    "Unknown Patient" and age/email are null.
    """
    patient_name: str = Field(UNKNOWN_PATIENT_NAME, description="Patient display name")
    patient_age: Optional[int] = Field(None, description="Patient age in years")
    patient_email: Optional[str] = Field(None, description="Patient email address")


class AlertListResponse(CamelModel):
    alerts: List[Alert]


class EnrichedAlertListResponse(CamelModel):
    alerts: List[EnrichedAlert]


class AlertAcknowledgeResponse(CamelModel):
    alert: Alert
