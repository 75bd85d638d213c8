"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.vitals import (
    PATIENT_ID_PATTERN,
    VitalReadingCreate,
    VitalReadingCreatedResponse,
    VitalReadingListResponse,
)
from schemas.alerts import (
    UNKNOWN_PATIENT_NAME,
    EnrichedAlert,
    AlertListResponse,
    EnrichedAlertListResponse,
    AlertAcknowledgeResponse,
)
from schemas.analytics import (
    AnalyticsStats,
    AggregateAnalyticsStats,
    DailyVitals,
    PatientAnalyticsResponse,
    AggregateAnalyticsResponse,
)

__all__ = [
    # Vital reading schemas
    "PATIENT_ID_PATTERN",
    "VitalReadingCreate",
    "VitalReadingCreatedResponse",
    "VitalReadingListResponse",
    # Alert schemas
    "UNKNOWN_PATIENT_NAME",
    "EnrichedAlert",
    "AlertListResponse",
    "EnrichedAlertListResponse",
    "AlertAcknowledgeResponse",
    # Analytics schemas
    "AnalyticsStats",
    "AggregateAnalyticsStats",
    "DailyVitals",
    "PatientAnalyticsResponse",
    "AggregateAnalyticsResponse",
]
