"""
Service layer for business logic.

This module contains all business logic and orchestration services.
"""
from services.threshold_classifier import AlertDraft, classify_reading, is_normal_reading
from services.vitals_service import VitalsService
from services.alert_service import AlertService
from services.analytics_service import AnalyticsService

__all__ = [
    "AlertDraft",
    "classify_reading",
    "is_normal_reading",
    "VitalsService",
    "AlertService",
    "AnalyticsService",
]
