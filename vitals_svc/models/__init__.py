"""
Domain models for the vitals service.

This module contains the entities persisted in the key/prefix store.
"""
from models.base import CamelModel, UTCDateTime
from models.profile import Profile, PATIENT_ROLE
from models.vitals import Alert, AlertSeverity, AlertType, VitalReading

__all__ = [
    "CamelModel",
    "UTCDateTime",
    "Profile",
    "PATIENT_ROLE",
    "Alert",
    "AlertSeverity",
    "AlertType",
    "VitalReading",
]
