"""
Repository for alerts derived from vital readings.

An alert lives at `alert:<patientId>:<epochMillis>-<type>`, reusing the key
time of the reading that triggered it.

Architecture:
    AlertRepository is the data access layer for alerts.
    It should be injected via core.dependencies.get_alert_repository().
"""
import logging
from typing import List, Optional

from models import Alert, AlertType
from repositories.base import KeyNotFoundError, KeyValueStore, load_entities
from repositories.vitals_repository import VITALS_PREFIX, newest_first

logger = logging.getLogger(__name__)

ALERT_PREFIX = "alert:"


def alert_key(reading_id: str, alert_type: AlertType) -> str:
    """
    Derive an alert key from its reading's key.

    Example:
        >>> alert_key("vitals:p1:1700000000000", AlertType.HEART_RATE)
        'alert:p1:1700000000000-HeartRate'
    """
    if not reading_id.startswith(VITALS_PREFIX):
        raise ValueError(f"Not a reading key: {reading_id!r}")
    return f"{ALERT_PREFIX}{reading_id[len(VITALS_PREFIX):]}-{alert_type.value}"


def patient_alerts_prefix(patient_id: str) -> str:
    return f"{ALERT_PREFIX}{patient_id}:"


class AlertRepository:
    """
    Repository for alert persistence and retrieval.

    It should be instantiated via core.dependencies.get_alert_repository().
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    def save(self, alert: Alert) -> Alert:
        """Insert or fully replace an alert."""
        self._store.put(alert.id, alert.model_dump(mode="json", by_alias=True))
        return alert

    def get(self, alert_id: str) -> Optional[Alert]:
        """
        Fetch one alert.

        Returns:
            The alert, or None if the key is absent, is not an alert key, or
            holds something that is not a valid alert.
        """
        if not alert_id.startswith(ALERT_PREFIX):
            return None
        try:
            value = self._store.get(alert_id)
        except KeyNotFoundError:
            return None
        alerts = load_entities([value], Alert, "alert")
        return alerts[0] if alerts else None

    def list_for_patient(self, patient_id: str) -> List[Alert]:
        """All alerts for a patient, newest first."""
        values = self._store.get_by_prefix(patient_alerts_prefix(patient_id))
        return newest_first(load_entities(values, Alert, "alert"))

    def list_all(self) -> List[Alert]:
        """Every patient's alerts, newest first."""
        values = self._store.get_by_prefix(ALERT_PREFIX)
        return newest_first(load_entities(values, Alert, "alert"))
