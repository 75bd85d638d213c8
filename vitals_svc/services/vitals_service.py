"""
Service layer for vital reading ingestion and retrieval.

Ingestion is the only place alerts are created: the reading is stored,
classified once, and one alert is stored per abnormal vital. Alerts are
never recomputed afterwards, so a later change to the thresholds does not
touch existing alerts.

Architecture:
    API Layer (routers) → VitalsService → Repositories → Key/prefix store

Dependency Injection:
    VitalsService receives its repositories via constructor injection.
    Use core.dependencies.get_vitals_service() in routers with Depends().
"""
import logging
from typing import List, Optional, Tuple

from core.datetime_utils import truncate_to_millis, utc_now
from core.middleware import MetricsCollector, get_metrics_collector
from models import Alert, AlertSeverity, VitalReading
from repositories import AlertRepository, VitalReadingRepository
from repositories.alert_repository import alert_key
from services.threshold_classifier import classify_reading

logger = logging.getLogger(__name__)


class VitalsService:
    """
    Service layer for vital readings.

    Write order on ingestion is reading first, then its alerts. A crash in
    between can leave a reading without alerts, never an alert without its
    reading.
    """

    def __init__(
        self,
        reading_repository: VitalReadingRepository,
        alert_repository: AlertRepository,
        metrics: Optional[MetricsCollector] = None
    ):
        """
        Initialize the vitals service.

        Args:
            reading_repository: Repository for readings.
            alert_repository: Repository for alerts.
            metrics: Counter sink for ingested readings and derived alerts.
                     Defaults to the process-wide collector.
        """
        self._reading_repo = reading_repository
        self._alert_repo = alert_repository
        self._metrics = metrics or get_metrics_collector()

    def record_reading(
        self,
        patient_id: str,
        recorded_by: str,
        heart_rate: Optional[float] = None,
        blood_pressure: Optional[str] = None,
        oxygen_level: Optional[float] = None,
        temperature: Optional[float] = None,
        notes: str = ""
    ) -> Tuple[VitalReading, List[Alert]]:
        """
        Store a reading and the alerts derived from it.

        Args:
            patient_id: Patient the reading belongs to.
            recorded_by: Id of the authenticated caller.
            heart_rate, blood_pressure, oxygen_level, temperature: Vital
                values; any may be None but the caller guarantees one is set.
            notes: Free text.

        Returns:
            The stored reading and its alerts ([] for a normal reading).

        Raises:
            StorageError: If the store rejects a write.
        """
        # Stored timestamps carry milliseconds only
        now = truncate_to_millis(utc_now())
        reading = VitalReading(
            id=self._reading_repo.allocate_key(patient_id, now),
            patient_id=patient_id,
            heart_rate=heart_rate,
            blood_pressure=blood_pressure,
            oxygen_level=oxygen_level,
            temperature=temperature,
            notes=notes or "",
            timestamp=now,
            recorded_by=recorded_by,
        )
        self._reading_repo.save(reading)

        alerts = [
            Alert(
                id=alert_key(reading.id, draft.type),
                patient_id=patient_id,
                reading_id=reading.id,
                type=draft.type,
                severity=draft.severity,
                value=draft.value,
                message=draft.message,
                timestamp=reading.timestamp,
            )
            for draft in classify_reading(reading)
        ]
        for alert in alerts:
            self._alert_repo.save(alert)
            if alert.severity == AlertSeverity.CRITICAL:
                logger.warning(
                    f"Critical alert for patient {patient_id}: {alert.message}",
                    extra={"alert_id": alert.id, "alert_type": alert.type.value}
                )

        self._metrics.record_ingestion([alert.severity.value for alert in alerts])
        logger.info(
            "Vital reading recorded",
            extra={"reading_id": reading.id, "alerts": len(alerts), "recorded_by": recorded_by}
        )
        return reading, alerts

    def list_readings(self, patient_id: str, limit: int) -> List[VitalReading]:
        """The patient's most recent readings, newest first, at most `limit`."""
        return self._reading_repo.list_for_patient(patient_id)[:limit]
