"""
Service layer for alert listing and acknowledgement.

Dependency Injection:
    Use core.dependencies.get_alert_service() in routers with Depends().
"""
import logging
from typing import List

from core.datetime_utils import utc_now
from core.exceptions import AlertNotFoundError
from models import Alert
from repositories import AlertRepository, ProfileRepository
from schemas import UNKNOWN_PATIENT_NAME, EnrichedAlert

logger = logging.getLogger(__name__)


class AlertService:
    """Alert queries and the acknowledge transition."""

    def __init__(
        self,
        alert_repository: AlertRepository,
        profile_repository: ProfileRepository
    ):
        self._alert_repo = alert_repository
        self._profile_repo = profile_repository

    def list_for_patient(self, patient_id: str) -> List[Alert]:
        return self._alert_repo.list_for_patient(patient_id)

    def list_all_enriched(self) -> List[EnrichedAlert]:
        """
        Every alert, newest first, labelled with the patient's profile.

        Only profiles with role "patient" are joined; any other alert gets
        "Unknown Patient" and null age/email.
        """
        profiles = {profile.id: profile for profile in self._profile_repo.list_patients()}
        enriched = []
        for alert in self._alert_repo.list_all():
            profile = profiles.get(alert.patient_id)
            enriched.append(EnrichedAlert(
                **alert.model_dump(),
                patient_name=(profile.name or UNKNOWN_PATIENT_NAME) if profile else UNKNOWN_PATIENT_NAME,
                patient_age=profile.age if profile else None,
                patient_email=profile.email if profile else None,
            ))
        return enriched

    def acknowledge(self, alert_id: str, actor_id: str) -> Alert:
        """
        Mark an alert acknowledged by `actor_id`.

        Re-acknowledging is allowed and overwrites who and when (last write
        wins). Nothing else on the alert changes.

        Raises:
            AlertNotFoundError: If no alert is stored under `alert_id`.
        """
        alert = self._alert_repo.get(alert_id)
        if alert is None:
            logger.warning(f"Acknowledge requested for unknown alert: {alert_id}")
            raise AlertNotFoundError(alert_id=alert_id)

        updated = alert.model_copy(update={
            "acknowledged": True,
            "acknowledged_by": actor_id,
            "acknowledged_at": utc_now(),
        })
        self._alert_repo.save(updated)
        logger.info(f"Alert acknowledged: {alert_id}", extra={"acknowledged_by": actor_id})
        return updated
