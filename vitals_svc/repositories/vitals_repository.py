"""
Repository for vital-sign readings.

Readings are append-only. Each lives at `vitals:<patientId>:<epochMillis>`,
so one prefix scan returns a patient's full history.

Architecture:
    VitalReadingRepository is the data access layer for readings.
    It should be injected via core.dependencies.get_vital_reading_repository().
"""
import logging
from datetime import datetime
from typing import List

from core.datetime_utils import epoch_millis
from models import VitalReading
from repositories.base import KeyNotFoundError, KeyValueStore, load_entities

logger = logging.getLogger(__name__)

VITALS_PREFIX = "vitals:"


def reading_key(patient_id: str, millis: int) -> str:
    return f"{VITALS_PREFIX}{patient_id}:{millis}"


def patient_readings_prefix(patient_id: str) -> str:
    return f"{VITALS_PREFIX}{patient_id}:"


def newest_first(entities: list) -> list:
    """Sort readings or alerts by timestamp descending (id breaks ties)."""
    return sorted(entities, key=lambda e: (e.timestamp, e.id), reverse=True)


class VitalReadingRepository:
    """
    Repository for reading persistence and retrieval.

    It should be instantiated via core.dependencies.get_vital_reading_repository().
    """

    def __init__(self, store: KeyValueStore):
        """
        Args:
            store: Key/prefix store. Injected via core.dependencies.
        """
        self._store = store

    def allocate_key(self, patient_id: str, created_at: datetime) -> str:
        """
        Key for a new reading created at `created_at`.

        Two readings for the same patient in the same millisecond would share
        a key; the later one moves to the next free millisecond instead of
        overwriting the earlier reading.
        """
        millis = epoch_millis(created_at)
        while True:
            key = reading_key(patient_id, millis)
            try:
                self._store.get(key)
            except KeyNotFoundError:
                return key
            millis += 1

    def save(self, reading: VitalReading) -> VitalReading:
        self._store.put(reading.id, reading.model_dump(mode="json", by_alias=True))
        logger.debug("Vital reading stored", extra={"reading_id": reading.id})
        return reading

    def list_for_patient(self, patient_id: str) -> List[VitalReading]:
        """All readings for a patient, newest first."""
        values = self._store.get_by_prefix(patient_readings_prefix(patient_id))
        return newest_first(load_entities(values, VitalReading, "vital reading"))

    def list_all(self) -> List[VitalReading]:
        """Every patient's readings, newest first."""
        values = self._store.get_by_prefix(VITALS_PREFIX)
        return newest_first(load_entities(values, VitalReading, "vital reading"))
