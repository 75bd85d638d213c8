"""
Service layer for vital-sign analytics.

Reads readings and alerts over a period, summarises them, and reduces the
readings to a daily series for charting. Everything is computed on demand
from the store; nothing here writes.

Dependency Injection:
    Use core.dependencies.get_analytics_service() in routers with Depends().
"""
import logging
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from core.datetime_utils import day_label, subtract_days, subtract_months, utc_now
from core.vital_thresholds import convert_temperature, parse_blood_pressure
from models import Alert, AlertSeverity, VitalReading
from repositories import AlertRepository, ProfileRepository, VitalReadingRepository
from schemas import (
    AggregateAnalyticsResponse,
    AggregateAnalyticsStats,
    AnalyticsStats,
    DailyVitals,
    PatientAnalyticsResponse,
)
from services.threshold_classifier import is_normal_reading

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = "7days"

_PERIOD_DAYS = {"7days": 7, "30days": 30}
_PERIOD_MONTHS = {"3months": 3, "1year": 12}

SUPPORTED_PERIODS = tuple(_PERIOD_DAYS) + tuple(_PERIOD_MONTHS)


# =============================================================================
# PURE HELPERS
# =============================================================================

def period_cutoff(period: str, now: datetime) -> Optional[datetime]:
    """
    Earliest timestamp included for a period, or None for all-time.

    Month-based periods use calendar months. An unrecognised period is not
    an error: it means no filtering, and is logged.
    """
    if period in _PERIOD_DAYS:
        return subtract_days(now, _PERIOD_DAYS[period])
    if period in _PERIOD_MONTHS:
        return subtract_months(now, _PERIOD_MONTHS[period])
    logger.warning(f"Unknown analytics period '{period}', using all-time data")
    return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _rounded_mean(values: List[float]) -> Optional[int]:
    mean = _mean(values)
    return round_half_up(mean) if mean is not None else None


def compute_stats(readings: List[VitalReading], alerts: List[Alert]) -> AnalyticsStats:
    """
    Summary counts and means.

    Means are over present values only and are 0 when there is nothing to
    average, so a period without data still yields a complete stats object.
    """
    return AnalyticsStats(
        total_readings=len(readings),
        normal_readings=sum(1 for r in readings if is_normal_reading(r)),
        total_alerts=len(alerts),
        critical_alerts=sum(1 for a in alerts if a.severity == AlertSeverity.CRITICAL),
        warning_alerts=sum(1 for a in alerts if a.severity == AlertSeverity.WARNING),
        avg_heart_rate=_rounded_mean([r.heart_rate for r in readings if r.heart_rate is not None]) or 0,
        avg_oxygen_level=_rounded_mean([r.oxygen_level for r in readings if r.oxygen_level is not None]) or 0,
    )


def daily_series(readings: Iterable[VitalReading], temperature_unit: str = "C") -> List[DailyVitals]:
    """
    Group readings by UTC day and average each vital per day.

    Days come back oldest first. Temperatures are converted to
    `temperature_unit` after averaging and rounded to one decimal.
    """
    days: Dict[str, Dict[str, List[float]]] = {}
    for reading in readings:
        bucket = days.setdefault(day_label(reading.timestamp), {
            "heart_rate": [], "oxygen_level": [], "temperature": [],
            "systolic": [], "diastolic": [],
        })
        if reading.heart_rate is not None:
            bucket["heart_rate"].append(reading.heart_rate)
        if reading.oxygen_level is not None:
            bucket["oxygen_level"].append(reading.oxygen_level)
        if reading.temperature is not None:
            bucket["temperature"].append(reading.temperature)
        pressure = parse_blood_pressure(reading.blood_pressure)
        if pressure is not None:
            bucket["systolic"].append(pressure[0])
            bucket["diastolic"].append(pressure[1])

    series = []
    for day, bucket in sorted(days.items()):
        mean_temperature = _mean(bucket["temperature"])
        if mean_temperature is not None:
            converted = convert_temperature(mean_temperature, temperature_unit)
            mean_temperature = math.floor(converted * 10 + 0.5) / 10
        series.append(DailyVitals(
            day=day,
            avg_heart_rate=_rounded_mean(bucket["heart_rate"]),
            avg_oxygen_level=_rounded_mean(bucket["oxygen_level"]),
            avg_temperature=mean_temperature,
            avg_systolic=_rounded_mean(bucket["systolic"]),
            avg_diastolic=_rounded_mean(bucket["diastolic"]),
            readings=(
                len(bucket["heart_rate"]) + len(bucket["oxygen_level"])
                + len(bucket["temperature"]) + len(bucket["systolic"])
            ),
        ))
    return series


def _in_period(entities: list, cutoff: Optional[datetime]) -> list:
    if cutoff is None:
        return list(entities)
    return [e for e in entities if e.timestamp >= cutoff]


# =============================================================================
# SERVICE
# =============================================================================

class AnalyticsService:
    """
    Per-patient and all-patients analytics.

    Readings and alerts are filtered by timestamp against the period cutoff
    and returned newest first.
    """

    def __init__(
        self,
        reading_repository: VitalReadingRepository,
        alert_repository: AlertRepository,
        profile_repository: ProfileRepository
    ):
        self._reading_repo = reading_repository
        self._alert_repo = alert_repository
        self._profile_repo = profile_repository

    def patient_analytics(
        self,
        patient_id: str,
        period: str = DEFAULT_PERIOD,
        temperature_unit: str = "C",
        now: Optional[datetime] = None
    ) -> PatientAnalyticsResponse:
        cutoff = period_cutoff(period, now or utc_now())
        readings = _in_period(self._reading_repo.list_for_patient(patient_id), cutoff)
        alerts = _in_period(self._alert_repo.list_for_patient(patient_id), cutoff)

        return PatientAnalyticsResponse(
            period=period,
            temperature_unit=temperature_unit,
            vitals=readings,
            alerts=alerts,
            stats=compute_stats(readings, alerts),
            series=daily_series(readings, temperature_unit),
        )

    def aggregate_analytics(
        self,
        period: str = DEFAULT_PERIOD,
        temperature_unit: str = "C",
        now: Optional[datetime] = None
    ) -> AggregateAnalyticsResponse:
        """
        Analytics across every patient.

        `totalPatients` counts profiles with role "patient" regardless of
        period; the patient list is included for client-side labelling.
        """
        cutoff = period_cutoff(period, now or utc_now())
        readings = _in_period(self._reading_repo.list_all(), cutoff)
        alerts = _in_period(self._alert_repo.list_all(), cutoff)
        patients = self._profile_repo.list_patients()

        stats = compute_stats(readings, alerts)
        return AggregateAnalyticsResponse(
            period=period,
            temperature_unit=temperature_unit,
            vitals=readings,
            alerts=alerts,
            stats=AggregateAnalyticsStats(**stats.model_dump(), total_patients=len(patients)),
            patients=patients,
            series=daily_series(readings, temperature_unit),
        )

    def aggregate(
        self,
        patient_id: Optional[str],
        period: str = DEFAULT_PERIOD,
        temperature_unit: str = "C",
        now: Optional[datetime] = None
    ):
        """Per-patient analytics for a patient id, all-patients analytics for None."""
        if patient_id is None:
            return self.aggregate_analytics(period, temperature_unit, now)
        return self.patient_analytics(patient_id, period, temperature_unit, now)
