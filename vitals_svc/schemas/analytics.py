"""
Pydantic schemas for analytics responses.
"""
from typing import List, Optional

from pydantic import Field

from models import Alert, CamelModel, Profile, VitalReading


class AnalyticsStats(CamelModel):
    """Summary counts over the readings and alerts of the requested period."""
    total_readings: int = Field(..., description="Readings in the period")
    normal_readings: int = Field(..., description="Readings that raised no alert")
    total_alerts: int = Field(..., description="Alerts in the period")
    critical_alerts: int = Field(..., description="Alerts with severity 'critical'")
    warning_alerts: int = Field(..., description="Alerts with severity 'warning'")
    avg_heart_rate: int = Field(..., description="Mean heart rate, rounded; 0 without data")
    avg_oxygen_level: int = Field(..., description="Mean oxygen level, rounded; 0 without data")


class AggregateAnalyticsStats(AnalyticsStats):
    total_patients: int = Field(..., description="Profiles with role 'patient'")


class DailyVitals(CamelModel):
    """Per-day means for charting. A mean is null when the day has no value for it."""
    day: str = Field(..., description="UTC calendar day, YYYY-MM-DD", examples=["2024-01-15"])
    avg_heart_rate: Optional[int] = None
    avg_oxygen_level: Optional[int] = None
    avg_temperature: Optional[float] = Field(None, description="One decimal, in the requested unit")
    avg_systolic: Optional[int] = None
    avg_diastolic: Optional[int] = None
    readings: int = Field(..., description="Vital values recorded that day")


class PatientAnalyticsResponse(CamelModel):
    period: str
    temperature_unit: str
    vitals: List[VitalReading]
    alerts: List[Alert]
    stats: AnalyticsStats
    series: List[DailyVitals]


class AggregateAnalyticsResponse(CamelModel):
    period: str
    temperature_unit: str
    vitals: List[VitalReading]
    alerts: List[Alert]
    stats: AggregateAnalyticsStats
    patients: List[Profile]
    series: List[DailyVitals]
