"""
Threshold classifier: one vital reading in, zero or more alert drafts out.

Pure and total. Each vital present on the reading is checked on its own
against the bands in core/vital_thresholds.yaml; an absent vital is simply
not checked. A vital yields at most one draft, and critical bands win over
warning bands.

Drafts carry no id or timestamp. The ingestion service stamps those from
the reading before persisting.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from core.vital_thresholds import VitalThreshold, get_threshold, parse_blood_pressure
from models import AlertSeverity, AlertType, VitalReading


@dataclass(frozen=True)
class AlertDraft:
    """An alert before it is tied to a stored reading."""
    type: AlertType
    severity: AlertSeverity
    value: Union[float, str]
    message: str


def _format_number(value: float) -> str:
    return f"{value:g}"


def _band_message(threshold: VitalThreshold, value: float) -> str:
    return f"{threshold.display_name} {threshold.direction(value)} normal range"


def _low_only_message(threshold: VitalThreshold, value: float) -> str:
    # Bands with no upper bound report the value itself
    return f"{threshold.display_name} below normal ({_format_number(value)}{threshold.unit})"


def _check_scalar(
    threshold: VitalThreshold,
    value: Optional[float],
    message: Callable[[VitalThreshold, float], str] = _band_message,
) -> Optional[AlertDraft]:
    if value is None:
        return None
    severity = threshold.severity(value)
    if severity is None:
        return None
    return AlertDraft(
        type=AlertType(threshold.alert_type),
        severity=AlertSeverity(severity),
        value=value,
        message=message(threshold, value),
    )


def _check_blood_pressure(blood_pressure: Optional[str]) -> Optional[AlertDraft]:
    parsed = parse_blood_pressure(blood_pressure)
    if parsed is None:
        return None
    systolic, diastolic = parsed
    if get_threshold("systolic").is_normal(systolic) and get_threshold("diastolic").is_normal(diastolic):
        return None
    # No critical band for blood pressure; out of range is always a warning
    return AlertDraft(
        type=AlertType.BLOOD_PRESSURE,
        severity=AlertSeverity.WARNING,
        value=f"{systolic}/{diastolic}",
        message=f"Blood pressure {systolic}/{diastolic} outside normal range",
    )


def classify_reading(reading: VitalReading) -> List[AlertDraft]:
    """
    Derive alert drafts from one reading.

    Returns one draft per abnormal vital, in the order heart rate, oxygen,
    temperature, blood pressure. A fully normal reading returns [].

    Example:
        >>> drafts = classify_reading(reading_with(heart_rate=45, oxygen_level=89))
        >>> [(d.type.value, d.severity.value) for d in drafts]
        [('HeartRate', 'warning'), ('OxygenLevel', 'critical')]
    """
    candidates = [
        _check_scalar(get_threshold("heart_rate"), reading.heart_rate),
        _check_scalar(get_threshold("oxygen_level"), reading.oxygen_level, _low_only_message),
        _check_scalar(get_threshold("temperature"), reading.temperature),
        _check_blood_pressure(reading.blood_pressure),
    ]
    return [draft for draft in candidates if draft is not None]


def is_normal_reading(reading: VitalReading) -> bool:
    """True when every vital present on the reading is inside its normal band."""
    return not classify_reading(reading)
