"""
Tests for the threshold classifier.

Covers the band table for every vital, critical precedence, absent vs.
zero values, and the one-alert-per-vital rule.
"""
from dataclasses import replace

import pytest

from core.vital_thresholds import get_threshold
from models import AlertSeverity, AlertType
from services.threshold_classifier import classify_reading, is_normal_reading


def _by_type(drafts):
    return {d.type: d for d in drafts}


# =============================================================================
# HEART RATE
# =============================================================================

@pytest.mark.parametrize("heart_rate", [60, 72, 85.5, 100])
def test_heart_rate_in_normal_band_emits_nothing(make_reading, heart_rate):
    drafts = classify_reading(make_reading(heart_rate=heart_rate))
    assert AlertType.HEART_RATE not in _by_type(drafts)


def test_heart_rate_45_is_single_alert_above_critical_bound(make_reading):
    # Critical is strictly below 40, so 45 is a warning
    drafts = classify_reading(make_reading(heart_rate=45))
    assert len(drafts) == 1
    assert drafts[0].type == AlertType.HEART_RATE
    assert drafts[0].severity == AlertSeverity.WARNING


def test_heart_rate_105_is_single_warning_alert(make_reading):
    drafts = classify_reading(make_reading(heart_rate=105))
    assert len(drafts) == 1
    assert drafts[0].type == AlertType.HEART_RATE
    assert drafts[0].severity == AlertSeverity.WARNING
    assert drafts[0].message == "Heart rate above normal range"
    assert drafts[0].value == 105


@pytest.mark.parametrize("heart_rate,severity,direction", [
    (39, AlertSeverity.CRITICAL, "below"),
    (40, AlertSeverity.WARNING, "below"),
    (59, AlertSeverity.WARNING, "below"),
    (101, AlertSeverity.WARNING, "above"),
    (120, AlertSeverity.WARNING, "above"),
    (121, AlertSeverity.CRITICAL, "above"),
])
def test_heart_rate_band_edges(make_reading, heart_rate, severity, direction):
    [draft] = classify_reading(make_reading(heart_rate=heart_rate))
    assert draft.severity == severity
    assert draft.message == f"Heart rate {direction} normal range"


# =============================================================================
# OXYGEN LEVEL
# =============================================================================

def test_oxygen_89_is_single_critical_alert(make_reading):
    [draft] = classify_reading(make_reading(oxygen_level=89))
    assert draft.type == AlertType.OXYGEN_LEVEL
    assert draft.severity == AlertSeverity.CRITICAL
    assert draft.message == "Oxygen saturation below normal (89%)"


def test_oxygen_92_is_single_warning_alert(make_reading):
    [draft] = classify_reading(make_reading(oxygen_level=92))
    assert draft.type == AlertType.OXYGEN_LEVEL
    assert draft.severity == AlertSeverity.WARNING


@pytest.mark.parametrize("oxygen_level", [95, 97, 100])
def test_oxygen_at_or_above_95_emits_nothing(make_reading, oxygen_level):
    assert classify_reading(make_reading(oxygen_level=oxygen_level)) == []


@pytest.mark.parametrize("oxygen_level,severity", [
    (90, AlertSeverity.WARNING),
    (94.9, AlertSeverity.WARNING),
    (89.9, AlertSeverity.CRITICAL),
])
def test_oxygen_band_edges(make_reading, oxygen_level, severity):
    [draft] = classify_reading(make_reading(oxygen_level=oxygen_level))
    assert draft.severity == severity


# =============================================================================
# TEMPERATURE
# =============================================================================

def test_temperature_39_is_one_critical_alert_not_two(make_reading):
    drafts = classify_reading(make_reading(temperature=39))
    assert len(drafts) == 1
    assert drafts[0].type == AlertType.TEMPERATURE
    assert drafts[0].severity == AlertSeverity.CRITICAL
    assert drafts[0].message == "Body temperature above normal range"


@pytest.mark.parametrize("temperature,severity,direction", [
    (34.9, AlertSeverity.CRITICAL, "below"),
    (35.0, AlertSeverity.WARNING, "below"),
    (36.0, AlertSeverity.WARNING, "below"),
    (37.5, AlertSeverity.WARNING, "above"),
    (38.5, AlertSeverity.WARNING, "above"),
])
def test_temperature_band_edges(make_reading, temperature, severity, direction):
    [draft] = classify_reading(make_reading(temperature=temperature))
    assert draft.severity == severity
    assert draft.message == f"Body temperature {direction} normal range"


@pytest.mark.parametrize("temperature", [36.1, 36.8, 37.2])
def test_temperature_in_normal_band_emits_nothing(make_reading, temperature):
    assert classify_reading(make_reading(temperature=temperature)) == []


# =============================================================================
# BLOOD PRESSURE
# =============================================================================

@pytest.mark.parametrize("blood_pressure", ["90/60", "120/80", "110/70"])
def test_blood_pressure_in_range_emits_nothing(make_reading, blood_pressure):
    assert classify_reading(make_reading(blood_pressure=blood_pressure)) == []


@pytest.mark.parametrize("blood_pressure", ["180/110", "85/70", "110/85", "200/130"])
def test_blood_pressure_out_of_range_is_warning_only(make_reading, blood_pressure):
    [draft] = classify_reading(make_reading(blood_pressure=blood_pressure))
    assert draft.type == AlertType.BLOOD_PRESSURE
    assert draft.severity == AlertSeverity.WARNING
    assert draft.value == blood_pressure
    assert draft.message == f"Blood pressure {blood_pressure} outside normal range"


def test_unparseable_blood_pressure_is_skipped(make_reading):
    assert classify_reading(make_reading(blood_pressure="high")) == []


# =============================================================================
# MULTIPLE VITALS, ABSENCE AND ZERO
# =============================================================================

def test_two_abnormal_vitals_emit_two_separate_alerts(make_reading):
    drafts = classify_reading(make_reading(heart_rate=45, oxygen_level=89))
    assert len(drafts) == 2
    assert {d.type for d in drafts} == {AlertType.HEART_RATE, AlertType.OXYGEN_LEVEL}


def test_every_vital_abnormal_emits_one_alert_each(make_reading):
    drafts = classify_reading(make_reading(
        heart_rate=130, oxygen_level=85, temperature=34, blood_pressure="150/95"
    ))
    assert [d.type for d in drafts] == [
        AlertType.HEART_RATE,
        AlertType.OXYGEN_LEVEL,
        AlertType.TEMPERATURE,
        AlertType.BLOOD_PRESSURE,
    ]
    assert all(d.severity == AlertSeverity.CRITICAL for d in drafts[:3])


def test_reading_without_vitals_emits_nothing(make_reading):
    reading = make_reading()
    assert classify_reading(reading) == []
    assert is_normal_reading(reading)


def test_zero_heart_rate_is_checked_not_treated_as_absent(make_reading):
    [draft] = classify_reading(make_reading(heart_rate=0))
    assert draft.type == AlertType.HEART_RATE
    assert draft.severity == AlertSeverity.CRITICAL


def test_is_normal_reading_includes_blood_pressure(make_reading):
    assert is_normal_reading(make_reading(heart_rate=72, blood_pressure="118/76"))
    assert not is_normal_reading(make_reading(heart_rate=72, blood_pressure="150/95"))


def test_messages_use_registry_display_name_and_unit(make_reading, monkeypatch):
    original = get_threshold

    def relabelled(name):
        threshold = original(name)
        return replace(threshold, display_name=threshold.display_name.upper(), unit=" pct")

    monkeypatch.setattr("services.threshold_classifier.get_threshold", relabelled)
    drafts = _by_type(classify_reading(make_reading(heart_rate=130, oxygen_level=89, temperature=34)))

    assert drafts[AlertType.HEART_RATE].message == "HEART RATE above normal range"
    assert drafts[AlertType.OXYGEN_LEVEL].message == "OXYGEN SATURATION below normal (89 pct)"
    assert drafts[AlertType.TEMPERATURE].message == "BODY TEMPERATURE below normal range"
