"""
Tests for the /analytics and /patients endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest


def _post(client, **vitals):
    response = client.post("/vitals", json={"patientId": "patient-1", **vitals})
    assert response.status_code == 201
    return response.json()


# =============================================================================
# PER-PATIENT
# =============================================================================

def test_patient_analytics_shape(client):
    _post(client, heartRate=60, temperature=37.0)
    _post(client, heartRate=100)
    _post(client, oxygenLevel=89)

    response = client.get("/analytics/patient-1")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"period", "temperatureUnit", "vitals", "alerts", "stats", "series"}
    assert data["period"] == "7days"

    stats = data["stats"]
    assert stats["totalReadings"] == 3
    assert stats["avgHeartRate"] == 80
    assert stats["avgOxygenLevel"] == 89
    assert stats["totalAlerts"] == 1
    assert stats["criticalAlerts"] == 1
    assert stats["warningAlerts"] == 0
    assert stats["normalReadings"] == 2
    assert "totalPatients" not in stats

    [day] = data["series"]
    assert day["avgHeartRate"] == 80
    assert day["avgTemperature"] == 37.0
    assert day["avgSystolic"] is None


def test_patient_analytics_fahrenheit(client):
    _post(client, temperature=37.0)
    data = client.get("/analytics/patient-1", params={"temperatureUnit": "F"}).json()
    assert data["temperatureUnit"] == "F"
    assert data["series"][0]["avgTemperature"] == 98.6
    # Stored readings stay in Celsius
    assert data["vitals"][0]["temperature"] == 37.0


def test_invalid_temperature_unit_is_rejected(client):
    response = client.get("/analytics/patient-1", params={"temperatureUnit": "K"})
    assert response.status_code == 400


def test_period_filters_old_readings(client, reading_repo, make_reading):
    old = datetime.now(timezone.utc) - timedelta(days=20)
    reading_repo.save(make_reading(timestamp=old, patient_id="patient-1", heart_rate=70))
    _post(client, heartRate=90)

    week = client.get("/analytics/patient-1", params={"period": "7days"}).json()
    month = client.get("/analytics/patient-1", params={"period": "30days"}).json()
    assert week["stats"]["totalReadings"] == 1
    assert month["stats"]["totalReadings"] == 2
    assert month["vitals"][0]["heartRate"] == 90


def test_unknown_period_returns_all_time(client, reading_repo, make_reading):
    old = datetime.now(timezone.utc) - timedelta(days=800)
    reading_repo.save(make_reading(timestamp=old, patient_id="patient-1", heart_rate=70))
    response = client.get("/analytics/patient-1", params={"period": "forever"})
    assert response.status_code == 200
    assert response.json()["stats"]["totalReadings"] == 1


# =============================================================================
# ALL PATIENTS
# =============================================================================

def test_aggregate_all(client, seed_profile):
    seed_profile("patient-1", name="Ana Silva")
    seed_profile("patient-2", name="Ben Okafor")
    seed_profile("doctor-1", role="doctor", name="Dr. Lee")
    _post(client, heartRate=70)
    client.post("/vitals", json={"patientId": "patient-2", "heartRate": 130})

    response = client.get("/analytics/aggregate/all")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"period", "temperatureUnit", "vitals", "alerts", "stats", "patients", "series"}
    assert data["stats"]["totalPatients"] == 2
    assert data["stats"]["totalReadings"] == 2
    assert data["stats"]["avgHeartRate"] == 100
    assert data["stats"]["criticalAlerts"] == 1
    assert {p["id"] for p in data["patients"]} == {"patient-1", "patient-2"}
    assert data["vitals"][0]["patientId"] == "patient-2"


def test_aggregate_all_empty(client):
    data = client.get("/analytics/aggregate/all").json()
    assert data["stats"] == {
        "totalReadings": 0,
        "normalReadings": 0,
        "totalAlerts": 0,
        "criticalAlerts": 0,
        "warningAlerts": 0,
        "avgHeartRate": 0,
        "avgOxygenLevel": 0,
        "totalPatients": 0,
    }
    assert data["series"] == []


# =============================================================================
# PATIENTS
# =============================================================================

def test_patients_lists_only_patients_newest_first(client, seed_profile):
    seed_profile("p-old", name="Old", created_at=datetime(2023, 1, 1, tzinfo=timezone.utc))
    seed_profile("p-new", name="New", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                 assigned_doctor_id="doctor-1")
    seed_profile("fam-1", role="family", name="Relative")

    response = client.get("/patients")
    assert response.status_code == 200
    patients = response.json()["patients"]
    assert [p["id"] for p in patients] == ["p-new", "p-old"]
    assert patients[0]["assignedDoctorId"] == "doctor-1"
    assert patients[0]["createdAt"] == "2024-01-01T00:00:00.000Z"


@pytest.mark.parametrize("path", ["/analytics/bad:id", "/vitals/bad:id", "/alerts/bad:id"])
def test_malformed_patient_id_in_path(client, path):
    response = client.get(path)
    assert response.status_code == 400
