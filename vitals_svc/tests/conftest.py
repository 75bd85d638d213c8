"""
Shared pytest fixtures for API tests.

Key patterns:

1. Store Isolation: Each test gets a fresh temporary SQLite store
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories
4. Auth Override: Requests run as a fixed user unless a test exercises auth

Fixture Hierarchy:
    temp_store → repositories → services → test_app → client
"""
import os
import tempfile
from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Configure the service before importing config modules
# This must happen before any config imports
TEST_TOKEN = "test-token"
TEST_USER_ID = "doctor-1"
OTHER_TOKEN = "other-token"
OTHER_USER_ID = "doctor-2"
os.environ.setdefault("VITALS_SVC_AUTH_TOKENS", f"{TEST_TOKEN}:{TEST_USER_ID},{OTHER_TOKEN}:{OTHER_USER_ID}")
os.environ.setdefault("VITALS_SVC_STORE_BACKEND", "memory")
os.environ.setdefault("VITALS_SVC_DB_DIR", tempfile.mkdtemp(prefix="vitals-svc-test-"))

from core import dependencies as deps
from core.auth import AuthenticatedUser, get_current_user
from core.exceptions import setup_exception_handlers
from core.middleware import MetricsCollector
from models import Profile, VitalReading
from repositories import (
    AlertRepository,
    ProfileRepository,
    SQLiteKeyValueStore,
    VitalReadingRepository,
)
from services import AlertService, AnalyticsService, VitalsService


@pytest.fixture
def temp_store():
    """
    Create a temporary SQLite store for testing.

    A fresh database file per test keeps tests fully isolated.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = SQLiteKeyValueStore(db_path=db_path, busy_timeout=1000)
    yield store

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def reading_repo(temp_store):
    return VitalReadingRepository(store=temp_store)


@pytest.fixture
def alert_repo(temp_store):
    return AlertRepository(store=temp_store)


@pytest.fixture
def profile_repo(temp_store):
    return ProfileRepository(store=temp_store)


@pytest.fixture
def metrics():
    """A private collector so counter assertions are not affected by other tests."""
    return MetricsCollector()


@pytest.fixture
def vitals_service(reading_repo, alert_repo, metrics):
    return VitalsService(
        reading_repository=reading_repo,
        alert_repository=alert_repo,
        metrics=metrics
    )


@pytest.fixture
def alert_service(alert_repo, profile_repo):
    return AlertService(alert_repository=alert_repo, profile_repository=profile_repo)


@pytest.fixture
def analytics_service(reading_repo, alert_repo, profile_repo):
    return AnalyticsService(
        reading_repository=reading_repo,
        alert_repository=alert_repo,
        profile_repository=profile_repo
    )


@pytest.fixture
def test_app(temp_store, reading_repo, alert_repo, profile_repo,
             vitals_service, alert_service, analytics_service):
    """
    Create a FastAPI test app with dependency overrides.

    - Uses the real routers (testing actual endpoint code)
    - Injects the test store and services via dependency_overrides
    - Registers exception handlers for proper error response testing
    """
    from api.routers import (
        health_router,
        vitals_router,
        alerts_router,
        analytics_router,
        patients_router,
    )

    app = FastAPI(title="Vitals Service API Test")

    setup_exception_handlers(app)

    app.dependency_overrides[deps.get_store] = lambda: temp_store
    app.dependency_overrides[deps.get_vital_reading_repository] = lambda: reading_repo
    app.dependency_overrides[deps.get_alert_repository] = lambda: alert_repo
    app.dependency_overrides[deps.get_profile_repository] = lambda: profile_repo
    app.dependency_overrides[deps.get_vitals_service] = lambda: vitals_service
    app.dependency_overrides[deps.get_alert_service] = lambda: alert_service
    app.dependency_overrides[deps.get_analytics_service] = lambda: analytics_service

    # Run every request as TEST_USER_ID; test_auth.py covers the real bearer path
    async def fixed_user():
        return AuthenticatedUser(id=TEST_USER_ID)
    app.dependency_overrides[get_current_user] = fixed_user

    app.include_router(health_router)
    app.include_router(vitals_router)
    app.include_router(alerts_router)
    app.include_router(analytics_router)
    app.include_router(patients_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


# =============================================================================
# DATA HELPERS
# =============================================================================

def _build_reading(
    timestamp: datetime = None,
    patient_id: str = "patient-1",
    reading_id: str = None,
    **vitals
) -> VitalReading:
    timestamp = timestamp or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    return VitalReading(
        id=reading_id or f"vitals:{patient_id}:{int(timestamp.timestamp() * 1000)}",
        patient_id=patient_id,
        timestamp=timestamp,
        recorded_by=TEST_USER_ID,
        **vitals
    )


@pytest.fixture
def make_reading():
    """Build a reading directly, bypassing ingestion (for classifier/analytics tests)."""
    return _build_reading


@pytest.fixture
def seed_profile(temp_store):
    """Store a profile as the external profile service would."""
    def _seed(profile_id: str, role: str = "patient", **fields) -> Profile:
        profile = Profile(id=profile_id, role=role, **fields)
        temp_store.put(f"profile:{profile_id}", profile.model_dump(mode="json", by_alias=True))
        return profile
    return _seed
