"""
Tests for API authentication.

Uses the real application and the real bearer verification path.
"""
import pytest
from fastapi.testclient import TestClient

from core.auth import StaticTokenVerifier, get_token_verifier
from core.dependencies import DependencyOverrides

VALID_TOKEN = "test-token"
OTHER_TOKEN = "other-token"


@pytest.fixture
def authenticated_client():
    """Create a test client for the production app."""
    from main import app
    return TestClient(app)


class TestAuthentication:
    """Test suite for API authentication."""

    @pytest.mark.parametrize("method,path", [
        ("get", "/vitals/patient-1"),
        ("get", "/alerts/all"),
        ("get", "/alerts/patient-1"),
        ("put", "/alerts/alert:patient-1:1-HeartRate/acknowledge"),
        ("get", "/analytics/patient-1"),
        ("get", "/analytics/aggregate/all"),
        ("get", "/patients"),
    ])
    def test_missing_header_returns_401(self, authenticated_client, method, path):
        response = getattr(authenticated_client, method)(path)
        assert response.status_code == 401
        assert response.json() == {"error": "No authorization header"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_post_vitals_requires_auth(self, authenticated_client):
        response = authenticated_client.post("/vitals", json={"patientId": "p1", "heartRate": 72})
        assert response.status_code == 401

    def test_invalid_token_returns_401(self, authenticated_client):
        response = authenticated_client.get(
            "/vitals/patient-1",
            headers={"Authorization": "Bearer not-a-real-token"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_non_bearer_scheme_returns_401(self, authenticated_client):
        response = authenticated_client.get(
            "/vitals/patient-1",
            headers={"Authorization": f"Basic {VALID_TOKEN}"}
        )
        assert response.status_code == 401

    def test_valid_token_records_caller(self, authenticated_client):
        response = authenticated_client.post(
            "/vitals",
            json={"patientId": "auth-test-patient", "heartRate": 72},
            headers={"Authorization": f"Bearer {OTHER_TOKEN}"}
        )
        assert response.status_code == 201
        assert response.json()["vitalReading"]["recordedBy"] == "doctor-2"

    def test_request_id_header(self, authenticated_client):
        response = authenticated_client.get("/health")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.parametrize("path", ["/", "/health", "/ready", "/metrics", "/metrics/json"])
    def test_operational_endpoints_need_no_auth(self, authenticated_client, path):
        response = authenticated_client.get(path)
        assert response.status_code == 200

    def test_unknown_route_uses_error_shape(self, authenticated_client):
        response = authenticated_client.get("/nope")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_token_verifier_can_be_replaced(self, authenticated_client):
        from main import app
        with DependencyOverrides(app) as overrides:
            overrides.set(get_token_verifier, lambda: StaticTokenVerifier({"sso-token": "sso-user"}))
            response = authenticated_client.get(
                "/patients", headers={"Authorization": "Bearer sso-token"}
            )
            assert response.status_code == 200
            rejected = authenticated_client.get(
                "/patients", headers={"Authorization": f"Bearer {VALID_TOKEN}"}
            )
            assert rejected.status_code == 401
        assert get_token_verifier not in app.dependency_overrides


class TestStaticTokenVerifier:

    def test_resolves_known_token(self):
        verifier = StaticTokenVerifier({"abc": "user-1", "def": "user-2"})
        assert verifier.resolve("def").id == "user-2"

    def test_unknown_token(self):
        verifier = StaticTokenVerifier({"abc": "user-1"})
        assert verifier.resolve("abcd") is None
        assert verifier.resolve("") is None
