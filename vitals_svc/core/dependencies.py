"""
FastAPI Dependency Injection configuration for the Vitals Service API.

Components never reach for a module-level store; they receive it through
their constructors, and routers receive services through Depends().

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (VitalsService, AlertService, AnalyticsService)
         ↓ Injected
    Repository Layer (readings, alerts, profiles)
         ↓ Injected
    Key/prefix store (SQLite or in-memory)

Usage in Routers:
    from core.dependencies import get_vitals_service

    @router.post("/vitals")
    async def create_reading(
        body: VitalReadingCreate,
        vitals_service: VitalsService = Depends(get_vitals_service)
    ):
        return vitals_service.record_reading(...)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_vitals_service] = lambda: test_service
"""
import logging
from typing import Optional

from core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# STORE DEPENDENCY
# =============================================================================

# The store class is imported when first needed
_store_instance: Optional["KeyValueStore"] = None


def get_store() -> "KeyValueStore":
    """
    Get the process-wide key/prefix store.

    The backend is chosen by VITALS_SVC_STORE_BACKEND and created once.

    Returns:
        KeyValueStore: SQLiteKeyValueStore or InMemoryKeyValueStore.
    """
    global _store_instance

    if _store_instance is None:
        if settings.vitals_svc_store_backend == "memory":
            from repositories import InMemoryKeyValueStore

            logger.info("Initializing in-memory key/value store")
            _store_instance = InMemoryKeyValueStore()
        else:
            from repositories import SQLiteKeyValueStore

            logger.info(f"Initializing SQLite key/value store: {settings.database_path}")
            _store_instance = SQLiteKeyValueStore(
                db_path=settings.database_path,
                busy_timeout=settings.vitals_svc_db_busy_timeout
            )

    return _store_instance


def reset_store() -> None:
    """Drop the cached store (for testing only)."""
    global _store_instance
    _store_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_vital_reading_repository() -> "VitalReadingRepository":
    from repositories import VitalReadingRepository

    return VitalReadingRepository(store=get_store())


def get_alert_repository() -> "AlertRepository":
    from repositories import AlertRepository

    return AlertRepository(store=get_store())


def get_profile_repository() -> "ProfileRepository":
    """
    Get a ProfileRepository over the shared store.

    Returns:
        ProfileRepository: Read-only access to user profiles.
    """
    from repositories import ProfileRepository

    return ProfileRepository(store=get_store())


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_vitals_service() -> "VitalsService":
    """
    Get a VitalsService with its repositories injected.

    Returns:
        VitalsService: Service for reading ingestion and listing.
    """
    from services import VitalsService

    return VitalsService(
        reading_repository=get_vital_reading_repository(),
        alert_repository=get_alert_repository()
    )


def get_alert_service() -> "AlertService":
    from services import AlertService

    return AlertService(
        alert_repository=get_alert_repository(),
        profile_repository=get_profile_repository()
    )


def get_analytics_service() -> "AnalyticsService":
    """
    Get an AnalyticsService with readings, alerts and profiles injected.

    Returns:
        AnalyticsService: Service for per-patient and aggregate analytics.
    """
    from services import AnalyticsService

    return AnalyticsService(
        reading_repository=get_vital_reading_repository(),
        alert_repository=get_alert_repository(),
        profile_repository=get_profile_repository()
    )


# =============================================================================
# DEPENDENCY OVERRIDE HELPERS (FOR TESTING)
# =============================================================================

class DependencyOverrides:
    """
    Context manager for temporarily overriding dependencies in tests.

    Usage:
        with DependencyOverrides(app) as overrides:
            overrides.set(get_store, lambda: InMemoryKeyValueStore())
        # Previous overrides restored after context exits
    """

    def __init__(self, app):
        self.app = app
        self._saved = {}

    def __enter__(self):
        self._saved = self.app.dependency_overrides.copy()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.app.dependency_overrides = self._saved

    def set(self, dependency, override):
        self.app.dependency_overrides[dependency] = override
