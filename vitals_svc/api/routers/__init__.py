"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from api.routers.health import router as health_router
from api.routers.vitals import router as vitals_router
from api.routers.alerts import router as alerts_router
from api.routers.analytics import router as analytics_router
from api.routers.patients import router as patients_router

__all__ = [
    "health_router",
    "vitals_router",
    "alerts_router",
    "analytics_router",
    "patients_router",
]
