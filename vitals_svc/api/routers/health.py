"""
Health, readiness, and metrics endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the key/prefix store reachable?)
- /metrics: Prometheus text format
- /metrics/json: The same counters as JSON

No authentication: these are for orchestration and scraping.
"""
import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from core.datetime_utils import format_iso, utc_now
from core.dependencies import get_store
from core.exceptions import StorageError
from core.middleware import get_metrics_collector

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])

SERVICE_NAME = "Vitals Service API"
SERVICE_VERSION = "1.0.0"


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    name: str
    status: str  # "ok" or "unavailable"
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


class MetricsResponse(BaseModel):
    """Response model for JSON metrics endpoint."""
    http_requests_total: int
    http_requests_2xx_total: int
    http_requests_4xx_total: int
    http_requests_5xx_total: int
    http_request_duration_ms_p50: float
    http_request_duration_ms_p95: float
    http_request_duration_ms_p99: float
    vital_readings_ingested_total: int
    alerts_warning_total: int
    alerts_critical_total: int


# =============================================================================
# HEALTH ENDPOINT (LIVENESS)
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application is running. Returns immediately without checking dependencies."
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=format_iso(utc_now())
    )


# =============================================================================
# READINESS ENDPOINT
# =============================================================================

def _check_store(store) -> DependencyStatus:
    start = time.perf_counter()
    try:
        store.ping()
    except StorageError as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Store readiness check failed", extra={"error": e.detail})
        return DependencyStatus(
            name="store",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=e.detail
        )
    latency_ms = (time.perf_counter() - start) * 1000
    return DependencyStatus(
        name="store",
        status="ok",
        latency_ms=round(latency_ms, 2),
        message=f"{type(store).__name__} healthy"
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Check that the key/prefix store answers. Returns 503 if it does not."
)
async def readiness_check(response: Response, store=Depends(get_store)) -> ReadyResponse:
    store_status = _check_store(store)

    if store_status.status == "ok":
        status = "ready"
    else:
        status = "not_ready"
        response.status_code = 503

    return ReadyResponse(
        status=status,
        dependencies=[store_status],
        timestamp=format_iso(utc_now())
    )


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="HTTP request counts, latency percentiles, readings ingested and alerts derived by severity."
)
async def get_metrics() -> Response:
    """
    Export metrics in Prometheus text format.

    Scrape configuration (prometheus.yml):
        scrape_configs:
          - job_name: 'vitals-svc'
            static_configs:
              - targets: ['localhost:8000']
            metrics_path: /metrics
    """
    return Response(
        content=get_metrics_collector().get_prometheus_format(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@router.get(
    "/metrics/json",
    response_model=MetricsResponse,
    summary="JSON metrics",
    description="Export metrics in JSON format for custom dashboards or API consumers."
)
async def get_metrics_json() -> MetricsResponse:
    return MetricsResponse(**get_metrics_collector().get_summary())


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@router.get(
    "/",
    summary="API root",
    description="Root endpoint with basic API information."
)
async def root() -> Dict[str, Any]:
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
        "metrics": "/metrics"
    }
