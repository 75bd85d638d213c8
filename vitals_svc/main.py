"""
FastAPI application entry point for the Vitals Service API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: one JSON object per log line
- Request ID Propagation: short id in every log line and in X-Request-ID
- Dependency Injection: store, repositories and services via Depends()
- Exception Handling: {"error": ...} responses via setup_exception_handlers()
- Bearer authentication on every data endpoint
- Lifespan Management: store initialization at startup

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & metrics       │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /health, /ready, /metrics            │
    │    ├── vitals.py     - Reading ingestion and history        │
    │    ├── alerts.py     - Alert listing and acknowledgement    │
    │    ├── analytics.py  - Per-patient and aggregate analytics  │
    │    └── patients.py   - Patient profile listing              │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── VitalsService      - Ingestion + alert derivation    │
    │    ├── AlertService       - Listing, acknowledgement        │
    │    └── AnalyticsService   - Period stats, daily series      │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)   ← Injected into Services    │
    │    ├── VitalReadingRepository   - vitals:<patient>:<ms>     │
    │    ├── AlertRepository          - alert:<patient>:<ms>-<t>  │
    │    └── ProfileRepository        - profile:<id> (read-only)  │
    ├─────────────────────────────────────────────────────────────┤
    │  Key/prefix store (SQLite or memory) ← Injected into repos  │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD
from core.dependencies import get_store
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import (
    health_router,
    vitals_router,
    alerts_router,
    analytics_router,
    patients_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures structured JSON logging
        - Initializes the key/prefix store (creates the SQLite table)
    """
    # Configure logging before anything else logs
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Vitals Service API...")

    store = get_store()
    logger.info("Store initialized", extra={"backend": type(store).__name__})

    yield

    logger.info("Vitals Service API shutting down...")


app = FastAPI(
    title="Vitals Service API",
    description="Records patient vital signs, derives threshold alerts from each reading, "
                "tracks alert acknowledgement and serves per-patient and aggregate analytics.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
# VitalsServiceError and its subclasses become {"error": ...} responses.
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Middleware is executed in REVERSE order of registration.

# 1. CORS Middleware (innermost - closest to routes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Logging Middleware (outermost - captures all requests)
app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(health_router)
app.include_router(vitals_router)
app.include_router(alerts_router)
app.include_router(analytics_router)
app.include_router(patients_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
