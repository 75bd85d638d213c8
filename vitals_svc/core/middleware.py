"""
FastAPI middleware and in-memory counters for operational visibility.

- LoggingMiddleware assigns a short request id, logs request start/finish,
  times the request, and echoes the id back in X-Request-ID
- MetricsCollector keeps request counters, a fixed-size latency window,
  and counts of alerts derived by severity (fed by the ingestion service)

Counters live in process memory and reset on restart; /metrics exposes them
in Prometheus text format.
"""
import logging
import threading
import time
import uuid
from collections import deque
from typing import Callable, Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging_config import set_request_id, clear_request_id

logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Request and alert counters.

    Latencies are kept in a bounded deque so memory stays flat no matter
    how long the process runs.
    """

    def __init__(self, max_history: int = 1000):
        self._lock = threading.Lock()
        self._durations: Deque[float] = deque(maxlen=max_history)
        self.total_requests = 0
        self.status_counts: Dict[str, int] = {"2xx": 0, "4xx": 0, "5xx": 0}
        self.alerts_derived: Dict[str, int] = {"warning": 0, "critical": 0}
        self.readings_ingested = 0

    def record_request(self, status_code: int, duration_ms: float) -> None:
        with self._lock:
            self._durations.append(duration_ms)
            self.total_requests += 1
            bucket = f"{status_code // 100}xx"
            if bucket in self.status_counts:
                self.status_counts[bucket] += 1

    def record_ingestion(self, severities: list) -> None:
        """Count one stored reading and the severities of its derived alerts."""
        with self._lock:
            self.readings_ingested += 1
            for severity in severities:
                self.alerts_derived[severity] = self.alerts_derived.get(severity, 0) + 1

    def latency_percentile(self, p: float) -> float:
        with self._lock:
            durations = sorted(self._durations)
        if not durations:
            return 0.0
        idx = min(int(len(durations) * p / 100), len(durations) - 1)
        return round(durations[idx], 2)

    def get_summary(self) -> Dict:
        return {
            "http_requests_total": self.total_requests,
            "http_requests_2xx_total": self.status_counts["2xx"],
            "http_requests_4xx_total": self.status_counts["4xx"],
            "http_requests_5xx_total": self.status_counts["5xx"],
            "http_request_duration_ms_p50": self.latency_percentile(50),
            "http_request_duration_ms_p95": self.latency_percentile(95),
            "http_request_duration_ms_p99": self.latency_percentile(99),
            "vital_readings_ingested_total": self.readings_ingested,
            "alerts_warning_total": self.alerts_derived.get("warning", 0),
            "alerts_critical_total": self.alerts_derived.get("critical", 0),
        }

    def get_prometheus_format(self) -> str:
        summary = self.get_summary()
        lines = [
            "# HELP http_requests_total Total HTTP requests",
            "# TYPE http_requests_total counter",
            f'http_requests_total {summary["http_requests_total"]}',
            "# HELP http_requests_by_status HTTP requests by status category",
            "# TYPE http_requests_by_status counter",
        ]
        for bucket in ("2xx", "4xx", "5xx"):
            lines.append(f'http_requests_by_status{{status="{bucket}"}} {self.status_counts[bucket]}')
        lines += [
            "# HELP http_request_duration_ms Request duration in milliseconds",
            "# TYPE http_request_duration_ms gauge",
            f'http_request_duration_ms{{quantile="0.5"}} {summary["http_request_duration_ms_p50"]}',
            f'http_request_duration_ms{{quantile="0.95"}} {summary["http_request_duration_ms_p95"]}',
            f'http_request_duration_ms{{quantile="0.99"}} {summary["http_request_duration_ms_p99"]}',
            "# HELP vital_readings_ingested_total Vital readings stored",
            "# TYPE vital_readings_ingested_total counter",
            f'vital_readings_ingested_total {summary["vital_readings_ingested_total"]}',
            "# HELP alerts_derived_total Alerts derived from readings by severity",
            "# TYPE alerts_derived_total counter",
            f'alerts_derived_total{{severity="warning"}} {summary["alerts_warning_total"]}',
            f'alerts_derived_total{{severity="critical"}} {summary["alerts_critical_total"]}',
        ]
        return "\n".join(lines) + "\n"


# Process-wide collector; counters only, no domain state
metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    return metrics_collector


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request/response logging with request_id propagation and timing."""

    EXCLUDED_PATHS = {"/health", "/ready", "/metrics", "/metrics/json", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        set_request_id(request_id)

        method = request.method
        path = request.url.path
        quiet = path in self.EXCLUDED_PATHS
        start_time = time.perf_counter()

        if not quiet:
            logger.info(
                "Request started",
                extra={
                    "method": method,
                    "path": path,
                    "query": str(request.query_params) if request.query_params else None,
                }
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed with exception",
                extra={"method": method, "path": path, "error": str(e)}
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            clear_request_id()

        metrics_collector.record_request(response.status_code, duration_ms)

        if not quiet:
            logger.log(
                logging.WARNING if response.status_code >= 400 else logging.INFO,
                "Request completed",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                    "request_id": request_id,
                }
            )

        response.headers["X-Request-ID"] = request_id
        return response
