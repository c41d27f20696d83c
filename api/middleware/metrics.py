"""
Prometheus metrics middleware for the Bizplan Assistant API.

Exposes /metrics endpoint with request counters, latency histograms,
and lead-signal business metrics.
"""

import logging
import time

from fastapi import Request, Response
from prometheus_client import (
    Counter, Histogram, Gauge,
    generate_latest, CONTENT_TYPE_LATEST,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Request metrics
REQUEST_COUNT = Counter(
    "bizplan_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "bizplan_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
ACTIVE_REQUESTS = Gauge(
    "bizplan_http_active_requests",
    "Currently active HTTP requests",
)

# Business metrics
EXTRACTION_COUNT = Counter(
    "bizplan_lead_signal_extractions_total",
    "Lead signal extractions by outcome",
    ["outcome"],  # success | invalid | provider_error
)
LEAD_SCORE_HIST = Histogram(
    "bizplan_lead_score",
    "Rule-based lead score distribution",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)
MODEL_ROUTE_COUNT = Counter(
    "bizplan_model_routes_total",
    "Routing decisions by phase and model",
    ["phase", "model"],
)
LLM_LATENCY = Histogram(
    "bizplan_llm_duration_seconds",
    "Lead signal extraction latency (including retry)",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)


def record_extraction(outcome: str):
    """Record a lead signal extraction outcome."""
    EXTRACTION_COUNT.labels(outcome=outcome).inc()


def record_lead_score(score: float):
    """Record a lead score."""
    LEAD_SCORE_HIST.observe(score)


def record_model_route(phase: str, model: str):
    """Record a routing decision."""
    MODEL_ROUTE_COUNT.labels(phase=phase, model=model).inc()


def record_llm_latency(seconds: float):
    """Record LLM generation latency."""
    LLM_LATENCY.observe(seconds)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware that records HTTP request metrics."""

    async def dispatch(self, request: Request, call_next):
        ACTIVE_REQUESTS.inc()
        start = time.time()

        try:
            response = await call_next(request)
        except Exception:
            ACTIVE_REQUESTS.dec()
            raise

        duration = time.time() - start
        endpoint = _endpoint_label(request, response.status_code)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)
        ACTIVE_REQUESTS.dec()

        return response


def _endpoint_label(request: Request, status_code: int) -> str:
    """Route template for the request, so path parameters don't become labels."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if path:
        return path
    if status_code == 404:
        return "unmatched"
    return request.url.path


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
