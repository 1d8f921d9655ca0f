"""
Prometheus metrics for system monitoring.
"""

import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)

registry = CollectorRegistry()

# Gunicorn/Celery prefork workers share counters through this directory
if os.getenv("PROMETHEUS_MULTIPROC_DIR"):
    multiprocess.MultiProcessCollector(registry)


JOB_CLAIMS = Counter(
    "job_claims_total",
    "Claim attempts by outcome",
    ["outcome"],
    registry=registry,
)

APPOINTMENTS_BOOKED = Counter(
    "appointments_booked_total",
    "Appointments created by a claim",
    ["priority"],
    registry=registry,
)

SLOT_SEARCHES = Counter(
    "slot_searches_total",
    "Slot searches by result",
    ["result"],
    registry=registry,
)

CONTRACTOR_MATCH_SCORE = Histogram(
    "contractor_match_score",
    "Match score of ranked contractors",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100, 130],
    registry=registry,
)

OFFER_CALLS = Counter(
    "offer_calls_total",
    "Outbound job-offer calls by status",
    ["status"],
    registry=registry,
)

OFFER_RESPONSES = Counter(
    "offer_responses_total",
    "Contractor answers received through the voice webhook",
    ["outcome"],
    registry=registry,
)

ISSUE_ENRICHMENTS = Counter(
    "issue_enrichments_total",
    "AI enrichment attempts by status",
    ["status"],
    registry=registry,
)

OUTBOX_EVENTS_PROCESSED = Counter(
    "outbox_events_processed_total",
    "Outbox events processed",
    ["event_type", "status"],
    registry=registry,
)

EXTERNAL_API_CALLS = Counter(
    "external_api_calls_total",
    "Calls to external services",
    ["service", "status_code"],
    registry=registry,
)

EXTERNAL_API_DURATION = Histogram(
    "external_api_call_duration_seconds",
    "Time spent in external service calls",
    ["service"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
    registry=registry,
)

ERRORS = Counter(
    "errors_total",
    "Errors by type and component",
    ["error_type", "component"],
    registry=registry,
)


def record_claim(outcome: str):
    """Record a claim attempt."""
    JOB_CLAIMS.labels(outcome=outcome).inc()


def record_appointment_booked(priority: str):
    """Record an appointment created by a claim."""
    APPOINTMENTS_BOOKED.labels(priority=priority).inc()


def record_slot_search(found: bool):
    """Record a slot search."""
    SLOT_SEARCHES.labels(result="found" if found else "none").inc()


def record_match_score(score: int):
    """Record the score of a ranked contractor."""
    CONTRACTOR_MATCH_SCORE.observe(score)


def record_offer_call(status: str):
    """Record an outbound offer call."""
    OFFER_CALLS.labels(status=status).inc()


def record_offer_response(outcome: str):
    """Record a contractor's answer to an offer."""
    OFFER_RESPONSES.labels(outcome=outcome).inc()


def record_enrichment(status: str):
    """Record an AI enrichment attempt."""
    ISSUE_ENRICHMENTS.labels(status=status).inc()


def record_outbox_event_processing(event_type: str, status: str):
    """Record outbox event processing."""
    OUTBOX_EVENTS_PROCESSED.labels(event_type=event_type, status=status).inc()


def record_external_api_call(service: str, status_code: int, duration: float):
    """Record a call to an external service."""
    EXTERNAL_API_CALLS.labels(service=service, status_code=str(status_code)).inc()
    EXTERNAL_API_DURATION.labels(service=service).observe(duration)


def record_error(error_type: str, component: str):
    """Record an error."""
    ERRORS.labels(error_type=error_type, component=component).inc()


def get_metrics() -> bytes:
    """Get metrics in Prometheus format."""
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    """Get content type for metrics."""
    return CONTENT_TYPE_LATEST
