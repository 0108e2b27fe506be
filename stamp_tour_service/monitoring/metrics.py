"""Prometheus metrics and monitoring utilities."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, generate_latest

REGISTRATIONS_TOTAL = Counter("stamp_tour_registrations_total", "Participants registered")
CHECKS_TOTAL = Counter("stamp_tour_checks_total", "Checkpoint visits by outcome", ["outcome"])
REDEMPTIONS_TOTAL = Counter("stamp_tour_redemptions_total", "Pending visits redeemed into the history")
REDEMPTIONS_REJECTED = Counter("stamp_tour_redemptions_rejected_total", "Redeem attempts without a pending visit")
SNAPSHOT_FAILURES = Counter("stamp_tour_snapshot_failures_total", "Snapshots that failed to persist")
PENDING_REDEMPTIONS = Gauge("stamp_tour_pending_redemptions", "Sessions holding a pending visit")

metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRATIONS_TOTAL",
    "CHECKS_TOTAL",
    "REDEMPTIONS_TOTAL",
    "REDEMPTIONS_REJECTED",
    "SNAPSHOT_FAILURES",
    "PENDING_REDEMPTIONS",
    "metrics_router",
]
