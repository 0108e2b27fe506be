"""Monitoring helpers."""

from .metrics import (
    CHECKS_TOTAL,
    PENDING_REDEMPTIONS,
    REDEMPTIONS_REJECTED,
    REDEMPTIONS_TOTAL,
    REGISTRATIONS_TOTAL,
    SNAPSHOT_FAILURES,
    metrics_router,
)

__all__ = [
    "CHECKS_TOTAL",
    "PENDING_REDEMPTIONS",
    "REDEMPTIONS_REJECTED",
    "REDEMPTIONS_TOTAL",
    "REGISTRATIONS_TOTAL",
    "SNAPSHOT_FAILURES",
    "metrics_router",
]
