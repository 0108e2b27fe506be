"""Error taxonomy for the stamp tour."""

from __future__ import annotations


class TourError(Exception):
    """Base class for expected, caller-facing stamp tour failures."""


class Unauthorized(TourError):
    """Missing or unknown session, nothing pending, or a non-loopback operator."""


class NotFound(TourError):
    """Unknown resource or an empty checkpoint on redeem."""


class PersistenceFailure(TourError):
    """A snapshot could not be read from or written to durable storage."""


class InvariantViolation(RuntimeError):
    """Internal state disagrees with itself. Always a programming error."""


__all__ = ["TourError", "Unauthorized", "NotFound", "PersistenceFailure", "InvariantViolation"]
