"""Stamp tour state: catalog, stores, persistence and the coordinating service."""

from .catalog import CheckpointCatalog, load_catalog
from .errors import InvariantViolation, NotFound, PersistenceFailure, TourError, Unauthorized
from .models import AdminResult, Checkpoint, CheckReceipt, Participant, Redemption, RedemptionRecord
from .persistence import PersistenceManager
from .service import TourService
from .stores import PendingRedemptionTable, RedemptionHistory, SessionDirectory

__all__ = [
    "AdminResult",
    "Checkpoint",
    "CheckpointCatalog",
    "CheckReceipt",
    "InvariantViolation",
    "NotFound",
    "Participant",
    "PendingRedemptionTable",
    "PersistenceFailure",
    "PersistenceManager",
    "Redemption",
    "RedemptionHistory",
    "RedemptionRecord",
    "SessionDirectory",
    "TourError",
    "TourService",
    "Unauthorized",
    "load_catalog",
]
