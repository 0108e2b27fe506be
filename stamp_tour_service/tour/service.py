"""Registration, checkpoint visits, redemption and operator snapshots."""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import ContextManager, Optional

from ..config import Settings
from ..monitoring.metrics import (
    CHECKS_TOTAL,
    PENDING_REDEMPTIONS,
    REDEMPTIONS_REJECTED,
    REDEMPTIONS_TOTAL,
    REGISTRATIONS_TOTAL,
    SNAPSHOT_FAILURES,
)
from .catalog import CheckpointCatalog, load_catalog
from .errors import InvariantViolation, NotFound, PersistenceFailure, Unauthorized
from .models import AdminResult, CheckReceipt, Participant, Redemption, RedemptionRecord
from .persistence import PersistenceManager, serialize_history
from .stores import PendingRedemptionTable, RedemptionHistory, SessionDirectory

logger = logging.getLogger(__name__)

REDEEM_PATH = "/stamp/"
STATUS_COMMAND = "stamp status"
SAVE_ALL_COMMAND = "save all"


class TourService:
    """Owns the four stores and coordinates every operation across them.

    Stores are locked individually. ``redeem`` and the admin snapshots run
    inside :meth:`_coordinated`, which is a no-op unless the service was built
    with ``serialize_operations=True``; in that case one re-entrant lock turns
    each of them into a single critical section.
    """

    def __init__(
        self,
        catalog: CheckpointCatalog,
        persistence: PersistenceManager,
        sessions: Optional[SessionDirectory] = None,
        history: Optional[RedemptionHistory] = None,
        *,
        serialize_operations: bool = False,
    ) -> None:
        self.catalog = catalog
        self.persistence = persistence
        self.sessions = sessions if sessions is not None else SessionDirectory()
        self.pending = PendingRedemptionTable()
        self.history = history if history is not None else RedemptionHistory(catalog)
        self._coordinator: ContextManager = threading.RLock() if serialize_operations else contextlib.nullcontext()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TourService":
        catalog = load_catalog(settings.resolved_catalog_path)
        persistence = PersistenceManager(settings.data_dir)

        loaded = persistence.load_history()
        unknown = sorted(set(loaded) - set(catalog))
        if unknown:
            logger.warning("Discarding history for checkpoints missing from the catalog", extra={"checkpoints": unknown})
        history = RedemptionHistory(catalog, {key: value for key, value in loaded.items() if key in catalog})

        return cls(
            catalog,
            persistence,
            SessionDirectory(persistence.load_sessions()),
            history,
            serialize_operations=settings.serialize_operations,
        )

    def _coordinated(self) -> ContextManager:
        return self._coordinator

    def register(self, display_name: str) -> Participant:
        participant = Participant.create(display_name)
        self.sessions.register(participant.id, participant)
        REGISTRATIONS_TOTAL.inc()
        logger.info("Participant registered", extra={"user_id": participant.id, "user_name": display_name})
        return participant

    def check(self, session_id: Optional[str], checkpoint_id: Optional[str]) -> CheckReceipt:
        """Record a visit. The receipt never reveals which branch was taken."""

        receipt = CheckReceipt.issue(REDEEM_PATH)

        if not session_id:
            logger.warning("Checkpoint visit without a session")
            CHECKS_TOTAL.labels(outcome="rejected").inc()
            return receipt

        if session_id not in self.sessions:
            logger.warning("Checkpoint visit from an unknown session", extra={"user_id": session_id})
            CHECKS_TOTAL.labels(outcome="rejected").inc()
            return receipt

        if checkpoint_id is None or checkpoint_id not in self.catalog:
            logger.warning("Checkpoint visit for an unknown checkpoint", extra={"user_id": session_id, "stamp_id": checkpoint_id})
            CHECKS_TOTAL.labels(outcome="rejected").inc()
            return receipt

        if self.pending.put(session_id, checkpoint_id) is None:
            PENDING_REDEMPTIONS.inc()
        CHECKS_TOTAL.labels(outcome="accepted").inc()
        logger.info("Checkpoint visit recorded", extra={"user_id": session_id, "stamp_id": checkpoint_id})
        return receipt

    def redeem(self, session_id: Optional[str]) -> Redemption:
        if not session_id:
            logger.warning("Redeem attempted without a session")
            REDEMPTIONS_REJECTED.inc()
            raise Unauthorized("No session")

        with self._coordinated():
            checkpoint_id = self.pending.pop(session_id)
            if checkpoint_id is None:
                logger.warning("Redeem attempted with nothing pending", extra={"user_id": session_id})
                REDEMPTIONS_REJECTED.inc()
                raise Unauthorized("Nothing to redeem")
            PENDING_REDEMPTIONS.dec()

            participant = self.sessions.get(session_id)
            if participant is None:
                logger.error("Pending visit belongs to an unregistered session", extra={"user_id": session_id})
                raise InvariantViolation(f"Session {session_id} has a pending visit but no participant")

            record = RedemptionRecord.now(participant)
            self.history.append(checkpoint_id, record)

        REDEMPTIONS_TOTAL.inc()
        logger.info("Redemption completed", extra={"user_id": session_id, "stamp_id": checkpoint_id})

        if checkpoint_id == "":
            logger.warning("Redeemed an empty checkpoint id", extra={"user_id": session_id})
            raise NotFound("Empty checkpoint id")
        return Redemption(checkpoint_id=checkpoint_id, record=record, checkpoint=self.catalog.get(checkpoint_id))

    def save_history(self) -> dict:
        """Persist the redemption history and return what was written."""

        with self._coordinated():
            history = self.history.snapshot()
            self.persistence.save_history(history)
        return serialize_history(history)

    def save_all(self) -> None:
        with self._coordinated():
            self.persistence.save_history(self.history.snapshot())
            self.persistence.save_sessions(self.sessions.snapshot())

    def admin(self, command: str) -> AdminResult:
        """Run an operator command. Callers must already be known to be local."""

        if command == STATUS_COMMAND:
            logger.info("Database lookup request", extra={"command": command})
            try:
                return AdminResult(command=command, output=self.save_history())
            except PersistenceFailure as exc:
                SNAPSHOT_FAILURES.inc()
                logger.exception("Database save failed", extra={"command": command})
                return AdminResult(command=command, output=f"Database save failed: {exc}", ok=False)

        if command == SAVE_ALL_COMMAND:
            try:
                self.save_all()
            except PersistenceFailure as exc:
                SNAPSHOT_FAILURES.inc()
                logger.exception("Database save failed", extra={"command": command})
                return AdminResult(command=command, output=f"Database save failed: {exc}", ok=False)
            return AdminResult(command=command, output="All databases saved")

        logger.info("Unrecognized admin command", extra={"command": command})
        return AdminResult(command=command, output="Command not found")


__all__ = ["TourService", "REDEEM_PATH", "STATUS_COMMAND", "SAVE_ALL_COMMAND"]
