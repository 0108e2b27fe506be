"""Thread-safe in-memory stores shared by request handlers.

Each store owns its own lock. Nothing here spans more than one store, so a
logical operation touching several of them is not atomic as a whole; that
coordination lives in :class:`stamp_tour_service.tour.service.TourService`.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Mapping, Optional

from .models import Participant, RedemptionRecord


class SessionDirectory:
    """Session id to participant, written by registration."""

    def __init__(self, participants: Iterable[Participant] = ()) -> None:
        self._lock = threading.Lock()
        self._sessions: Dict[str, Participant] = {p.id: p for p in participants}

    def register(self, session_id: str, participant: Participant) -> None:
        with self._lock:
            self._sessions[session_id] = participant

    def get(self, session_id: str) -> Optional[Participant]:
        with self._lock:
            return self._sessions.get(session_id)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def snapshot(self) -> Dict[str, Participant]:
        with self._lock:
            return dict(self._sessions)


class PendingRedemptionTable:
    """At most one pending checkpoint per session; the last check wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: Dict[str, str] = {}

    def put(self, session_id: str, checkpoint_id: str) -> Optional[str]:
        """Record ``checkpoint_id`` for the session and return whatever it replaced."""

        with self._lock:
            previous = self._pending.get(session_id)
            self._pending[session_id] = checkpoint_id
            return previous

    def pop(self, session_id: str) -> Optional[str]:
        """Remove and return the pending checkpoint in one step under the lock."""

        with self._lock:
            return self._pending.pop(session_id, None)

    def peek(self, session_id: str) -> Optional[str]:
        with self._lock:
            return self._pending.get(session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class RedemptionHistory:
    """Append-only redemption log keyed by checkpoint id."""

    def __init__(self, checkpoint_ids: Iterable[str] = (), records: Optional[Mapping[str, List[RedemptionRecord]]] = None) -> None:
        self._lock = threading.Lock()
        self._history: Dict[str, List[RedemptionRecord]] = {checkpoint_id: [] for checkpoint_id in checkpoint_ids}
        for checkpoint_id, entries in (records or {}).items():
            self._history.setdefault(checkpoint_id, []).extend(entries)

    def append(self, checkpoint_id: str, record: RedemptionRecord) -> int:
        """Append ``record`` and return the new number of records for the checkpoint."""

        with self._lock:
            entries = self._history.setdefault(checkpoint_id, [])
            entries.append(record)
            return len(entries)

    def records(self, checkpoint_id: str) -> List[RedemptionRecord]:
        with self._lock:
            return list(self._history.get(checkpoint_id, ()))

    def count(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._history.values())

    def snapshot(self) -> Dict[str, List[RedemptionRecord]]:
        with self._lock:
            return {checkpoint_id: list(entries) for checkpoint_id, entries in self._history.items()}


__all__ = ["SessionDirectory", "PendingRedemptionTable", "RedemptionHistory"]
