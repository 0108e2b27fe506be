"""JSON snapshots of the session directory and redemption history."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .errors import PersistenceFailure
from .models import Participant, RedemptionRecord

logger = logging.getLogger(__name__)

HISTORY_FILE = "stamp_status.json"
SESSIONS_FILE = "user_status.json"


class PersistenceManager:
    """Load tables at startup and overwrite them wholesale on demand."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.history_path = data_dir / HISTORY_FILE
        self.sessions_path = data_dir / SESSIONS_FILE
        self._lock = threading.Lock()

    def _read(self, path: Path) -> Dict[str, Any]:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Snapshot not found, starting empty", extra={"path": str(path)})
            return {}
        except OSError as exc:
            raise PersistenceFailure(f"Unable to read {path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise PersistenceFailure(f"Corrupt snapshot {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceFailure(f"Corrupt snapshot {path}: expected an object")
        return data

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        # Serialized per manager; temp names stay unique across processes.
        tmp = path.with_name(f"{path.name}.{uuid.uuid4().hex}.tmp")
        with self._lock:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
                tmp.replace(path)
            except (OSError, TypeError, ValueError) as exc:
                tmp.unlink(missing_ok=True)
                raise PersistenceFailure(f"Unable to write {path}: {exc}") from exc
        logger.info("Snapshot saved", extra={"path": str(path)})

    def load_sessions(self) -> List[Participant]:
        users = self._read(self.sessions_path).get("users", {})
        try:
            participants = [Participant(id=str(user_id), display_name=str(name)) for user_id, name in users.items()]
        except AttributeError as exc:
            raise PersistenceFailure(f"Corrupt snapshot {self.sessions_path}: {exc}") from exc
        logger.info("Sessions loaded", extra={"path": str(self.sessions_path), "sessions": len(participants)})
        return participants

    def load_history(self) -> Dict[str, List[RedemptionRecord]]:
        raw_history = self._read(self.history_path).get("stamp_history", {})
        try:
            history = {
                str(checkpoint_id): [RedemptionRecord.from_dict(entry) for entry in entries]
                for checkpoint_id, entries in raw_history.items()
            }
        except (AttributeError, KeyError, TypeError) as exc:
            raise PersistenceFailure(f"Corrupt snapshot {self.history_path}: {exc}") from exc
        logger.info("Redemption history loaded", extra={"path": str(self.history_path), "checkpoints": len(history)})
        return history

    def save_sessions(self, sessions: Mapping[str, Participant]) -> None:
        users = {session_id: participant.display_name for session_id, participant in sessions.items()}
        self._write(self.sessions_path, {"users": users})

    def save_history(self, history: Mapping[str, List[RedemptionRecord]]) -> None:
        self._write(self.history_path, {"stamp_history": serialize_history(history)})


def serialize_history(history: Mapping[str, List[RedemptionRecord]]) -> Dict[str, List[Dict[str, str]]]:
    return {checkpoint_id: [record.to_dict() for record in entries] for checkpoint_id, entries in history.items()}


__all__ = ["PersistenceManager", "serialize_history", "HISTORY_FILE", "SESSIONS_FILE"]
