"""Domain models for participants, checkpoints and redemptions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import uuid


@dataclass(frozen=True)
class Participant:
    id: str
    display_name: str

    @classmethod
    def create(cls, display_name: str) -> "Participant":
        return cls(id=str(uuid.uuid4()), display_name=display_name)

    def to_dict(self) -> Dict[str, str]:
        return {"user_id": self.id, "user_name": self.display_name}


@dataclass(frozen=True)
class Checkpoint:
    id: str
    location: str = ""
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Checkpoint":
        return cls(
            id=str(data["stampId"]),
            location=str(data.get("stampLocation", "")),
            name=str(data.get("stampName", "")),
            description=str(data.get("stampDesc", "")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "stampId": self.id,
            "stampLocation": self.location,
            "stampName": self.name,
            "stampDesc": self.description,
        }


@dataclass(frozen=True)
class RedemptionRecord:
    participant_id: str
    participant_name: str
    timestamp: str

    @classmethod
    def now(cls, participant: Participant) -> "RedemptionRecord":
        return cls(
            participant_id=participant.id,
            participant_name=participant.display_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RedemptionRecord":
        return cls(
            participant_id=str(data["user_id"]),
            participant_name=str(data["user_name"]),
            timestamp=str(data["timestamp"]),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "user_id": self.participant_id,
            "user_name": self.participant_name,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class CheckReceipt:
    """Outcome of a checkpoint visit. Identical in shape for every branch."""

    location: str

    @classmethod
    def issue(cls, redeem_path: str) -> "CheckReceipt":
        return cls(location=f"{redeem_path}?random={uuid.uuid4()}")


@dataclass(frozen=True)
class Redemption:
    checkpoint_id: str
    record: RedemptionRecord
    checkpoint: Optional[Checkpoint] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checkpoint_id": self.checkpoint_id,
            "checkpoint": self.checkpoint.to_dict() if self.checkpoint else None,
            "record": self.record.to_dict(),
        }


@dataclass(frozen=True)
class AdminResult:
    command: str
    output: Any
    ok: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"command": self.command, "output": self.output, "ok": self.ok}


__all__ = ["Participant", "Checkpoint", "RedemptionRecord", "CheckReceipt", "Redemption", "AdminResult"]
