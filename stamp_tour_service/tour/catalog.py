"""Read-only checkpoint catalog loaded once at startup."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping

from .models import Checkpoint

logger = logging.getLogger(__name__)


class CheckpointCatalog(Mapping[str, Checkpoint]):
    """Immutable mapping of checkpoint id to checkpoint metadata. Needs no lock."""

    def __init__(self, checkpoints: Iterable[Checkpoint] = ()) -> None:
        entries: Dict[str, Checkpoint] = {}
        for checkpoint in checkpoints:
            entries[checkpoint.id] = checkpoint
        self._entries = MappingProxyType(entries)

    def __getitem__(self, checkpoint_id: str) -> Checkpoint:
        return self._entries[checkpoint_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CheckpointCatalog({sorted(self._entries)!r})"


def load_catalog(path: Path) -> CheckpointCatalog:
    """Build the catalog from a ``{"stampList": [...]}`` document.

    A missing or unreadable document is not fatal: the service starts with an
    empty catalog, which means every check is rejected.
    """

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
        checkpoints = [Checkpoint.from_dict(item) for item in document.get("stampList", [])]
    except FileNotFoundError:
        logger.warning("Checkpoint catalog not found", extra={"path": str(path)})
        return CheckpointCatalog()
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Checkpoint catalog could not be parsed", extra={"path": str(path), "error": str(exc)})
        return CheckpointCatalog()

    catalog = CheckpointCatalog(checkpoints)
    logger.info("Checkpoint catalog loaded", extra={"path": str(path), "checkpoints": len(catalog)})
    return catalog


__all__ = ["CheckpointCatalog", "load_catalog"]
