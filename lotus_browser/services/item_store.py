from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from lotus_browser.core.records import (
    IdentityKey,
    Record,
    identity_key,
    now_iso,
    to_saved_record,
)
from lotus_browser.services.storage import SlotStorage

logger = logging.getLogger(__name__)

SAVED_STUDIES_SLOT = "lotus-saved-studies"
EXPORT_PREFIX = "lotus-saved-studies"


@dataclass(frozen=True)
class ExportArtifact:
    """A file ready to hand to the browser's download mechanism."""

    filename: str
    content: str
    mime_type: str = "application/json"


class ItemStore:
    """
    Saved studies: insertion-ordered, at most one entry per identity key
    (year, title, authors), persisted as a single JSON array in one slot.

    Every mutation re-reads the slot, applies the change and writes the
    whole array back. There is no locking; with two writers (two tabs) the
    last write wins.

    Storage failures never escape: reads degrade to an empty store and
    failed writes leave the store unchanged and report False.
    """

    def __init__(
            self,
            storage: SlotStorage,
            *,
            slot: str = SAVED_STUDIES_SLOT,
            clock: Callable[[], str] = now_iso,
    ):
        self.storage = storage
        self.slot = slot
        self._clock = clock
        self._items: Optional[List[Dict[str, Any]]] = None

    # ---- reads ----

    def load(self) -> List[Dict[str, Any]]:
        """Read the slot. Absent, unreadable or malformed data reads as []."""
        try:
            raw = self.storage.get_item(self.slot)
        except Exception:
            logger.exception("Failed to read saved studies", extra={"slot": self.slot})
            raw = None

        items = _decode(raw, self.slot)
        self._items = items
        return list(items)

    @property
    def items(self) -> List[Dict[str, Any]]:
        if self._items is None:
            self.load()
        return list(self._items or [])

    def __len__(self) -> int:
        return len(self.items)

    def index_of(self, key: IdentityKey) -> Optional[int]:
        key = tuple(key)
        return next((i for i, s in enumerate(self.items) if identity_key(s) == key), None)

    def contains(self, record: Record) -> bool:
        return self.index_of(identity_key(record)) is not None

    # ---- mutations ----

    def save(self, record: Record) -> bool:
        """
        Append a study stamped with `savedAt`. Returns False, without
        writing, when a study with the same identity key is already saved.
        """
        items = self.load()
        key = identity_key(record)
        if any(identity_key(s) == key for s in items):
            return False

        updated = items + [to_saved_record(record, self._clock())]
        if not self._persist(updated):
            return False

        logger.info("Saved study", extra={"slot": self.slot, "n_saved": len(updated)})
        return True

    def remove_at(self, index: int) -> bool:
        """Remove by position in insertion order (not display order)."""
        items = self.load()
        if not isinstance(index, int) or not 0 <= index < len(items):
            logger.warning(
                "Remove index out of range",
                extra={"slot": self.slot, "index": index, "n_saved": len(items)},
            )
            return False

        updated = items[:index] + items[index + 1:]
        if not self._persist(updated):
            return False

        logger.info("Removed saved study", extra={"slot": self.slot, "n_saved": len(updated)})
        return True

    def remove_key(self, key: IdentityKey) -> bool:
        """Remove the study with this identity key, wherever it sits."""
        self.load()
        index = self.index_of(key)
        if index is None:
            logger.warning("No saved study with that key", extra={"slot": self.slot})
            return False
        return self.remove_at(index)

    def clear_all(self) -> bool:
        try:
            self.storage.remove_item(self.slot)
        except Exception:
            logger.exception("Failed to clear saved studies", extra={"slot": self.slot})
            return False

        self._items = []
        logger.info("Cleared saved studies", extra={"slot": self.slot})
        return True

    # ---- export ----

    def export_all(self, today: Optional[str] = None) -> ExportArtifact:
        """
        Pretty-printed JSON of the saved studies, field order preserved.
        Read-only.
        """
        day = today or datetime.now(timezone.utc).date().isoformat()
        content = json.dumps(self.items, indent=2, ensure_ascii=False)
        return ExportArtifact(filename=f"{EXPORT_PREFIX}-{day}.json", content=content)

    # ---- internals ----

    def _persist(self, items: List[Dict[str, Any]]) -> bool:
        try:
            blob = json.dumps(items, ensure_ascii=False, separators=(",", ":"))
            self.storage.set_item(self.slot, blob)
        except Exception:
            logger.exception("Failed to persist saved studies", extra={"slot": self.slot})
            return False

        self._items = items
        return True


def _decode(raw: Optional[str], slot: str) -> List[Dict[str, Any]]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed saved-studies data", extra={"slot": slot})
        return []

    if not isinstance(data, list):
        logger.warning("Ignoring saved-studies data that is not a list", extra={"slot": slot})
        return []
    return [item for item in data if isinstance(item, dict)]
