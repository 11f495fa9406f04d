from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, MutableMapping, Optional


class SlotStorage(ABC):
    """
    Named-slot string storage, shaped after the browser's localStorage.

    Implementations may raise on any call (quota exceeded, storage disabled,
    disk errors); callers decide how to degrade.
    """

    @abstractmethod
    def get_item(self, slot: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, slot: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, slot: str) -> None:
        pass


class BrowserSlotStorage(SlotStorage):
    """
    Slots kept in the browser's localStorage.

    Dash hands a callback the current contents of a
    `dcc.Store(storage_type="local")` as a plain dict; this wraps that dict
    and `data` is returned as the store's new value.
    """

    def __init__(self, data: Optional[MutableMapping[str, str]] = None):
        self.data: Dict[str, str] = dict(data) if isinstance(data, dict) else {}

    def get_item(self, slot: str) -> Optional[str]:
        return self.data.get(slot)

    def set_item(self, slot: str, value: str) -> None:
        self.data[slot] = value

    def remove_item(self, slot: str) -> None:
        self.data.pop(slot, None)


class LocalFileSlotStorage(SlotStorage):
    """
    One file per slot under a root directory. Used when the browser runs as
    a single-user desktop tool and saved studies should outlive the browser
    profile.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, slot: str) -> Path:
        # Prevent path traversal attacks
        full_path = (self.root / f"{slot}.json").resolve()
        if full_path.parent != self.root:
            raise ValueError(f"Access denied: {slot}")
        return full_path

    def get_item(self, slot: str) -> Optional[str]:
        p = self._resolve(slot)
        if not p.is_file():
            return None
        return p.read_text(encoding="utf-8")

    def set_item(self, slot: str, value: str) -> None:
        self._resolve(slot).write_text(value, encoding="utf-8")

    def remove_item(self, slot: str) -> None:
        self._resolve(slot).unlink(missing_ok=True)
