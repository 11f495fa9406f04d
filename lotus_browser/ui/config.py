from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from lotus_browser.config.model import STORAGE_FILE, GlobalConfig
from lotus_browser.services.auth_service import AuthService
from lotus_browser.services.item_store import ItemStore
from lotus_browser.services.storage import BrowserSlotStorage, SlotStorage
from lotus_browser.services.study_service import StudyService


@dataclass
class AppConfig:
    """
    Shared state handed to layout builders and callback registration
    instead of module-level globals.

    Saved studies and the signed-in user live in the browser, so stores
    are rebuilt per callback from the `local-slots` snapshot. With the
    "file" backend saved studies use `file_storage` instead.
    """

    config_root: Path
    global_config: GlobalConfig
    study_service: Optional[StudyService] = None
    file_storage: Optional[SlotStorage] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.study_service is None:
            raise RuntimeError("AppConfig.study_service must be initialized.")
        if self.global_config.storage_backend == STORAGE_FILE and self.file_storage is None:
            raise RuntimeError("AppConfig.file_storage must be initialized for the file backend.")

    def open_item_store(self, slots_data) -> Tuple[ItemStore, BrowserSlotStorage]:
        """
        ItemStore for one callback, plus the browser slots wrapper whose
        `data` becomes the new `local-slots` value.
        """
        browser = BrowserSlotStorage(slots_data)
        backend = self.file_storage if self.file_storage is not None else browser
        return ItemStore(backend), browser

    def open_auth(self, slots_data) -> Tuple[AuthService, BrowserSlotStorage]:
        browser = BrowserSlotStorage(slots_data)
        return AuthService(browser), browser
