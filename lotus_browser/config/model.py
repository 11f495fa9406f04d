from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lotus_browser.core.pagination import DEFAULT_PAGE_SIZE
from lotus_browser.core.pane_layout import DEFAULT_MIN_PIXELS, DEFAULT_PANE_SIZES

STORAGE_BROWSER = "browser"
STORAGE_FILE = "file"


@dataclass
class GlobalConfig:
    """
    Parsed `global.json`.

    - api_base: root URL of the study query API
    - request_timeout: seconds before a study query is abandoned
    - page_size: rows per page in both study tables
    - min_pane_px / default_pane_sizes: resizable layout constraints and
      initial split (percentages, Terms | Query | Brain viewer)
    - storage_backend: "browser" keeps saved studies in localStorage,
      "file" keeps them under `storage_root` on the server
    """

    ui_title: str = "LoTUS-BF"
    subtitle: str = "Location-or-Term Unified Search for Brain Functions"
    version: str = "v2.0"
    api_base: str = "http://localhost:5000"
    request_timeout: float = 30.0
    page_size: int = DEFAULT_PAGE_SIZE
    min_pane_px: float = DEFAULT_MIN_PIXELS
    default_pane_sizes: List[float] = field(default_factory=lambda: list(DEFAULT_PANE_SIZES))
    storage_backend: str = STORAGE_BROWSER
    storage_root: Optional[Path] = None
    footer: str = "Powered by Neurosynth Database · National Taiwan University"
