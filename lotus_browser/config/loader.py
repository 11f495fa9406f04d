from __future__ import annotations

import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, List

from lotus_browser.config.model import STORAGE_BROWSER, STORAGE_FILE, GlobalConfig
from lotus_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

API_BASE_ENV = "LOTUS_API_BASE"


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory.

    Expected structure:

        root/
            global.json

    Every key is optional; missing keys take the GlobalConfig defaults and a
    missing file yields a default config. `LOTUS_API_BASE` overrides
    `api_base`. A relative `storage_root` is resolved against `root`.

    :param root: Directory containing 'global.json'.
    :return: A GlobalConfig instance.
    :raises ConfigError: if global.json is unreadable or holds invalid values.
    """
    root = Path(root)
    logger.info(
        "Loading global config",
        extra={"config_root": str(root)},
    )

    global_path = root / "global.json"
    raw: Dict[str, Any] = {}
    if global_path.is_file():
        try:
            with global_path.open(encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not read {global_path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{global_path} must contain a JSON object")
    else:
        logger.warning("No global.json found, using defaults", extra={"config_root": str(root)})

    return _parse_global(raw, root)


def _parse_global(raw: Dict[str, Any], root: Path) -> GlobalConfig:
    defaults = GlobalConfig()

    page_size = _positive_int(raw, "page_size", defaults.page_size)
    min_pane_px = _positive_float(raw, "min_pane_px", defaults.min_pane_px)
    request_timeout = _positive_float(raw, "request_timeout", defaults.request_timeout)
    pane_sizes = _pane_sizes(raw.get("default_pane_sizes", defaults.default_pane_sizes))

    storage_backend = str(raw.get("storage_backend", STORAGE_BROWSER)).lower()
    if storage_backend not in (STORAGE_BROWSER, STORAGE_FILE):
        raise ConfigError(f"Unknown storage_backend '{storage_backend}'")

    storage_root_raw = raw.get("storage_root")
    if storage_root_raw is None:
        storage_root = (root / "saved").resolve() if storage_backend == STORAGE_FILE else None
    else:
        storage_root_path = Path(storage_root_raw)
        storage_root = storage_root_path if storage_root_path.is_absolute() \
            else (root / storage_root_path).resolve()

    api_base = os.getenv(API_BASE_ENV) or raw.get("api_base", defaults.api_base)

    return GlobalConfig(
        ui_title=raw.get("ui_title", defaults.ui_title),
        subtitle=raw.get("subtitle", defaults.subtitle),
        version=raw.get("version", defaults.version),
        api_base=str(api_base).rstrip("/"),
        request_timeout=request_timeout,
        page_size=page_size,
        min_pane_px=min_pane_px,
        default_pane_sizes=pane_sizes,
        storage_backend=storage_backend,
        storage_root=storage_root,
        footer=raw.get("footer", defaults.footer),
    )


def _positive_int(raw: Dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _positive_float(raw: Dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive number, got {value!r}")
    return float(value)


def _pane_sizes(value: Any) -> List[float]:
    if not isinstance(value, list) or len(value) != 3:
        raise ConfigError("'default_pane_sizes' must be a list of three percentages")
    try:
        sizes = [float(v) for v in value]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'default_pane_sizes' must be numeric: {e}") from e
    if any(v <= 0 for v in sizes) or not math.isclose(sum(sizes), 100.0, abs_tol=1e-6):
        raise ConfigError("'default_pane_sizes' must be positive and sum to 100")
    return sizes
