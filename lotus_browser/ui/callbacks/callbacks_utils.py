from __future__ import annotations

import logging
from typing import Any, Optional

import dash

logger = logging.getLogger(__name__)


def triggered_pattern(kind: str) -> Optional[str]:
    """
    Index of the pattern-matching component that fired, or None.

    Re-rendered buttons come back with n_clicks=0 and still trigger ALL
    callbacks; those are not clicks.
    """
    triggered = dash.ctx.triggered_id
    if not isinstance(triggered, dict) or triggered.get("type") != kind:
        return None
    if not any(t.get("value") for t in dash.ctx.triggered):
        return None
    return triggered.get("index")


def next_revision(revision: Any) -> int:
    try:
        return int(revision or 0) + 1
    except (TypeError, ValueError):
        logger.warning("Invalid saved-revision value: %r", revision)
        return 1
