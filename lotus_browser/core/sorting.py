from __future__ import annotations

import math
import unicodedata
from typing import Any, Callable, Dict, List, Sequence, Tuple

import pandas as pd

from lotus_browser.core.records import FieldKind, Record, field_kind

ASC = "asc"
DESC = "desc"


# -------------------------------------------------------------------------
# Per-kind sort keys
# -------------------------------------------------------------------------

def _numeric_key(value: Any) -> float:
    """Missing or non-numeric values sort as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _temporal_key(value: Any) -> float:
    """
    Seconds since the epoch. Missing or unparseable values sort as the epoch
    itself; bare numbers are taken as epoch milliseconds.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)) or value == "":
        return 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value) / 1000.0

    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return 0.0
    return ts.timestamp()


def _textual_key(value: Any) -> str:
    """Case-insensitive collation key; missing values sort as ''."""
    if value is None:
        return ""
    return unicodedata.normalize("NFC", str(value)).casefold()


_KEY_FUNCS: Dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.NUMERIC: _numeric_key,
    FieldKind.TEMPORAL: _temporal_key,
    FieldKind.TEXTUAL: _textual_key,
}


# -------------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------------

def sorted_with_index(
        records: Sequence[Record],
        key: str,
        direction: str = ASC,
) -> List[Tuple[int, Record]]:
    """
    Stable sort that keeps each record's position in the input.

    Returns (original_index, record) pairs so a row picked from the sorted
    projection can be mapped back to the underlying sequence.
    Descending order reverses the comparison only: ties keep their original
    relative order in both directions.
    """
    key_func = _KEY_FUNCS[field_kind(key)]
    keyed = [(key_func(r.get(key)), i, r) for i, r in enumerate(records)]
    keyed.sort(key=lambda item: item[0], reverse=(direction == DESC))
    return [(i, r) for _, i, r in keyed]


def sorted_by(records: Sequence[Record], key: str, direction: str = ASC) -> List[Record]:
    """Return a new, stably ordered list; `records` is left untouched."""
    return [r for _, r in sorted_with_index(records, key, direction)]


def toggle_sort(current_key: str, current_direction: str, clicked_key: str) -> Tuple[str, str]:
    """
    Column-header click: the same column flips direction, a new column
    starts ascending.
    """
    if clicked_key == current_key:
        return current_key, (ASC if current_direction == DESC else DESC)
    return clicked_key, ASC


def sort_indicator(column_key: str, sort_key: str, direction: str) -> str:
    if column_key != sort_key:
        return ""
    return "▲" if direction == ASC else "▼"
