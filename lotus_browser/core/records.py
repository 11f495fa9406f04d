from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

# A study row as returned by the query API. Opaque apart from the fields
# below; anything else the server sends is carried through untouched.
Record = Mapping[str, Any]
IdentityKey = Tuple[Any, Any, Any]

SAVED_AT_FIELD = "savedAt"
IDENTITY_FIELDS: Tuple[str, str, str] = ("year", "title", "authors")


class FieldKind(str, Enum):
    """How a column is compared when a table is sorted by it."""

    NUMERIC = "numeric"
    TEMPORAL = "temporal"
    TEXTUAL = "textual"


FIELD_KINDS: Dict[str, FieldKind] = {
    "year": FieldKind.NUMERIC,
    SAVED_AT_FIELD: FieldKind.TEMPORAL,
}


def field_kind(key: str) -> FieldKind:
    return FIELD_KINDS.get(key, FieldKind.TEXTUAL)


def identity_key(record: Record) -> IdentityKey:
    """
    Composite identity used to deduplicate saved studies.

    Two records with the same (year, title, authors) are the same study,
    whatever the rest of their fields say.
    """
    return tuple(record.get(f) for f in IDENTITY_FIELDS)  # type: ignore[return-value]


def identity_token(record: Record) -> str:
    """
    String form of the identity key, safe to embed in a Dash component id.
    """
    return json.dumps(list(identity_key(record)), ensure_ascii=False)


def identity_from_token(token: str) -> IdentityKey:
    return tuple(json.loads(token))  # type: ignore[return-value]


def now_iso() -> str:
    """
    Return a current UTC timestamp in ISO-8601 format.
    """
    return datetime.now(timezone.utc).isoformat()


def to_saved_record(record: Record, saved_at: str | None = None) -> Dict[str, Any]:
    """
    Flatten a study into its persisted form: the record's own fields, in
    their original order, followed by `savedAt`.
    """
    saved = dict(record)
    saved[SAVED_AT_FIELD] = saved_at or now_iso()
    return saved
