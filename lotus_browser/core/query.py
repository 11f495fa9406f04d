from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlencode

QUERY_PARAM = "q"
OPERATOR_TOKENS = ("AND", "OR", "NOT", "(", ")")


def append_token(query: Optional[str], token: str) -> str:
    """
    Query builder buttons and term picks append to the query text.
    The boolean grammar itself is parsed by the API, never here.
    """
    query = query or ""
    return f"{query} {token}" if query else token


def query_from_search(search: Optional[str]) -> str:
    """Read the query from a URL search string such as '?q=emotion'."""
    if not search:
        return ""
    values = parse_qs(search.lstrip("?"), keep_blank_values=True).get(QUERY_PARAM)
    return values[0] if values else ""


def search_from_query(query: Optional[str]) -> str:
    """Inverse of query_from_search; an empty query clears the parameter."""
    if not query:
        return ""
    return "?" + urlencode({QUERY_PARAM: query})
