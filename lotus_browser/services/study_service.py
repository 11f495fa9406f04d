from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from lotus_browser.core.exceptions import FetchError, QueryCancelled

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


# -------------------------------------------------------------------------
# HTTP client
# -------------------------------------------------------------------------

class StudyClient:
    """
    Thin wrapper over the study query API:

        GET {api_base}/query/{query}/studies  ->  {"results": [...]}

    Any failure (network, non-2xx, payload that is not JSON) is raised as a
    single FetchError.

    The body is streamed: when `cancelled` is set by the time the headers
    arrive, the connection is closed unread and QueryCancelled is raised.
    """

    def __init__(
            self,
            api_base: str,
            *,
            timeout: float = DEFAULT_TIMEOUT,
            session: Optional[requests.Session] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def studies_url(self, query: str) -> str:
        return f"{self.api_base}/query/{quote(query, safe='')}/studies"

    def fetch_studies(
            self,
            query: str,
            cancelled: Optional[threading.Event] = None,
    ) -> List[Dict[str, Any]]:
        url = self.studies_url(query)
        try:
            resp = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            raise FetchError(str(e)) from e

        try:
            if cancelled is not None and cancelled.is_set():
                raise QueryCancelled(query)
            data = resp.json()
        except ValueError:
            data = None
        except requests.RequestException as e:
            raise FetchError(str(e)) from e
        finally:
            resp.close()

        if not resp.ok:
            message = data.get("error") if isinstance(data, dict) else None
            raise FetchError(str(message or f"HTTP {resp.status_code}"), status=resp.status_code)

        if not isinstance(data, dict):
            raise FetchError("Malformed response payload", status=resp.status_code)

        results = data.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]


# -------------------------------------------------------------------------
# Superseded-request tracking
# -------------------------------------------------------------------------

@dataclass
class QueryTicket:
    client_id: str
    query: str
    cancelled: threading.Event = field(default_factory=threading.Event)

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled.is_set()


class QueryTracker:
    """
    One live query per client. Starting a new one cancels the previous
    ticket, so a slow response for an old query can be recognised and
    dropped when it finally arrives.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: Dict[str, QueryTicket] = {}

    def begin(self, client_id: str, query: str) -> QueryTicket:
        ticket = QueryTicket(client_id=client_id, query=query)
        with self._lock:
            previous = self._current.get(client_id)
            self._current[client_id] = ticket
        if previous is not None:
            previous.cancelled.set()
        return ticket

    def is_current(self, ticket: QueryTicket) -> bool:
        with self._lock:
            return not ticket.is_cancelled and self._current.get(ticket.client_id) is ticket

    def finish(self, ticket: QueryTicket) -> None:
        with self._lock:
            if self._current.get(ticket.client_id) is ticket:
                del self._current[ticket.client_id]


# -------------------------------------------------------------------------
# Service
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class StudyResult:
    """
    Outcome of one query: rows on success, a user-facing message on failure.
    `query` lets the view check the result still matches what is on screen.
    """

    query: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"query": self.query, "rows": list(self.rows), "error": self.error}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[StudyResult]:
        if not isinstance(data, dict) or "query" not in data:
            return None
        rows = data.get("rows")
        return cls(
            query=str(data.get("query") or ""),
            rows=[r for r in rows if isinstance(r, dict)] if isinstance(rows, list) else [],
            error=data.get("error"),
        )


class StudyService:
    def __init__(self, client: StudyClient, tracker: Optional[QueryTracker] = None):
        self.client = client
        self.tracker = tracker or QueryTracker()

    def fetch(self, client_id: str, query: str) -> Optional[StudyResult]:
        """
        Run a query for one browser client.

        Returns None when a newer query from the same client started while
        this one was in flight; the caller must not apply anything then.
        """
        ticket = self.tracker.begin(client_id, query)
        try:
            rows = self.client.fetch_studies(query, cancelled=ticket.cancelled)
            result = StudyResult(query=query, rows=rows)
        except QueryCancelled:
            logger.info("Query cancelled before its response was read", extra={"query": query})
            return None
        except FetchError as e:
            logger.warning(
                "Study query failed",
                extra={"query": query, "status": e.status, "error": e.message},
            )
            result = StudyResult(query=query, error=f"Unable to fetch studies: {e.message}")

        if not self.tracker.is_current(ticket):
            logger.info("Dropping result of superseded query", extra={"query": query})
            return None

        self.tracker.finish(ticket)
        logger.info("Study query finished", extra={"query": query, "n_rows": len(result.rows)})
        return result
