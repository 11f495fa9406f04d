import threading

import pytest
import requests

from lotus_browser.core.exceptions import FetchError, QueryCancelled
from lotus_browser.services.study_service import (
    QueryTracker,
    StudyClient,
    StudyResult,
    StudyService,
)


class _FakeResponse:
    def __init__(self, status_code=200, payload=None, raw=False):
        self.status_code = status_code
        self._payload = payload
        self._raw = raw
        self.closed = False
        self.read = False

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def close(self):
        self.closed = True

    def json(self):
        self.read = True
        if self._raw:
            raise ValueError("Expecting value")
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None, stream=False):
        self.calls.append((url, timeout, stream))
        if self.error is not None:
            raise self.error
        return self.response


def _client(response=None, error=None):
    session = _FakeSession(response, error)
    return StudyClient("http://api.test/", timeout=5, session=session), session


def test_studies_url_escapes_query():
    client, _ = _client()

    assert client.studies_url("(fear OR anxiety)/x") == (
        "http://api.test/query/%28fear%20OR%20anxiety%29%2Fx/studies"
    )


def test_fetch_returns_result_rows():
    rows = [{"year": 2010, "title": "Fear"}, {"year": 2012, "title": "Memory"}]
    client, session = _client(_FakeResponse(payload={"results": rows}))

    assert client.fetch_studies("emotion") == rows
    assert session.calls == [("http://api.test/query/emotion/studies", 5, True)]
    assert session.response.closed


def test_fetch_drops_non_object_rows_and_missing_results():
    client, _ = _client(_FakeResponse(payload={"results": [{"title": "ok"}, "junk"]}))
    assert client.fetch_studies("q") == [{"title": "ok"}]

    client, _ = _client(_FakeResponse(payload={}))
    assert client.fetch_studies("q") == []


def test_http_error_uses_server_message():
    client, _ = _client(_FakeResponse(400, payload={"error": "Unbalanced parentheses"}))

    with pytest.raises(FetchError) as excinfo:
        client.fetch_studies("(fear")

    assert excinfo.value.message == "Unbalanced parentheses"
    assert excinfo.value.status == 400


def test_http_error_without_body_reports_status():
    client, _ = _client(_FakeResponse(503, raw=True))

    with pytest.raises(FetchError, match="HTTP 503"):
        client.fetch_studies("fear")


def test_malformed_payload_is_a_fetch_error():
    client, _ = _client(_FakeResponse(200, raw=True))

    with pytest.raises(FetchError, match="Malformed"):
        client.fetch_studies("fear")


def test_network_failure_is_a_fetch_error():
    client, _ = _client(error=requests.ConnectionError("connection refused"))

    with pytest.raises(FetchError, match="connection refused"):
        client.fetch_studies("fear")


def test_service_wraps_failure_for_display():
    client, _ = _client(_FakeResponse(500, payload={}))

    result = StudyService(client).fetch("client-1", "fear")

    assert result == StudyResult(query="fear", rows=[], error="Unable to fetch studies: HTTP 500")


def test_superseded_query_is_dropped():
    tracker = QueryTracker()

    class _SlowClient:
        def fetch_studies(self, query, cancelled=None):
            # A newer query from the same browser starts while this one runs
            tracker.begin("client-1", "newer")
            return [{"title": "stale"}]

    service = StudyService(_SlowClient(), tracker)

    assert service.fetch("client-1", "older") is None


def test_queries_from_other_clients_do_not_interfere():
    tracker = QueryTracker()

    class _Client:
        def fetch_studies(self, query, cancelled=None):
            tracker.begin("client-2", "their query")
            return [{"title": query}]

    result = StudyService(_Client(), tracker).fetch("client-1", "mine")

    assert result.rows == [{"title": "mine"}]
    assert result.error is None


def test_tracker_cancels_previous_ticket():
    tracker = QueryTracker()

    first = tracker.begin("c", "a")
    second = tracker.begin("c", "b")

    assert first.is_cancelled
    assert not tracker.is_current(first)
    assert tracker.is_current(second)

    tracker.finish(second)
    assert not tracker.is_current(second)


def test_study_result_round_trip():
    result = StudyResult(query="fear", rows=[{"title": "A"}], error=None)

    assert StudyResult.from_dict(result.to_dict()) == result
    assert StudyResult.from_dict(None) is None
    assert StudyResult.from_dict({"query": "x", "rows": "nope"}).rows == []


def test_cancelled_query_closes_response_unread():
    response = _FakeResponse(payload={"results": [{"title": "stale"}]})
    client, _ = _client(response)
    cancelled = threading.Event()
    cancelled.set()

    with pytest.raises(QueryCancelled):
        client.fetch_studies("fear", cancelled=cancelled)

    assert response.closed
    assert not response.read


def test_service_drops_query_cancelled_while_waiting_for_headers():
    tracker = QueryTracker()
    response = _FakeResponse(payload={"results": [{"title": "stale"}]})

    class _Session(_FakeSession):
        def get(self, url, timeout=None, stream=False):
            # A newer query starts before the server answers this one
            tracker.begin("client-1", "newer")
            return super().get(url, timeout=timeout, stream=stream)

    client = StudyClient("http://api.test", session=_Session(response))

    assert StudyService(client, tracker).fetch("client-1", "older") is None
    assert not response.read
