"""
tests/test_google_analytics_connector.py

HTTP behavior of the reporting API connector against a fake session.
"""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from analytics_reporter.config import ExternalHTTPSettings
from analytics_reporter.connectors import base as connector_base
from analytics_reporter.connectors.base import TransportError
from analytics_reporter.connectors.google_analytics_connector import GoogleAnalyticsConnector

SETTINGS = ExternalHTTPSettings(
    base_url="https://analytics.test/v3/",
    max_retries=2,
    backoff_initial_seconds=0.1,
    rate_limit_per_second=0,
)


class _Credential:
    token = "token-123"


def _response(status_code: int, body: Any) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    response.url = "https://analytics.test/v3/data/ga"
    return response


class _FakeSession:
    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> requests.Response:
        self.calls.append(kwargs)
        outcome = self._responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(connector_base.time, "sleep", lambda _: None)


def _query() -> dict[str, Any]:
    return {
        "metrics": "ga:sessions",
        "samplingLevel": "HIGHER_PRECISION",
        "max-results": 10000,
        "ids": "ga:123456",
        "auth": _Credential(),
    }


def test_fetches_core_reporting_endpoint() -> None:
    session = _FakeSession(_response(200, {"totalResults": 0, "columnHeaders": []}))
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    payload = connector.fetch(_query(), realtime=False)

    assert payload == {"totalResults": 0, "columnHeaders": []}
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://analytics.test/v3/data/ga"
    assert call["headers"] == {"Authorization": "Bearer token-123"}
    assert "auth" not in call["params"]
    assert call["params"]["ids"] == "ga:123456"
    assert call["timeout"] == SETTINGS.timeout_seconds


def test_realtime_uses_realtime_endpoint() -> None:
    session = _FakeSession(_response(200, {"totalResults": 0}))
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    connector.fetch(_query(), realtime=True)

    assert session.calls[0]["url"] == "https://analytics.test/v3/data/realtime"


def test_retries_retryable_status_then_succeeds() -> None:
    session = _FakeSession(
        _response(503, {"error": {"code": 503}}),
        requests.ConnectionError("reset"),
        _response(200, {"totalResults": 1}),
    )
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    assert connector.fetch(_query(), realtime=False) == {"totalResults": 1}
    assert len(session.calls) == 3


def test_exhausted_retries_raise_transport_error() -> None:
    session = _FakeSession(*[requests.Timeout("slow") for _ in range(3)])
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    with pytest.raises(TransportError):
        connector.fetch(_query(), realtime=False)
    assert len(session.calls) == 3


def test_client_error_is_not_retried() -> None:
    session = _FakeSession(_response(403, {"error": {"code": 403, "message": "User does not have permission"}}))
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    with pytest.raises(TransportError) as exc_info:
        connector.fetch(_query(), realtime=False)

    assert exc_info.value.status_code == 403
    assert len(session.calls) == 1


def test_invalid_json_raises_transport_error() -> None:
    session = _FakeSession(_response(200, b"<html>oops</html>"))
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    with pytest.raises(TransportError):
        connector.fetch(_query(), realtime=False)


def test_error_payload_raises_transport_error() -> None:
    session = _FakeSession(_response(200, {"error": {"code": 400, "message": "Invalid dimension"}}))
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    with pytest.raises(TransportError, match="Invalid dimension"):
        connector.fetch(_query(), realtime=False)


def test_missing_token_fails_before_request() -> None:
    session = _FakeSession()
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)
    query = _query()
    query["auth"] = None

    with pytest.raises(TransportError):
        connector.fetch(query, realtime=False)
    assert session.calls == []


def test_other_request_errors_raise_transport_error() -> None:
    session = _FakeSession(requests.TooManyRedirects("redirect loop"))
    connector = GoogleAnalyticsConnector(http_settings=SETTINGS, session=session)

    with pytest.raises(TransportError) as exc_info:
        connector.fetch(_query(), realtime=False)

    assert isinstance(exc_info.value.__cause__, requests.TooManyRedirects)
    assert len(session.calls) == 1


def test_rate_limit_spaces_requests_under_lock(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = {"now": 100.0}
    sleeps: list[float] = []
    settings = ExternalHTTPSettings(base_url="https://analytics.test/v3/", max_retries=0, rate_limit_per_second=2)
    session = _FakeSession(
        _response(200, {"totalResults": 0}),
        _response(200, {"totalResults": 0}),
    )
    connector = GoogleAnalyticsConnector(http_settings=settings, session=session)

    def _sleep(seconds: float) -> None:
        assert connector._rate_limit_lock.locked()
        sleeps.append(seconds)
        clock["now"] += seconds

    monkeypatch.setattr(connector_base.time, "monotonic", lambda: clock["now"])
    monkeypatch.setattr(connector_base.time, "sleep", _sleep)

    connector.fetch(_query(), realtime=False)
    connector.fetch(_query(), realtime=False)

    assert sleeps == [pytest.approx(0.5)]
    assert not connector._rate_limit_lock.locked()
