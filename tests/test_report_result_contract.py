import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from analytics_reporter.schemas.report_result import ReportResult


def _result(**overrides: object) -> ReportResult:
    payload: dict = {
        "name": "devices",
        "query": {"metrics": ["ga:sessions"]},
        "meta": {"name": "Devices"},
        "data": [{"device": "mobile", "visits": "3"}],
        "totals": {"devices": {"mobile": 3, "desktop": 0, "tablet": 0}},
    }
    payload.update(overrides)
    return ReportResult(**payload)


def test_payload_keys_without_timestamp() -> None:
    assert set(_result().to_payload()) == {"name", "query", "meta", "data", "totals"}


def test_payload_serializes_timestamp_as_iso_8601() -> None:
    taken_at = datetime(2014, 12, 28, 10, 30, tzinfo=timezone.utc)

    payload = _result(taken_at=taken_at).to_payload()

    assert datetime.fromisoformat(payload["taken_at"].replace("Z", "+00:00")) == taken_at
    assert json.loads(json.dumps(payload))["totals"]["devices"]["mobile"] == 3


def test_result_is_frozen() -> None:
    result = _result()

    with pytest.raises(ValidationError):
        result.name = "other"  # type: ignore[misc]
