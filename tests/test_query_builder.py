"""
tests/test_query_builder.py

Unit tests for QueryBuilder parameter construction.
"""

from __future__ import annotations

import pytest

from analytics_reporter.domain.account import AccountContext
from analytics_reporter.schemas.report_definition import ReportDefinition
from analytics_reporter.services.query_builder import QueryBuilder

ACCOUNT = AccountContext(ids="ga:123456", hostname="example.gov")
CREDENTIAL = object()


@pytest.fixture()
def builder() -> QueryBuilder:
    return QueryBuilder()


def _report(**overrides: object) -> ReportDefinition:
    raw = {
        "name": "windows-ie",
        "query": {
            "dimensions": ["ga:date", "ga:operatingSystemVersion"],
            "metrics": ["ga:sessions"],
            "start-date": "90daysAgo",
            "end-date": "yesterday",
            "filters": ["ga:operatingSystem==Windows"],
            "sort": "-ga:sessions",
        },
        "filters": ["ga:hostname=~example"],
    }
    raw.update(overrides)
    return ReportDefinition.model_validate(raw)


def test_builds_full_query(builder: QueryBuilder) -> None:
    query = builder.build(_report(), account=ACCOUNT, credential=CREDENTIAL)

    assert query == {
        "dimensions": "ga:date,ga:operatingSystemVersion",
        "metrics": "ga:sessions",
        "start-date": "90daysAgo",
        "end-date": "yesterday",
        "samplingLevel": "HIGHER_PRECISION",
        "filters": "ga:operatingSystem==Windows;ga:hostname=~example",
        "max-results": 10000,
        "sort": "-ga:sessions",
        "ids": "ga:123456",
        "auth": CREDENTIAL,
    }


def test_omits_absent_keys(builder: QueryBuilder) -> None:
    report = ReportDefinition.model_validate({"name": "realtime", "realtime": True, "query": {"metrics": ["rt:activeUsers"]}})

    query = builder.build(report, account=ACCOUNT, credential=CREDENTIAL)

    assert set(query) == {"metrics", "samplingLevel", "max-results", "ids", "auth"}


def test_report_filters_alone_are_used(builder: QueryBuilder) -> None:
    report = _report(query={"metrics": ["ga:sessions"]}, filters=["ga:country==Canada"])

    query = builder.build(report, account=ACCOUNT, credential=CREDENTIAL)

    assert query["filters"] == "ga:country==Canada"


def test_explicit_max_results_wins(builder: QueryBuilder) -> None:
    report = _report(query={"metrics": ["ga:sessions"], "max-results": 30})

    query = builder.build(report, account=ACCOUNT, credential=CREDENTIAL)

    assert query["max-results"] == 30


@pytest.mark.parametrize("realtime", [False, True])
def test_sampling_level_is_always_highest_precision(builder: QueryBuilder, realtime: bool) -> None:
    query = builder.build(_report(realtime=realtime), account=ACCOUNT, credential=CREDENTIAL)

    assert query["samplingLevel"] == "HIGHER_PRECISION"


def test_does_not_mutate_report_definition(builder: QueryBuilder) -> None:
    report = _report()
    before = report.model_dump()

    first = builder.build(report, account=ACCOUNT, credential=CREDENTIAL)
    first["filters"] = "changed"
    builder.build(report, account=ACCOUNT, credential=CREDENTIAL)

    assert report.model_dump() == before
