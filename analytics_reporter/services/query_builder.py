"""
analytics_reporter/services/query_builder.py

Translate a report definition into reporting API query parameters.
"""

from __future__ import annotations

from typing import Any, Final

from analytics_reporter.domain.account import AccountContext
from analytics_reporter.schemas.report_definition import ReportDefinition

SAMPLING_LEVEL: Final[str] = "HIGHER_PRECISION"
DEFAULT_MAX_RESULTS: Final[int] = 10000


class QueryBuilder:
    """
    Builds a fresh provider query per call.

    The report definition is only read; every value placed in the query is a
    new string or scalar, so callers can reuse definitions across runs.
    """

    def __init__(
        self,
        *,
        sampling_level: str = SAMPLING_LEVEL,
        default_max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._sampling_level = sampling_level
        self._default_max_results = default_max_results

    def build(
        self,
        report: ReportDefinition,
        *,
        account: AccountContext,
        credential: Any,
    ) -> dict[str, Any]:
        axes = report.query
        query: dict[str, Any] = {}

        if axes.dimensions:
            query["dimensions"] = ",".join(axes.dimensions)
        if axes.metrics:
            query["metrics"] = ",".join(axes.metrics)

        if axes.start_date:
            query["start-date"] = axes.start_date
        if axes.end_date:
            query["end-date"] = axes.end_date

        # never sample data
        query["samplingLevel"] = self._sampling_level

        filters = [*(axes.filters or ()), *(report.filters or ())]
        if filters:
            query["filters"] = ";".join(filters)

        query["max-results"] = axes.max_results or self._default_max_results

        if axes.sort:
            query["sort"] = axes.sort

        query["ids"] = account.ids
        query["auth"] = credential
        return query
