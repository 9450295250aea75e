"""
analytics_reporter/services/report_processor.py

Assemble a ReportResult from one raw reporting API response.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from analytics_reporter.domain.account import AccountContext
from analytics_reporter.schemas.report_definition import ReportDefinition
from analytics_reporter.schemas.report_result import ReportResult
from analytics_reporter.services.aggregation_service import AggregationEngine
from analytics_reporter.services.row_transformer import RowTransformer

logger = logging.getLogger(__name__)


class ReportProcessor:
    """
    Pure transformation from provider response to ReportResult.

    No I/O; safe to call concurrently for different reports.
    """

    def __init__(
        self,
        *,
        account: AccountContext | None = None,
        transformer: RowTransformer | None = None,
        engine: AggregationEngine | None = None,
    ) -> None:
        self._account = account
        self._transformer = transformer or RowTransformer()
        self._engine = engine or AggregationEngine()

    def process(
        self,
        report: ReportDefinition,
        response: Mapping[str, Any] | None,
    ) -> ReportResult:
        response = response or {}
        query = copy.deepcopy(dict(response.get("query") or {}))
        query.pop("ids", None)

        # A filter that matches nothing comes back without a rows key.
        if "rows" not in response or response["rows"] is None:
            logger.info("Report returned no rows report=%s", report.name)
            return ReportResult(name=report.name, query=query, meta=report.meta)

        taken_at = datetime.now(timezone.utc)
        points = self._transformer.transform(report, response, account=self._account)
        totals = self._engine.aggregate(report.name, points)

        return ReportResult(
            name=report.name,
            query=query,
            meta=report.meta,
            data=points,
            totals=totals,
            taken_at=taken_at,
        )


def process(
    report: ReportDefinition,
    response: Mapping[str, Any] | None,
    *,
    account: AccountContext | None = None,
) -> ReportResult:
    """
    Transform one raw response with the default transformer and totals rules.
    """

    return ReportProcessor(account=account).process(report, response)
