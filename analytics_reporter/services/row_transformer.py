"""
analytics_reporter/services/row_transformer.py

Turn provider rows into normalized data points.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from analytics_reporter.domain.account import AccountContext
from analytics_reporter.domain.types import DataPoint
from analytics_reporter.mappers.field_mapper import DATE_FIELD, canonicalize, normalize_date
from analytics_reporter.schemas.report_definition import ReportDefinition
from analytics_reporter.validators.data_contract import DataContractViolation, parse_int

logger = logging.getLogger(__name__)


class RowTransformer:
    """
    Applies threshold, cut and field mapping to each provider row.
    """

    def transform(
        self,
        report: ReportDefinition,
        response: Mapping[str, Any],
        *,
        account: AccountContext | None = None,
    ) -> list[DataPoint]:
        rows: Sequence[Sequence[Any]] = response.get("rows") or []
        if not rows or not response.get("totalResults"):
            return []

        headers = [header["name"] for header in response.get("columnHeaders") or []]
        column_indices = {name: index for index, name in enumerate(headers)}
        cut = report.cut or frozenset()
        domain = account.hostname if (report.realtime and account is not None) else None

        threshold_index: int | None = None
        if report.threshold is not None:
            threshold_index = column_indices.get(report.threshold.field)
            if threshold_index is None:
                logger.warning(
                    "Threshold column missing report=%s field=%s; every row is dropped",
                    report.name,
                    report.threshold.field,
                )

        points: list[DataPoint] = []
        for row_number, row in enumerate(rows):
            if len(row) != len(headers):
                raise DataContractViolation(
                    f"Row {row_number} has {len(row)} cells for {len(headers)} column headers.",
                    report=report.name,
                    value=list(row),
                )

            if report.threshold is not None:
                if threshold_index is None:
                    continue
                observed = parse_int(
                    row[threshold_index],
                    field=report.threshold.field,
                    report=report.name,
                )
                if observed < report.threshold.value:
                    continue

            point: DataPoint = {}
            for column_name, value in zip(headers, row):
                if column_name in cut:
                    continue
                field = canonicalize(column_name)
                if field == DATE_FIELD:
                    value = normalize_date(value)
                point[field] = value

            if domain:
                point["domain"] = domain

            points.append(point)

        logger.debug(
            "Transformed rows report=%s rows=%d points=%d",
            report.name,
            len(rows),
            len(points),
        )
        return points
