"""
analytics_reporter/services package marker.
"""

from analytics_reporter.services.aggregation_service import (
    DEFAULT_RULES,
    AggregationEngine,
    CrossTabRule,
    DateRangeRule,
    FieldSumRule,
    HistogramRule,
    TotalsRule,
)
from analytics_reporter.services.query_builder import QueryBuilder
from analytics_reporter.services.report_processor import ReportProcessor, process
from analytics_reporter.services.report_runner import ReportRunner, get_report_runner
from analytics_reporter.services.row_transformer import RowTransformer

__all__ = [
    "DEFAULT_RULES",
    "AggregationEngine",
    "CrossTabRule",
    "DateRangeRule",
    "FieldSumRule",
    "HistogramRule",
    "TotalsRule",
    "QueryBuilder",
    "ReportProcessor",
    "process",
    "ReportRunner",
    "get_report_runner",
    "RowTransformer",
]
