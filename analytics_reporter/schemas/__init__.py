"""
analytics_reporter/schemas package marker.
"""

from analytics_reporter.schemas.report_definition import (
    ReportDefinition,
    ReportQuerySpec,
    ReportThreshold,
)
from analytics_reporter.schemas.report_result import ReportResult

__all__ = [
    "ReportDefinition",
    "ReportQuerySpec",
    "ReportResult",
    "ReportThreshold",
]
