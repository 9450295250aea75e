"""
analytics_reporter/catalog package marker.
"""

from analytics_reporter.catalog.loader import (
    JsonReportCatalog,
    load_report_catalog,
    parse_report_definitions,
)

__all__ = [
    "JsonReportCatalog",
    "load_report_catalog",
    "parse_report_definitions",
]
