"""
analytics_reporter/domain package marker.
"""

from analytics_reporter.domain.account import AccountContext
from analytics_reporter.domain.types import DataPoint, Totals

__all__ = [
    "AccountContext",
    "DataPoint",
    "Totals",
]
