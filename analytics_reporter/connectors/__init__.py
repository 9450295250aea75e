"""
analytics_reporter/connectors package marker.
"""

from analytics_reporter.connectors.base import BaseConnector, TransportError
from analytics_reporter.connectors.google_analytics_connector import GoogleAnalyticsConnector

__all__ = [
    "BaseConnector",
    "GoogleAnalyticsConnector",
    "TransportError",
]
