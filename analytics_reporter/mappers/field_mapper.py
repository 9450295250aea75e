"""
analytics_reporter/mappers/field_mapper.py

Static mapping from reporting API column names to canonical field names.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

OTHER_BUCKET = "(other)"
"""Provider-reserved bucket for long-tail rows; never a real date."""

DATE_FIELD = "date"

FIELD_MAPPING: Mapping[str, str] = MappingProxyType(
    {
        "ga:date": "date",
        "ga:hour": "hour",
        "ga:users": "visitors",
        "rt:activeUsers": "active_visitors",
        "rt:pagePath": "page",
        "rt:pageTitle": "page_title",
        "ga:sessions": "visits",
        "ga:deviceCategory": "device",
        "ga:operatingSystem": "os",
        "ga:operatingSystemVersion": "os_version",
        "ga:hostname": "domain",
        "ga:browser": "browser",
        "ga:browserVersion": "browser_version",
        "ga:source": "source",
        "ga:pagePath": "page",
        "ga:pageTitle": "page_title",
        "ga:pageviews": "pageviews",
        "ga:country": "country",
        "ga:city": "city",
        "ga:eventLabel": "event_label",
        "ga:totalEvents": "total_events",
        "ga:landingPagePath": "landing_page",
        "ga:exitPagePath": "exit_page",
        "ga:hasSocialSourceReferral": "has_social_referral",
        "ga:referralPath": "referral_path",
        "ga:pageviewsPerSession": "pageviews_per_session",
        "ga:avgSessionDuration": "avg_session_duration",
        "ga:exits": "exits",
        "ga:language": "language",
        "ga:screenResolution": "screen_resolution",
        "ga:mobileDeviceModel": "mobile_device",
        "rt:country": "country",
        "rt:city": "city",
        "rt:totalEvents": "total_events",
        "rt:eventLabel": "event_label",
    }
)


def canonicalize(provider_field: str) -> str:
    """
    Return the canonical name for a provider column.

    Unknown columns pass through unchanged so new provider fields still
    reach the output.
    """

    return FIELD_MAPPING.get(provider_field, provider_field)


def normalize_date(raw_date: str) -> str:
    """
    Translate ``20141228`` into ``2014-12-28``.
    """

    # screen-size reports lead with an "(other)" row instead of a date.
    if raw_date == OTHER_BUCKET:
        return raw_date
    return "-".join((raw_date[:4], raw_date[4:6], raw_date[6:8]))
