"""
analytics_reporter/mappers package marker.
"""

from analytics_reporter.mappers.field_mapper import (
    DATE_FIELD,
    FIELD_MAPPING,
    OTHER_BUCKET,
    canonicalize,
    normalize_date,
)

__all__ = [
    "DATE_FIELD",
    "FIELD_MAPPING",
    "OTHER_BUCKET",
    "canonicalize",
    "normalize_date",
]
