"""
Shared type aliases for normalized report data.
"""

from __future__ import annotations

from typing import Any

DataPoint = dict[str, str]
"""One normalized row keyed by canonical field name."""

Totals = dict[str, Any]
"""Report rollups; only the keys that apply to a report are present."""
