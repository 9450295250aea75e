"""
analytics_reporter/schemas/report_result.py

Output contract handed to downstream consumers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReportResult(BaseModel):
    """
    Normalized rows and rollups for one report run.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    query: dict[str, Any] = Field(default_factory=dict)
    meta: Any = None
    data: list[dict[str, Any]] = Field(default_factory=list)
    totals: dict[str, Any] = Field(default_factory=dict)
    taken_at: datetime | None = None

    def to_payload(self) -> dict[str, Any]:
        """
        JSON-ready dict; ``taken_at`` is omitted when the response had no rows.
        """

        payload = self.model_dump(mode="json")
        if self.taken_at is None:
            payload.pop("taken_at")
        return payload
