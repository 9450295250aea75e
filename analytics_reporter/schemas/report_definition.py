"""
analytics_reporter/schemas/report_definition.py

Input contract for declarative report definitions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReportQuerySpec(BaseModel):
    """
    Provider query axes as written in the report file.

    Hyphenated keys (``start-date``, ``max-results``) are accepted verbatim.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    dimensions: list[str] | None = None
    metrics: list[str] | None = None
    start_date: str | None = Field(default=None, alias="start-date")
    end_date: str | None = Field(default=None, alias="end-date")
    filters: list[str] | None = None
    max_results: int | None = Field(default=None, alias="max-results", gt=0)
    sort: str | None = None


class ReportThreshold(BaseModel):
    """
    Client-side minimum for one provider column.
    """

    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    value: int


class ReportDefinition(BaseModel):
    """
    One report: what to query and how to post-process the rows.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    query: ReportQuerySpec = Field(default_factory=ReportQuerySpec)
    filters: list[str] | None = None
    threshold: ReportThreshold | None = None
    cut: frozenset[str] | None = None
    realtime: bool = False
    meta: Any = None

    @field_validator("filters", mode="before")
    @classmethod
    def _wrap_single_filter(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value
