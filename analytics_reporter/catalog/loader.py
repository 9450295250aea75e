"""
analytics_reporter/catalog/loader.py

JSON loader for report definitions.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Iterable

from analytics_reporter.config import resolve_path
from analytics_reporter.schemas.report_definition import ReportDefinition

logger = logging.getLogger(__name__)


class JsonReportCatalog(Mapping[str, ReportDefinition]):
    """
    Read-only, insertion-ordered report definitions keyed by name.
    """

    def __init__(self, reports: Iterable[ReportDefinition]) -> None:
        by_name: dict[str, ReportDefinition] = {}
        for report in reports:
            if report.name in by_name:
                raise ValueError(f"Duplicate report name '{report.name}' in catalog.")
            by_name[report.name] = report
        self._by_name = by_name

    def lookup(self, name: str) -> ReportDefinition | None:
        return self._by_name.get(name)

    def __getitem__(self, name: str) -> ReportDefinition:
        return self._by_name[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)


def parse_report_definitions(raw_data: Any) -> list[ReportDefinition]:
    """
    Validate a ``{"reports": [...]}`` document into report definitions.
    """

    if not isinstance(raw_data, dict):
        raise ValueError("Invalid report file: top level must be an object.")
    entries = raw_data.get("reports", [])
    if not isinstance(entries, list):
        raise ValueError("Invalid report file: 'reports' must be a list.")

    parsed: list[ReportDefinition] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object report entry index=%s", index)
            continue
        parsed.append(ReportDefinition.model_validate(entry))
    return parsed


def load_report_catalog(*, reports_path: str | Path) -> JsonReportCatalog:
    """
    Load report definitions from a JSON file.
    """

    path = resolve_path(str(reports_path))
    if not path.exists():
        raise FileNotFoundError(f"Report definition file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    catalog = JsonReportCatalog(parse_report_definitions(raw_data))
    logger.info("Loaded report catalog path=%s reports=%d", path, len(catalog))
    return catalog
