"""
analytics_reporter/validators/data_contract.py

Validation for values the aggregation layer must treat as numeric or categorical.
"""

from __future__ import annotations

from typing import Any


class DataContractViolation(ValueError):
    """
    Raised when provider data breaks a contract the pipeline relies on.

    A partially-wrong total is worse than a visible failure, so the whole
    ``process`` call fails instead of coercing the value.
    """

    def __init__(
        self,
        message: str,
        *,
        report: str | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.report = report
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "report": self.report,
            "field": self.field,
            "value": self.value,
        }


def parse_int(value: Any, *, field: str, report: str | None = None) -> int:
    """
    Parse a provider cell as an integer or raise DataContractViolation.
    """

    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DataContractViolation(
            f"Field '{field}' expected an integer, got {value!r}.",
            report=report,
            field=field,
            value=value,
        ) from exc
