"""
analytics_reporter/domain/account.py

Account context shared read-only by every report run.
"""

from __future__ import annotations

from dataclasses import dataclass

from analytics_reporter.config import AccountSettings


@dataclass(frozen=True)
class AccountContext:
    """
    Reporting account identity injected into queries and realtime points.
    """

    ids: str
    hostname: str | None = None

    @classmethod
    def from_settings(cls, settings: AccountSettings) -> "AccountContext":
        return cls(ids=settings.ids, hostname=settings.hostname)
