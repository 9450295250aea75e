"""
analytics_reporter/services/report_runner.py

Run one report end to end: resolve, authorize, query, fetch, process.

The runner holds only read-only collaborators (catalog, account, auth
provider, transport). Each call builds its own query and totals, so
different reports may run in parallel threads without locking.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from functools import lru_cache
from typing import Any, Mapping, Protocol

from analytics_reporter.auth import AuthError, ServiceAccountAuthProvider
from analytics_reporter.catalog.loader import load_report_catalog
from analytics_reporter.config import (
    get_account_settings,
    get_external_http_settings,
    get_google_auth_settings,
    get_report_catalog_settings,
)
from analytics_reporter.connectors.base import TransportError
from analytics_reporter.connectors.google_analytics_connector import GoogleAnalyticsConnector
from analytics_reporter.domain.account import AccountContext
from analytics_reporter.logging_utils import log_event
from analytics_reporter.schemas.report_definition import ReportDefinition
from analytics_reporter.schemas.report_result import ReportResult
from analytics_reporter.services.query_builder import QueryBuilder
from analytics_reporter.services.report_processor import ReportProcessor
from analytics_reporter.validators.data_contract import DataContractViolation

logger = logging.getLogger(__name__)

ReportCallback = Callable[[Exception | None, ReportResult | None], None]


class AuthProvider(Protocol):
    def authorize(self) -> Any:
        ...


class Transport(Protocol):
    def fetch(self, query: Mapping[str, Any], *, realtime: bool) -> Mapping[str, Any]:
        ...


class ReportCatalog(Protocol):
    def lookup(self, name: str) -> ReportDefinition | None:
        ...

    def __iter__(self) -> Iterator[str]:
        ...


class ReportRunner:
    """
    Coordinates one authorization and one fetch per report run.

    No retries happen here; collaborator errors reach the caller unchanged.
    """

    def __init__(
        self,
        *,
        catalog: ReportCatalog,
        account: AccountContext,
        auth_provider: AuthProvider,
        transport: Transport,
        query_builder: QueryBuilder | None = None,
        processor: ReportProcessor | None = None,
    ) -> None:
        self._catalog = catalog
        self._account = account
        self._auth_provider = auth_provider
        self._transport = transport
        self._query_builder = query_builder or QueryBuilder()
        self._processor = processor or ReportProcessor(account=account)

    def report_names(self) -> tuple[str, ...]:
        return tuple(self._catalog)

    def resolve(self, report: ReportDefinition | str | None) -> ReportDefinition | None:
        if report is None or isinstance(report, ReportDefinition):
            return report
        return self._catalog.lookup(report)

    def query(
        self,
        report: ReportDefinition | str | None,
        callback: ReportCallback | None = None,
    ) -> ReportResult | None:
        """
        Run *report* (a definition or a catalog name).

        An unknown report is a no-op and returns None. Without *callback*,
        AuthError, TransportError and DataContractViolation propagate. With
        *callback*, it receives ``(error, result)`` instead.
        """

        try:
            result = self._run(report)
        except (AuthError, TransportError, DataContractViolation) as exc:
            if callback is None:
                raise
            callback(exc, None)
            return None

        if callback is not None:
            callback(None, result)
        return result

    def _run(self, report: ReportDefinition | str | None) -> ReportResult | None:
        definition = self.resolve(report)
        if definition is None:
            logger.info("Report not defined, skipping report=%r", report)
            return None

        started = time.monotonic()
        log_event(logger, logging.INFO, "report_started", report=definition.name)

        try:
            credential = self._auth_provider.authorize()
            query = self._query_builder.build(
                definition,
                account=self._account,
                credential=credential,
            )
            response = self._transport.fetch(query, realtime=definition.realtime)
            result = self._processor.process(definition, response)
        except (AuthError, TransportError, DataContractViolation) as exc:
            log_event(
                logger,
                logging.ERROR,
                "report_failed",
                report=definition.name,
                error_type=type(exc).__name__,
                error=str(exc),
                details=exc.to_dict() if isinstance(exc, DataContractViolation) else None,
            )
            raise

        log_event(
            logger,
            logging.INFO,
            "report_completed",
            report=definition.name,
            points=len(result.data),
            totals=sorted(result.totals),
            elapsed_seconds=round(time.monotonic() - started, 3),
        )
        return result


@lru_cache(maxsize=1)
def get_report_runner() -> ReportRunner:
    """
    Build and cache the runner from environment configuration.
    """

    http_settings = get_external_http_settings()
    catalog = load_report_catalog(reports_path=get_report_catalog_settings().reports_path)
    return ReportRunner(
        catalog=catalog,
        account=AccountContext.from_settings(get_account_settings()),
        auth_provider=ServiceAccountAuthProvider(settings=get_google_auth_settings()),
        transport=GoogleAnalyticsConnector(http_settings=http_settings),
    )
