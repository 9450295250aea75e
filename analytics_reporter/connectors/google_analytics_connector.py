"""
analytics_reporter/connectors/google_analytics_connector.py

Google Analytics Core Reporting and Real Time Reporting (v3) connector.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from analytics_reporter.config import ExternalHTTPSettings
from analytics_reporter.connectors.base import BaseConnector, TransportError

logger = logging.getLogger(__name__)


class GoogleAnalyticsConnector(BaseConnector):
    """
    Fetches raw report responses with the bearer token carried in the query.
    """

    def __init__(
        self,
        *,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="google_analytics", http_settings=http_settings, session=session)
        self._base_url = http_settings.base_url.rstrip("/")

    def fetch(self, query: Mapping[str, Any], *, realtime: bool) -> Mapping[str, Any]:
        params = {key: value for key, value in query.items() if key != "auth"}
        token = getattr(query.get("auth"), "token", None)
        if not token:
            raise TransportError(f"{self.source}: query carries no access token.")

        endpoint = f"{self._base_url}/data/realtime" if realtime else f"{self._base_url}/data/ga"
        payload = self._request_json(
            method="GET",
            url=endpoint,
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )

        if not isinstance(payload, dict):
            logger.error("Unexpected reporting API payload shape source=%s", self.source)
            raise TransportError(f"{self.source}: response was not a JSON object.")
        if "error" in payload:
            error = payload["error"] if isinstance(payload["error"], dict) else {}
            raise TransportError(
                f"{self.source}: {error.get('message', 'provider returned an error')}",
                status_code=error.get("code"),
            )

        logger.debug(
            "Fetched report source=%s realtime=%s total_results=%s",
            self.source,
            realtime,
            payload.get("totalResults"),
        )
        return payload
