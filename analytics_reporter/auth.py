"""
analytics_reporter/auth.py

Service-account authorization for the reporting API.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import requests
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from analytics_reporter.config import GoogleAuthSettings

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class AuthError(RuntimeError):
    """
    Raised when the authorization handshake fails.
    """


class ServiceAccountAuthProvider:
    """
    Builds service-account credentials once and refreshes them on demand.

    Credentials come from a JSON key file, or from an email plus a PEM
    private key given inline or as a file.
    """

    def __init__(
        self,
        *,
        settings: GoogleAuthSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._credentials: service_account.Credentials | None = None
        self._lock = threading.Lock()

    def authorize(self) -> service_account.Credentials:
        """
        Return valid credentials, refreshing the access token when needed.
        """

        with self._lock:
            credentials = self._credentials or self._load_credentials()
            self._credentials = credentials
            if credentials.valid:
                return credentials

            try:
                credentials.refresh(Request(self._session))
            except google_auth_exceptions.GoogleAuthError as exc:
                logger.error(
                    "Authorization failed email=%s error=%s",
                    credentials.service_account_email,
                    exc,
                )
                raise AuthError("Service account authorization failed.") from exc

            logger.debug("Authorization refreshed email=%s", credentials.service_account_email)
            return credentials

    def _load_credentials(self) -> service_account.Credentials:
        scopes = list(self._settings.scopes)
        key_path = Path(self._settings.key_path) if self._settings.key_path else None

        try:
            if key_path is not None and key_path.suffix == ".json":
                return service_account.Credentials.from_service_account_file(
                    str(key_path),
                    scopes=scopes,
                )

            private_key = self._settings.key
            if private_key is None and key_path is not None:
                private_key = key_path.read_text(encoding="utf-8")
            if not private_key or not self._settings.email:
                raise AuthError(
                    "Missing service account credentials. Set ANALYTICS_KEY_PATH to a JSON key, "
                    "or ANALYTICS_REPORT_EMAIL with ANALYTICS_KEY / ANALYTICS_KEY_PATH."
                )

            return service_account.Credentials.from_service_account_info(
                {
                    "client_email": self._settings.email,
                    "private_key": private_key,
                    "token_uri": GOOGLE_TOKEN_URI,
                },
                scopes=scopes,
            )
        except (OSError, ValueError) as exc:
            raise AuthError(f"Unable to load service account key: {exc}") from exc
