from __future__ import annotations

from typing import Any

import pytest
from google.auth import exceptions as google_auth_exceptions

from analytics_reporter.auth import AuthError, ServiceAccountAuthProvider
from analytics_reporter.config import GoogleAuthSettings


class _FakeCredentials:
    service_account_email = "reporter@example.iam.gserviceaccount.com"

    def __init__(self, *, valid: bool, refresh_error: Exception | None = None) -> None:
        self.valid = valid
        self.refresh_calls = 0
        self._refresh_error = refresh_error

    def refresh(self, request: Any) -> None:
        self.refresh_calls += 1
        if self._refresh_error is not None:
            raise self._refresh_error
        self.valid = True


def _provider(monkeypatch: pytest.MonkeyPatch, credentials: _FakeCredentials) -> ServiceAccountAuthProvider:
    provider = ServiceAccountAuthProvider(settings=GoogleAuthSettings(email="reporter@example.com", key="pem"))
    monkeypatch.setattr(provider, "_load_credentials", lambda: credentials)
    return provider


def test_missing_credentials_raise_auth_error() -> None:
    provider = ServiceAccountAuthProvider(settings=GoogleAuthSettings())

    with pytest.raises(AuthError):
        provider.authorize()


def test_unreadable_key_file_raises_auth_error(tmp_path) -> None:
    settings = GoogleAuthSettings(key_path=str(tmp_path / "missing.json"))

    with pytest.raises(AuthError):
        ServiceAccountAuthProvider(settings=settings).authorize()


def test_malformed_private_key_raises_auth_error() -> None:
    settings = GoogleAuthSettings(email="reporter@example.com", key="not a pem key")

    with pytest.raises(AuthError):
        ServiceAccountAuthProvider(settings=settings).authorize()


def test_refreshes_invalid_credentials_once(monkeypatch: pytest.MonkeyPatch) -> None:
    credentials = _FakeCredentials(valid=False)
    provider = _provider(monkeypatch, credentials)

    assert provider.authorize() is credentials
    assert provider.authorize() is credentials
    assert credentials.refresh_calls == 1


def test_refresh_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    credentials = _FakeCredentials(valid=False, refresh_error=google_auth_exceptions.RefreshError("invalid_grant"))
    provider = _provider(monkeypatch, credentials)

    with pytest.raises(AuthError) as exc_info:
        provider.authorize()

    assert isinstance(exc_info.value.__cause__, google_auth_exceptions.RefreshError)
