"""
analytics_reporter/config.py

Environment-driven configuration for accounts, auth, HTTP and report catalogs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ANALYTICS_READONLY_SCOPE = "https://www.googleapis.com/auth/analytics.readonly"


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = _project_root()
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def resolve_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@dataclass(frozen=True)
class AccountSettings:
    """
    Analytics account the reports run against.
    """

    ids: str
    hostname: str | None = None


@dataclass(frozen=True)
class GoogleAuthSettings:
    """
    Service-account credentials for the reporting API.
    """

    email: str | None = None
    key: str | None = None
    key_path: str | None = None
    scopes: tuple[str, ...] = (ANALYTICS_READONLY_SCOPE,)


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for the reporting API connector.
    """

    base_url: str = "https://www.googleapis.com/analytics/v3"
    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class ReportCatalogSettings:
    """
    Location of the report definition file.
    """

    reports_path: str


@lru_cache(maxsize=1)
def get_account_settings() -> AccountSettings:
    """
    Return the analytics account from environment variables.

    Raises RuntimeError if ANALYTICS_REPORT_IDS is not set.
    """

    ids = _get_optional_str_env("ANALYTICS_REPORT_IDS")
    if ids is None:
        raise RuntimeError("ANALYTICS_REPORT_IDS must be set (e.g. 'ga:123456').")
    return AccountSettings(
        ids=ids,
        hostname=_get_optional_str_env("ANALYTICS_HOSTNAME"),
    )


@lru_cache(maxsize=1)
def get_google_auth_settings() -> GoogleAuthSettings:
    """
    Return service-account settings from environment variables.
    """

    key = _get_optional_str_env("ANALYTICS_KEY")
    return GoogleAuthSettings(
        email=_get_optional_str_env("ANALYTICS_REPORT_EMAIL"),
        # Keys pasted into .env files carry literal "\n" sequences.
        key=key.replace("\\n", "\n") if key else None,
        key_path=_get_optional_str_env("ANALYTICS_KEY_PATH"),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        base_url=_get_str_env("ANALYTICS_API_BASE_URL", "https://www.googleapis.com/analytics/v3"),
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_report_catalog_settings() -> ReportCatalogSettings:
    """
    Return the report catalog location, resolved against the project root.
    """

    raw_path = _get_str_env("ANALYTICS_REPORTS_PATH", "reports/reports.json")
    return ReportCatalogSettings(reports_path=str(resolve_path(raw_path)))
