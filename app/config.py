"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import ensure_postgres_url, load_env_files, resolve_database_url


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    load_env_files()
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

    load_env_files()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    load_env_files()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_bool_env(name: str, default: bool = False) -> bool:
    load_env_files()
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_optional_str_env(name: str) -> str | None:
    load_env_files()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class WeiboAPISettings:
    """
    Weibo open API connector settings.

    The access token is passed through as a query parameter untouched.
    """

    base_url: str = "https://api.weibo.com/2"
    access_token: str | None = None
    page_size: int = 200
    timeout_seconds: float = 15.0
    rate_limit_per_second: float = 2.0


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for ingestion passes.

    Throttled passes pause ``throttle_base_seconds`` plus up to
    ``throttle_jitter_seconds`` after every successful fetch.
    """

    cursor_step: int = 100
    throttle_base_seconds: float = 5.0
    throttle_jitter_seconds: float = 10.0
    status_fetch_workers: int = 8


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Mirror database connection and pool settings.
    """

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle_seconds: int = 1800
    connect_timeout_seconds: int = 10
    application_name: str = "weibo-mirror-ingest"


@lru_cache(maxsize=1)
def get_weibo_api_settings() -> WeiboAPISettings:
    """
    Return Weibo connector settings from environment variables.
    """

    return WeiboAPISettings(
        base_url=_get_str_env("WEIBO_API_BASE_URL", "https://api.weibo.com/2").rstrip("/"),
        access_token=_get_optional_str_env("WEIBO_ACCESS_TOKEN"),
        page_size=min(200, max(1, _get_int_env("WEIBO_PAGE_SIZE", 200))),
        timeout_seconds=max(1.0, _get_float_env("WEIBO_HTTP_TIMEOUT_SECONDS", 15.0)),
        rate_limit_per_second=max(0.0, _get_float_env("WEIBO_RATE_LIMIT_PER_SECOND", 2.0)),
    )


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return ingestion pass settings from environment variables.
    """

    return IngestionSettings(
        cursor_step=max(1, _get_int_env("INGEST_CURSOR_STEP", 100)),
        throttle_base_seconds=max(0.0, _get_float_env("INGEST_THROTTLE_BASE_SECONDS", 5.0)),
        throttle_jitter_seconds=max(0.0, _get_float_env("INGEST_THROTTLE_JITTER_SECONDS", 10.0)),
        status_fetch_workers=max(1, _get_int_env("INGEST_STATUS_FETCH_WORKERS", 8)),
    )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """
    Return database settings from environment variables.
    """

    return DatabaseSettings(
        url=ensure_postgres_url(resolve_database_url()),
        echo=_get_bool_env("SQL_ECHO", default=False),
        pool_size=max(1, _get_int_env("DB_POOL_SIZE", 5)),
        max_overflow=max(0, _get_int_env("DB_MAX_OVERFLOW", 10)),
        pool_recycle_seconds=max(-1, _get_int_env("DB_POOL_RECYCLE", 1800)),
        connect_timeout_seconds=max(1, _get_int_env("DB_CONNECT_TIMEOUT_SECONDS", 10)),
        application_name=_get_str_env("DB_APPLICATION_NAME", "weibo-mirror-ingest"),
    )


def get_log_level() -> str:
    return _get_str_env("LOG_LEVEL", "INFO").upper()
