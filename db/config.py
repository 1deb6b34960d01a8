"""
db/config.py

Where the mirror database lives: `.env` loading and URL resolution.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

ENV_FILES = (".env", ".env.local")
PSYCOPG_SCHEME = "postgresql+psycopg://"

_CLOUD_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})
_BARE_SCHEMES = ("postgres://", "postgresql://")


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export ") :].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


@lru_cache(maxsize=1)
def load_env_files() -> None:
    """
    Load `KEY=VALUE` pairs from the project's `.env` files once per process.

    Variables already present in the process environment win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in ENV_FILES:
        env_path = project_root / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite bare `postgres://` / `postgresql://` URLs to the psycopg driver.
    """

    for scheme in _BARE_SCHEMES:
        if url.startswith(scheme):
            return PSYCOPG_SCHEME + url[len(scheme) :]
    return url


def ensure_postgres_url(url: str) -> str:
    if not url.startswith("postgresql"):
        raise RuntimeError("The Weibo mirror only runs on PostgreSQL; got a non-postgresql URL.")
    return url


def resolve_database_url() -> str:
    """
    Resolve the mirror database URL.

    `DATABASE_URL` wins; `CLOUD_DATABASE_URL` applies only when `ENVIRONMENT`
    names a deployed stage; `LOCAL_DATABASE_URL` is the fallback.
    """

    load_env_files()
    in_cloud = os.getenv("ENVIRONMENT", "local").strip().lower() in _CLOUD_ENVIRONMENTS
    candidates = (
        ("DATABASE_URL", True),
        ("CLOUD_DATABASE_URL", in_cloud),
        ("LOCAL_DATABASE_URL", True),
    )
    for name, applies in candidates:
        value = (os.getenv(name) or "").strip()
        if applies and value:
            return normalize_postgres_url(value)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )
