"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests

logger = logging.getLogger(__name__)


class ConnectorRequestError(RuntimeError):
    """
    Raised when an upstream request fails or the upstream refuses it.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: int | str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class BaseConnector:
    """
    Shared request pacing and JSON decoding for upstream APIs.

    Requests are never retried here; callers decide what a failure means.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        rate_limit_per_second: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._min_request_interval_seconds = (
            1.0 / rate_limit_per_second if rate_limit_per_second > 0 else 0.0
        )
        self._last_request_monotonic: float = 0.0
        self._pacing_lock = threading.Lock()

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute one HTTP request and return parsed JSON.

        ``data`` is sent form-encoded, as the upstream write endpoints expect.
        """

        self._apply_rate_limit()
        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                data=data,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ConnectorRequestError(f"{self.source}: transport failure: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ConnectorRequestError(
                f"{self.source}: response was not valid JSON.",
                status_code=response.status_code,
            ) from exc

        error_code = payload.get("error_code") if isinstance(payload, dict) else None
        if not response.ok or error_code is not None:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise ConnectorRequestError(
                f"{self.source}: request refused status={response.status_code} "
                f"error_code={error_code} error={message}",
                status_code=response.status_code,
                error_code=error_code,
            )
        return payload

    def _apply_rate_limit(self) -> None:
        """
        Enforce minimum interval between outbound requests.
        """

        if self._min_request_interval_seconds <= 0:
            return

        with self._pacing_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_monotonic
            remaining = self._min_request_interval_seconds - elapsed
            if remaining > 0:
                time.sleep(remaining)
            self._last_request_monotonic = time.monotonic()
