"""
app/connectors/weibo_connector.py

Weibo open API connector for statuses and comments, reads and comment writes.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import WeiboAPISettings
from app.connectors.base import BaseConnector, ConnectorRequestError
from app.domain.fetch_outcome import FetchedData, FetchEmpty, FetchHardLimit, FetchOutcome

logger = logging.getLogger(__name__)

TIMELINE_PATHS = {
    "home": "statuses/home_timeline.json",
    "public": "statuses/public_timeline.json",
}


class WeiboConnector(BaseConnector):
    """
    Fetches one page of upstream data per call.

    Every fetch failure, whatever its cause, comes back as ``FetchHardLimit``.
    Comment writes return the upstream payload and raise
    ``ConnectorRequestError`` when refused.
    """

    def __init__(
        self,
        *,
        settings: WeiboAPISettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="weibo",
            timeout_seconds=settings.timeout_seconds,
            rate_limit_per_second=settings.rate_limit_per_second,
            session=session,
        )
        self._settings = settings

    def fetch_comments_by_status_id(self, status_id: int) -> FetchOutcome:
        logger.debug("Fetch comments by status id=%s", status_id)
        return self._fetch_collection(
            path="comments/show.json",
            params={"id": status_id, "page": 1, "count": self._settings.page_size},
            key="comments",
            selector=f"comments status_id={status_id}",
        )

    def fetch_timeline(self, name: str) -> FetchOutcome:
        path = TIMELINE_PATHS.get(name)
        if path is None:
            allowed = ", ".join(sorted(TIMELINE_PATHS))
            raise ValueError(f"Unsupported timeline '{name}'. Allowed timelines: {allowed}.")
        logger.debug("Fetch %s timeline", name)
        return self._fetch_collection(
            path=path,
            params={"page": 1, "count": self._settings.page_size},
            key="statuses",
            selector=f"{name}_timeline",
        )

    def fetch_status(self, status_id: int) -> FetchOutcome:
        logger.debug("Fetch status id=%s", status_id)
        try:
            payload = self._get("statuses/show.json", {"id": status_id})
        except ConnectorRequestError as exc:
            logger.warning("Fetch status id=%s failed error=%s", status_id, exc)
            return FetchHardLimit(reason=str(exc))

        if not isinstance(payload, dict) or payload.get("id") is None:
            return FetchEmpty()
        return FetchedData(records=[payload])

    def create_comment(self, status_id: int, comment: str) -> dict[str, Any]:
        logger.debug("Create comment on status id=%s", status_id)
        return self._post("comments/create.json", {"id": status_id, "comment": comment})

    def reply_comment(self, status_id: int, comment_id: int, comment: str) -> dict[str, Any]:
        logger.debug("Reply to comment id=%s on status id=%s", comment_id, status_id)
        return self._post(
            "comments/reply.json",
            {"id": status_id, "cid": comment_id, "comment": comment},
        )

    def destroy_comment(self, comment_id: int) -> dict[str, Any]:
        logger.debug("Destroy comment id=%s", comment_id)
        return self._post("comments/destroy.json", {"cid": comment_id})

    def _fetch_collection(
        self,
        *,
        path: str,
        params: dict[str, Any],
        key: str,
        selector: str,
    ) -> FetchOutcome:
        try:
            payload = self._get(path, params)
        except ConnectorRequestError as exc:
            logger.warning("Fetch %s failed, maybe rate limited error=%s", selector, exc)
            return FetchHardLimit(reason=str(exc))

        items = payload.get(key) if isinstance(payload, dict) else None
        if items is None or items == []:
            return FetchEmpty()
        if not isinstance(items, list):
            logger.warning("Fetch %s returned unexpected %s payload type=%s", selector, key, type(items).__name__)
            return FetchHardLimit(reason=f"unexpected '{key}' payload")

        logger.debug("Fetched %s items=%s", selector, len(items))
        return FetchedData(records=items)

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        query = dict(params)
        if self._settings.access_token:
            query["access_token"] = self._settings.access_token
        return self._request_json(
            method="GET",
            url=f"{self._settings.base_url}/{path}",
            params=query,
        )

    def _post(self, path: str, form: dict[str, Any]) -> dict[str, Any]:
        body = dict(form)
        if self._settings.access_token:
            body["access_token"] = self._settings.access_token
        payload = self._request_json(
            method="POST",
            url=f"{self._settings.base_url}/{path}",
            data=body,
        )
        if not isinstance(payload, dict):
            raise ConnectorRequestError(f"{self.source}: unexpected {path} response type.")
        return payload
