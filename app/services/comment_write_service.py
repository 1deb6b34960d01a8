"""
app/services/comment_write_service.py

Write-through comment operations: call the Weibo API, then keep the mirror
in step with what upstream accepted.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from app.ingestion.record_store import Collection, RecordStore
from app.logging_utils import log_event
from db.repositories.errors import RecordInsertError

logger = logging.getLogger(__name__)


class WeiboCommentWriter(Protocol):
    def create_comment(self, status_id: int, comment: str) -> dict[str, Any]:
        ...

    def reply_comment(self, status_id: int, comment_id: int, comment: str) -> dict[str, Any]:
        ...

    def destroy_comment(self, comment_id: int) -> dict[str, Any]:
        ...


class CommentWriteService:
    """
    Forward comment writes upstream and mirror the outcome.

    ``ConnectorRequestError`` from the writer propagates untouched and leaves
    the store alone. ``StoreUnavailableError`` propagates after the upstream
    write already happened.
    """

    def __init__(self, *, store: RecordStore, connector: WeiboCommentWriter) -> None:
        self._store = store
        self._connector = connector

    def create(self, *, status_id: int, comment: str) -> dict[str, Any]:
        created = self._connector.create_comment(status_id, comment)
        self._mirror(created, action="create")
        return created

    def reply(self, *, status_id: int, comment_id: int, comment: str) -> dict[str, Any]:
        created = self._connector.reply_comment(status_id, comment_id, comment)
        self._mirror(created, action="reply")
        return created

    def destroy(self, *, comment_id: int) -> dict[str, Any]:
        destroyed = self._connector.destroy_comment(comment_id)
        removed = self._store.delete(Collection.COMMENTS, {"id": comment_id})
        log_event(
            logger,
            logging.INFO,
            "comment_write",
            action="destroy",
            comment_id=comment_id,
            mirrored=removed > 0,
        )
        return destroyed

    def _mirror(self, comment: dict[str, Any], *, action: str) -> None:
        try:
            self._store.insert_one(Collection.COMMENTS, comment)
        except RecordInsertError as exc:
            # already mirrored, or upstream answered without a usable status
            logger.debug("Mirror of %s comment id=%s skipped error=%s", action, comment.get("id"), exc)
            mirrored = False
        else:
            mirrored = True
        log_event(
            logger,
            logging.INFO,
            "comment_write",
            action=action,
            comment_id=comment.get("id"),
            mirrored=mirrored,
        )
