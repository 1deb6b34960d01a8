"""
app/services/comment_query_service.py

Serves stored comments in the upstream ``comments/show`` envelope.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.repositories.comment_query_repository import CommentQueryRepository


class CommentQueryService:
    def __init__(self, db: Session) -> None:
        self._repository = CommentQueryRepository(db)

    def show_comments(self, *, status_id: int, count: int = 20, page: int = 1) -> dict[str, Any]:
        count = max(1, count)
        page = max(1, page)
        comments = self._repository.list_by_status_id(
            status_id,
            skip=(page - 1) * count,
            take=count,
        )
        status = self._repository.get_status(status_id)
        next_cursor = comments[-1].id if len(comments) == count else 0
        return {
            "comments": [dict(comment.payload) for comment in comments],
            "marks": [],
            "hasvisible": False,
            "previous_cursor": 0,
            "next_cursor": next_cursor,
            "previous_cursor_str": "0",
            "next_cursor_str": str(next_cursor),
            "total_number": self._repository.count_by_status_id(status_id),
            "status": self._status_payload(status),
        }

    @staticmethod
    def _status_payload(status: Any) -> dict[str, Any]:
        if status is None:
            return {}
        payload = dict(status.payload or {})
        payload["comments_count"] = status.comments_count
        return payload
