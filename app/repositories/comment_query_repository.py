"""
app/repositories/comment_query_repository.py

Read-side queries over mirrored comments.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.comment import Comment
from db.models.status import Status


class CommentQueryRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_by_status_id(self, status_id: int, *, skip: int = 0, take: int = 20) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.status_id == status_id)
            .order_by(Comment.id.desc())
            .offset(max(0, skip))
            .limit(max(1, take))
        )
        return list(self._session.scalars(stmt).all())

    def count_by_status_id(self, status_id: int) -> int:
        stmt = select(func.count()).select_from(Comment).where(Comment.status_id == status_id)
        return int(self._session.scalar(stmt) or 0)

    def get_status(self, status_id: int) -> Status | None:
        return self._session.scalars(select(Status).where(Status.id == status_id).limit(1)).first()
