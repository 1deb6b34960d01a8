"""
db/models/comment.py

Mirrored Weibo comment, owned by one status.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, FetchedAtMixin, JSONPayload


class Comment(Base, FetchedAtMixin):
    __tablename__ = "comments"

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    status_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Upstream id of the owning status",
    )
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    user: Mapped[dict[str, Any] | None] = mapped_column(JSONPayload, nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONPayload, nullable=False)

    __table_args__ = (
        Index("ix_comments_status_id", "status_id"),
        Index("ix_comments_user_id", "user_id"),
    )
