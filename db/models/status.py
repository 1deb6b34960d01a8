"""
db/models/status.py

Mirrored Weibo status (post).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, FetchedAtMixin, JSONPayload


class Status(Base, FetchedAtMixin):
    __tablename__ = "statuses"

    row_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Local insertion order; cursor traversal sorts on this",
    )
    id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reposts_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attitudes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    user: Mapped[dict[str, Any] | None] = mapped_column(
        JSONPayload,
        nullable=True,
        comment="Embedded author record as served upstream",
    )
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSONPayload,
        nullable=False,
        comment="Full upstream status payload",
    )

    __table_args__ = (Index("ix_statuses_user_id", "user_id"),)
