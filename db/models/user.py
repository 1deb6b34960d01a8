"""
db/models/user.py

Mirrored Weibo user, derived from authors of stored statuses and comments.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, FetchedAtMixin, JSONPayload


class User(Base, FetchedAtMixin):
    __tablename__ = "users"

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    screen_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONPayload, nullable=False)
