"""
db/models/ingestion_run.py

Ledger of ingestion invocations and their aggregate outcome.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONPayload, TimestampMixin


class IngestionOperation:
    COMMENTS_BY_STATUS_IDS = "comments_by_status_ids"
    COMMENTS_FOR_STATUSES = "comments_for_statuses"
    NEW_STATUSES = "new_statuses"
    STATUSES_BY_IDS = "statuses_by_ids"
    USERS_FROM_COMMENTS = "users_from_comments"
    USERS_FROM_STATUSES = "users_from_statuses"
    ALL_USERS = "all_users"


class IngestionRunStatus:
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class IngestionRun(Base, TimestampMixin):
    __tablename__ = "ingestion_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    operation: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=IngestionRunStatus.RUNNING,
    )
    request_payload: Mapped[dict[str, Any] | None] = mapped_column(
        JSONPayload,
        nullable=True,
        comment="Invocation parameters (ids, policy flags)",
    )
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    success: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_ingestion_runs_operation", "operation"),
        Index("ix_ingestion_runs_status", "status"),
        Index("ix_ingestion_runs_created_at", "created_at"),
    )
