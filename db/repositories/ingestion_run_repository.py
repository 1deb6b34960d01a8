"""
Repository for ingestion run ledger persistence and lookup.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.ingestion_run import IngestionRun, IngestionRunStatus


class IngestionRunRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def start_run(
        self,
        *,
        operation: str,
        request_payload: dict[str, Any] | None = None,
    ) -> IngestionRun:
        run = IngestionRun(
            operation=operation,
            status=IngestionRunStatus.RUNNING,
            request_payload=request_payload,
            started_at=datetime.now(timezone.utc),
        )
        self._session.add(run)
        self._session.flush()
        self._session.refresh(run)
        return run

    def get_run(self, run_id: uuid.UUID) -> IngestionRun | None:
        return self._session.get(IngestionRun, run_id)

    def list_runs(
        self,
        *,
        limit: int = 100,
        operation: str | None = None,
        status: str | None = None,
    ) -> list[IngestionRun]:
        stmt: Select[tuple[IngestionRun]] = select(IngestionRun)

        if operation:
            stmt = stmt.where(IngestionRun.operation == operation)
        if status:
            stmt = stmt.where(IngestionRun.status == status)

        stmt = stmt.order_by(IngestionRun.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def mark_completed(self, *, run_id: uuid.UUID, total: int, success: int) -> IngestionRun | None:
        run = self.get_run(run_id)
        if run is None:
            return None
        run.status = IngestionRunStatus.COMPLETED
        run.total = total
        run.success = success
        run.completed_at = datetime.now(timezone.utc)
        run.error_message = None
        return run

    def mark_failed(self, *, run_id: uuid.UUID, error_message: str) -> IngestionRun | None:
        run = self.get_run(run_id)
        if run is None:
            return None
        run.status = IngestionRunStatus.FAILED
        run.completed_at = datetime.now(timezone.utc)
        run.error_message = error_message[:4000]
        return run
