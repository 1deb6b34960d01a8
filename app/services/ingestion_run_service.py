"""
app/services/ingestion_run_service.py

Records each ingestion invocation and its outcome in the run ledger.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.ingest_result import IngestResult
from app.logging_utils import log_event
from db.models.ingestion_run import IngestionRun
from db.repositories.errors import StoreUnavailableError
from db.repositories.ingestion_run_repository import IngestionRunRepository

logger = logging.getLogger(__name__)


class IngestionRunRecorder:
    """
    Wraps one ingestion call with a running/completed/failed ledger row.
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._repository = IngestionRunRepository(db)

    def run(
        self,
        *,
        operation: str,
        action: Callable[[], IngestResult],
        request_payload: dict[str, Any] | None = None,
    ) -> IngestResult:
        try:
            run = self._repository.start_run(operation=operation, request_payload=request_payload)
            # read before commit; an expired row would reload from the database
            run_id = run.id
            self._db.commit()
        except (OperationalError, InterfaceError) as exc:
            self._db.rollback()
            raise StoreUnavailableError("Record store unavailable while starting ingestion run.") from exc

        try:
            result = action()
        except Exception as exc:
            self._mark_failed(run_id, exc)
            raise

        try:
            self._repository.mark_completed(run_id=run_id, total=result.total, success=result.success)
            self._db.commit()
        except (OperationalError, InterfaceError) as exc:
            self._db.rollback()
            raise StoreUnavailableError("Record store unavailable while completing ingestion run.") from exc
        log_event(
            logger,
            logging.INFO,
            "ingestion_run_completed",
            run_id=run_id,
            operation=operation,
            **result.as_dict(),
        )
        return result

    def list_runs(self, *, limit: int = 50, operation: str | None = None) -> list[IngestionRun]:
        return self._repository.list_runs(limit=limit, operation=operation)

    def _mark_failed(self, run_id: uuid.UUID, exc: Exception) -> None:
        try:
            self._db.rollback()
            self._repository.mark_failed(run_id=run_id, error_message=f"{type(exc).__name__}: {exc}")
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            logger.exception("Failed to mark ingestion run failed run_id=%s", run_id)
