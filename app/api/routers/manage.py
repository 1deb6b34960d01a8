"""
app/api/routers/manage.py

Ingestion trigger endpoints.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_ingestion_service, get_run_recorder
from app.domain.ingest_result import IngestResult
from app.schemas.ingestion import (
    IngestIDsRequest,
    IngestionRunListResponse,
    IngestionRunResponse,
    IngestResultResponse,
)
from app.services.ingestion_run_service import IngestionRunRecorder
from app.services.weibo_ingestion_service import (
    IngestionRequestError,
    WeiboIngestionService,
    validate_ids,
)
from db.models.ingestion_run import IngestionOperation, IngestionRun
from db.repositories.errors import StoreUnavailableError

router = APIRouter(prefix="/manage", tags=["manage"])


@router.post("/comments/by-status-ids", response_model=IngestResultResponse)
def ingest_comments_by_status_ids(
    payload: IngestIDsRequest,
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    ids = _validated_ids(payload.ids)
    return _record(
        recorder,
        IngestionOperation.COMMENTS_BY_STATUS_IDS,
        lambda: service.ingest_comments_for_ids(ids),
        {"ids": ids},
    )


@router.post("/comments/for-statuses", response_model=IngestResultResponse)
def ingest_comments_for_statuses(
    slow: bool = Query(default=False, description="Pause 5-15s between fetches"),
    overwrite: bool = Query(default=False, description="Fetch even when comments are stored"),
    reverse: bool = Query(default=False, description="Walk newest statuses first"),
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    policy = service.build_policy(slow=slow, overwrite=overwrite, reverse=reverse)
    return _record(
        recorder,
        IngestionOperation.COMMENTS_FOR_STATUSES,
        lambda: service.ingest_comments_for_all_statuses(policy),
        {"slow": slow, "overwrite": overwrite, "reverse": reverse},
    )


@router.post("/statuses/new", response_model=IngestResultResponse)
def ingest_new_statuses(
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    return _record(recorder, IngestionOperation.NEW_STATUSES, service.ingest_new_statuses)


@router.post("/statuses/by-ids", response_model=IngestResultResponse)
def ingest_statuses_by_ids(
    payload: IngestIDsRequest,
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    ids = _validated_ids(payload.ids)
    return _record(
        recorder,
        IngestionOperation.STATUSES_BY_IDS,
        lambda: service.ingest_statuses_by_ids(ids),
        {"ids": ids},
    )


@router.post("/users/from-comments", response_model=IngestResultResponse)
def ingest_users_from_comments(
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    return _record(recorder, IngestionOperation.USERS_FROM_COMMENTS, service.ingest_users_from_comments)


@router.post("/users/from-statuses", response_model=IngestResultResponse)
def ingest_users_from_statuses(
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    return _record(recorder, IngestionOperation.USERS_FROM_STATUSES, service.ingest_users_from_statuses)


@router.post("/users/all", response_model=IngestResultResponse)
def ingest_all_users(
    service: WeiboIngestionService = Depends(get_ingestion_service),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestResultResponse:
    return _record(recorder, IngestionOperation.ALL_USERS, service.ingest_all_users)


@router.get("/runs", response_model=IngestionRunListResponse)
def list_ingestion_runs(
    operation: str | None = Query(default=None, description="Optional operation filter"),
    limit: int = Query(default=50, ge=1, le=500, description="Max runs returned"),
    recorder: IngestionRunRecorder = Depends(get_run_recorder),
) -> IngestionRunListResponse:
    runs = recorder.list_runs(limit=limit, operation=operation)
    return IngestionRunListResponse(runs=[_to_run_response(run) for run in runs])


def _validated_ids(raw_ids: list[int]) -> list[int]:
    try:
        return validate_ids(raw_ids)
    except IngestionRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _record(
    recorder: IngestionRunRecorder,
    operation: str,
    action: Callable[[], IngestResult],
    request_payload: dict[str, Any] | None = None,
) -> IngestResultResponse:
    try:
        result = recorder.run(operation=operation, action=action, request_payload=request_payload)
    except IngestionRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return IngestResultResponse(**result.as_dict())


def _to_run_response(run: IngestionRun) -> IngestionRunResponse:
    return IngestionRunResponse(
        run_id=run.id,
        operation=run.operation,
        status=run.status,
        total=run.total,
        success=run.success,
        request_payload=run.request_payload,
        error_message=run.error_message,
        started_at=run.started_at,
        completed_at=run.completed_at,
    )
