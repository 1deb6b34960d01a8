"""
app/api/routers/comments.py

Comment endpoints shaped like the upstream API. Reads come from the mirror;
writes go upstream first and are mirrored after.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_comment_query_service, get_comment_write_service
from app.connectors.base import ConnectorRequestError
from app.schemas.comments import ShowCommentsResponse
from app.services.comment_query_service import CommentQueryService
from app.services.comment_write_service import CommentWriteService
from db.repositories.errors import StoreUnavailableError

router = APIRouter(prefix="/weibo/2/comments", tags=["comments"])


@router.get("/show.json", response_model=ShowCommentsResponse)
def show_comments_by_status_id(
    status_id: int | None = Query(default=None, alias="id", description="Upstream status id"),
    count: int = Query(default=20, ge=1, le=200),
    page: int = Query(default=1, ge=1),
    service: CommentQueryService = Depends(get_comment_query_service),
) -> ShowCommentsResponse:
    _require(status_id, "id")
    return ShowCommentsResponse(**service.show_comments(status_id=status_id, count=count, page=page))


@router.post("/create.json")
def create_comment(
    status_id: int | None = Query(default=None, alias="id", description="Upstream status id"),
    comment: str | None = Query(default=None, max_length=140),
    service: CommentWriteService = Depends(get_comment_write_service),
) -> dict[str, Any]:
    _require(status_id, "id")
    _require(comment, "comment")
    return _forward(lambda: service.create(status_id=status_id, comment=comment))


@router.post("/reply.json")
def reply_comment(
    status_id: int | None = Query(default=None, alias="id", description="Upstream status id"),
    comment_id: int | None = Query(default=None, alias="cid", description="Comment being replied to"),
    comment: str | None = Query(default=None, max_length=140),
    service: CommentWriteService = Depends(get_comment_write_service),
) -> dict[str, Any]:
    _require(status_id, "id")
    _require(comment_id, "cid")
    _require(comment, "comment")
    return _forward(
        lambda: service.reply(status_id=status_id, comment_id=comment_id, comment=comment)
    )


@router.post("/destroy.json")
def destroy_comment(
    comment_id: int | None = Query(default=None, alias="cid", description="Comment to delete"),
    service: CommentWriteService = Depends(get_comment_write_service),
) -> dict[str, Any]:
    _require(comment_id, "cid")
    return _forward(lambda: service.destroy(comment_id=comment_id))


def _require(value: Any, name: str) -> None:
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"param {name} is required")


def _forward(action: Callable[[], dict[str, Any]]) -> dict[str, Any]:
    try:
        return action()
    except ConnectorRequestError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
