"""
app/services package marker.
"""

from app.services.comment_query_service import CommentQueryService
from app.services.comment_write_service import CommentWriteService
from app.services.ingestion_run_service import IngestionRunRecorder
from app.services.weibo_ingestion_service import (
    IngestionRequestError,
    WeiboIngestionService,
    get_weibo_connector,
    get_weibo_ingestion_service,
    validate_ids,
)

__all__ = [
    "CommentQueryService",
    "CommentWriteService",
    "IngestionRequestError",
    "IngestionRunRecorder",
    "WeiboIngestionService",
    "get_weibo_connector",
    "get_weibo_ingestion_service",
    "validate_ids",
]
