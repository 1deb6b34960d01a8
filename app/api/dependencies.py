"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.services.comment_query_service import CommentQueryService
from app.services.comment_write_service import CommentWriteService
from app.services.ingestion_run_service import IngestionRunRecorder
from app.services.weibo_ingestion_service import (
    WeiboIngestionService,
    get_weibo_connector,
    get_weibo_ingestion_service,
)
from db.repositories.record_store import SQLAlchemyRecordStore
from db.session import get_db


def get_ingestion_service(db: Session = Depends(get_db)) -> WeiboIngestionService:
    return get_weibo_ingestion_service(db)


def get_run_recorder(db: Session = Depends(get_db)) -> IngestionRunRecorder:
    return IngestionRunRecorder(db)


def get_comment_query_service(db: Session = Depends(get_db)) -> CommentQueryService:
    return CommentQueryService(db)


def get_comment_write_service(db: Session = Depends(get_db)) -> CommentWriteService:
    return CommentWriteService(store=SQLAlchemyRecordStore(db), connector=get_weibo_connector())
