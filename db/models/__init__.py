"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.comment import Comment
from db.models.ingestion_run import IngestionOperation, IngestionRun, IngestionRunStatus
from db.models.status import Status
from db.models.user import User

__all__ = [
    "Comment",
    "IngestionOperation",
    "IngestionRun",
    "IngestionRunStatus",
    "Status",
    "User",
]
