"""
Repository layer exports.
"""

from db.repositories.errors import (
    DuplicateRecordError,
    RecordInsertError,
    RecordRejectedError,
    StoreError,
    StoreUnavailableError,
    UnknownCollectionError,
)
from db.repositories.ingestion_run_repository import IngestionRunRepository
from db.repositories.record_store import SQLAlchemyRecordCursor, SQLAlchemyRecordStore

__all__ = [
    "DuplicateRecordError",
    "IngestionRunRepository",
    "RecordInsertError",
    "RecordRejectedError",
    "SQLAlchemyRecordCursor",
    "SQLAlchemyRecordStore",
    "StoreError",
    "StoreUnavailableError",
    "UnknownCollectionError",
]
