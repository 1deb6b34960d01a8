"""
app/ingestion package marker.
"""

from app.ingestion.cursor_traversal import (
    TraversalSignal,
    TraversalSummary,
    traverse_cursor_with_step,
)
from app.ingestion.one_by_one import insert_one_by_one
from app.ingestion.record_store import Collection, RecordCursor, RecordStore

__all__ = [
    "Collection",
    "RecordCursor",
    "RecordStore",
    "TraversalSignal",
    "TraversalSummary",
    "insert_one_by_one",
    "traverse_cursor_with_step",
]
