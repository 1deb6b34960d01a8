"""
app/ingestion/one_by_one.py

Insert candidate records independently, collecting a partial-success result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from app.domain.ingest_result import IngestResult
from db.repositories.errors import DuplicateRecordError, RecordInsertError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def insert_one_by_one(
    records: Iterable[T],
    insert_one: Callable[[T], Any],
    *,
    label: str = "records",
) -> IngestResult:
    """
    Attempt every record exactly once, in input order.

    A ``RecordInsertError`` only costs that record. Anything else, including
    ``StoreUnavailableError``, propagates and ends the batch.
    """

    total = 0
    success = 0
    duplicates = 0
    rejected = 0

    for record in records:
        total += 1
        try:
            insert_one(record)
        except DuplicateRecordError as exc:
            duplicates += 1
            logger.debug("Skip duplicate %s id=%s error=%s", label, exc.record_id, exc)
            continue
        except RecordInsertError as exc:
            rejected += 1
            logger.debug("Reject %s id=%s error=%s", label, exc.record_id, exc)
            continue
        success += 1

    logger.debug(
        "Insert %s result success=%s total=%s duplicates=%s rejected=%s",
        label,
        success,
        total,
        duplicates,
        rejected,
    )
    return IngestResult(total=total, success=success)
