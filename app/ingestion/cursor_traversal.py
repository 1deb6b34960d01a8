"""
app/ingestion/cursor_traversal.py

Step-bounded walk over a collection.

Each step opens a fresh cursor for at most ``step`` records, hands them to the
caller one at a time and closes the cursor before the next step opens. No more
than one step of records is held at once and no cursor outlives its step.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.ingestion.record_store import RecordCursor

logger = logging.getLogger(__name__)


class TraversalSignal(enum.Enum):
    CONTINUE = "continue"
    STOP = "stop"


CursorFactory = Callable[[int, int], RecordCursor]
RecordHandler = Callable[[Any], TraversalSignal | None]


@dataclass(frozen=True)
class TraversalSummary:
    visited: int
    steps: int
    stopped: bool


def traverse_cursor_with_step(
    create_cursor: CursorFactory,
    *,
    step: int,
    on_record: RecordHandler,
    on_step_complete: Callable[[], None] | None = None,
) -> TraversalSummary:
    """
    Walk the collection behind ``create_cursor(offset, limit)`` step by step.

    ``on_record`` returning ``TraversalSignal.STOP`` ends the whole walk; no
    further cursor is opened. ``on_step_complete`` runs after every non-empty
    step, the stopping step included.
    """

    if step <= 0:
        raise ValueError(f"step must be > 0, got {step}.")

    offset = 0
    steps = 0
    stopped = False

    while not stopped:
        cursor = create_cursor(offset, step)
        consumed = 0
        try:
            for record in cursor:
                consumed += 1
                if on_record(record) is TraversalSignal.STOP:
                    stopped = True
                    break
                if consumed >= step:
                    break
        finally:
            cursor.close()

        if consumed == 0:
            break

        steps += 1
        offset += consumed
        if on_step_complete is not None:
            on_step_complete()
        logger.debug("Cursor step done step=%s consumed=%s offset=%s", steps, consumed, offset)

    if stopped:
        logger.debug("Cursor traversal stopped early visited=%s steps=%s", offset, steps)
    return TraversalSummary(visited=offset, steps=steps, stopped=stopped)
