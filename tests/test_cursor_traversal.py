"""
tests/test_cursor_traversal.py

Step-bounded cursor traversal over the in-memory store.
"""

from __future__ import annotations

from typing import Any

import pytest

from app.ingestion.cursor_traversal import TraversalSignal, traverse_cursor_with_step
from app.ingestion.record_store import Collection
from tests.fakes import InMemoryRecordStore, make_status


def _seeded_store(count: int) -> InMemoryRecordStore:
    store = InMemoryRecordStore()
    store.seed(Collection.STATUSES, *(make_status(i) for i in range(1, count + 1)))
    return store


def _factory(store: InMemoryRecordStore, *, reverse: bool = False):
    def create_cursor(offset: int, limit: int):
        return store.open_cursor(Collection.STATUSES, fields=("id",), reverse=reverse, offset=offset, limit=limit)

    return create_cursor


@pytest.mark.parametrize("step", [1, 2, 3, 7, 10, 50])
def test_visits_every_record_exactly_once(step: int) -> None:
    store = _seeded_store(7)
    visited: list[int] = []

    summary = traverse_cursor_with_step(
        _factory(store),
        step=step,
        on_record=lambda record: visited.append(record["id"]),
    )

    assert visited == [1, 2, 3, 4, 5, 6, 7]
    assert summary.visited == 7
    assert summary.stopped is False


@pytest.mark.parametrize("step, expected_steps", [(1, 7), (3, 3), (7, 1), (10, 1)])
def test_reopens_a_cursor_per_step_until_empty(step: int, expected_steps: int) -> None:
    store = _seeded_store(7)

    summary = traverse_cursor_with_step(_factory(store), step=step, on_record=lambda record: None)

    assert summary.steps == expected_steps
    # one extra open finds the collection exhausted
    assert len(store.cursors) == expected_steps + 1
    assert [request["offset"] for request in store.cursor_requests] == [
        min(step * index, 7) for index in range(expected_steps + 1)
    ]
    assert all(request["limit"] == step for request in store.cursor_requests)


def test_every_cursor_is_closed() -> None:
    store = _seeded_store(5)

    traverse_cursor_with_step(_factory(store), step=2, on_record=lambda record: None)

    assert store.cursors
    assert all(cursor.closed for cursor in store.cursors)


def test_reverse_order() -> None:
    store = _seeded_store(5)
    visited: list[int] = []

    traverse_cursor_with_step(
        _factory(store, reverse=True),
        step=2,
        on_record=lambda record: visited.append(record["id"]),
    )

    assert visited == [5, 4, 3, 2, 1]


def test_empty_collection_opens_one_cursor() -> None:
    store = InMemoryRecordStore()
    calls: list[Any] = []

    summary = traverse_cursor_with_step(_factory(store), step=3, on_record=calls.append)

    assert calls == []
    assert summary.visited == 0
    assert summary.steps == 0
    assert len(store.cursors) == 1


def test_stop_halts_whole_traversal() -> None:
    store = _seeded_store(9)
    visited: list[int] = []

    def on_record(record: dict[str, Any]) -> TraversalSignal | None:
        visited.append(record["id"])
        if record["id"] == 4:
            return TraversalSignal.STOP
        return TraversalSignal.CONTINUE

    summary = traverse_cursor_with_step(_factory(store), step=3, on_record=on_record)

    assert visited == [1, 2, 3, 4]
    assert summary.stopped is True
    # the stopping step is the last cursor ever opened
    assert len(store.cursors) == 2
    assert all(cursor.closed for cursor in store.cursors)


def test_step_complete_runs_after_each_non_empty_step() -> None:
    store = _seeded_store(5)
    batches: list[list[int]] = []
    current: list[int] = []

    def flush() -> None:
        batches.append(list(current))
        current.clear()

    traverse_cursor_with_step(
        _factory(store),
        step=2,
        on_record=lambda record: current.append(record["id"]),
        on_step_complete=flush,
    )

    assert batches == [[1, 2], [3, 4], [5]]


def test_step_complete_runs_for_stopping_step() -> None:
    store = _seeded_store(5)
    flushed: list[int] = []

    traverse_cursor_with_step(
        _factory(store),
        step=2,
        on_record=lambda record: TraversalSignal.STOP if record["id"] == 3 else None,
        on_step_complete=lambda: flushed.append(1),
    )

    assert flushed == [1, 1]


@pytest.mark.parametrize("step", [0, -1])
def test_rejects_non_positive_step(step: int) -> None:
    store = _seeded_store(3)

    with pytest.raises(ValueError):
        traverse_cursor_with_step(_factory(store), step=step, on_record=lambda record: None)

    assert store.cursors == []
