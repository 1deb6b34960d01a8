"""
In-memory stand-ins for the record store, the upstream connector and sleep.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from app.domain.fetch_outcome import FetchEmpty, FetchOutcome
from app.ingestion.record_store import Collection
from db.repositories.errors import (
    DuplicateRecordError,
    RecordRejectedError,
    StoreUnavailableError,
)


def make_user(user_id: int) -> dict[str, Any]:
    return {"id": user_id, "screen_name": f"user-{user_id}"}


def make_status(status_id: int, *, comments_count: int = 0, user_id: int | None = None) -> dict[str, Any]:
    return {
        "id": status_id,
        "text": f"status {status_id}",
        "comments_count": comments_count,
        "user": make_user(user_id if user_id is not None else status_id * 10),
    }


def make_comment(comment_id: int, status_id: int, *, user_id: int | None = None) -> dict[str, Any]:
    return {
        "id": comment_id,
        "text": f"comment {comment_id}",
        "status": {"id": status_id},
        "user": make_user(user_id if user_id is not None else comment_id * 100),
    }


class InMemoryCursor:
    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self._rows = rows
        self.closed = False

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for row in self._rows:
            if self.closed:
                raise RuntimeError("cursor used after close")
            yield row

    def close(self) -> None:
        self.closed = True


class InMemoryRecordStore:
    """
    Dict-backed store honoring the ``RecordStore`` contract.
    """

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {
            Collection.STATUSES: [],
            Collection.COMMENTS: [],
            Collection.USERS: [],
        }
        self.cursors: list[InMemoryCursor] = []
        self.cursor_requests: list[dict[str, Any]] = []
        self.updates: list[tuple[str, dict[str, Any], dict[str, Any]]] = []
        self.insert_attempts: list[tuple[str, Any]] = []
        self.unavailable = False

    def seed(self, collection: str, *records: Mapping[str, Any]) -> None:
        for record in records:
            self.collections[collection].append(self._normalize(collection, record))

    def ids(self, collection: str) -> list[int]:
        return [row["id"] for row in self.collections[collection]]

    def open_cursor(
        self,
        collection: str,
        *,
        fields: Sequence[str] | None = None,
        reverse: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> InMemoryCursor:
        self._check_available()
        self.cursor_requests.append(
            {"collection": collection, "fields": fields, "reverse": reverse, "offset": offset, "limit": limit}
        )
        rows = list(self.collections[collection])
        if reverse:
            rows.reverse()
        end = offset + limit if limit is not None else None
        window = rows[offset:end]
        if fields:
            window = [{name: row.get(name) for name in fields} for row in window]
        else:
            window = [copy.deepcopy(row) for row in window]
        cursor = InMemoryCursor(window)
        self.cursors.append(cursor)
        return cursor

    def find_one(self, collection: str, where: Mapping[str, Any]) -> dict[str, Any] | None:
        self._check_available()
        for row in self.collections[collection]:
            if all(row.get(key) == value for key, value in where.items()):
                return copy.deepcopy(row)
        return None

    def insert_one(self, collection: str, record: Mapping[str, Any]) -> None:
        self.insert_attempts.append((collection, record))
        self._check_available()
        if not isinstance(record, Mapping) or "id" not in record:
            raise RecordRejectedError("record has no id", collection=collection)
        if any(row["id"] == record["id"] for row in self.collections[collection]):
            raise DuplicateRecordError(
                f"duplicate {collection} id", collection=collection, record_id=record["id"]
            )
        try:
            normalized = self._normalize(collection, record)
        except (KeyError, TypeError) as exc:
            raise RecordRejectedError(str(exc), collection=collection, record_id=record["id"]) from exc
        self.collections[collection].append(normalized)

    def update(
        self,
        collection: str,
        where: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> int:
        self._check_available()
        self.updates.append((collection, dict(where), dict(values)))
        matched = 0
        for row in self.collections[collection]:
            if all(row.get(key) == value for key, value in where.items()):
                row.update(values)
                matched += 1
        return matched

    def delete(self, collection: str, where: Mapping[str, Any]) -> int:
        self._check_available()
        kept = [
            row for row in self.collections[collection]
            if not all(row.get(key) == value for key, value in where.items())
        ]
        removed = len(self.collections[collection]) - len(kept)
        self.collections[collection] = kept
        return removed

    def _check_available(self) -> None:
        if self.unavailable:
            raise StoreUnavailableError("store is down")

    @staticmethod
    def _normalize(collection: str, record: Mapping[str, Any]) -> dict[str, Any]:
        row = copy.deepcopy(dict(record))
        if collection == Collection.COMMENTS and "status_id" not in row:
            row["status_id"] = row["status"]["id"]
        return row


class ScriptedConnector:
    """
    Returns pre-programmed outcomes; anything unscripted is ``FetchEmpty``.

    An ``Exception`` instance scripted as an outcome is raised instead.
    """

    def __init__(
        self,
        *,
        comments: Mapping[int, FetchOutcome | Exception] | None = None,
        timelines: Mapping[str, FetchOutcome | Exception] | None = None,
        statuses: Mapping[int, FetchOutcome | Exception] | None = None,
    ) -> None:
        self.comments = dict(comments or {})
        self.timelines = dict(timelines or {})
        self.statuses = dict(statuses or {})
        self.calls: list[tuple[str, Any]] = []

    def fetch_comments_by_status_id(self, status_id: int) -> FetchOutcome:
        self.calls.append(("comments", status_id))
        return self._resolve(self.comments.get(status_id))

    def fetch_timeline(self, name: str) -> FetchOutcome:
        self.calls.append(("timeline", name))
        return self._resolve(self.timelines.get(name))

    def fetch_status(self, status_id: int) -> FetchOutcome:
        self.calls.append(("status", status_id))
        return self._resolve(self.statuses.get(status_id))

    @staticmethod
    def _resolve(outcome: FetchOutcome | Exception | None) -> FetchOutcome:
        if isinstance(outcome, Exception):
            raise outcome
        return outcome if outcome is not None else FetchEmpty()


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeCommentWriter:
    """
    Echoes comment writes the way upstream answers them.

    Set ``refusal`` to make every call raise it.
    """

    def __init__(self, *, next_comment_id: int = 1000) -> None:
        self.next_comment_id = next_comment_id
        self.refusal: Exception | None = None
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def create_comment(self, status_id: int, comment: str) -> dict[str, Any]:
        self._record("create", id=status_id, comment=comment)
        return self._comment(status_id, comment)

    def reply_comment(self, status_id: int, comment_id: int, comment: str) -> dict[str, Any]:
        self._record("reply", id=status_id, cid=comment_id, comment=comment)
        created = self._comment(status_id, comment)
        created["reply_comment"] = {"id": comment_id}
        return created

    def destroy_comment(self, comment_id: int) -> dict[str, Any]:
        self._record("destroy", cid=comment_id)
        return {"id": comment_id, "text": "deleted"}

    def _record(self, action: str, **form: Any) -> None:
        self.calls.append((action, form))
        if self.refusal is not None:
            raise self.refusal

    def _comment(self, status_id: int, text: str) -> dict[str, Any]:
        comment_id = self.next_comment_id
        self.next_comment_id += 1
        return {"id": comment_id, "text": text, "status": {"id": status_id}, "user": make_user(1)}
