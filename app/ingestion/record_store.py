"""
app/ingestion/record_store.py

Store collaborator contract consumed by the ingestion core.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Protocol


class Collection:
    STATUSES = "statuses"
    COMMENTS = "comments"
    USERS = "users"


class RecordCursor(Protocol):
    """
    Forward-only handle over one window of a collection.
    """

    def __iter__(self) -> Iterator[dict[str, Any]]:
        ...

    def close(self) -> None:
        ...


class RecordStore(Protocol):
    def open_cursor(
        self,
        collection: str,
        *,
        fields: Sequence[str] | None = None,
        reverse: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> RecordCursor:
        ...

    def find_one(self, collection: str, where: Mapping[str, Any]) -> dict[str, Any] | None:
        ...

    def insert_one(self, collection: str, record: Mapping[str, Any]) -> None:
        """
        Raise ``RecordInsertError`` for a per-record failure and
        ``StoreUnavailableError`` when the store itself is down.
        """

    def update(
        self,
        collection: str,
        where: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> int:
        ...

    def delete(self, collection: str, where: Mapping[str, Any]) -> int:
        ...
