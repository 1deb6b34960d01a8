"""
db/repositories/record_store.py

SQLAlchemy-backed record store for mirrored statuses, comments and users.

Every insert and update commits on its own so progress made before a later
failure is never rolled back with it. Cursors are plain ``LIMIT/OFFSET``
windows, fully buffered, so committing while one is open is safe.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Any

from sqlalchemy import Result, delete, select, update
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.ingestion.record_store import Collection
from db.base import Base
from db.models.comment import Comment
from db.models.status import Status
from db.models.user import User
from db.repositories.errors import (
    DuplicateRecordError,
    RecordRejectedError,
    StoreUnavailableError,
    UnknownCollectionError,
)

_HIDDEN_COLUMNS = frozenset({"row_id", "payload", "created_at"})


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _embedded_user(record: Mapping[str, Any]) -> dict[str, Any] | None:
    user = record.get("user")
    return dict(user) if isinstance(user, Mapping) else None


def _status_columns(record: Mapping[str, Any]) -> dict[str, Any]:
    user = _embedded_user(record)
    return {
        "id": int(record["id"]),
        "text": record.get("text"),
        "comments_count": int(record.get("comments_count") or 0),
        "reposts_count": int(record.get("reposts_count") or 0),
        "attitudes_count": int(record.get("attitudes_count") or 0),
        "user_id": _optional_int(user.get("id")) if user else None,
        "user": user,
        "payload": dict(record),
    }


def _comment_columns(record: Mapping[str, Any]) -> dict[str, Any]:
    status = record.get("status")
    if isinstance(status, Mapping):
        status_id = int(status["id"])
    else:
        status_id = int(record["status_id"])
    user = _embedded_user(record)
    return {
        "id": int(record["id"]),
        "status_id": status_id,
        "text": record.get("text"),
        "user_id": _optional_int(user.get("id")) if user else None,
        "user": user,
        "payload": dict(record),
    }


def _user_columns(record: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": int(record["id"]),
        "screen_name": record.get("screen_name"),
        "payload": dict(record),
    }


@dataclass(frozen=True)
class _CollectionTable:
    model: type[Base]
    to_columns: Callable[[Mapping[str, Any]], dict[str, Any]]

    @property
    def exposed_columns(self) -> frozenset[str]:
        return frozenset(self.model.__table__.columns.keys()) - _HIDDEN_COLUMNS


_COLLECTIONS: dict[str, _CollectionTable] = {
    Collection.STATUSES: _CollectionTable(model=Status, to_columns=_status_columns),
    Collection.COMMENTS: _CollectionTable(model=Comment, to_columns=_comment_columns),
    Collection.USERS: _CollectionTable(model=User, to_columns=_user_columns),
}


def _projected_row_to_record(row: Any) -> dict[str, Any]:
    return dict(row._mapping)


def _entity_row_to_record(table: _CollectionTable, row: Any) -> dict[str, Any]:
    return SQLAlchemyRecordStore._row_to_record(table, row[0])


class SQLAlchemyRecordCursor:
    """
    One buffered window of rows, converted to plain dicts on iteration.
    """

    def __init__(self, result: Result[Any], to_record: Callable[[Any], dict[str, Any]]) -> None:
        self._result = result
        self._to_record = to_record

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for row in self._result:
            yield self._to_record(row)

    def close(self) -> None:
        self._result.close()


class SQLAlchemyRecordStore:
    """
    Record store over one SQLAlchemy session.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def open_cursor(
        self,
        collection: str,
        *,
        fields: Sequence[str] | None = None,
        reverse: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> SQLAlchemyRecordCursor:
        table = self._table(collection)
        model = table.model
        order = model.row_id.desc() if reverse else model.row_id.asc()

        to_record: Callable[[Any], dict[str, Any]]
        if fields:
            self._check_columns(collection, table, fields)
            stmt = select(*(model.__table__.columns[name] for name in fields))
            to_record = _projected_row_to_record
        else:
            stmt = select(model)
            to_record = partial(_entity_row_to_record, table)

        stmt = stmt.order_by(order).offset(max(0, offset))
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._translate_unavailable(f"open cursor on {collection}"):
            result = self._session.execute(stmt)
        return SQLAlchemyRecordCursor(result, to_record)

    def find_one(self, collection: str, where: Mapping[str, Any]) -> dict[str, Any] | None:
        table = self._table(collection)
        self._check_columns(collection, table, where.keys())
        stmt = select(table.model).filter_by(**where).limit(1)
        with self._translate_unavailable(f"lookup on {collection}"):
            row = self._session.scalars(stmt).first()
        return self._row_to_record(table, row) if row is not None else None

    def insert_one(self, collection: str, record: Mapping[str, Any]) -> None:
        table = self._table(collection)
        record_id = record.get("id") if isinstance(record, Mapping) else None
        try:
            values = table.to_columns(record)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RecordRejectedError(
                f"Malformed {collection} payload: {exc!r}",
                collection=collection,
                record_id=record_id,
            ) from exc

        self._session.add(table.model(**values))
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateRecordError(
                f"{collection} record {record_id} violates a constraint.",
                collection=collection,
                record_id=record_id,
            ) from exc
        except DataError as exc:
            self._session.rollback()
            raise RecordRejectedError(
                f"{collection} record {record_id} was rejected by the database.",
                collection=collection,
                record_id=record_id,
            ) from exc
        except (OperationalError, InterfaceError) as exc:
            self._session.rollback()
            raise StoreUnavailableError(f"Record store unavailable during insert into {collection}.") from exc

    def update(
        self,
        collection: str,
        where: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> int:
        table = self._table(collection)
        self._check_columns(collection, table, [*where.keys(), *values.keys()])
        stmt = update(table.model).filter_by(**where).values(**values)
        with self._translate_unavailable(f"update on {collection}"):
            result = self._session.execute(stmt)
            self._session.commit()
        return result.rowcount

    def delete(self, collection: str, where: Mapping[str, Any]) -> int:
        table = self._table(collection)
        self._check_columns(collection, table, where.keys())
        stmt = delete(table.model).filter_by(**where)
        with self._translate_unavailable(f"delete on {collection}"):
            result = self._session.execute(stmt)
            self._session.commit()
        return result.rowcount

    @contextmanager
    def _translate_unavailable(self, action: str) -> Iterator[None]:
        try:
            yield
        except (OperationalError, InterfaceError) as exc:
            self._session.rollback()
            raise StoreUnavailableError(f"Record store unavailable during {action}.") from exc

    @staticmethod
    def _table(collection: str) -> _CollectionTable:
        table = _COLLECTIONS.get(collection)
        if table is None:
            allowed = ", ".join(sorted(_COLLECTIONS))
            raise UnknownCollectionError(f"Unknown collection '{collection}'. Allowed: {allowed}.")
        return table

    @staticmethod
    def _check_columns(collection: str, table: _CollectionTable, names: Any) -> None:
        unknown = sorted(set(names) - table.exposed_columns)
        if unknown:
            raise UnknownCollectionError(f"Unknown {collection} fields: {', '.join(unknown)}.")

    @staticmethod
    def _row_to_record(table: _CollectionTable, row: Any) -> dict[str, Any]:
        record = dict(row.payload or {})
        for name in table.exposed_columns:
            record[name] = getattr(row, name)
        return record
