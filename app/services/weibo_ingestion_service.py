"""
app/services/weibo_ingestion_service.py

Ingestion passes that mirror Weibo statuses, comments and users.

Every pass returns an ``IngestResult``. Upstream refusals only ever shrink
``success``; they never surface as errors. Store outages propagate.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache, partial
from typing import Any, Protocol, assert_never

import requests
from sqlalchemy.orm import Session

from app.config import IngestionSettings, get_ingestion_settings, get_weibo_api_settings
from app.connectors.base import ConnectorRequestError
from app.connectors.weibo_connector import WeiboConnector
from app.domain.fetch_outcome import FetchedData, FetchEmpty, FetchHardLimit, FetchOutcome
from app.domain.ingest_result import IngestResult, concat_results
from app.domain.traversal_policy import TraversalPolicy
from app.ingestion.cursor_traversal import CursorFactory, TraversalSignal, traverse_cursor_with_step
from app.ingestion.one_by_one import insert_one_by_one
from app.ingestion.record_store import Collection, RecordStore
from app.logging_utils import log_event
from db.repositories.record_store import SQLAlchemyRecordStore

module_logger = logging.getLogger(__name__)

TIMELINES = ("home", "public")


class IngestionRequestError(ValueError):
    """
    Raised when an ingestion call is malformed; no I/O has happened yet.
    """


class WeiboFetcher(Protocol):
    def fetch_comments_by_status_id(self, status_id: int) -> FetchOutcome:
        ...

    def fetch_timeline(self, name: str) -> FetchOutcome:
        ...

    def fetch_status(self, status_id: int) -> FetchOutcome:
        ...


def validate_ids(ids: Iterable[Any] | None) -> list[int]:
    """
    Return ``ids`` as a list of positive ints or raise ``IngestionRequestError``.
    """

    if ids is None or isinstance(ids, (str, bytes)):
        raise IngestionRequestError("param ids is required")
    validated: list[int] = []
    for raw in ids:
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise IngestionRequestError(f"invalid id: {raw!r}")
        try:
            value = int(raw)
        except (TypeError, ValueError) as exc:
            raise IngestionRequestError(f"invalid id: {raw!r}") from exc
        if value <= 0:
            raise IngestionRequestError(f"invalid id: {raw!r}")
        validated.append(value)
    if not validated:
        raise IngestionRequestError("param ids is required")
    return validated


class WeiboIngestionService:
    """
    Composes the Weibo connector, cursor traversal and one-by-one inserts.
    """

    def __init__(
        self,
        *,
        store: RecordStore,
        connector: WeiboFetcher,
        settings: IngestionSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[], float] = random.random,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._connector = connector
        self._settings = settings or IngestionSettings()
        self._sleep = sleep
        self._jitter = jitter
        self._logger = logger or module_logger

    def build_policy(
        self,
        *,
        slow: bool = False,
        overwrite: bool = False,
        reverse: bool = False,
        step_size: int | None = None,
    ) -> TraversalPolicy:
        return TraversalPolicy(
            step_size=step_size or self._settings.cursor_step,
            reverse=reverse,
            overwrite=overwrite,
            throttle=slow,
        )

    def ingest_comments_for_ids(self, ids: Sequence[int]) -> IngestResult:
        status_ids = validate_ids(ids)
        self._logger.debug("Ingest comments by status ids=%s", status_ids)
        results: list[IngestResult] = []

        for status_id in status_ids:
            outcome = self._connector.fetch_comments_by_status_id(status_id)
            match outcome:
                case FetchedData(records=records):
                    results.append(self._insert(Collection.COMMENTS, records))
                case FetchEmpty():
                    self._logger.debug("Status id=%s has no comments upstream", status_id)
                case FetchHardLimit(reason=reason):
                    self._logger.warning(
                        "Skip comments for status id=%s, fetch failed reason=%s",
                        status_id,
                        reason,
                    )
                case _:
                    assert_never(outcome)

        return self._summarize("ingest_comments_for_ids", results, requested=len(status_ids))

    def ingest_comments_for_all_statuses(self, policy: TraversalPolicy | None = None) -> IngestResult:
        policy = policy or self.build_policy()
        self._logger.debug("Ingest comments for stored statuses policy=%s", policy)
        results: list[IngestResult] = []

        def visit(status: dict[str, Any]) -> TraversalSignal | None:
            status_id = status["id"]

            if status.get("comments_count") == 0:
                self._logger.debug("Status id=%s has no comment", status_id)
                return None

            if not policy.overwrite and self._store.find_one(
                Collection.COMMENTS, {"status_id": status_id}
            ) is not None:
                self._logger.debug("Status id=%s already has comments", status_id)
                return None

            outcome = self._connector.fetch_comments_by_status_id(status_id)
            match outcome:
                case FetchHardLimit(reason=reason):
                    self._logger.warning(
                        "Fetch comments for status id=%s failed, maybe rate limited; stop pass reason=%s",
                        status_id,
                        reason,
                    )
                    return TraversalSignal.STOP
                case FetchEmpty():
                    self._logger.debug("Status id=%s has no comments upstream, reset comments_count", status_id)
                    self._store.update(Collection.STATUSES, {"id": status_id}, {"comments_count": 0})
                    return None
                case FetchedData(records=records):
                    results.append(self._insert(Collection.COMMENTS, records))
                    if policy.throttle:
                        self._throttle()
                    return None
                case _:
                    assert_never(outcome)

        summary = traverse_cursor_with_step(
            self._cursor_factory(Collection.STATUSES, ("id", "comments_count"), policy.reverse),
            step=policy.step_size,
            on_record=visit,
        )
        return self._summarize(
            "ingest_comments_for_all_statuses",
            results,
            visited=summary.visited,
            halted=summary.stopped,
        )

    def ingest_new_statuses(self) -> IngestResult:
        self._logger.debug("Ingest new statuses from timelines=%s", TIMELINES)
        results: list[IngestResult] = []

        for name in TIMELINES:
            outcome = self._connector.fetch_timeline(name)
            match outcome:
                case FetchedData(records=records):
                    results.append(self._insert(Collection.STATUSES, records))
                case FetchEmpty():
                    self._logger.debug("Timeline %s is empty", name)
                case FetchHardLimit(reason=reason):
                    self._logger.warning("Fetch %s timeline failed reason=%s", name, reason)
                case _:
                    assert_never(outcome)

        return self._summarize("ingest_new_statuses", results)

    def ingest_statuses_by_ids(self, ids: Sequence[int]) -> IngestResult:
        status_ids = validate_ids(ids)
        self._logger.debug("Ingest statuses by ids=%s", status_ids)

        workers = min(self._settings.status_fetch_workers, len(status_ids))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="status-fetch") as executor:
            futures = [executor.submit(self._fetch_status, status_id) for status_id in status_ids]
            outcomes = [future.result() for future in futures]

        statuses: list[dict[str, Any]] = []
        for status_id, outcome in zip(status_ids, outcomes):
            match outcome:
                case FetchedData(records=records):
                    statuses.extend(records)
                case FetchEmpty():
                    self._logger.debug("Status id=%s not found upstream", status_id)
                case FetchHardLimit(reason=reason):
                    self._logger.warning("Fetch status id=%s failed reason=%s", status_id, reason)
                case _:
                    assert_never(outcome)

        result = self._insert(Collection.STATUSES, statuses)
        return self._summarize("ingest_statuses_by_ids", [result], requested=len(status_ids))

    def ingest_users_from_comments(self) -> IngestResult:
        return self._ingest_users_from(Collection.COMMENTS)

    def ingest_users_from_statuses(self) -> IngestResult:
        return self._ingest_users_from(Collection.STATUSES)

    def ingest_all_users(self) -> IngestResult:
        result = concat_results(self.ingest_users_from_comments(), self.ingest_users_from_statuses())
        log_event(self._logger, logging.INFO, "ingest_all_users", **result.as_dict())
        return result

    def _ingest_users_from(self, collection: str) -> IngestResult:
        self._logger.debug("Ingest users from %s", collection)
        results: list[IngestResult] = []
        users: list[dict[str, Any]] = []

        def collect(record: dict[str, Any]) -> None:
            user = record.get("user")
            if not isinstance(user, dict):
                return
            users.append(user)
            self._logger.debug("Collect user id=%s from %s", user.get("id"), collection)

        def flush() -> None:
            results.append(self._insert(Collection.USERS, users))
            users.clear()

        traverse_cursor_with_step(
            self._cursor_factory(collection, ("user",), True),
            step=self._settings.cursor_step,
            on_record=collect,
            on_step_complete=flush,
        )
        return self._summarize(f"ingest_users_from_{collection}", results)

    def _cursor_factory(self, collection: str, fields: Sequence[str], reverse: bool) -> CursorFactory:
        def create_cursor(offset: int, limit: int):
            return self._store.open_cursor(
                collection,
                fields=fields,
                reverse=reverse,
                offset=offset,
                limit=limit,
            )

        return create_cursor

    def _fetch_status(self, status_id: int) -> FetchOutcome:
        try:
            return self._connector.fetch_status(status_id)
        except (ConnectorRequestError, requests.RequestException) as exc:
            self._logger.warning("Fetch status id=%s failed in worker error=%s", status_id, exc)
            return FetchHardLimit(reason=str(exc))

    def _insert(self, collection: str, records: Sequence[dict[str, Any]]) -> IngestResult:
        result = insert_one_by_one(
            records,
            partial(self._store.insert_one, collection),
            label=collection,
        )
        self._logger.debug("Insert %s result: %s / %s", collection, result.success, result.total)
        return result

    def _throttle(self) -> None:
        delay = self._settings.throttle_base_seconds + self._jitter() * self._settings.throttle_jitter_seconds
        self._logger.debug("Throttle before next fetch delay_seconds=%.2f", delay)
        self._sleep(delay)

    def _summarize(self, event: str, results: Sequence[IngestResult], **fields: Any) -> IngestResult:
        result = concat_results(*results)
        log_event(self._logger, logging.INFO, event, **result.as_dict(), **fields)
        return result


@lru_cache(maxsize=1)
def get_weibo_connector() -> WeiboConnector:
    """
    Build and cache the Weibo connector.
    """

    return WeiboConnector(settings=get_weibo_api_settings())


def get_weibo_ingestion_service(db: Session) -> WeiboIngestionService:
    """
    Build an ingestion service bound to one database session.
    """

    return WeiboIngestionService(
        store=SQLAlchemyRecordStore(db),
        connector=get_weibo_connector(),
        settings=get_ingestion_settings(),
    )
