from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  registers all ORM models on Base.metadata
from app.config import IngestionSettings
from app.services.weibo_ingestion_service import WeiboIngestionService
from db.base import Base
from tests.fakes import InMemoryRecordStore, RecordingSleep, ScriptedConnector


@pytest.fixture()
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def make_service(
    store: InMemoryRecordStore,
    sleep: RecordingSleep,
) -> Callable[..., WeiboIngestionService]:
    def _build(
        connector: ScriptedConnector,
        *,
        cursor_step: int = 2,
        jitter: Callable[[], float] = lambda: 0.5,
    ) -> WeiboIngestionService:
        return WeiboIngestionService(
            store=store,
            connector=connector,
            settings=IngestionSettings(cursor_step=cursor_step, status_fetch_workers=4),
            sleep=sleep,
            jitter=jitter,
        )

    return _build


@pytest.fixture()
def session() -> Iterator[Session]:
    """In-memory SQLite session with every mirror table created."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    with Session(engine, expire_on_commit=False) as db:
        yield db
    engine.dispose()
