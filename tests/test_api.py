"""
tests/test_api.py

HTTP surface: ingestion triggers, run ledger and the comment endpoints.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_comment_query_service,
    get_comment_write_service,
    get_ingestion_service,
    get_run_recorder,
)
from app.api.routers import comments_router, manage_router
from app.config import IngestionSettings
from app.connectors.base import ConnectorRequestError
from app.domain.fetch_outcome import FetchedData, FetchHardLimit
from app.ingestion.record_store import Collection
from app.services.comment_query_service import CommentQueryService
from app.services.comment_write_service import CommentWriteService
from app.services.ingestion_run_service import IngestionRunRecorder
from app.services.weibo_ingestion_service import WeiboIngestionService
from db.repositories.errors import StoreUnavailableError
from db.repositories.record_store import SQLAlchemyRecordStore
from tests.fakes import FakeCommentWriter, ScriptedConnector, make_comment, make_status


@pytest.fixture()
def connector() -> ScriptedConnector:
    return ScriptedConnector()


@pytest.fixture()
def writer() -> FakeCommentWriter:
    return FakeCommentWriter()


@pytest.fixture()
def client(session, connector, writer) -> TestClient:
    application = FastAPI()
    application.include_router(manage_router)
    application.include_router(comments_router)

    service = WeiboIngestionService(
        store=SQLAlchemyRecordStore(session),
        connector=connector,
        settings=IngestionSettings(cursor_step=2),
        sleep=lambda seconds: None,
    )
    application.dependency_overrides[get_ingestion_service] = lambda: service
    application.dependency_overrides[get_run_recorder] = lambda: IngestionRunRecorder(session)
    application.dependency_overrides[get_comment_query_service] = lambda: CommentQueryService(session)
    application.dependency_overrides[get_comment_write_service] = lambda: CommentWriteService(
        store=SQLAlchemyRecordStore(session),
        connector=writer,
    )
    return TestClient(application)


def test_comments_by_status_ids(client, connector) -> None:
    connector.comments[5] = FetchedData(records=[make_comment(51, 5), make_comment(52, 5)])
    connector.comments[6] = FetchHardLimit()

    response = client.post("/manage/comments/by-status-ids", json={"ids": [5, 6]})

    assert response.status_code == 200
    assert response.json() == {"total": 2, "success": 2, "failed": 0}


@pytest.mark.parametrize("body", [{"ids": []}, {"ids": [0]}, {}])
def test_bad_ids_are_refused_without_running(client, connector, body) -> None:
    response = client.post("/manage/statuses/by-ids", json=body)

    assert response.status_code == 400
    assert connector.calls == []
    assert client.get("/manage/runs").json() == {"runs": []}


def test_comment_pass_with_flags(client, connector, session) -> None:
    store = SQLAlchemyRecordStore(session)
    store.insert_one(Collection.STATUSES, make_status(1, comments_count=2))
    store.insert_one(Collection.STATUSES, make_status(2, comments_count=2))
    connector.comments[2] = FetchedData(records=[make_comment(21, 2)])

    response = client.post("/manage/comments/for-statuses", params={"slow": "true", "reverse": "true"})

    assert response.status_code == 200
    assert response.json() == {"total": 1, "success": 1, "failed": 0}
    assert [value for _, value in connector.calls] == [2, 1]


def test_runs_are_listed(client, connector) -> None:
    connector.timelines["home"] = FetchedData(records=[make_status(1)])

    client.post("/manage/statuses/new")
    client.post("/manage/users/all")

    response = client.get("/manage/runs", params={"operation": "new_statuses"})

    assert response.status_code == 200
    (run,) = response.json()["runs"]
    assert run["status"] == "completed"
    assert (run["total"], run["success"]) == (1, 1)


def test_store_outage_is_503(client, monkeypatch) -> None:
    def down(self, **kwargs):
        raise StoreUnavailableError("store is down")

    monkeypatch.setattr(IngestionRunRecorder, "run", down)

    response = client.post("/manage/users/from-comments")

    assert response.status_code == 503


def test_show_comments_envelope(client, session) -> None:
    store = SQLAlchemyRecordStore(session)
    store.insert_one(Collection.STATUSES, make_status(9, comments_count=3))
    for comment_id in (91, 92, 93):
        store.insert_one(Collection.COMMENTS, make_comment(comment_id, 9))

    response = client.get("/weibo/2/comments/show.json", params={"id": 9, "count": 2})

    assert response.status_code == 200
    body = response.json()
    assert [comment["id"] for comment in body["comments"]] == [93, 92]
    assert body["total_number"] == 3
    assert body["next_cursor"] == 92
    assert body["next_cursor_str"] == "92"
    assert body["status"]["id"] == 9

    last_page = client.get("/weibo/2/comments/show.json", params={"id": 9, "count": 2, "page": 2}).json()
    assert [comment["id"] for comment in last_page["comments"]] == [91]
    assert last_page["next_cursor"] == 0


def test_show_comments_requires_id(client) -> None:
    response = client.get("/weibo/2/comments/show.json")

    assert response.status_code == 400
    assert response.json()["detail"] == "param id is required"


def test_create_comment_is_mirrored_and_shown(client, writer, session) -> None:
    SQLAlchemyRecordStore(session).insert_one(Collection.STATUSES, make_status(9, comments_count=0))

    response = client.post("/weibo/2/comments/create.json", params={"id": 9, "comment": "nice"})

    assert response.status_code == 200
    assert response.json()["id"] == 1000
    assert writer.calls == [("create", {"id": 9, "comment": "nice"})]
    shown = client.get("/weibo/2/comments/show.json", params={"id": 9}).json()
    assert [comment["text"] for comment in shown["comments"]] == ["nice"]


def test_reply_and_destroy(client, writer, session) -> None:
    store = SQLAlchemyRecordStore(session)
    store.insert_one(Collection.COMMENTS, make_comment(91, 9))

    reply = client.post("/weibo/2/comments/reply.json", params={"id": 9, "cid": 91, "comment": "same"})
    assert reply.status_code == 200

    destroyed = client.post("/weibo/2/comments/destroy.json", params={"cid": 91})
    assert destroyed.status_code == 200
    assert store.find_one(Collection.COMMENTS, {"id": 91}) is None
    assert store.find_one(Collection.COMMENTS, {"id": 1000}) is not None


@pytest.mark.parametrize(
    ("path", "params", "missing"),
    [
        ("create.json", {"comment": "hi"}, "id"),
        ("create.json", {"id": 9}, "comment"),
        ("reply.json", {"id": 9, "comment": "hi"}, "cid"),
        ("destroy.json", {}, "cid"),
    ],
)
def test_comment_writes_require_params(client, writer, path, params, missing) -> None:
    response = client.post(f"/weibo/2/comments/{path}", params=params)

    assert response.status_code == 400
    assert response.json()["detail"] == f"param {missing} is required"
    assert writer.calls == []


def test_upstream_refusal_is_502(client, writer) -> None:
    writer.refusal = ConnectorRequestError("weibo: request refused status=403")

    response = client.post("/weibo/2/comments/destroy.json", params={"cid": 91})

    assert response.status_code == 502


def test_store_outage_on_write_is_503(client, monkeypatch) -> None:
    def down(self, collection, where):
        raise StoreUnavailableError("store is down")

    monkeypatch.setattr(SQLAlchemyRecordStore, "delete", down)

    response = client.post("/weibo/2/comments/destroy.json", params={"cid": 91})

    assert response.status_code == 503
