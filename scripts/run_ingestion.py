"""
Run one ingestion pass from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable

from app.config import get_log_level
from app.domain.ingest_result import IngestResult
from app.logging_utils import configure_logging
from app.services.ingestion_run_service import IngestionRunRecorder
from app.services.weibo_ingestion_service import (
    IngestionRequestError,
    WeiboIngestionService,
    get_weibo_ingestion_service,
    validate_ids,
)
from db.models.ingestion_run import IngestionOperation
from db.repositories.errors import StoreUnavailableError
from db.session import SessionLocal

logger = logging.getLogger("run_ingestion")

OPERATIONS = {
    "comments-by-ids": IngestionOperation.COMMENTS_BY_STATUS_IDS,
    "comments-for-statuses": IngestionOperation.COMMENTS_FOR_STATUSES,
    "new-statuses": IngestionOperation.NEW_STATUSES,
    "statuses-by-ids": IngestionOperation.STATUSES_BY_IDS,
    "users-from-comments": IngestionOperation.USERS_FROM_COMMENTS,
    "users-from-statuses": IngestionOperation.USERS_FROM_STATUSES,
    "all-users": IngestionOperation.ALL_USERS,
}

ID_OPERATIONS = {"comments-by-ids", "statuses-by-ids"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run one Weibo mirror ingestion pass.")
    parser.add_argument("operation", choices=sorted(OPERATIONS))
    parser.add_argument("--ids", nargs="+", default=None, help="Upstream status ids.")
    parser.add_argument("--slow", action="store_true", help="Pause between comment fetches.")
    parser.add_argument("--overwrite", action="store_true", help="Refetch statuses that have comments.")
    parser.add_argument("--reverse", action="store_true", help="Walk newest statuses first.")
    return parser


def resolve_action(
    service: WeiboIngestionService,
    args: argparse.Namespace,
) -> tuple[Callable[[], IngestResult], dict[str, object]]:
    if args.operation in ID_OPERATIONS:
        ids = validate_ids(args.ids)
        if args.operation == "comments-by-ids":
            return (lambda: service.ingest_comments_for_ids(ids)), {"ids": ids}
        return (lambda: service.ingest_statuses_by_ids(ids)), {"ids": ids}

    if args.operation == "comments-for-statuses":
        policy = service.build_policy(slow=args.slow, overwrite=args.overwrite, reverse=args.reverse)
        flags = {"slow": args.slow, "overwrite": args.overwrite, "reverse": args.reverse}
        return (lambda: service.ingest_comments_for_all_statuses(policy)), flags

    actions: dict[str, Callable[[], IngestResult]] = {
        "new-statuses": service.ingest_new_statuses,
        "users-from-comments": service.ingest_users_from_comments,
        "users-from-statuses": service.ingest_users_from_statuses,
        "all-users": service.ingest_all_users,
    }
    return actions[args.operation], {}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_log_level())

    with SessionLocal() as db:
        service = get_weibo_ingestion_service(db)
        try:
            action, request_payload = resolve_action(service, args)
        except IngestionRequestError as exc:
            parser.error(str(exc))

        try:
            result = IngestionRunRecorder(db).run(
                operation=OPERATIONS[args.operation],
                action=action,
                request_payload=request_payload,
            )
        except StoreUnavailableError as exc:
            logger.error("Ingestion aborted, store unavailable error=%s", exc)
            return 1

    print(json.dumps(result.as_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
