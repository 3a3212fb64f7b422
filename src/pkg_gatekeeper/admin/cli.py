from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from ..adapters.database.audit_store import SQLAlchemyAuditStore
from ..application.use_cases.audit_log import AuditLogService
from ..domain.value_objects import Page
from ..env import database_url_from_env, settings_from_env
from ..integrations.common.auth_factory import create_bearer_auth


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-gatekeeper",
        description="Issue bearer tokens and inspect the operator audit log",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    issue = sub.add_parser(
        "issue-token",
        help="Sign a token using GATEKEEPER_SIGNING_KEY / GATEKEEPER_ALGORITHM.",
    )
    issue.add_argument("--identity", "-i", required=True, help="Identity claim value.")
    issue.add_argument(
        "--ttl",
        type=float,
        default=3600.0,
        help="Token lifetime in seconds (default: 3600).",
    )

    for name, help_text in (
        ("init-db", "Create the audit table if missing."),
        ("list-audit", "Print one page of audit records, newest first."),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument(
            "--database-url",
            help="SQLAlchemy URL (defaults from env GATEKEEPER_DATABASE_URL).",
        )

    list_audit = sub.choices["list-audit"]
    list_audit.add_argument("--share-id", "-s", help="Only records for this share/session id.")
    list_audit.add_argument("--page-size", type=int, default=20)
    list_audit.add_argument("--offset", type=int, default=0)

    return parser.parse_args(args=argv)


def _run(args: argparse.Namespace) -> dict[str, Any]:
    if args.command == "issue-token":
        auth = create_bearer_auth(settings_from_env())
        token = auth.issue_token(args.identity, args.ttl)
        return {"token": token, "context_key": auth.context_key}

    store = SQLAlchemyAuditStore.from_url(args.database_url or database_url_from_env())
    if args.command == "init-db":
        store.create_tables()
        return {"created": True}

    service = AuditLogService(store=store)
    page = Page(page_size=args.page_size, offset=args.offset)
    if args.share_id:
        total, records = service.list_by_session(args.share_id, page)
    else:
        total, records = service.list(page)
    return {"total": total, "records": [r.to_dict() for r in records]}


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    try:
        summary = _run(args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
