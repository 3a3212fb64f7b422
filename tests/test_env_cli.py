# tests/test_env_cli.py
import json

import pytest

from pkg_gatekeeper.adapters.database.audit_store import SQLAlchemyAuditStore
from pkg_gatekeeper.adapters.pyjwt.token_codec import JWTTokenCodec
from pkg_gatekeeper.admin.cli import main
from pkg_gatekeeper.application.use_cases.audit_log import AuditLogService
from pkg_gatekeeper.domain.constants import OperationResource, OperationType
from pkg_gatekeeper.domain.entities import audit_record
from pkg_gatekeeper.domain.exceptions import InvalidConfigError
from pkg_gatekeeper.env import DEFAULT_DATABASE_URL, database_url_from_env, settings_from_env

SECRET = "env-test-secret-" + "e" * 64

ENV_KEYS = [
    "GATEKEEPER_SIGNING_KEY",
    "GATEKEEPER_HEADER_NAME",
    "GATEKEEPER_ALGORITHM",
    "GATEKEEPER_CONTEXT_KEY",
    "GATEKEEPER_EXCLUDE_PATHS",
    "GATEKEEPER_EXCLUDE_PREFIXES",
    "GATEKEEPER_AUTH_ON_OPTIONS",
    "GATEKEEPER_DATABASE_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


# --------------------------------------------------------------------- #
# env loading
# --------------------------------------------------------------------- #

def test_settings_from_env_requires_key():
    with pytest.raises(InvalidConfigError) as info:
        settings_from_env()
    assert "GATEKEEPER_SIGNING_KEY" in str(info.value)


def test_settings_from_env_defaults(monkeypatch):
    monkeypatch.setenv("GATEKEEPER_SIGNING_KEY", SECRET)
    s = settings_from_env()
    assert s.signing_key == SECRET
    assert s.header_name == "Authorization"
    assert s.algorithm == "HS256"
    assert s.context_key == "Authorization"
    assert s.exempt_options is True
    assert s.exclude_paths == frozenset()


def test_settings_from_env_overrides(monkeypatch):
    monkeypatch.setenv("GATEKEEPER_SIGNING_KEY", SECRET)
    monkeypatch.setenv("GATEKEEPER_HEADER_NAME", "X-Token")
    monkeypatch.setenv("GATEKEEPER_ALGORITHM", "HS512")
    monkeypatch.setenv("GATEKEEPER_CONTEXT_KEY", "uid")
    monkeypatch.setenv("GATEKEEPER_EXCLUDE_PATHS", "/login, /healthz,,")
    monkeypatch.setenv("GATEKEEPER_EXCLUDE_PREFIXES", "/public")
    monkeypatch.setenv("GATEKEEPER_AUTH_ON_OPTIONS", "yes")

    s = settings_from_env()
    assert s.header_name == "X-Token"
    assert s.algorithm == "HS512"
    assert s.context_key == "uid"
    assert s.exclude_paths == frozenset({"/login", "/healthz"})
    assert s.exclude_prefixes == ("/public",)
    assert s.exempt_options is False


def test_settings_from_env_rejects_algorithm(monkeypatch):
    monkeypatch.setenv("GATEKEEPER_SIGNING_KEY", SECRET)
    monkeypatch.setenv("GATEKEEPER_ALGORITHM", "RS256")
    with pytest.raises(InvalidConfigError):
        settings_from_env()


def test_database_url_from_env(monkeypatch):
    assert database_url_from_env() == DEFAULT_DATABASE_URL
    monkeypatch.setenv("GATEKEEPER_DATABASE_URL", "sqlite:///other.db")
    assert database_url_from_env() == "sqlite:///other.db"


# --------------------------------------------------------------------- #
# CLI
# --------------------------------------------------------------------- #

def _output(capsys) -> dict:
    return json.loads(capsys.readouterr().out)


def test_cli_issue_token(monkeypatch, capsys):
    monkeypatch.setenv("GATEKEEPER_SIGNING_KEY", SECRET)
    monkeypatch.setenv("GATEKEEPER_CONTEXT_KEY", "uid")

    main(["issue-token", "--identity", "alice", "--ttl", "120"])
    out = _output(capsys)

    assert out["ok"] is True
    assert out["context_key"] == "uid"
    parsed = JWTTokenCodec(signing_key=SECRET, identity_claim="uid").parse_and_verify(out["token"])
    assert parsed.valid is True
    assert parsed.claims["uid"] == "alice"


def test_cli_issue_token_without_key(capsys):
    with pytest.raises(InvalidConfigError):
        main(["issue-token", "--identity", "alice"])
    out = _output(capsys)
    assert out["ok"] is False
    assert "GATEKEEPER_SIGNING_KEY" in out["error"]


def test_cli_init_db_and_list(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'audit.db'}"

    main(["init-db", "--database-url", url])
    assert _output(capsys) == {"ok": True, "created": True}

    main(["list-audit", "--database-url", url, "--page-size", "5"])
    assert _output(capsys) == {"ok": True, "total": 0, "records": []}

    main(["list-audit", "--database-url", url, "--share-id", "missing"])
    assert _output(capsys) == {"ok": True, "total": 0, "records": []}


def test_cli_list_audit_records(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'audit.db'}"
    store = SQLAlchemyAuditStore.from_url(url)
    store.create_tables()
    service = AuditLogService(store=store)
    for obj in ("first", "second"):
        service.append(
            audit_record(
                share_id="share-1",
                operating_object=obj,
                operation=OperationType.BUILD,
                resource=OperationResource.APP,
                group_ids=[2, 1],
            )
        )

    main(["list-audit", "--database-url", url, "--share-id", "share-1", "--page-size", "1"])
    out = _output(capsys)

    assert out["total"] == 2
    assert len(out["records"]) == 1
    record = out["records"][0]
    assert record["operating_object"] == "second"
    assert record["group_id"] == [1, 2]
    assert record["operation"] == "build"
    assert record["resource"] == "app"
