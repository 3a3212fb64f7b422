# tests/test_domain.py
from datetime import datetime, timezone

import pytest

from pkg_gatekeeper.domain.constants import OperationResource, OperationType
from pkg_gatekeeper.domain.entities import AccessDecision, AuditRecord, ParsedToken, audit_record
from pkg_gatekeeper.domain.exceptions import (
    AlgorithmMismatchError,
    AuthenticationError,
    InvalidConfigError,
    OperationKindError,
    TokenParseError,
    MalformedTokenError,
)
from pkg_gatekeeper.domain.value_objects import (
    Page,
    RequestDescriptor,
    convert_operation_type,
    parse_operation_type,
)
from pkg_gatekeeper.settings import AuthSettings
from pkg_gatekeeper.application.use_cases.authenticate import extract_bearer_token

SECRET = "domain-test-secret-" + "x" * 48


def test_request_descriptor():
    req = RequestDescriptor("get", "/items", {"Authorization": "Bearer abc"})
    assert req.method == "GET"
    assert req.path == "/items"
    assert req.header("authorization") == "Bearer abc"
    assert req.header("AUTHORIZATION") == "Bearer abc"
    assert req.header("X-Missing") is None

    assert RequestDescriptor("POST", "/").header("Authorization") is None


def test_page():
    page = Page(page_size=10, offset=20)
    assert page.page_size == 10
    assert page.offset == 20
    assert Page(5).offset == 0

    with pytest.raises(ValueError):
        Page(page_size=-1)
    with pytest.raises(ValueError):
        Page(page_size=10, offset=-5)


def test_operation_kind_conversion():
    assert convert_operation_type(5, 2) == "5-2"
    assert convert_operation_type(OperationType.SCALE, OperationResource.INFRA) == "5-2"
    assert parse_operation_type("5-2") == (5, 2)
    assert parse_operation_type("0-255") == (0, 255)


@pytest.mark.parametrize(
    "text",
    ["5", "", "5-2-1", "-2", "5-", "a-2", "5-b", "+5-2", " 5-2", "5-256", "5.0-2", "٣-2"],
)
def test_operation_kind_rejects(text):
    with pytest.raises(OperationKindError):
        parse_operation_type(text)


def test_operation_kind_error_is_value_error():
    with pytest.raises(ValueError):
        parse_operation_type("5")


@pytest.mark.parametrize("operation, resource", [(-1, 2), (256, 2), (5, -1), (5, 256)])
def test_operation_kind_conversion_rejects_out_of_range(operation, resource):
    with pytest.raises(OperationKindError):
        convert_operation_type(operation, resource)


@pytest.mark.parametrize("operation, resource", [(-1, 0), (256, 0), (0, -1), (0, 300)])
def test_audit_record_rejects_out_of_range_codes(operation, resource):
    with pytest.raises(ValueError):
        AuditRecord(
            share_id="s",
            operating_object="obj",
            operating_type=operation,
            operating_resource=resource,
        )


def test_audit_record_kind_parses_back():
    record = AuditRecord(share_id="s", operating_object="", operating_type=255, operating_resource=0)
    assert parse_operation_type(record.kind) == (255, 0)


def test_enum_labels():
    assert OperationType.ADD.label == "add"
    assert OperationType.RESTART.label == "restart"
    assert OperationResource.CONFIG_MAP.label == "config map"
    assert OperationResource.RULE.label == "alert rule"
    assert len(OperationType) == 9
    assert len(OperationResource) == 20
    assert OperationResource.STEP == 19


def test_audit_record():
    created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    record = AuditRecord(
        id=7,
        share_id="share-1",
        group_ids=[3, 1, 3],
        operating_object="deployment/web",
        operating_type=OperationType.ROLLBACK,
        operating_resource=OperationResource.APP,
        create_time=created,
    )

    assert record.group_ids == frozenset({1, 3})
    assert record.operation == "rollback"
    assert record.resource == "app"
    assert record.kind == "6-8"
    assert record.to_dict() == {
        "id": 7,
        "share_id": "share-1",
        "group_id": [1, 3],
        "operating_object": "deployment/web",
        "create_time": "2026-01-02T03:04:05+00:00",
        "operation": "rollback",
        "resource": "app",
    }

    # codes outside the enumerations keep an empty label
    unknown = AuditRecord(share_id="s", operating_object="", operating_type=200, operating_resource=99)
    assert unknown.operation == ""
    assert unknown.resource == ""
    assert unknown.to_dict()["create_time"] is None


def test_audit_record_helper():
    record = audit_record(
        share_id="abc",
        operating_object="user bob",
        operation=OperationType.DELETE,
        resource=OperationResource.USER,
        group_ids={4},
    )
    assert record.operating_type == 2
    assert record.operating_resource == 4
    assert record.group_ids == frozenset({4})
    assert record.id is None
    assert record.create_time is None


def test_access_decision_and_parsed_token():
    assert AccessDecision().exempt is False
    assert AccessDecision(exempt=True).identity is None

    parsed = ParsedToken(header={"alg": "HS256"}, claims={"sub": "x"}, valid=True)
    assert parsed.algorithm == "HS256"
    assert ParsedToken().algorithm is None


def test_auth_settings_defaults():
    s = AuthSettings(signing_key=SECRET)
    assert s.header_name == "Authorization"
    assert s.algorithm == "HS256"
    assert s.context_key == "Authorization"
    assert s.exempt_options is True
    assert s.exclude_paths == frozenset()
    assert s.exclude_prefixes == ()
    assert s.extractor is extract_bearer_token
    assert s.validator is None

    s = AuthSettings(
        signing_key=SECRET,
        context_key="uid",
        exclude_paths=["/login", "/login"],
        exclude_prefixes=["/public"],
    )
    assert s.context_key == "uid"
    assert s.exclude_paths == frozenset({"/login"})
    assert s.exclude_prefixes == ("/public",)


def test_auth_settings_validation():
    with pytest.raises(InvalidConfigError):
        AuthSettings(signing_key="")
    with pytest.raises(InvalidConfigError):
        AuthSettings(signing_key=SECRET, algorithm="RS256")
    with pytest.raises(InvalidConfigError):
        AuthSettings(signing_key=SECRET, header_name="")


def test_error_messages():
    exc = AlgorithmMismatchError("HS256", "HS512")
    assert isinstance(exc, AuthenticationError)
    assert exc.expected == "HS256"
    assert exc.actual == "HS512"
    assert "HS256" in str(exc) and "HS512" in str(exc)

    cause = MalformedTokenError("bad")
    wrapped = TokenParseError(cause)
    assert wrapped.cause is cause
    assert str(wrapped) == "Error parsing token: bad"
