"""Error Hierarchy — tests for status codes and the REST envelope."""

from ventytime.core.errors import (
    AuthenticationError,
    BusinessRuleError,
    DatabaseError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ValidationError,
)


def test_status_codes():
    assert ValidationError("bad").http_status == 400
    assert BusinessRuleError("rule", "RULE").http_status == 400
    assert AuthenticationError().http_status == 401
    assert PermissionDeniedError("no").http_status == 403
    assert ResourceNotFoundError("Event", 7).http_status == 404
    assert DatabaseError("down", "query").http_status == 503


def test_not_found_message_names_resource():
    assert ResourceNotFoundError("Event", 7).message == "Event '7' not found"


def test_response_envelope():
    body = BusinessRuleError("Event is full", "EVENT_FULL").to_response()
    assert body["message"] == "Event is full"
    assert body["error"]["code"] == "EVENT_FULL"
    assert body["error"]["category"] == "business_rule"
    assert body["error"]["severity"] == "error"
    assert "timestamp" in body["error"]
