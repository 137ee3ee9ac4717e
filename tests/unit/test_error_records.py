"""Unit tests for operation and API error record construction."""

from __future__ import annotations

from datetime import timezone

import pytest

from upstream_errors.normalize.records import ErrorKind
from upstream_errors.normalize.records import api_error
from upstream_errors.normalize.records import operation_error
from upstream_errors.normalize.sanitizer import CIRCULAR_MARKER
from upstream_errors.normalize.status import CLIENT_ERROR_MESSAGE
from upstream_errors.normalize.status import UNKNOWN_ERROR_MESSAGE

NODE = {"name": "HTTP Request", "id": "node-7"}


def test_operation_error_wraps_message_string() -> None:
    record = operation_error(NODE, "Invalid credentials")

    assert record.kind == ErrorKind.OPERATION
    assert record.name == "OperationError"
    assert record.message == "Invalid credentials"
    assert isinstance(record.cause, Exception)
    assert str(record.cause) == "Invalid credentials"
    assert record.context is NODE
    assert record.description is None
    assert record.http_code is None
    assert record.timestamp.tzinfo == timezone.utc


def test_operation_error_keeps_existing_exception_and_skips_search() -> None:
    error = ValueError("Unsupported operation")
    error.statusCode = 404  # type: ignore[attr-defined]

    record = operation_error(NODE, error)

    assert record.cause is error
    assert record.message == "Unsupported operation"
    assert record.http_code is None


def test_operation_error_prefers_message_attribute() -> None:
    class LegacyError(Exception):
        def __init__(self) -> None:
            super().__init__("args text")
            self.message = "attribute text"

    assert operation_error(NODE, LegacyError()).message == "attribute text"


def test_operation_error_sanitizes_cause() -> None:
    cause: dict = {"message": "loop"}
    cause["self"] = cause

    record = operation_error(NODE, cause)

    assert record.message == "loop"
    assert record.cause["self"] == CIRCULAR_MARKER


def test_api_error_resolves_exact_status_message_and_description() -> None:
    record = api_error(NODE, {"status": 404, "message": "Workflow does not exist"})

    assert record.kind == ErrorKind.API
    assert record.name == "ApiError"
    assert record.http_code == "404"
    assert record.message == "The resource you are requesting could not be found"
    assert record.description == "Workflow does not exist"


def test_api_error_falls_back_to_status_class_message() -> None:
    record = api_error(NODE, {"statusCode": 499})

    assert record.http_code == "499"
    assert record.message == CLIENT_ERROR_MESSAGE


def test_api_error_finds_nested_status() -> None:
    payload = {"response": {"body": {"error": {"code": 503, "message": "Maintenance window"}}}}

    record = api_error(NODE, payload)

    assert record.http_code == "503"
    assert record.message == "Service unavailable - perhaps try again later?"
    assert record.description == "Maintenance window"


def test_api_error_without_status_uses_unknown_sentinel() -> None:
    record = api_error(NODE, {"error": {"reason": "Something odd"}})

    assert record.http_code is None
    assert record.message == UNKNOWN_ERROR_MESSAGE
    assert record.description == "Something odd"


def test_api_error_ignores_non_numeric_status_values() -> None:
    record = api_error(NODE, {"code": "ECONNREFUSED", "message": "connect ECONNREFUSED"})

    assert record.http_code is None
    assert record.message == UNKNOWN_ERROR_MESSAGE
    assert record.description == "connect ECONNREFUSED"


def test_api_error_override_message_short_circuits_search() -> None:
    payload = {"statusCode": 500, "message": "Should be ignored", "error": {"description": "Also ignored"}}

    record = api_error(NODE, payload, message="X", description="Custom description")

    assert record.message == "X"
    assert record.description == "Custom description"
    assert record.http_code is None
    assert record.cause is payload


def test_api_error_override_keeps_explicit_http_code() -> None:
    record = api_error(NODE, {"status": 500}, message="Quota exhausted", http_code="429")

    assert record.message == "Quota exhausted"
    assert record.http_code == "429"
    assert record.description is None


def test_api_error_reads_description_from_xml_body() -> None:
    payload = {
        "statusCode": 403,
        "error": "<Error><Code>AccessDenied</Code><Message>Access Denied</Message></Error>",
        "message": "JSON message is not used",
    }

    record = api_error(NODE, payload, parse_xml=True)

    assert record.http_code == "403"
    assert record.message == "Forbidden - perhaps check your credentials?"
    assert record.description == "Access Denied"


def test_api_error_with_malformed_xml_has_no_description() -> None:
    payload = {"statusCode": 400, "error": "<Error><Message>broken", "message": "JSON message is not used"}

    record = api_error(NODE, payload, parse_xml=True)

    assert record.http_code == "400"
    assert record.description is None


def test_api_error_sanitizes_payload_before_search() -> None:
    payload: dict = {"statusCode": 502}
    payload["response"] = {"request": payload}

    record = api_error(NODE, payload)

    assert record.http_code == "502"
    assert record.cause["response"]["request"] == CIRCULAR_MARKER


def test_api_error_accepts_exception_payloads() -> None:
    error = RuntimeError("socket hang up")
    error.response = {"status": 504}  # type: ignore[attr-defined]

    record = api_error(NODE, error)

    assert record.http_code == "504"
    assert record.description == "socket hang up"


def test_error_records_are_immutable() -> None:
    record = api_error(NODE, {"status": 400})

    with pytest.raises(AttributeError):
        record.message = "changed"  # type: ignore[misc]


def test_api_error_without_matches_in_deep_payload_does_not_raise() -> None:
    payload: dict = {"message": "too deep"}
    for _ in range(3000):
        payload = {"data": payload}

    record = api_error(NODE, payload)

    assert record.http_code is None
    assert record.message == UNKNOWN_ERROR_MESSAGE
    assert record.description is None


def test_api_error_skips_non_finite_description_values() -> None:
    record = api_error(NODE, {"status": 500, "message": float("nan")})

    assert record.http_code == "500"
    assert record.description is None


def test_api_error_override_drops_empty_description_and_non_numeric_code() -> None:
    record = api_error(NODE, {"status": 500}, message="Quota exhausted", description="", http_code="E_QUOTA")

    assert record.message == "Quota exhausted"
    assert record.description is None
    assert record.http_code is None


def test_api_error_breaks_cycles_through_tuples() -> None:
    payload: dict = {"statusCode": 409, "message": "Version conflict"}
    payload["history"] = (payload, "previous attempt")

    record = api_error(NODE, payload)

    assert record.http_code == "409"
    assert record.description == "Version conflict"
    assert record.cause["history"] == (CIRCULAR_MARKER, "previous attempt")
