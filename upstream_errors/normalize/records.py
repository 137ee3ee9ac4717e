"""Structured error records built from upstream failures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from enum import Enum
from typing import Any

from upstream_errors.normalize.finder import find_property
from upstream_errors.normalize.keys import ERROR_MESSAGE_KEYS
from upstream_errors.normalize.keys import ERROR_NESTING_KEYS
from upstream_errors.normalize.keys import ERROR_STATUS_KEYS
from upstream_errors.normalize.sanitizer import sanitize
from upstream_errors.normalize.status import resolve_status
from upstream_errors.normalize.xml_extractor import extract_description_from_xml


class ErrorKind(str, Enum):
    """Construction path that produced an error record."""

    OPERATION = "operation"
    API = "api"


_KIND_NAMES = {
    ErrorKind.OPERATION: "OperationError",
    ErrorKind.API: "ApiError",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ErrorRecord:
    """Normalized view of an upstream failure."""

    kind: ErrorKind
    message: str
    cause: Any
    context: Any = None
    description: str | None = None
    http_code: str | None = None
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def name(self) -> str:
        return _KIND_NAMES[self.kind]


def operation_error(context: Any, error: BaseException | Mapping[str, Any] | str) -> ErrorRecord:
    """Wrap an operational failure, e.g. invalid credentials, without any search."""
    if isinstance(error, str):
        error = Exception(error)

    error = sanitize(error)
    return ErrorRecord(
        kind=ErrorKind.OPERATION,
        message=_message_of(error),
        cause=error,
        context=context,
    )


def api_error(
    context: Any,
    payload: Any,
    *,
    message: str | None = None,
    description: str | None = None,
    http_code: str | None = None,
    parse_xml: bool = False,
) -> ErrorRecord:
    """Build a record for an upstream API error response.

    An explicit ``message`` short-circuits every lookup and the overrides are
    used as given, except that an empty description and a non-numeric
    ``http_code`` are dropped. Otherwise the status code is located in
    ``payload`` and mapped to a canned message, and the description is either
    read from the XML document under ``payload["error"]`` (``parse_xml``) or located in the
    payload itself.
    """
    payload = sanitize(payload)

    if message:
        return ErrorRecord(
            kind=ErrorKind.API,
            message=message,
            description=description or None,
            http_code=_status_code_or_none(http_code),
            cause=payload,
            context=context,
        )

    found_code = find_property(payload, ERROR_STATUS_KEYS, ERROR_NESTING_KEYS)
    resolution = resolve_status(_status_code_or_none(found_code))

    if parse_xml:
        found_description = extract_description_from_xml(_xml_body_of(payload))
    else:
        found_description = find_property(payload, ERROR_MESSAGE_KEYS, ERROR_NESTING_KEYS)

    return ErrorRecord(
        kind=ErrorKind.API,
        message=resolution.message,
        description=found_description or None,
        http_code=resolution.canonical_code,
        cause=payload,
        context=context,
    )


def _message_of(error: Any) -> str:
    if isinstance(error, Mapping):
        value = error.get("message")
        return str(value) if value else ""

    value = getattr(error, "message", None)
    if value:
        return str(value)
    return str(error)


def _status_code_or_none(code: str | None) -> str | None:
    if code and code.isascii() and code.isdigit():
        return code
    return None


def _xml_body_of(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return payload.get("error")
    if isinstance(payload, BaseException):
        return getattr(payload, "error", None)
    return None
