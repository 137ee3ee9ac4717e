"""Ordered candidate key lists used when searching upstream error payloads."""

from __future__ import annotations

# Top-level properties where an error message can be found.
ERROR_MESSAGE_KEYS: tuple[str, ...] = (
    "error",
    "message",
    "Message",
    "msg",
    "messages",
    "description",
    "reason",
    "detail",
    "details",
    "errors",
    "errorMessage",
    "errorMessages",
    "ErrorMessage",
    "error_message",
    "_error_message",
    "errorDescription",
    "error_description",
    "error_summary",
    "title",
    "text",
    "field",
    "err",
    "type",
)

# Top-level properties where an HTTP status code can be found.
ERROR_STATUS_KEYS: tuple[str, ...] = (
    "statusCode",
    "status",
    "code",
    "status_code",
    "errorCode",
    "error_code",
)

# Properties that may hold a nested error object.
ERROR_NESTING_KEYS: tuple[str, ...] = ("error", "err", "response", "body", "data")

XML_TRAVERSAL_KEYS: tuple[str, ...] = ("Error", *ERROR_NESTING_KEYS)
