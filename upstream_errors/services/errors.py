"""Service layer for error normalization and upstream proxy workflows."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import status

from upstream_errors.core.errors import APIError
from upstream_errors.normalize.records import ErrorRecord
from upstream_errors.normalize.records import api_error
from upstream_errors.normalize.records import operation_error
from upstream_errors.schemas.error import ErrorDetail
from upstream_errors.schemas.record import ErrorRecordResponse
from upstream_errors.schemas.record import NormalizeErrorRequest


def normalize_error_service(payload: NormalizeErrorRequest) -> ErrorRecordResponse:
    if payload.kind == "operation":
        if not isinstance(payload.payload, (str, Mapping)):
            raise APIError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="validation_error",
                message="Operation errors require a message string or an error object",
                details=[ErrorDetail(field="payload", issue="Expected string or object")],
            )
        record = operation_error(payload.context, payload.payload)
    else:
        overrides = payload.overrides
        record = api_error(
            payload.context,
            payload.payload,
            message=overrides.message if overrides else None,
            description=overrides.description if overrides else None,
            http_code=overrides.http_code if overrides else None,
            parse_xml=overrides.parse_xml if overrides else False,
        )

    return to_record_response(record)


def to_record_response(record: ErrorRecord) -> ErrorRecordResponse:
    """Convert an error record to its API representation."""
    return ErrorRecordResponse(
        kind=record.kind,
        name=record.name,
        message=record.message,
        description=record.description,
        http_code=record.http_code,
        cause=_jsonable(record.cause),
        context=record.context,
        timestamp=record.timestamp,
    )


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseException):
        return {"type": type(value).__name__, "message": str(value)}
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value
