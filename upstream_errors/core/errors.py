"""API error envelope and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from upstream_errors.schemas.error import ErrorDetail
from upstream_errors.schemas.error import ErrorObject
from upstream_errors.schemas.error import ErrorResponse
from upstream_errors.upstream.client import UpstreamResponseError
from upstream_errors.upstream.client import UpstreamServiceError

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base application exception for explicit API error responses."""

    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Sequence[ErrorDetail] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = list(details) if details else None


def _build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Sequence[ErrorDetail] | None = None,
    description: str | None = None,
    upstream_status: str | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        error=ErrorObject(
            code=code,
            message=message,
            description=description,
            upstream_status=upstream_status,
            details=list(details) if details else None,
        )
    )
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "validation_error"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for issue in exc.errors():
        location = issue.get("loc", ())
        field = _format_location(location)
        message = str(issue.get("msg", "Invalid value"))
        details.append(ErrorDetail(field=field, issue=message))
    return details


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to the shared error envelope."""

    return _build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=_validation_details(exc),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize HTTP exceptions to the shared error envelope."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    return _build_error_response(
        status_code=exc.status_code,
        code=_http_error_code(exc.status_code),
        message=message,
    )


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    """Return explicit domain errors in the shared envelope."""

    return _build_error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def upstream_service_error_handler(_: Request, exc: UpstreamServiceError) -> JSONResponse:
    """Surface a normalized upstream failure as a bad gateway response."""

    record = exc.record
    return _build_error_response(
        status_code=status.HTTP_502_BAD_GATEWAY,
        code="upstream_error",
        message=record.message,
        description=record.description,
        upstream_status=record.http_code,
    )


async def upstream_response_error_handler(_: Request, exc: UpstreamResponseError) -> JSONResponse:
    """Report undecodable upstream success bodies as a bad gateway response."""

    return _build_error_response(
        status_code=status.HTTP_502_BAD_GATEWAY,
        code="upstream_error",
        message=str(exc),
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    logger.error("Unhandled exception", exc_info=exc)
    return _build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
        message="Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(UpstreamServiceError, upstream_service_error_handler)
    app.add_exception_handler(UpstreamResponseError, upstream_response_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
