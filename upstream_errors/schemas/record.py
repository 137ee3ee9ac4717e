"""Pydantic schemas for error normalization API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from typing import Literal

from pydantic import BaseModel

from upstream_errors.normalize.records import ErrorKind

RecordKind = Literal["api", "operation"]


class ErrorOverrides(BaseModel):
    """Explicit values that take precedence over payload lookups."""

    message: str | None = None
    description: str | None = None
    http_code: str | None = None
    parse_xml: bool = False


class NormalizeErrorRequest(BaseModel):
    """Raw upstream failure to normalize."""

    kind: RecordKind = "api"
    context: Any = None
    payload: Any = None
    overrides: ErrorOverrides | None = None


class ErrorRecordResponse(BaseModel):
    """Normalized error record response payload."""

    kind: ErrorKind
    name: str
    message: str
    description: str | None = None
    http_code: str | None = None
    cause: Any = None
    context: Any = None
    timestamp: datetime
