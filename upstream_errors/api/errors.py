"""Error normalization API routes."""

from __future__ import annotations

from fastapi import APIRouter

from upstream_errors.schemas.record import ErrorRecordResponse
from upstream_errors.schemas.record import NormalizeErrorRequest
from upstream_errors.services.errors import normalize_error_service

router = APIRouter(prefix="/api/v1", tags=["errors"])


@router.post("/errors/normalize", response_model=ErrorRecordResponse)
def normalize_error_endpoint(payload: NormalizeErrorRequest) -> ErrorRecordResponse:
    """Normalize a raw upstream error payload into an error record."""
    return normalize_error_service(payload)
