"""Upstream proxy routes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request

from upstream_errors.core.config import UpstreamSettings
from upstream_errors.core.config import get_upstream_settings
from upstream_errors.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["upstream"])


def get_upstream_client(settings: UpstreamSettings = Depends(get_upstream_settings)) -> UpstreamClient:
    """Build an upstream client from runtime settings."""
    logger.info("Using upstream settings=%s", settings.safe_for_logging())
    return UpstreamClient(
        base_url=settings.base_url,
        api_token=settings.api_token,
        timeout_seconds=settings.timeout_seconds,
    )


@router.get("/upstream/{path:path}")
def proxy_upstream_endpoint(
    path: str,
    request: Request,
    client: UpstreamClient = Depends(get_upstream_client),
) -> Any:
    """Forward a GET to the upstream service; failures use the error envelope."""
    correlation_id = request.headers.get("X-Correlation-ID")
    logger.info("Proxying upstream request path=%s correlation_id=%s", path, correlation_id)

    body = client.get(path, params=request.query_params, context=correlation_id)

    logger.info("Completed upstream request path=%s", path)
    return body
