"""HTTP client that reports upstream failures as normalized error records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import logging

import requests

from upstream_errors.normalize.records import ErrorRecord
from upstream_errors.normalize.records import api_error
from upstream_errors.normalize.records import operation_error

logger = logging.getLogger(__name__)


class UpstreamClientError(RuntimeError):
    """Base error raised by upstream client operations."""


class UpstreamServiceError(UpstreamClientError):
    """Raised when an upstream call fails; carries the normalized record."""

    def __init__(self, record: ErrorRecord) -> None:
        super().__init__(record.message)
        self.record = record


class UpstreamResponseError(UpstreamClientError):
    """Raised when a successful upstream response cannot be decoded."""


class UpstreamClient:
    """Issue single-attempt requests against an upstream JSON API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_token: str,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        normalized = base_url.rstrip("/")
        if not normalized:
            raise ValueError("base_url is required")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._base_url = normalized
        self._api_token = api_token
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        context: Any = None,
    ) -> Any:
        """Fetch ``path`` and return the decoded JSON body.

        ``context`` is an opaque correlation token copied onto the error
        record of a failed call.
        """
        url = f"{self._base_url}/{path.lstrip('/')}"

        try:
            response = self._session.get(
                url,
                headers=self._headers(),
                params=dict(params) if params else None,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            record = operation_error(context, exc)
            logger.warning("Upstream request to %s failed: %s", url, record.message)
            raise UpstreamServiceError(record) from exc

        if response.status_code >= 400:
            record = api_error(
                context,
                self._error_payload(response),
                parse_xml=self._is_xml(response),
            )
            logger.warning(
                "Upstream request to %s failed with status %s: %s",
                url,
                response.status_code,
                record.description or record.message,
            )
            raise UpstreamServiceError(record)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamResponseError("Upstream payload must be JSON") from exc

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Accept": "application/json",
            "User-Agent": "upstream-errors/0.1",
        }

    @staticmethod
    def _error_payload(response: requests.Response) -> dict[str, Any]:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        return {"statusCode": response.status_code, "error": body}

    @staticmethod
    def _is_xml(response: requests.Response) -> bool:
        content_type = response.headers.get("Content-Type", "") if response.headers else ""
        return "xml" in content_type.lower()
