"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_UPSTREAM_BASE_URL = "https://upstream.example.com"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    return float(raw)


def redact_secret(secret: str) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class UpstreamSettings:
    """Runtime settings for calls to the upstream service."""

    base_url: str
    api_token: str
    timeout_seconds: float

    def safe_for_logging(self) -> dict[str, str | float]:
        """Return upstream settings safe for logs."""
        return {
            "base_url": self.base_url,
            "api_token": redact_secret(self.api_token),
            "timeout_seconds": self.timeout_seconds,
        }


@lru_cache(maxsize=1)
def get_upstream_settings() -> UpstreamSettings:
    """Load upstream settings from the environment."""
    return UpstreamSettings(
        base_url=os.getenv("UPSTREAM_ERRORS_BASE_URL", DEFAULT_UPSTREAM_BASE_URL),
        api_token=os.getenv("UPSTREAM_ERRORS_API_TOKEN", ""),
        timeout_seconds=_get_float_env("UPSTREAM_ERRORS_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS),
    )
