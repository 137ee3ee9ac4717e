"""HTTP status code to human-readable message resolution."""

from __future__ import annotations

from typing import NamedTuple

UNKNOWN_ERROR_MESSAGE = "UNKNOWN ERROR - check the detailed error for more information"

CLIENT_ERROR_MESSAGE = "Your request is invalid or could not be processed by the service"
SERVER_ERROR_MESSAGE = "The service failed to process your request"

STATUS_CODE_MESSAGES: dict[str, str] = {
    "400": "Bad request - please check your parameters",
    "401": "Authorization failed - please check your credentials",
    "402": "Payment required - perhaps check your payment details?",
    "403": "Forbidden - perhaps check your credentials?",
    "404": "The resource you are requesting could not be found",
    "405": "Method not allowed - please check you are using the right HTTP method",
    "429": "The service is receiving too many requests from you! Perhaps take a break?",
    "500": "The service was not able to process your request",
    "502": "Bad gateway - the service failed to handle your request",
    "503": "Service unavailable - perhaps try again later?",
    "504": "Gateway timed out - perhaps try again later?",
}

_CLASS_MESSAGES: dict[str, str] = {
    "4": CLIENT_ERROR_MESSAGE,
    "5": SERVER_ERROR_MESSAGE,
}


class StatusResolution(NamedTuple):
    """Canonical status code and the message selected for it."""

    canonical_code: str | None
    message: str


def resolve_status(code: str | None) -> StatusResolution:
    """Map a located status code to a message, exact match first then by class."""
    if not code:
        return StatusResolution(None, UNKNOWN_ERROR_MESSAGE)

    exact = STATUS_CODE_MESSAGES.get(code)
    if exact is not None:
        return StatusResolution(code, exact)

    return StatusResolution(code, _CLASS_MESSAGES.get(code[0], UNKNOWN_ERROR_MESSAGE))
