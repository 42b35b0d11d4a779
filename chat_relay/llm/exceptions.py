"""
Error handling for the chat relay and its stream consumer.

This module provides the error hierarchy shared by both sides of the relay:
- Configuration errors raised before any network call
- Upstream gateway failures classified by HTTP status
- Consumer-side turn failures carrying a user-facing message
"""

from __future__ import annotations

from http import HTTPStatus

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a moment."
UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again later."
NOT_CONFIGURED_MESSAGE = "AI service is not configured"

TURN_RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment and try again."
TURN_UNAVAILABLE_MESSAGE = UNAVAILABLE_MESSAGE
TURN_FAILED_MESSAGE = "Failed to get response"


class LLMError(Exception):
    """Base relay error carrying the status reported to the caller."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        upstream_status: int | None = None,
        response_data: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.upstream_status = upstream_status
        self.response_data = response_data


class ConfigurationError(LLMError):
    """Server-side configuration is missing (e.g. the gateway credential)."""
    pass


class RateLimitError(LLMError):
    """Upstream gateway throttled the request (HTTP 429)."""

    status_code = HTTPStatus.TOO_MANY_REQUESTS


class ServiceUnavailableError(LLMError):
    """Upstream gateway refused for capacity or billing reasons (HTTP 402)."""

    status_code = HTTPStatus.PAYMENT_REQUIRED


class GatewayError(LLMError):
    """Any other non-success status from the upstream gateway."""
    pass


class StreamingError(LLMError):
    """Streaming-specific errors."""
    pass


class ChatTurnError(LLMError):
    """A chat turn failed on the consumer side; message is user-facing."""
    pass


def error_for_status(status: int, body: str | None = None) -> LLMError:
    """Classify a non-success upstream status into a relay error."""
    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return RateLimitError(
            RATE_LIMIT_MESSAGE, upstream_status=status, response_data=body
        )
    if status == HTTPStatus.PAYMENT_REQUIRED:
        return ServiceUnavailableError(
            UNAVAILABLE_MESSAGE, upstream_status=status, response_data=body
        )
    return GatewayError(
        f"AI gateway error: {status}", upstream_status=status, response_data=body
    )


def turn_error_message(status: int, error: str | None = None) -> str:
    """Pick the message shown to the user when the relay rejects a turn."""
    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return TURN_RATE_LIMIT_MESSAGE
    if status == HTTPStatus.PAYMENT_REQUIRED:
        return TURN_UNAVAILABLE_MESSAGE
    return error or TURN_FAILED_MESSAGE
