"""
Centralized logging and error handling utilities for the chat relay.

This module provides decorators and helper functions to standardize logging
and error reporting across the relay and the stream consumer.

Features:
- Structured logging with contextual information
- Classification of errors into caller-facing HTTP statuses
- Performance timing for operations
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from chat_relay.llm.exceptions import (
    ChatTurnError,
    ConfigurationError,
    GatewayError,
    LLMError,
    RateLimitError,
    ServiceUnavailableError,
    StreamingError,
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")
AsyncCallable = Callable[P, Awaitable[T]]

logger = structlog.get_logger(__name__)

_LLM_ERROR_CATEGORIES: dict[type[LLMError], str] = {
    ConfigurationError: "configuration_error",
    RateLimitError: "rate_limit_error",
    ServiceUnavailableError: "service_unavailable_error",
    GatewayError: "gateway_error",
    StreamingError: "streaming_error",
    ChatTurnError: "chat_turn_error",
}


def configure_logging(logging_config: dict[str, Any] | None = None) -> None:
    """Apply the configured level to the stdlib root logger structlog writes to."""
    level_name = str((logging_config or {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level '{level_name}'")
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)


class RelayErrorHandler:
    """Maps exceptions onto caller-facing statuses with structured logging."""

    @staticmethod
    def classify_error(error: Exception) -> tuple[int, str]:
        """
        Classify an error and return the HTTP status and error category.

        Args:
            error: The exception to classify

        Returns:
            Tuple of (http_status, error_category)
        """
        if isinstance(error, LLMError):
            category = _LLM_ERROR_CATEGORIES.get(type(error), "llm_error")
            return int(error.status_code), category
        if isinstance(error, ValidationError):
            return HTTPStatus.INTERNAL_SERVER_ERROR, "validation_error"
        if isinstance(error, TimeoutError | httpx.TimeoutException):
            return HTTPStatus.INTERNAL_SERVER_ERROR, "timeout_error"
        if isinstance(error, ConnectionError | OSError | httpx.TransportError):
            return HTTPStatus.INTERNAL_SERVER_ERROR, "connection_error"
        if isinstance(error, ValueError | TypeError):
            return HTTPStatus.INTERNAL_SERVER_ERROR, "parameter_error"
        return HTTPStatus.INTERNAL_SERVER_ERROR, "unknown_error"

    @staticmethod
    def error_message(error: Exception) -> str:
        """User-facing message for an error body."""
        if isinstance(error, LLMError):
            return error.message
        return str(error) or "Unknown error occurred"

    @staticmethod
    def error_response(
        error: Exception,
        operation: str,
        context: dict[str, Any] | None = None,
    ) -> tuple[int, dict[str, str]]:
        """
        Log an error with context and build the caller-facing response.

        Returns:
            Tuple of (http_status, {"error": message})
        """
        status, error_category = RelayErrorHandler.classify_error(error)

        logger.error(
            "Operation failed",
            operation=operation,
            error_type=type(error).__name__,
            error_category=error_category,
            status_code=status,
            error_message=str(error),
            **(context or {}),
        )

        return status, {"error": RelayErrorHandler.error_message(error)}


def log_operation(
    operation: str,
    *,
    log_args: bool = False,
    log_result: bool = False,
    log_timing: bool = True,
    context: dict[str, Any] | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator for logging async operations with structured context.

    Args:
        operation: Description of the operation being performed
        log_args: Whether to log function arguments
        log_result: Whether to log function result
        log_timing: Whether to log execution timing
        context: Additional context to include in logs

    Returns:
        Decorated function with logging
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )

            log_data = {}
            if log_args:
                log_data.update({
                    "args": args[1:] if args else [],  # Skip 'self' if present
                    "kwargs": kwargs,
                })

            operation_logger.info("Operation started", **log_data)

            start_time = time.perf_counter() if log_timing else None

            try:
                result = await func(*args, **kwargs)

                end_log_data: dict[str, Any] = {}
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    end_log_data["duration_ms"] = duration
                if log_result:
                    end_log_data["result"] = result

                operation_logger.info(
                    "Operation completed successfully", **end_log_data
                )
                return result

            except Exception as e:
                error_log_data: dict[str, Any] = {
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                }
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    error_log_data["duration_ms"] = duration

                operation_logger.error("Operation failed", **error_log_data)
                raise

        return wrapper
    return decorator


@asynccontextmanager
async def operation_context(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
    log_timing: bool = True,
):
    """
    Async context manager for operation logging.

    Args:
        operation: Description of the operation
        context: Additional context for logging
        log_timing: Whether to log operation timing

    Yields:
        Bound logger for the operation
    """
    operation_logger = logger.bind(
        operation=operation,
        **(context or {}),
    )

    operation_logger.info("Operation started")
    start_time = time.perf_counter() if log_timing else None

    try:
        yield operation_logger

        log_data: dict[str, Any] = {}
        if log_timing and start_time is not None:
            duration = round((time.perf_counter() - start_time) * 1000, 2)
            log_data["duration_ms"] = duration

        operation_logger.info("Operation completed successfully", **log_data)

    except Exception as e:
        error_log_data: dict[str, Any] = {
            "error_type": type(e).__name__,
            "error_message": str(e),
        }
        if log_timing and start_time is not None:
            duration = round((time.perf_counter() - start_time) * 1000, 2)
            error_log_data["duration_ms"] = duration

        operation_logger.error("Operation failed", **error_log_data)
        raise


class ContextualLogger:
    """Logger that maintains context across related operations."""

    def __init__(self, base_context: dict[str, Any] | None = None):
        self.base_context = base_context or {}
        self._logger = logger.bind(**self.base_context)

    def bind(self, **context: Any) -> ContextualLogger:
        """Create a new logger with additional context."""
        merged_context = {**self.base_context, **context}
        return ContextualLogger(merged_context)

    def info(self, message: str, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._logger.error(message, **context)

    def debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, **context)
