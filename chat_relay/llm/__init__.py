"""
Chat-completion gateway integration.

This package provides:
- Dataclass models for gateway requests
- Error classification for upstream failures
- Incremental parsing of streamed responses
"""

from __future__ import annotations

from .exceptions import (
    ChatTurnError,
    ConfigurationError,
    GatewayError,
    LLMError,
    RateLimitError,
    ServiceUnavailableError,
    StreamingError,
    error_for_status,
    turn_error_message,
)
from .models import GatewayRequest, MessageRole

__all__ = [
    "ChatTurnError",
    "ConfigurationError",
    "GatewayError",
    "GatewayRequest",
    # Exceptions
    "LLMError",
    # Core models
    "MessageRole",
    "RateLimitError",
    "ServiceUnavailableError",
    "StreamingError",
    "error_for_status",
    "turn_error_message",
]
