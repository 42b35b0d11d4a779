"""
Streaming support for chat-completion event streams.

This module contains:
- Line framing with partial-frame recovery
- Delta extraction from chat-completion chunks
"""

from __future__ import annotations

from .models import DONE_SENTINEL, Frame, FrameType, ParserState, ParserStats
from .parser import StreamFrameParser, extract_delta

__all__ = [
    "DONE_SENTINEL",
    "Frame",
    "FrameType",
    "ParserState",
    "ParserStats",
    "StreamFrameParser",
    "extract_delta",
]
