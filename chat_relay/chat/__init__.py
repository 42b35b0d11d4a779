"""
Client side of the chat relay: transcript state and the stream consumer.
"""

from __future__ import annotations

from .consumer import ChatSession, StreamConsumer
from .models import ChatRequest, ErrorBody, Message
from .transcript import Transcript

__all__ = [
    "ChatRequest",
    "ChatSession",
    "ErrorBody",
    "Message",
    "StreamConsumer",
    "Transcript",
]
