# chat_relay/chat/models.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """One turn of the conversation."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Relay request body."""
    messages: list[Message]


class ErrorBody(BaseModel):
    """Relay error body."""
    error: str
