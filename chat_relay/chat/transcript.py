"""
In-memory conversation transcript with an explicit open assistant turn.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from chat_relay.chat.models import Message


class Transcript:
    """
    Ordered conversation held only for the active session.

    The open assistant handle is the index of the assistant message currently
    being extended by streamed deltas. It is set when a fold creates a new
    assistant message and cleared when a user message is appended or the
    turn is closed, so a new user turn always gets a fresh assistant reply.
    """

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])
        self._open_assistant: int | None = None

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    @property
    def open_assistant_index(self) -> int | None:
        return self._open_assistant

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def append_user(self, content: str) -> Message:
        message = Message(role="user", content=content)
        self._messages.append(message)
        self._open_assistant = None
        return message

    def fold_delta(self, accumulated: str) -> Message:
        """Publish the accumulated assistant text for the current turn."""
        message = Message(role="assistant", content=accumulated)
        if self._open_assistant is None:
            self._messages.append(message)
            self._open_assistant = len(self._messages) - 1
        else:
            self._messages[self._open_assistant] = message
        return message

    def close_assistant_turn(self) -> None:
        self._open_assistant = None

    def clear(self) -> None:
        self._messages.clear()
        self._open_assistant = None

    def to_payload(self) -> dict[str, Any]:
        """Relay request body for the whole conversation."""
        return {"messages": [m.model_dump() for m in self._messages]}
