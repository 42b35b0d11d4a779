"""
Gateway request dataclasses.

The upstream gateway speaks the OpenAI-compatible chat-completion format;
only the fields the relay sends are modelled here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class GatewayMessage:
    """A single message in the upstream request."""
    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class GatewayRequest:
    """Complete upstream chat-completion request."""
    model: str
    messages: list[GatewayMessage] = field(default_factory=list)
    stream: bool = True

    @classmethod
    def with_system_prompt(
        cls,
        model: str,
        system_prompt: str,
        messages: list[dict[str, Any]],
    ) -> GatewayRequest:
        """Prepend the system instruction to the caller's conversation."""
        gateway_messages = [GatewayMessage(MessageRole.SYSTEM, system_prompt)]
        gateway_messages.extend(
            GatewayMessage(MessageRole(m["role"]), m["content"]) for m in messages
        )
        return cls(model=model, messages=gateway_messages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "stream": self.stream,
        }
