"""Shared pytest fixtures: streamed upstream responses and relay configuration."""

import asyncio

import httpx
import pytest

from chat_relay.config import Configuration

GATEWAY_KEY_ENV = "LOVABLE_API_KEY"


class ChunkStream(httpx.AsyncByteStream):
    """Response body delivered in the given network chunks."""

    def __init__(
        self,
        chunks: list[bytes | str],
        gate: asyncio.Event | None = None,
        gate_after: int = 1,
        error: Exception | None = None,
    ) -> None:
        self.chunks = [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]
        self.gate = gate
        self.gate_after = gate_after
        self.error = error

    async def __aiter__(self):
        for index, chunk in enumerate(self.chunks):
            if self.gate is not None and index == self.gate_after:
                await self.gate.wait()
            yield chunk
        if self.error is not None:
            raise self.error


@pytest.fixture
def sse_response():
    """Factory for event-stream responses split into explicit chunks."""
    def factory(chunks, status_code: int = 200, **stream_kwargs) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers={"Content-Type": "text/event-stream"},
            stream=ChunkStream(chunks, **stream_kwargs),
        )
    return factory


@pytest.fixture
def configuration(monkeypatch) -> Configuration:
    """Default configuration with the gateway credential present."""
    monkeypatch.setenv(GATEWAY_KEY_ENV, "gateway-secret")
    return Configuration()
