#!/usr/bin/env python3
"""
Tests for the relay endpoint.

The FastAPI app is driven in-process through httpx.ASGITransport and the
upstream gateway is an httpx MockTransport.
"""

import json

import httpx
import pytest

from chat_relay.relay.app import create_app
from chat_relay.relay.gateway import GatewayClient
from chat_relay.relay.prompts import SYSTEM_PROMPT

ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
UPSTREAM_BODY = (
    b': OPENROUTER PROCESSING\n\n'
    b'data: {"choices":[{"delta":{"content":"Hello"}}]}\n\n'
    b'data: {"choices":[{"delta":{"content":" there!"}}]}\n\n'
    b"data: [DONE]\n\n"
)


class UpstreamRecorder:
    """Mock gateway handler recording every request it receives."""

    def __init__(self, response_factory):
        self.response_factory = response_factory
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response_factory()


def relay_client(configuration, upstream: UpstreamRecorder) -> httpx.AsyncClient:
    gateway = GatewayClient(
        configuration.get_gateway_config(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
    )
    app = create_app(configuration, gateway=gateway)
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://relay.test"
    )


def assert_cors(response: httpx.Response) -> None:
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Headers"] == ALLOW_HEADERS


class TestRelayEndpoint:
    """Test request forwarding and stream pass-through."""

    @pytest.mark.asyncio
    async def test_streams_upstream_body_verbatim(self, configuration, sse_response):
        upstream = UpstreamRecorder(
            lambda: sse_response([UPSTREAM_BODY[:30], UPSTREAM_BODY[30:]])
        )

        async with relay_client(configuration, upstream) as client:
            response = await client.post(
                "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
            )

        assert response.status_code == 200
        assert response.headers["Content-Type"].startswith("text/event-stream")
        assert_cors(response)
        assert response.content == UPSTREAM_BODY

    @pytest.mark.asyncio
    async def test_injects_system_prompt_and_credential(self, configuration, sse_response):
        upstream = UpstreamRecorder(lambda: sse_response([b"data: [DONE]\n\n"]))
        messages = [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "Cricket camps?"},
        ]

        async with relay_client(configuration, upstream) as client:
            await client.post("/chat", json={"messages": messages})

        assert len(upstream.requests) == 1
        request = upstream.requests[0]
        assert str(request.url) == "https://ai.gateway.lovable.dev/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer gateway-secret"
        assert json.loads(request.content) == {
            "model": "google/gemini-2.5-flash",
            "messages": [{"role": "system", "content": SYSTEM_PROMPT}, *messages],
            "stream": True,
        }

    @pytest.mark.asyncio
    async def test_preflight(self, configuration):
        upstream = UpstreamRecorder(lambda: httpx.Response(500))

        async with relay_client(configuration, upstream) as client:
            response = await client.options("/chat")

        assert response.status_code == 200
        assert response.content == b""
        assert_cors(response)
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_health(self, configuration):
        async with relay_client(configuration, UpstreamRecorder(lambda: httpx.Response(500))) as client:
            response = await client.get("/health")

        assert response.json() == {"status": "ok"}


class TestRelayErrors:
    """Test upstream status mapping and configuration failures."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("upstream_status, relay_status, fragment", [
        (429, 429, "Rate limit"),
        (402, 402, "unavailable"),
        (500, 500, "500"),
        (503, 500, "503"),
        (401, 500, "401"),
    ])
    async def test_status_mapping(self, configuration, upstream_status, relay_status, fragment):
        upstream = UpstreamRecorder(
            lambda: httpx.Response(upstream_status, json={"error": {"message": "upstream says no"}})
        )

        async with relay_client(configuration, upstream) as client:
            response = await client.post(
                "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
            )

        assert response.status_code == relay_status
        assert response.headers["Content-Type"] == "application/json"
        assert_cors(response)
        assert fragment in response.json()["error"]
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_generic_failure_message(self, configuration):
        upstream = UpstreamRecorder(lambda: httpx.Response(503, text="overloaded"))

        async with relay_client(configuration, upstream) as client:
            response = await client.post(
                "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
            )

        assert response.json() == {"error": "AI gateway error: 503"}

    @pytest.mark.asyncio
    async def test_missing_credential_fails_before_upstream(self, configuration, monkeypatch):
        monkeypatch.delenv("LOVABLE_API_KEY")
        upstream = UpstreamRecorder(lambda: httpx.Response(200))

        async with relay_client(configuration, upstream) as client:
            response = await client.post(
                "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "AI service is not configured"}
        assert_cors(response)
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_invalid_body(self, configuration):
        upstream = UpstreamRecorder(lambda: httpx.Response(200))

        async with relay_client(configuration, upstream) as client:
            response = await client.post("/chat", content=b"not json")

        assert response.status_code == 500
        assert "error" in response.json()
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_upstream_unreachable(self, configuration):
        def unreachable() -> httpx.Response:
            raise httpx.ConnectError("name resolution failed")

        upstream = UpstreamRecorder(unreachable)

        async with relay_client(configuration, upstream) as client:
            response = await client.post(
                "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "name resolution failed"}
