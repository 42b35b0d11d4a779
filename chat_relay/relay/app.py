"""
Relay endpoint: proxies a conversation to the upstream gateway and pipes the
event stream back to the caller unmodified.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from chat_relay.chat.models import ChatRequest
from chat_relay.config import Configuration
from chat_relay.logging_utils import RelayErrorHandler
from chat_relay.relay.gateway import GatewayClient, build_http_client

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

EVENT_STREAM_HEADERS = {**CORS_HEADERS, "Content-Type": "text/event-stream"}


async def _relay_body(upstream: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    finally:
        await upstream.aclose()


def create_app(
    configuration: Configuration, gateway: GatewayClient | None = None
) -> FastAPI:
    """
    Build the relay application.

    When no gateway is given, the lifespan creates one backed by a shared
    HTTP client configured from ``gateway.http_client``.
    """
    path = configuration.get_relay_config()["path"]

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "gateway", None) is not None:
            yield
            return

        http_client = build_http_client(configuration.get_http_client_config())
        app.state.gateway = GatewayClient(
            configuration.get_gateway_config(), http_client
        )
        try:
            yield
        finally:
            await http_client.aclose()

    app = FastAPI(
        title="SportAI Chat Relay",
        description="Streams chat completions from the AI gateway to the browser",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.gateway = gateway

    @app.options(path)
    async def chat_preflight() -> Response:
        return Response(headers=CORS_HEADERS)

    @app.post(path)
    async def chat(request: Request) -> Response:
        try:
            body = ChatRequest.model_validate_json(await request.body())
            api_key = configuration.gateway_api_key
            upstream = await request.app.state.gateway.open_stream(
                [m.model_dump() for m in body.messages], api_key
            )
        except Exception as e:
            status, payload = RelayErrorHandler.error_response(e, "relay_chat")
            return JSONResponse(payload, status_code=status, headers=CORS_HEADERS)

        return StreamingResponse(_relay_body(upstream), headers=EVENT_STREAM_HEADERS)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app
