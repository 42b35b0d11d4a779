"""
Upstream chat-completion gateway client.

One request per relayed turn, streaming enabled, no retries. Failure
statuses are classified here, once, and raised as relay errors.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from chat_relay.llm.exceptions import error_for_status
from chat_relay.llm.models import GatewayRequest
from chat_relay.relay.prompts import SYSTEM_PROMPT

logger = structlog.get_logger(__name__)

LOG_PREVIEW_CHARS = 200


def build_http_client(http_config: dict[str, Any]) -> httpx.AsyncClient:
    """Create the shared gateway HTTP client from validated configuration."""
    timeout = httpx.Timeout(
        connect=http_config["connect_timeout"],
        read=http_config["read_timeout"],
        write=http_config["write_timeout"],
        pool=http_config["pool_timeout"],
    )
    limits = httpx.Limits(
        max_connections=http_config["max_connections"],
        max_keepalive_connections=http_config["max_keepalive"],
    )
    return httpx.AsyncClient(timeout=timeout, limits=limits)


class GatewayClient:
    """Forwards a conversation to the upstream gateway under a server-held key."""

    def __init__(
        self,
        config: dict[str, Any],
        http_client: httpx.AsyncClient | None = None,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self.url: str = config["url"]
        self.model: str = config["model"]
        self.system_prompt = system_prompt
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=None)

    def build_payload(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        """Upstream request body: system instruction, then the conversation."""
        return GatewayRequest.with_system_prompt(
            self.model, self.system_prompt, messages
        ).to_dict()

    async def open_stream(
        self, messages: list[dict[str, Any]], api_key: str
    ) -> httpx.Response:
        """
        Send the conversation upstream and return the open streaming response.

        The caller owns the returned response and must close it.

        Raises:
            RateLimitError: Upstream answered 429.
            ServiceUnavailableError: Upstream answered 402.
            GatewayError: Any other non-success status.
        """
        logger.info(
            "Sending request to AI gateway",
            model=self.model,
            message_count=len(messages),
            messages=json.dumps(messages, ensure_ascii=False)[:LOG_PREVIEW_CHARS],
        )

        request = self.http_client.build_request(
            "POST",
            self.url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json=self.build_payload(messages),
        )
        response = await self.http_client.send(request, stream=True)

        if not response.is_success:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            finally:
                await response.aclose()
            logger.error(
                "AI gateway error",
                status_code=response.status_code,
                body=body[:LOG_PREVIEW_CHARS],
            )
            raise error_for_status(response.status_code, body)

        logger.info("AI gateway response received, streaming")
        return response

    async def close(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> GatewayClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
