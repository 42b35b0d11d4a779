"""
Client-side stream consumer.

Sends the whole conversation to the relay on every user turn, reads the
event stream incrementally and folds each text delta into the transcript,
republishing the growing assistant message after every delta.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx

from chat_relay.chat.transcript import Transcript
from chat_relay.llm.exceptions import ChatTurnError, turn_error_message
from chat_relay.llm.streaming import StreamFrameParser
from chat_relay.logging_utils import ContextualLogger, log_operation

DEFAULT_CONNECT_TIMEOUT = 10.0
SEND_FAILED_MESSAGE = "Failed to send message"

UpdateCallback = Callable[[Transcript], None]
ErrorCallback = Callable[[str], None]


class StreamConsumer:
    """Issues one streaming relay call per turn and materializes the reply."""

    def __init__(
        self,
        config: dict[str, Any],
        access_token: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.relay_url: str = config["relay_url"]
        self.access_token = access_token
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                DEFAULT_CONNECT_TIMEOUT, read=config.get("read_timeout")
            )
        )

    @staticmethod
    def _error_field(response: httpx.Response) -> str | None:
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict) and isinstance(data.get("error"), str):
            return data["error"]
        return None

    @log_operation("stream_reply")
    async def stream_reply(
        self,
        transcript: Transcript,
        on_update: UpdateCallback | None = None,
    ) -> str:
        """
        Stream the assistant reply for the conversation in ``transcript``.

        The transcript must already end with the new user turn. It is left
        untouched when the relay rejects the request; once deltas have been
        folded in they are kept even if the stream later fails.

        Returns:
            The full assistant text received.

        Raises:
            ChatTurnError: The relay rejected the turn or the transport failed.
        """
        accumulated = ""
        parser = StreamFrameParser()

        def fold(deltas: list[str]) -> None:
            nonlocal accumulated
            for delta in deltas:
                accumulated += delta
                transcript.fold_delta(accumulated)
                if on_update is not None:
                    on_update(transcript)

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.access_token}",
        }

        try:
            async with self.http_client.stream(
                "POST", self.relay_url, json=transcript.to_payload(), headers=headers
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise ChatTurnError(
                        turn_error_message(
                            response.status_code, self._error_field(response)
                        ),
                        status_code=response.status_code,
                        upstream_status=response.status_code,
                    )

                async for chunk in response.aiter_bytes():
                    fold(parser.feed(chunk))
                    if parser.is_done:
                        break
                else:
                    fold(parser.finish())

        except httpx.HTTPError as e:
            parser.fail(e)
            raise ChatTurnError(f"{SEND_FAILED_MESSAGE}: {e}") from e
        finally:
            transcript.close_assistant_turn()

        return accumulated

    async def close(self) -> None:
        """Close the HTTP client if this consumer created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> StreamConsumer:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class ChatSession:
    """
    The single active conversation of a chat view.

    Only one turn may be in flight; ``send`` ignores input while a turn is
    streaming. Failures are reported through ``on_error`` and never raise,
    so the view keeps working and the user can resubmit.
    """

    def __init__(
        self,
        consumer: StreamConsumer,
        on_update: UpdateCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.consumer = consumer
        self.transcript = Transcript()
        self.on_update = on_update
        self.on_error = on_error
        self._task: asyncio.Task[str] | None = None
        self._logger = ContextualLogger({"component": "chat_session"})

    @property
    def is_loading(self) -> bool:
        return self._task is not None and not self._task.done()

    async def send(self, text: str) -> bool:
        """Append a user turn and stream the reply. Returns True on success."""
        content = text.strip()
        if not content or self.is_loading:
            return False

        self.transcript.append_user(content)
        if self.on_update is not None:
            self.on_update(self.transcript)

        self._task = asyncio.create_task(
            self.consumer.stream_reply(self.transcript, self.on_update)
        )
        try:
            await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            self._logger.info("Chat turn cancelled", messages=len(self.transcript))
            return False
        except Exception as e:
            message = str(e) or SEND_FAILED_MESSAGE
            self._logger.error(
                "Chat error", error_type=type(e).__name__, error_message=message
            )
            if self.on_error is not None:
                self.on_error(message)
            return False
        finally:
            self._task = None

        return True

    def cancel(self) -> bool:
        """Cancel the in-flight turn, keeping any partial reply."""
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        return True

    async def aclose(self) -> None:
        """Tear down the session: cancel the active turn and wait for it."""
        task = self._task
        if self.cancel() and task is not None:
            await asyncio.gather(task, return_exceptions=True)
