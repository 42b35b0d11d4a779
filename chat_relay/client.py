"""
Interactive terminal chat against a running relay.

Assistant text is printed as it streams in; failures are shown as a notice
and the conversation continues.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from chat_relay.chat.consumer import ChatSession, StreamConsumer
from chat_relay.chat.transcript import Transcript
from chat_relay.config import Configuration
from chat_relay.logging_utils import configure_logging

SUGGESTED_QUESTIONS = [
    "What cricket programs are available?",
    "How do I register as an athlete?",
    "Show me programs in Mumbai",
    "What are the eligibility criteria?",
]

EXIT_COMMANDS = {"/quit", "/exit"}


class TerminalView:
    """Renders transcript updates incrementally to a text stream."""

    def __init__(self, out=None) -> None:
        self.out = out or sys.stdout
        self._printed = 0
        self._index: int | None = None

    def on_update(self, transcript: Transcript) -> None:
        last = transcript.last
        if last is None or last.role != "assistant":
            self._index = None
            self._printed = 0
            return

        index = len(transcript) - 1
        if index != self._index:
            self._index = index
            self._printed = 0
            self.out.write("SportAI: ")

        self.out.write(last.content[self._printed:])
        self.out.flush()
        self._printed = len(last.content)

    def end_turn(self) -> None:
        if self._index is not None:
            self.out.write("\n")
            self.out.flush()
        self._index = None
        self._printed = 0

    def on_error(self, message: str) -> None:
        self.end_turn()
        self.out.write(f"[error] {message}\n")
        self.out.flush()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the SportAI assistant")
    parser.add_argument("--relay-url", help="Relay endpoint (overrides config)")
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    parser.add_argument("--message", help="Initial message to send")
    return parser.parse_args(argv)


async def chat_loop(args: argparse.Namespace) -> None:
    config = Configuration(args.config)
    configure_logging(config.get_logging_config())

    consumer_config = dict(config.get_consumer_config())
    if args.relay_url:
        consumer_config["relay_url"] = args.relay_url

    view = TerminalView()
    async with StreamConsumer(consumer_config, config.consumer_access_token) as consumer:
        session = ChatSession(consumer, on_update=view.on_update, on_error=view.on_error)

        print("SportAI Assistant - ask me anything about sports programs")
        print("Try: " + " | ".join(SUGGESTED_QUESTIONS))

        pending = args.message
        try:
            while True:
                text = pending if pending is not None else await asyncio.to_thread(input, "> ")
                pending = None
                if text.strip() in EXIT_COMMANDS:
                    break
                if await session.send(text):
                    view.end_turn()
        finally:
            await session.aclose()


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    try:
        asyncio.run(chat_loop(parse_args(argv)))
    except (KeyboardInterrupt, EOFError):
        print()


if __name__ == "__main__":
    main()
