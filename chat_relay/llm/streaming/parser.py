"""
Line-oriented event stream parser with partial-frame recovery.

The parser is an explicit state machine (READING -> FRAMING -> READING ...
-> DONE | FAILED). Bytes are decoded incrementally, complete lines are framed,
and data payloads whose JSON does not parse yet are pushed back onto the
buffer until more bytes arrive.
"""

from __future__ import annotations

import codecs
import json
from typing import Any

import structlog

from .models import Frame, FrameType, ParserState, ParserStats

logger = structlog.get_logger(__name__)


def extract_delta(payload: Any) -> str | None:
    """Return the incremental text of a chat-completion chunk, if any."""
    try:
        content = payload["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(content, str) and content:
        return content
    return None


class StreamFrameParser:
    """Incremental parser turning raw stream chunks into text deltas."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self.state = ParserState.READING
        self.stats = ParserStats()
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._pending_line: str | None = None

    @property
    def buffer(self) -> str:
        """Text received but not yet consumed."""
        return self._buffer

    @property
    def is_done(self) -> bool:
        return self.state in (ParserState.DONE, ParserState.FAILED)

    def feed(self, chunk: bytes | str) -> list[str]:
        """Consume one network chunk and return the deltas it completed."""
        if self.is_done:
            return []

        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk
        return self._drain(final=False)

    def finish(self) -> list[str]:
        """Signal end of stream and flush whatever is still buffered."""
        if self.is_done:
            return []

        self._buffer += self._decoder.decode(b"", final=True)
        deltas = self._drain(final=True)
        self.state = ParserState.DONE
        return deltas

    def fail(self, error: BaseException | str) -> None:
        """Stop accepting input after a transport failure."""
        logger.warning(
            "Stream parser failed",
            error=str(error),
            buffered_chars=len(self._buffer),
        )
        self.state = ParserState.FAILED

    def _drain(self, *, final: bool) -> list[str]:
        deltas: list[str] = []
        self.state = ParserState.FRAMING

        while self.state is ParserState.FRAMING:
            newline = self._buffer.find("\n")
            if newline == -1:
                if not (final and self._buffer):
                    self.state = ParserState.READING
                    break
                line, self._buffer = self._buffer, ""
            else:
                line = self._buffer[:newline]
                self._buffer = self._buffer[newline + 1:]

            frame = Frame.from_line(line)
            self.stats.total_frames += 1

            if frame.frame_type is FrameType.DONE:
                # Anything after the sentinel is never parsed
                self._buffer = ""
                self.state = ParserState.DONE
                break

            if frame.frame_type is not FrameType.DATA:
                continue

            self.stats.data_frames += 1
            try:
                payload = json.loads(frame.data)
            except json.JSONDecodeError:
                if final or (line == self._pending_line and "\n" in self._buffer):
                    # Still unparseable with complete lines behind it: corrupt
                    self.stats.discarded_lines += 1
                    self._pending_line = None
                    logger.debug("Discarding malformed data line", line=line[:200])
                    continue

                self._buffer = line + "\n" + self._buffer
                self._pending_line = line
                self.stats.rebuffered_lines += 1
                self.state = ParserState.READING
                break

            self._pending_line = None
            delta = extract_delta(payload)
            if delta:
                self.stats.deltas += 1
                deltas.append(delta)

        return deltas

    def get_stats(self) -> dict[str, int]:
        """Get parser statistics for monitoring."""
        return self.stats.as_dict()

    def reset(self) -> None:
        """Reset parser state for a new stream."""
        self.state = ParserState.READING
        self.stats = ParserStats()
        self._decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
        self._buffer = ""
        self._pending_line = None
