"""
Streaming dataclasses for the line-oriented event stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DATA_PREFIX = "data: "
COMMENT_PREFIX = ":"
DONE_SENTINEL = "[DONE]"


class ParserState(Enum):
    """States of the stream framing state machine."""
    READING = "reading"    # Waiting for more bytes
    FRAMING = "framing"    # Extracting complete lines from the buffer
    DONE = "done"          # Sentinel seen or stream finished
    FAILED = "failed"      # Transport failure, no further input accepted


class FrameType(Enum):
    """Kinds of decoded event lines."""
    COMMENT = "comment"
    BLANK = "blank"
    DATA = "data"
    DONE = "done"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Frame:
    """A single decoded event line."""
    frame_type: FrameType
    data: str = ""
    raw_line: str = ""

    @classmethod
    def from_line(cls, line: str) -> Frame:
        """Classify one line (trailing newline already removed)."""
        if line.endswith("\r"):
            line = line[:-1]

        if line.strip() == "":
            return cls(FrameType.BLANK, raw_line=line)
        if line.startswith(COMMENT_PREFIX):
            return cls(FrameType.COMMENT, raw_line=line)
        if not line.startswith(DATA_PREFIX):
            return cls(FrameType.IGNORED, raw_line=line)

        data = line[len(DATA_PREFIX):].strip()
        if not data:
            # Heartbeat
            return cls(FrameType.BLANK, raw_line=line)
        if data == DONE_SENTINEL:
            return cls(FrameType.DONE, data=data, raw_line=line)
        return cls(FrameType.DATA, data=data, raw_line=line)


@dataclass
class ParserStats:
    """Counters for monitoring a single stream."""
    total_frames: int = 0
    data_frames: int = 0
    deltas: int = 0
    rebuffered_lines: int = 0
    discarded_lines: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total_frames": self.total_frames,
            "data_frames": self.data_frames,
            "deltas": self.deltas,
            "rebuffered_lines": self.rebuffered_lines,
            "discarded_lines": self.discarded_lines,
        }
