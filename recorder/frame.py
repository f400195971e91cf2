"""Reading fixed-size audio frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class DualFrame:
    """One system-audio frame and one microphone frame."""

    sys: bytes
    mic: bytes


def read_frame(reader: BinaryIO, frame_bytes: int) -> bytes:
    """Read exactly one frame of ``frame_bytes`` bytes.

    Raises EOFError if the stream ends before the frame is complete.
    """
    buf = bytearray()
    while len(buf) < frame_bytes:
        chunk = reader.read(frame_bytes - len(buf))
        if not chunk:
            if buf:
                raise EOFError(f"unexpected end of stream after {len(buf)} of {frame_bytes} bytes")
            raise EOFError("end of stream")
        buf += chunk
    return bytes(buf)


def silent(frame_bytes: int) -> bytes:
    """Return a zero-filled frame representing silence."""
    return bytes(frame_bytes)