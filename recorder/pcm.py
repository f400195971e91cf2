"""Helpers for signed 16-bit little-endian mono PCM audio."""

from __future__ import annotations

import math
import struct

SAMPLE_RATE = 16000
FRAME_BYTES = SAMPLE_RATE * 2  # one second of s16le mono


def compute_rms(data: bytes | bytearray | None) -> float:
    """Return the RMS amplitude of 16-bit LE PCM data, normalised to [0, 1]."""
    if not data or len(data) < 2:
        return 0.0
    n = len(data) // 2
    sum_sq = sum(sample * sample for (sample,) in struct.iter_unpack("<h", data[: n * 2]))
    return math.sqrt(sum_sq / n) / 32768.0


def frame_count(pcm: bytes | bytearray | None, frame_bytes: int) -> int:
    """Return the number of complete frames in ``pcm``."""
    if frame_bytes <= 0:
        return 0
    return len(pcm or b"") // frame_bytes


def trim_trailing_frames(pcm: bytes | bytearray, frames: int, frame_bytes: int) -> bytes | bytearray:
    """Drop ``frames`` trailing frames, unless that would remove everything."""
    if frames <= 0 or frame_bytes <= 0:
        return pcm
    trim_bytes = frames * frame_bytes
    if 0 < trim_bytes < len(pcm):
        return pcm[: len(pcm) - trim_bytes]
    return pcm