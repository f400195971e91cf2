"""WAV container for raw PCM."""

from __future__ import annotations

import struct


def make_wav(pcm: bytes | bytearray | None, sample_rate: int) -> bytes:
    """Wrap mono 16-bit PCM data in a 44-byte WAV header."""
    pcm = bytes(pcm or b"")
    data_size = len(pcm)
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        1,
        1,
        sample_rate,
        sample_rate * 2,
        2,
        16,
        b"data",
        data_size,
    )
    return header + pcm