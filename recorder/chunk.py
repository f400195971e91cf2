"""Accumulation of dual-channel PCM into transcription chunks."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

from recorder.pcm import FRAME_BYTES, trim_trailing_frames

DEFAULT_MIN_SECS = 10
DEFAULT_MAX_SECS = 45
DEFAULT_SILENT_DISCARD_SEC = 5
DEFAULT_SILENCE_EMIT_SEC = 1


class Action(enum.Enum):
    """What the accumulator decided after ingesting a frame."""

    NONE = enum.auto()
    EMIT = enum.auto()
    DISCARD = enum.auto()


@dataclass(frozen=True)
class ChunkConfig:
    """Chunk boundary tuning parameters."""

    frame_bytes: int = FRAME_BYTES
    min_secs: int = DEFAULT_MIN_SECS
    max_secs: int = DEFAULT_MAX_SECS
    silent_discard_sec: int = DEFAULT_SILENT_DISCARD_SEC
    silence_emit_sec: int = DEFAULT_SILENCE_EMIT_SEC


def default_config() -> ChunkConfig:
    """Return production chunk accumulation settings."""
    return ChunkConfig()


@dataclass(frozen=True)
class ChunkOutput:
    """Result of ingesting one frame or flushing buffered audio."""

    action: Action = Action.NONE
    sys_pcm: bytes = b""
    mic_pcm: bytes = b""
    start_time: datetime | None = None
    consecutive_silent_secs: int = 0
    has_speech: bool = False


class Accumulator:
    """Buffers dual-channel PCM and decides when to emit or discard chunks."""

    def __init__(self, cfg: ChunkConfig) -> None:
        self._cfg = cfg
        self._sys_buf = bytearray()
        self._mic_buf = bytearray()
        self._has_speech = False
        self._consecutive_silent_secs = 0
        self._chunk_start_time: datetime | None = None

    def ingest(self, sys: bytes, mic: bytes, at: datetime, has_speech: bool) -> ChunkOutput:
        """Append one frame and update speech and silence tracking."""
        if self._chunk_start_time is None:
            self._chunk_start_time = at
        self._sys_buf += sys
        self._mic_buf += mic

        if has_speech:
            self._has_speech = True
            self._consecutive_silent_secs = 0
        else:
            self._consecutive_silent_secs += 1

        silent_secs = self._consecutive_silent_secs
        speech = self._has_speech
        action = self._action()

        if action is Action.DISCARD:
            self._reset()
            return ChunkOutput(action=Action.DISCARD, consecutive_silent_secs=silent_secs, has_speech=speech)
        if action is Action.EMIT:
            sys_pcm, mic_pcm = self._trimmed_pcm()
            start = self._chunk_start_time
            self._reset()
            return ChunkOutput(
                action=Action.EMIT,
                sys_pcm=sys_pcm,
                mic_pcm=mic_pcm,
                start_time=start,
                consecutive_silent_secs=silent_secs,
                has_speech=speech,
            )
        return ChunkOutput(consecutive_silent_secs=silent_secs, has_speech=speech)

    def flush(self) -> ChunkOutput | None:
        """Emit the buffered partial chunk if it holds speech and meets the minimum length."""
        if not self._has_speech or len(self._sys_buf) < self._cfg.min_secs * self._cfg.frame_bytes:
            return None
        return ChunkOutput(
            action=Action.EMIT,
            sys_pcm=bytes(self._sys_buf),
            mic_pcm=bytes(self._mic_buf),
            start_time=self._chunk_start_time,
            has_speech=True,
        )

    def _reset(self) -> None:
        self._sys_buf.clear()
        self._mic_buf.clear()
        self._has_speech = False
        self._consecutive_silent_secs = 0
        self._chunk_start_time = None

    def _action(self) -> Action:
        cfg = self._cfg
        buf_secs = len(self._sys_buf) // cfg.frame_bytes
        if not self._has_speech and buf_secs >= cfg.silent_discard_sec:
            return Action.DISCARD
        if self._has_speech and buf_secs >= cfg.min_secs:
            if self._consecutive_silent_secs >= cfg.silence_emit_sec or buf_secs >= cfg.max_secs:
                return Action.EMIT
        return Action.NONE

    def _trimmed_pcm(self) -> tuple[bytes, bytes]:
        trim = max(0, self._consecutive_silent_secs - self._cfg.silence_emit_sec)
        fb = self._cfg.frame_bytes
        return (
            bytes(trim_trailing_frames(self._sys_buf, trim, fb)),
            bytes(trim_trailing_frames(self._mic_buf, trim, fb)),
        )