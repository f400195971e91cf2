"""RMS gates for speech detection and chunk filtering."""

from __future__ import annotations

from dataclasses import dataclass

from recorder.pcm import compute_rms

DEFAULT_FRAME_THRESHOLD = 0.002
DEFAULT_CHUNK_THRESHOLD = 0.0025


@dataclass(frozen=True)
class GateResult:
    """RMS measurements and whether the gate passed."""

    sys_rms: float
    mic_rms: float
    passes: bool


@dataclass(frozen=True)
class GateConfig:
    """Per-frame and per-chunk RMS thresholds."""

    frame_threshold: float = DEFAULT_FRAME_THRESHOLD
    chunk_threshold: float = DEFAULT_CHUNK_THRESHOLD

    def frame_has_speech(self, sys: bytes | None, mic: bytes | None) -> GateResult:
        """Report whether either channel reaches the frame threshold."""
        return _measure(sys, mic, self.frame_threshold)

    def chunk_passes(self, sys: bytes | None, mic: bytes | None) -> GateResult:
        """Report whether either channel reaches the chunk threshold."""
        return _measure(sys, mic, self.chunk_threshold)


def _measure(sys: bytes | None, mic: bytes | None, threshold: float) -> GateResult:
    sys_rms = compute_rms(sys)
    mic_rms = compute_rms(mic)
    return GateResult(sys_rms=sys_rms, mic_rms=mic_rms, passes=sys_rms >= threshold or mic_rms >= threshold)


def default_gate() -> GateConfig:
    """Return production gate thresholds."""
    return GateConfig()