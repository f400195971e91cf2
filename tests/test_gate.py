import struct

import pytest

from recorder.gate import GateConfig, default_gate
from recorder.pcm import FRAME_BYTES


def loud_pcm(amplitude: int, samples: int) -> bytes:
    return struct.pack(f"<{samples}h", *([amplitude] * samples))


def test_frame_has_speech_both_silent():
    silent = bytes(FRAME_BYTES)
    r = default_gate().frame_has_speech(silent, silent)
    assert not r.passes
    assert r.sys_rms == 0
    assert r.mic_rms == 0


def test_frame_has_speech_sys_only():
    r = default_gate().frame_has_speech(loud_pcm(500, 1000), bytes(FRAME_BYTES))
    assert r.passes
    assert r.mic_rms == 0


def test_frame_has_speech_mic_only():
    r = default_gate().frame_has_speech(bytes(FRAME_BYTES), loud_pcm(500, 1000))
    assert r.passes
    assert r.sys_rms == 0


def test_frame_has_speech_at_threshold():
    g = GateConfig(frame_threshold=0.5, chunk_threshold=0.5)
    r = g.frame_has_speech(loud_pcm(16384, 1000), None)
    assert r.passes
    assert r.sys_rms == pytest.approx(0.5, abs=0.001)


def test_frame_has_speech_below_threshold():
    g = GateConfig(frame_threshold=0.5, chunk_threshold=0.5)
    quiet = loud_pcm(100, 1000)
    assert not g.frame_has_speech(quiet, quiet).passes


def test_chunk_passes_different_threshold():
    g = GateConfig(frame_threshold=0.002, chunk_threshold=0.01)
    signal = loud_pcm(300, 1000)
    assert g.frame_has_speech(signal, signal).passes
    assert not g.chunk_passes(signal, signal).passes


def test_chunk_passes_empty_pcm():
    assert not default_gate().chunk_passes(None, None).passes


def test_default_gate_thresholds():
    g = default_gate()
    assert g.frame_threshold == 0.002
    assert g.chunk_threshold == 0.0025