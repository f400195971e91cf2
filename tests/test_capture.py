import io

import pytest

from recorder.capture import ParecSource
from recorder.frame import silent
from recorder.parec import ParecClient
from recorder.pcm import FRAME_BYTES


class FakeRunner:
    def __init__(self, start_fn):
        self.start_fn = start_fn

    def output(self, name, *args):
        if args[0] == "get-default-sink":
            return b"sink\n"
        return b"mic\n"

    def start(self, name, *args):
        return self.start_fn(name, *args)


def streams_runner(*payloads, stops=None):
    data = list(payloads)
    count = {"n": 0}

    def start(name, *args):
        index = count["n"]
        count["n"] += 1
        stop = stops[index] if stops else (lambda: None)
        return io.BytesIO(data[index]), stop

    return FakeRunner(start)


def test_start_yields_frames_until_exhausted():
    sys_data = bytes([0x01]) * (FRAME_BYTES * 2)
    mic_data = bytes([0x02]) * (FRAME_BYTES * 2)
    src = ParecSource(ParecClient(streams_runner(sys_data, mic_data)))

    frames = list(src.start())

    assert len(frames) == 2
    assert frames[0].sys == sys_data[:FRAME_BYTES]
    assert frames[0].mic == mic_data[:FRAME_BYTES]
    assert frames[1].sys == sys_data[FRAME_BYTES:]
    assert src.monitor_source() == "sink.monitor"
    assert src.mic_source() == "mic"


def test_mic_falls_back_to_silence():
    sys_data = bytes([0x01]) * FRAME_BYTES
    src = ParecSource(ParecClient(streams_runner(sys_data, b"")))

    frames = list(src.start())

    assert len(frames) == 1
    assert frames[0].mic == silent(FRAME_BYTES)


def test_stop_closes_streams():
    closed = []
    runner = streams_runner(b"", b"", stops=[lambda: closed.append("sys"), lambda: closed.append("mic")])
    src = ParecSource(ParecClient(runner))

    frames = src.start()
    src.stop()

    assert sorted(closed) == ["mic", "sys"]
    assert list(frames) == []


def test_stop_is_idempotent():
    closed = []
    sys_data = bytes([0x01]) * FRAME_BYTES
    runner = streams_runner(
        sys_data, sys_data, stops=[lambda: closed.append("sys"), lambda: closed.append("mic")]
    )
    src = ParecSource(ParecClient(runner))
    frames = src.start()
    src.stop()
    src.stop()
    assert list(frames) == []
    assert sorted(closed) == ["mic", "sys"]


def test_exhausted_iteration_closes_streams():
    closed = []
    sys_data = bytes([0x01]) * FRAME_BYTES
    runner = streams_runner(
        sys_data, sys_data, stops=[lambda: closed.append("sys"), lambda: closed.append("mic")]
    )
    src = ParecSource(ParecClient(runner))
    assert len(list(src.start())) == 1
    assert sorted(closed) == ["mic", "sys"]


def test_mic_start_failure_closes_sys_stream():
    closed = []
    count = {"n": 0}

    def start(name, *args):
        count["n"] += 1
        if count["n"] == 2:
            raise RuntimeError("device not found")
        return io.BytesIO(b""), lambda: closed.append("sys")

    src = ParecSource(ParecClient(FakeRunner(start)))
    with pytest.raises(RuntimeError, match="start mic parec"):
        src.start()
    assert closed == ["sys"]


def test_sys_start_failure_is_reported():
    def start(name, *args):
        raise RuntimeError("device not found")

    src = ParecSource(ParecClient(FakeRunner(start)))
    with pytest.raises(RuntimeError, match="start sys parec"):
        src.start()