import io
import subprocess
import sys

import pytest

from recorder.parec import CaptureStream, ExecRunner, ParecClient


class FakeRunner:
    def __init__(self, output_fn=None, start_fn=None):
        self.output_fn = output_fn
        self.start_fn = start_fn

    def output(self, name, *args):
        return self.output_fn(name, *args)

    def start(self, name, *args):
        return self.start_fn(name, *args)


def test_get_default_sink():
    calls = []

    def output(name, *args):
        calls.append((name, args))
        return b"alsa_output.pci\n"

    client = ParecClient(FakeRunner(output_fn=output))
    assert client.get_default_sink() == "alsa_output.pci.monitor"
    assert calls == [("pactl", ("get-default-sink",))]


def test_get_default_source():
    calls = []

    def output(name, *args):
        calls.append((name, args))
        return b"alsa_input.usb\n"

    client = ParecClient(FakeRunner(output_fn=output))
    assert client.get_default_source() == "alsa_input.usb"
    assert calls == [("pactl", ("get-default-source",))]


def failing_output(name, *args):
    raise FileNotFoundError("command not found")


def test_get_default_sink_error():
    client = ParecClient(FakeRunner(output_fn=failing_output))
    with pytest.raises(RuntimeError, match="pactl get-default-sink"):
        client.get_default_sink()


def test_get_default_source_error():
    client = ParecClient(FakeRunner(output_fn=failing_output))
    with pytest.raises(RuntimeError, match="pactl get-default-source"):
        client.get_default_source()


def test_start_capture():
    pcm_data = bytes([0x01, 0x02]) * 100
    state = {"closed": False, "call": None}

    def start(name, *args):
        state["call"] = (name, list(args))

        def stop():
            state["closed"] = True

        return io.BytesIO(pcm_data), stop

    client = ParecClient(FakeRunner(start_fn=start))
    stream = client.start_capture("test-device", 16000)

    assert state["call"] == (
        "parec",
        ["--device=test-device", "--rate=16000", "--channels=1", "--format=s16le", "--raw"],
    )
    assert stream.read() == pcm_data
    stream.close()
    assert state["closed"] is True


def test_start_capture_error():
    def start(name, *args):
        raise RuntimeError("device not found")

    client = ParecClient(FakeRunner(start_fn=start))
    with pytest.raises(RuntimeError, match="device not found"):
        client.start_capture("bad-device", 16000)


def test_capture_stream_context_manager_closes():
    closed = []
    with CaptureStream(io.BytesIO(b"abcd"), lambda: closed.append(True)) as stream:
        assert stream.read(2) == b"ab"
    assert closed == [True]


def test_exec_runner_output():
    out = ExecRunner().output(sys.executable, "-c", "print('hi')")
    assert out.strip() == b"hi"


def test_exec_runner_output_failure():
    with pytest.raises(subprocess.CalledProcessError):
        ExecRunner().output(sys.executable, "-c", "import sys; sys.exit(3)")


def test_exec_runner_start_streams_stdout():
    reader, stop = ExecRunner().start(sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'abc')")
    try:
        assert reader.read() == b"abc"
    finally:
        stop()
    assert reader.closed


def test_exec_runner_start_missing_command():
    with pytest.raises(RuntimeError, match="start "):
        ExecRunner().start("definitely-not-a-real-command-xyz")