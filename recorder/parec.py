"""PulseAudio capture through the pactl and parec commands."""

from __future__ import annotations

import subprocess
from typing import BinaryIO, Callable, Protocol

StopFn = Callable[[], object]


class CommandRunner(Protocol):
    """Runs external commands; replaceable for testing."""

    def output(self, name: str, *args: str) -> bytes:
        """Run a command to completion and return its stdout."""
        ...

    def start(self, name: str, *args: str) -> tuple[BinaryIO, StopFn]:
        """Start a command and return its stdout stream and a function stopping it."""
        ...


class ExecRunner:
    """CommandRunner that executes real processes."""

    def output(self, name: str, *args: str) -> bytes:
        """Run a command and return its stdout; raises CalledProcessError on failure."""
        return subprocess.run([name, *args], stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=True).stdout

    def start(self, name: str, *args: str) -> tuple[BinaryIO, StopFn]:
        """Start a command with stderr discarded and return its stdout and a stop function."""
        try:
            proc = subprocess.Popen([name, *args], stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
        except OSError as exc:
            raise RuntimeError(f"start {name}: {exc}") from exc

        def stop() -> int:
            proc.kill()
            try:
                return proc.wait()
            finally:
                proc.stdout.close()

        return proc.stdout, stop


class CaptureStream:
    """A running capture: raw s16le mono PCM until closed."""

    def __init__(self, reader: BinaryIO, stop: StopFn) -> None:
        self._reader = reader
        self._stop = stop

    def read(self, size: int = -1) -> bytes:
        """Read raw PCM data from the capture."""
        return self._reader.read(size)

    def close(self) -> object:
        """Stop the capture process."""
        return self._stop()

    def __enter__(self) -> CaptureStream:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ParecClient:
    """Queries default devices with pactl and streams audio with parec."""

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self._runner = runner if runner is not None else ExecRunner()

    def get_default_sink(self) -> str:
        """Return the monitor source of the default output device."""
        try:
            out = self._runner.output("pactl", "get-default-sink")
        except Exception as exc:
            raise RuntimeError(f"pactl get-default-sink: {exc}") from exc
        return out.decode("utf-8", errors="replace").strip() + ".monitor"

    def get_default_source(self) -> str:
        """Return the name of the default input device."""
        try:
            out = self._runner.output("pactl", "get-default-source")
        except Exception as exc:
            raise RuntimeError(f"pactl get-default-source: {exc}") from exc
        return out.decode("utf-8", errors="replace").strip()

    def start_capture(self, device: str, sample_rate: int) -> CaptureStream:
        """Start streaming mono s16le audio from ``device``."""
        reader, stop = self._runner.start(
            "parec",
            f"--device={device}",
            f"--rate={sample_rate}",
            "--channels=1",
            "--format=s16le",
            "--raw",
        )
        return CaptureStream(reader, stop)