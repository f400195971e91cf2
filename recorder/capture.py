"""Dual-channel audio capture: system output plus microphone."""

from __future__ import annotations

import abc
import contextlib
import threading
from collections.abc import Callable, Iterator

from recorder.frame import DualFrame, read_frame, silent
from recorder.parec import CaptureStream, ParecClient
from recorder.pcm import FRAME_BYTES, SAMPLE_RATE

_READ_ERRORS = (EOFError, OSError, ValueError)


class CaptureSource(abc.ABC):
    """Captures system and microphone audio as one-second frame pairs."""

    @abc.abstractmethod
    def start(self) -> Iterator[DualFrame]:
        """Begin capturing and return the frames as they arrive."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Stop capturing."""

    @abc.abstractmethod
    def monitor_source(self) -> str:
        """Name of the system-audio monitor source."""

    @abc.abstractmethod
    def mic_source(self) -> str:
        """Name of the microphone source."""


class ParecSource(CaptureSource):
    """CaptureSource backed by two parec processes."""

    def __init__(self, client: ParecClient) -> None:
        self._client = client
        self._monitor = ""
        self._mic = ""
        self._stop: Callable[[], None] | None = None

    def monitor_source(self) -> str:
        return self._monitor

    def mic_source(self) -> str:
        return self._mic

    def start(self) -> Iterator[DualFrame]:
        """Start both captures and return an iterator of frame pairs.

        The iterator ends when the system stream ends or ``stop`` is called.
        A failed microphone read yields a silent microphone frame.
        """
        monitor = self._client.get_default_sink()
        mic = self._client.get_default_source()
        self._monitor = monitor
        self._mic = mic

        try:
            sys_stream = self._client.start_capture(monitor, SAMPLE_RATE)
        except Exception as exc:
            raise RuntimeError(f"start sys parec: {exc}") from exc
        try:
            mic_stream = self._client.start_capture(mic, SAMPLE_RATE)
        except Exception as exc:
            with contextlib.suppress(Exception):
                sys_stream.close()
            raise RuntimeError(f"start mic parec: {exc}") from exc

        done = threading.Event()
        lock = threading.Lock()

        def stop() -> None:
            with lock:
                if done.is_set():
                    return
                done.set()
            for stream in (sys_stream, mic_stream):
                with contextlib.suppress(Exception):
                    stream.close()

        self._stop = stop
        return self._frames(sys_stream, mic_stream, done, stop)

    @staticmethod
    def _frames(
        sys_stream: CaptureStream,
        mic_stream: CaptureStream,
        done: threading.Event,
        stop: Callable[[], None],
    ) -> Iterator[DualFrame]:
        try:
            while not done.is_set():
                try:
                    sys_data = read_frame(sys_stream, FRAME_BYTES)
                except _READ_ERRORS:
                    return
                try:
                    mic_data = read_frame(mic_stream, FRAME_BYTES)
                except _READ_ERRORS:
                    mic_data = silent(FRAME_BYTES)
                if done.is_set():
                    return
                yield DualFrame(sys=sys_data, mic=mic_data)
        finally:
            stop()

    def stop(self) -> None:
        """Terminate the capture processes."""
        if self._stop is not None:
            self._stop()