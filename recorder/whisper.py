"""Client for OpenAI-compatible audio transcription endpoints."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

import httpx

_SPACE = re.compile(r"[\t\n\f\r ]+")


@dataclass(frozen=True)
class WhisperClientConfig:
    """Endpoint URL and per-request timeout in seconds."""

    url: str
    timeout: float = 60.0


class TranscriptionError(Exception):
    """The server answered with a status other than 200."""

    def __init__(self, status_code: int, body: bytes) -> None:
        super().__init__(f"whisper: status {status_code}")
        self.status_code = status_code
        self.body = body


class WhisperClient:
    """Uploads WAV audio and returns the transcribed text."""

    def __init__(self, http: httpx.Client, cfg: WhisperClientConfig) -> None:
        self._http = http
        self._cfg = cfg

    def transcribe(self, wav_data: bytes, filename: str) -> str:
        """Transcribe ``wav_data``; whitespace in the result is normalised.

        Raises TranscriptionError for non-200 responses and ValueError for
        malformed response bodies.
        """
        response = self._http.post(
            self._cfg.url,
            files={"file": (filename, bytes(wav_data), "application/octet-stream")},
            data={"model": "whisper-1", "response_format": "json"},
            timeout=self._cfg.timeout,
        )
        body = response.read()
        if response.status_code != 200:
            raise TranscriptionError(response.status_code, body)

        data = json.loads(body)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("whisper: expected a JSON object")
        text = data.get("text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise ValueError("whisper: field 'text' must be a string")
        return _SPACE.sub(" ", text.strip())