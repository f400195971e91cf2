"""Client for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class Message:
    """One entry of a chat conversation."""

    role: str
    content: str


@dataclass(frozen=True)
class LLMClientConfig:
    """Endpoint, model and generation parameters; timeout is in seconds."""

    url: str
    model: str
    timeout: float = 180.0
    temperature: float = 0.0
    max_tokens: int = 0


class CompletionError(Exception):
    """The server answered with a status other than 200."""

    def __init__(self, status_code: int, body: bytes) -> None:
        super().__init__(f"chat completion: status {status_code}")
        self.status_code = status_code
        self.body = body


def _object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"chat completion: {what} must be a JSON object")
    return value


class LLMClient:
    """Sends a conversation and returns the model's single text completion."""

    def __init__(self, http: httpx.Client, cfg: LLMClientConfig) -> None:
        self._http = http
        self._cfg = cfg

    def complete(self, messages: Iterable[Message]) -> str:
        """Return the trimmed content of the first choice.

        Raises CompletionError for non-200 responses and ValueError for
        malformed bodies or responses without choices.
        """
        payload = {
            "model": self._cfg.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": self._cfg.temperature,
            "max_tokens": self._cfg.max_tokens,
        }
        response = self._http.post(
            self._cfg.url,
            content=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            timeout=self._cfg.timeout,
        )
        body = response.read()
        if response.status_code != 200:
            raise CompletionError(response.status_code, body)

        data = _object(json.loads(body), "response")
        choices = data.get("choices")
        if choices is None:
            choices = []
        if not isinstance(choices, list):
            raise ValueError("chat completion: choices must be a JSON array")
        if not choices:
            raise ValueError("chat completion: no choices in response")
        message = _object(_object(choices[0], "choice").get("message"), "message")
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise ValueError("chat completion: content must be a string")
        return content.strip()