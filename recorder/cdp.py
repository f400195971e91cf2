"""Chrome DevTools Protocol client: listing tabs and evaluating JavaScript.

Evaluation speaks a minimal WebSocket (RFC 6455) directly over a TCP socket.
"""

from __future__ import annotations

import base64
import json
import os
import socket
import struct
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import httpx

LIST_TABS_TIMEOUT = 5.0
EVALUATE_TIMEOUT = 10.0
_MAX_HANDSHAKE_BYTES = 64 * 1024


class CdpError(RuntimeError):
    """A DevTools request failed."""


@dataclass(frozen=True)
class Tab:
    """A debuggable browser target."""

    title: str = ""
    url: str = ""
    type: str = ""
    websocket_debugger_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Tab:
        """Build from an entry of the ``/json`` listing."""
        data = data or {}
        return cls(
            title=_string(data, "title"),
            url=_string(data, "url"),
            type=_string(data, "type"),
            websocket_debugger_url=_string(data, "webSocketDebuggerUrl"),
        )


def _string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


class CdpClient:
    """Talks to a browser through the DevTools Protocol."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def list_tabs(self, port: int) -> list[Tab]:
        """Fetch the debuggable targets from the ``/json`` endpoint on ``port``."""
        try:
            response = self._http.get(f"http://localhost:{port}/json", timeout=LIST_TABS_TIMEOUT)
            body = response.read()
        except httpx.HTTPError as exc:
            raise CdpError(f"cdp list tabs: {exc}") from exc
        try:
            data = json.loads(body)
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError("expected a JSON array")
            tabs = []
            for item in data:
                if item is not None and not isinstance(item, dict):
                    raise ValueError("expected a JSON object in array")
                tabs.append(Tab.from_dict(item))
            return tabs
        except ValueError as exc:
            raise CdpError(f"cdp list tabs: {exc}") from exc

    def evaluate(self, websocket_url: str, expression: str) -> str:
        """Run ``expression`` in the tab via Runtime.evaluate and return its value."""
        try:
            sock = ws_dial(websocket_url, EVALUATE_TIMEOUT)
        except (OSError, ValueError, CdpError) as exc:
            raise CdpError(f"cdp dial: {exc}") from exc

        with sock:
            request = {
                "id": 1,
                "method": "Runtime.evaluate",
                "params": {"expression": expression, "returnByValue": True},
            }
            payload = json.dumps(request, separators=(",", ":")).encode("utf-8")
            try:
                ws_write(sock, payload)
            except OSError as exc:
                raise CdpError(f"cdp write: {exc}") from exc
            try:
                response = ws_read(sock)
            except (OSError, EOFError) as exc:
                raise CdpError(f"cdp read: {exc}") from exc

        try:
            return _evaluate_value(response)
        except ValueError as exc:
            raise CdpError(f"cdp unmarshal: {exc}") from exc


def _object(value: Any, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    return value


def _evaluate_value(payload: bytes) -> str:
    data = _object(json.loads(payload), "response")
    outer = _object(data.get("result"), "result")
    inner = _object(outer.get("result"), "result.result")
    value = inner.get("value")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("field 'value' must be a string")
    return value


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    buf = bytearray()
    while len(buf) < size:
        chunk = sock.recv(size - len(buf))
        if not chunk:
            raise EOFError("connection closed")
        buf += chunk
    return bytes(buf)


def _read_handshake_status(sock: socket.socket) -> int:
    buf = bytearray()
    while not buf.endswith(b"\r\n\r\n"):
        if len(buf) >= _MAX_HANDSHAKE_BYTES:
            raise CdpError("websocket handshake response too large")
        chunk = sock.recv(1)
        if not chunk:
            raise EOFError("connection closed during handshake")
        buf += chunk
    status_line = bytes(buf).split(b"\r\n", 1)[0].decode("latin-1")
    parts = status_line.split()
    if len(parts) < 2 or not parts[0].startswith("HTTP/") or not parts[1].isdigit():
        raise CdpError(f"malformed HTTP response {status_line!r}")
    return int(parts[1])


def ws_dial(raw_url: str, timeout: float) -> socket.socket:
    """Open a TCP connection to ``raw_url`` and complete the WebSocket upgrade."""
    parts = urlsplit(raw_url)
    host = parts.hostname
    if not host:
        raise ValueError(f"invalid websocket URL {raw_url!r}")
    port = parts.port if parts.port is not None else 80
    host_header = parts.netloc.rpartition("@")[2]
    request_uri = parts.path or "/"
    if parts.query:
        request_uri += "?" + parts.query

    sock = socket.create_connection((host, port), timeout=timeout)
    try:
        key = base64.b64encode(os.urandom(16)).decode("ascii")
        handshake = (
            f"GET {request_uri} HTTP/1.1\r\n"
            f"Host: {host_header}\r\n"
            "Upgrade: websocket\r\n"
            "Connection: Upgrade\r\n"
            f"Sec-WebSocket-Key: {key}\r\n"
            "Sec-WebSocket-Version: 13\r\n"
            "\r\n"
        )
        sock.sendall(handshake.encode("latin-1"))
        status = _read_handshake_status(sock)
    except BaseException:
        sock.close()
        raise
    if status != 101:
        sock.close()
        raise CdpError(f"websocket upgrade failed: {status}")
    return sock


def ws_write(sock: socket.socket, payload: bytes) -> None:
    """Send ``payload`` as one masked text frame."""
    payload = bytes(payload)
    size = len(payload)
    if size <= 125:
        header = struct.pack("!BB", 0x81, 0x80 | size)
    elif size <= 0xFFFF:
        header = struct.pack("!BBH", 0x81, 0x80 | 126, size)
    else:
        header = struct.pack("!BBQ", 0x81, 0x80 | 127, size)
    mask = os.urandom(4)
    key = (mask * (size // 4 + 1))[:size]
    masked = (int.from_bytes(payload, "big") ^ int.from_bytes(key, "big")).to_bytes(size, "big")
    sock.sendall(header + mask + masked)


def ws_read(sock: socket.socket) -> bytes:
    """Read one unmasked frame and return its payload."""
    header = _recv_exact(sock, 2)
    size = header[1] & 0x7F
    if size == 126:
        (size,) = struct.unpack("!H", _recv_exact(sock, 2))
    elif size == 127:
        (size,) = struct.unpack("!Q", _recv_exact(sock, 8))
    return _recv_exact(sock, size)