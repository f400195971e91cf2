"""Shared HTTP client construction."""

from __future__ import annotations

import httpx


def new_http_client() -> httpx.Client:
    """Return an HTTP client with connect, response and idle-connection limits."""
    return httpx.Client(
        timeout=httpx.Timeout(None, connect=10.0, read=60.0),
        limits=httpx.Limits(max_connections=None, max_keepalive_connections=10, keepalive_expiry=90.0),
    )


def close_http_client(client: httpx.Client | None) -> None:
    """Close ``client`` and its pooled connections; ``None`` is ignored."""
    if client is None:
        return
    client.close()