"""Shared helpers for provider endpoint modules.

It is internal to matchrelay and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from matchrelay._transport import Transport
from matchrelay.exceptions import TransientUpstreamError
from matchrelay.ingestion.normalize import format_timestamp


def time_range(start: datetime, end: datetime) -> str:
    """Value of a ``range[begin_at]`` filter."""
    return f"{format_timestamp(start)},{format_timestamp(end)}"


async def fetch_list(
    transport: Transport,
    endpoint: str,
    params: Mapping[str, Any] | None = None,
    *,
    timeout: float | None = None,
) -> list[dict[str, Any]]:
    """GET a list endpoint; non-dict items are dropped."""
    body = await transport.get_json(endpoint, params, timeout=timeout)
    if body is None:
        return []
    if not isinstance(body, list):
        raise TransientUpstreamError(f"Expected a list from {endpoint}, got {type(body).__name__}", endpoint=endpoint)
    return [item for item in body if isinstance(item, dict)]


async def fetch_object(
    transport: Transport,
    endpoint: str,
    params: Mapping[str, Any] | None = None,
    *,
    timeout: float | None = None,
) -> dict[str, Any]:
    body = await transport.get_json(endpoint, params, timeout=timeout)
    if not isinstance(body, dict):
        raise TransientUpstreamError(f"Expected an object from {endpoint}", endpoint=endpoint)
    return body


async def fetch_pages(
    transport: Transport,
    endpoint: str,
    params: Mapping[str, Any],
    *,
    max_pages: int,
    timeout: float | None = None,
) -> list[dict[str, Any]]:
    """Walk ``page=1..max_pages`` and stop at the first empty page."""
    items: list[dict[str, Any]] = []
    for page in range(1, max_pages + 1):
        batch = await fetch_list(transport, endpoint, {**params, "page": page}, timeout=timeout)
        if not batch:
            break
        items.extend(batch)
    return items
