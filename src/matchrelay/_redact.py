"""Masking of credentials before they reach a log line.

Delivery tokens address a subscriber's device and the provider API key is a
bearer credential; neither is ever logged in full.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SECRET_PARAMS: frozenset[str] = frozenset(
    {
        "token",
        "tokens",
        "api_key",
        "apikey",
        "authorization",
        "password",
        "store_url",
    }
)


def mask_token(token: str, *, keep: int = 6) -> str:
    """Return *token* with everything but its first characters hidden."""
    if not token:
        return "<empty>"
    if len(token) <= keep:
        return "<redacted>"
    return f"{token[:keep]}…<{len(token)}>"


def _mask_secret(value: Any) -> str:
    if isinstance(value, str):
        return mask_token(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"<{len(value)} redacted>"
    return "<redacted>"


def redact_params(params: Mapping[str, Any], *, max_length: int = 512) -> dict[str, Any]:
    """Copy of *params* with secret values masked and long strings clipped.

    Nested mappings are redacted the same way; other values pass through.
    """
    safe: dict[str, Any] = {}
    for name, value in params.items():
        key = str(name)
        if key.lower() in _SECRET_PARAMS:
            safe[key] = _mask_secret(value)
        elif isinstance(value, Mapping):
            safe[key] = redact_params(value, max_length=max_length)
        elif isinstance(value, str) and len(value) > max_length:
            safe[key] = f"{value[:max_length]}…<truncated>"
        else:
            safe[key] = value
    return safe
