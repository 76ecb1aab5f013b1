"""Relay configuration for matchrelay."""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from matchrelay._constants import (
    BASE_URL,
    CACHE_TTL_SECONDS,
    DEFAULT_GAME,
    DEFAULT_LANGUAGE,
    MATCHES_TTL_SECONDS,
    PRIZE_POOL_THRESHOLD,
    QUALIFYING_TIERS,
    REMINDER_WINDOW,
    TEAMS_CACHE_TTL_SECONDS,
)
from matchrelay.exceptions import MatchRelayConfigError

_STORE_URL_RE = re.compile(r"rediss?://\S+")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise MatchRelayConfigError(f"{key} must be numeric, got {raw!r}") from exc


def normalize_store_url(url: str | None) -> str | None:
    """Clean up a key-value store URL taken from the environment.

    Operators regularly paste the whole ``redis-cli -u redis://...`` command
    into ``REDIS_URL``; the URL is extracted from it. Upstash only accepts TLS
    connections, so its hosts are upgraded to ``rediss://``.
    """
    if url is None:
        return None
    cleaned = url.strip()
    if not cleaned:
        return None

    if "redis-cli" in cleaned:
        match = _STORE_URL_RE.search(cleaned)
        if match is None:
            raise MatchRelayConfigError("REDIS_URL looks like a redis-cli command but holds no redis:// URL")
        cleaned = match.group(0)

    if "upstash.io" in cleaned and cleaned.startswith("redis://"):
        cleaned = "rediss://" + cleaned[len("redis://") :]
    return cleaned


@dataclasses.dataclass(frozen=True)
class RelayConfig:
    """Relay configuration.

    Parameters
    ----------
    api_key : str
        PandaScore API token, sent as a bearer token.
    base_url : str
        Provider base URL.
    game : str
        Provider game slug used in endpoint paths (``"csgo"`` covers CS2).
    store_url : str or None
        Key-value store URL. ``None`` runs the store in degraded mode.
    store_timeout : float
        Seconds allowed for a single store call before it degrades.
    request_timeout : float
        Seconds allowed for a provider request.
    live_request_timeout : float
        Seconds allowed for the live-window request, which runs more often.
    poll_interval : float
        Seconds between two polling cycles.
    matches_ttl : int
        TTL of the reconciled match history, in seconds.
    cache_ttl : int
        TTL of tournament and standings read caches, in seconds.
    teams_cache_ttl : int
        Lifetime of the in-memory team directory, in seconds.
    reminder_window : timedelta
        How far ahead of a match start a reminder may fire.
    default_language : str
        Language used when a subscriber's language has no templates.
    prize_pool_threshold : int
        A tournament whose prize pool exceeds this qualifies regardless of tier.
    qualifying_tiers : tuple of str
        Tiers that always qualify.
    notifications_enabled : bool
        Run event detection and dispatch during sync cycles.
    """

    api_key: str = ""
    base_url: str = BASE_URL
    game: str = DEFAULT_GAME
    store_url: str | None = None
    store_timeout: float = 2.0
    request_timeout: float = 10.0
    live_request_timeout: float = 5.0
    poll_interval: float = 30.0
    matches_ttl: int = MATCHES_TTL_SECONDS
    cache_ttl: int = CACHE_TTL_SECONDS
    teams_cache_ttl: int = TEAMS_CACHE_TTL_SECONDS
    reminder_window: timedelta = REMINDER_WINDOW
    default_language: str = DEFAULT_LANGUAGE
    prize_pool_threshold: int = PRIZE_POOL_THRESHOLD
    qualifying_tiers: tuple[str, ...] = QUALIFYING_TIERS
    notifications_enabled: bool = True

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise MatchRelayConfigError("poll_interval must be positive")
        if self.store_timeout <= 0 or self.request_timeout <= 0:
            raise MatchRelayConfigError("timeouts must be positive")
        if not self.default_language:
            raise MatchRelayConfigError("default_language must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> RelayConfig:
        """Create configuration from environment variables.

        Reads ``PANDASCORE_API_KEY``, ``REDIS_URL`` and the optional
        ``MATCHRELAY_*`` variables. Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "PANDASCORE_API_KEY": "api_key",
            "MATCHRELAY_BASE_URL": "base_url",
            "MATCHRELAY_GAME": "game",
            "MATCHRELAY_DEFAULT_LANGUAGE": "default_language",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        if "store_url" not in overrides:
            config_kwargs["store_url"] = normalize_store_url(env.get("REDIS_URL"))

        _ENV_FLOAT_MAP = {
            "MATCHRELAY_STORE_TIMEOUT": "store_timeout",
            "MATCHRELAY_REQUEST_TIMEOUT": "request_timeout",
            "MATCHRELAY_POLL_INTERVAL": "poll_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            parsed = _env_float(env, env_key)
            if parsed is not None and field_name not in overrides:
                config_kwargs[field_name] = parsed

        cache_ttl = _env_float(env, "MATCHRELAY_CACHE_TTL")
        if cache_ttl is not None and "cache_ttl" not in overrides:
            config_kwargs["cache_ttl"] = int(cache_ttl)

        reminder_minutes = _env_float(env, "MATCHRELAY_REMINDER_MINUTES")
        if reminder_minutes is not None and "reminder_window" not in overrides:
            config_kwargs["reminder_window"] = timedelta(minutes=reminder_minutes)

        if "notifications_enabled" not in overrides:
            config_kwargs["notifications_enabled"] = _env_bool(env.get("MATCHRELAY_NOTIFICATIONS_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
