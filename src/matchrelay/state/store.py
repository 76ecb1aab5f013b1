"""Key-value store with a local-memory fallback.

This is the only component that talks to the primary backend. Every call is
bounded by a timeout and degrades instead of raising:

* writes return ``False``;
* reads return ``None`` (``{}`` for whole hashes).

The store keeps a process-local copy of the most recent value of each
fallback key (by default only the match history). That copy is served only
while the store is degraded. Any other key is simply unavailable while the
backend is down.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from matchrelay._constants import MATCHES_KEY
from matchrelay.state.backend import KeyValueBackend

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Store:
    """Capability wrapper over a :class:`KeyValueBackend`.

    Two operating modes:

    * *connected*: the last backend call succeeded;
    * *degraded*: no backend is configured, or the last call failed or timed
      out. The next successful call flips the store back to connected.
    """

    def __init__(
        self,
        backend: KeyValueBackend | None,
        *,
        timeout: float = 2.0,
        fallback_keys: Iterable[str] = (MATCHES_KEY,),
    ) -> None:
        self._backend = backend
        self._timeout = timeout
        self._fallback_keys = frozenset(fallback_keys)
        self._fallback: dict[str, Any] = {}
        self._connected = backend is not None

    @property
    def is_connected(self) -> bool:
        return self._backend is not None and self._connected

    @property
    def has_backend(self) -> bool:
        return self._backend is not None

    def _mark(self, ok: bool, op: str) -> None:
        if ok and not self._connected:
            _logger.info("Key-value store reachable again (%s)", op)
        elif not ok and self._connected:
            _logger.warning("Key-value store unreachable, running degraded (%s)", op)
        self._connected = ok

    async def _call(self, op: str, key: str, fn: Callable[[KeyValueBackend], Awaitable[T]], default: T) -> T:
        backend = self._backend
        if backend is None:
            return default
        try:
            result = await asyncio.wait_for(fn(backend), self._timeout)
        except TimeoutError:
            _logger.warning("Store %s %s timed out after %.1fs", op, key, self._timeout)
            self._mark(False, op)
            return default
        except Exception:
            _logger.warning("Store %s %s failed", op, key, exc_info=True)
            self._mark(False, op)
            return default
        self._mark(True, op)
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        """Probe the backend and update the connection flag."""
        return bool(await self._call("PING", "-", lambda b: b.ping(), False))

    async def close(self) -> None:
        backend = self._backend
        closer = getattr(backend, "aclose", None) or getattr(backend, "close", None)
        if closer is None:
            return
        try:
            result = closer()
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            _logger.debug("Store backend close failed", exc_info=True)

    # ------------------------------------------------------------------
    # Plain keys (JSON values)
    # ------------------------------------------------------------------

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """Write a JSON-encodable value; ``True`` when the backend accepted it."""
        self.remember(key, value)
        encoded = json.dumps(value, separators=(",", ":"))
        result = await self._call("SET", key, lambda b: b.set(key, encoded, ex=ttl_seconds), None)
        return bool(result)

    def remember(self, key: str, value: Any) -> None:
        """Refresh the local copy of a fallback key without touching the backend."""
        if key in self._fallback_keys:
            self._fallback[key] = copy.deepcopy(value)

    async def get(self, key: str) -> Any | None:
        """Read a JSON value.

        The local copy of a fallback key is served only while degraded; a
        connected backend that lacks the key answers ``None``.
        """
        raw = await self._call("GET", key, lambda b: b.get(key), None)
        if raw is not None:
            try:
                return json.loads(raw)
            except (TypeError, ValueError):
                _logger.warning("Store value under %s is not JSON; ignoring it", key)
        if not self.is_connected and key in self._fallback:
            _logger.debug("Serving %s from the local fallback", key)
            return copy.deepcopy(self._fallback[key])
        return None

    # ------------------------------------------------------------------
    # Hashes
    # ------------------------------------------------------------------

    async def hget(self, name: str, field: str) -> str | None:
        return await self._call("HGET", name, lambda b: b.hget(name, field), None)

    async def hset(self, name: str, field: str, value: str) -> bool:
        result = await self._call("HSET", name, lambda b: b.hset(name, field, value), None)
        return result is not None

    async def hdel(self, name: str, field: str) -> bool:
        result = await self._call("HDEL", name, lambda b: b.hdel(name, field), None)
        return result is not None

    async def hgetall(self, name: str) -> dict[str, str]:
        result = await self._call("HGETALL", name, lambda b: b.hgetall(name), None)
        return dict(result) if result else {}

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    async def sadd(self, name: str, member: str) -> bool:
        """Add *member*; ``True`` only when it was not already present."""
        result = await self._call("SADD", name, lambda b: b.sadd(name, member), 0)
        return bool(result)

    async def sismember(self, name: str, member: str) -> bool:
        result = await self._call("SISMEMBER", name, lambda b: b.sismember(name, member), False)
        return bool(result)
