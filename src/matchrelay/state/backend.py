"""Key-value backend interface and the in-process implementation.

:class:`KeyValueBackend` uses the method names and return conventions of
``redis.asyncio.Redis`` created with ``decode_responses=True``, so such a
client satisfies it structurally.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol


class KeyValueBackend(Protocol):
    """Structural interface the store needs from its primary backend."""

    async def ping(self) -> bool: ...

    async def get(self, name: str) -> str | None: ...

    async def set(self, name: str, value: str, ex: int | None = None) -> bool | None: ...

    async def hget(self, name: str, key: str) -> str | None: ...

    async def hset(self, name: str, key: str, value: str) -> int: ...

    async def hdel(self, name: str, *keys: str) -> int: ...

    async def hgetall(self, name: str) -> dict[str, str]: ...

    async def sadd(self, name: str, *values: str) -> int: ...

    async def sismember(self, name: str, value: str) -> bool | int: ...


class MemoryBackend:
    """Process-local backend with per-key expiry.

    Used by tests and single-process deployments without a key-value server.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._strings: dict[str, str] = {}
        self._expiry: dict[str, float] = {}
        self._hashes: dict[str, dict[str, str]] = {}
        self._sets: dict[str, set[str]] = {}

    def _expire(self, name: str) -> None:
        deadline = self._expiry.get(name)
        if deadline is not None and self._clock() >= deadline:
            self._strings.pop(name, None)
            self._expiry.pop(name, None)

    async def ping(self) -> bool:
        return True

    async def get(self, name: str) -> str | None:
        self._expire(name)
        return self._strings.get(name)

    async def set(self, name: str, value: str, ex: int | None = None) -> bool:
        self._strings[name] = value
        if ex is not None and ex > 0:
            self._expiry[name] = self._clock() + ex
        else:
            self._expiry.pop(name, None)
        return True

    async def hget(self, name: str, key: str) -> str | None:
        return self._hashes.get(name, {}).get(key)

    async def hset(self, name: str, key: str, value: str) -> int:
        bucket = self._hashes.setdefault(name, {})
        added = 0 if key in bucket else 1
        bucket[key] = value
        return added

    async def hdel(self, name: str, *keys: str) -> int:
        bucket = self._hashes.get(name, {})
        removed = 0
        for key in keys:
            if bucket.pop(key, None) is not None:
                removed += 1
        return removed

    async def hgetall(self, name: str) -> dict[str, str]:
        return dict(self._hashes.get(name, {}))

    async def sadd(self, name: str, *values: str) -> int:
        members = self._sets.setdefault(name, set())
        added = 0
        for value in values:
            if value not in members:
                members.add(value)
                added += 1
        return added

    async def sismember(self, name: str, value: str) -> bool:
        return value in self._sets.get(name, set())
