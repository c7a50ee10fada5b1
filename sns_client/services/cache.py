"""In-memory TTL cache keyed by {kind}:{label}[:{extra}]."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_TTL = 300
MAX_ENTRIES = 1000
SWEEP_INTERVAL = 60


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


class TTLCache:
    """Bounded in-memory cache with per-key TTL.

    Insertion past ``max_entries`` evicts the oldest-inserted key. Expired
    entries are dropped lazily on read and by an optional background sweep.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        max_entries: int = MAX_ENTRIES,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        # dicts keep insertion order; the first key is always the oldest.
        self._store: dict[str, CacheEntry] = {}
        self._sweeper: asyncio.Task | None = None
        self._closed = False

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.expired(time.monotonic()):
            del self._store[key]
            return None
        return entry.value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        if ttl is None:
            ttl = self.default_ttl
        # Overwrite re-inserts so the key's age and eviction order reset.
        self._store.pop(key, None)
        if len(self._store) >= self.max_entries:
            oldest = next(iter(self._store))
            del self._store[oldest]
        self._store[key] = CacheEntry(value=value, stored_at=time.monotonic(), ttl=ttl)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    invalidate = delete

    def clear(self) -> None:
        self._store.clear()

    def keys(self) -> list[str]:
        return list(self._store)

    def stats(self) -> dict[str, Any]:
        return {"size": len(self._store), "keys": list(self._store)}

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = time.monotonic()
        stale = [k for k, entry in self._store.items() if entry.expired(now)]
        for key in stale:
            del self._store[key]
        return len(stale)

    # ── Background sweep ──

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self, interval: float = SWEEP_INTERVAL) -> asyncio.Task:
        """Start the periodic sweep on the running loop and return its task."""
        if self._closed:
            raise RuntimeError("cache is closed")
        if self.sweeping:
            return self._sweeper
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_loop(interval), name="sns-cache-sweeper"
        )
        return self._sweeper

    async def _sweep_loop(self, interval: float) -> None:
        while not self._closed:
            await asyncio.sleep(interval)
            removed = self.sweep()
            if removed:
                log.debug("Cache sweep removed %d expired entries", removed)

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def close(self) -> None:
        self._closed = True
        await self.stop_sweeper()
        self.clear()
