"""
Lightweight in-memory response cache for local development.

Implements the same interface as food_explorer.database.redis_real so the
upstream gateway can run without a real Redis instance. Expired entries are
purged on every write and the cache never holds more than max_entries; the
oldest entries are evicted first.
"""

from __future__ import annotations

import copy
import time
from collections import OrderedDict
from typing import Any, Optional, Tuple

DEFAULT_MAX_ENTRIES = 1024


class ResponseCache:
    def __init__(self, clock=time.monotonic, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1; got {max_entries}")
        # key -> (expires_at, value) in insertion order; expires_at None means no expiry
        self._entries: "OrderedDict[str, Tuple[Optional[float], Any]]" = OrderedDict()
        self._clock = clock
        self.max_entries = max_entries

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl: int = 3600) -> None:
        if ttl is not None and ttl <= 0:
            return
        now = self._clock()
        self._purge_expired(now)
        expires_at = now + ttl if ttl else None
        self._entries.pop(key, None)
        self._entries[key] = (expires_at, copy.deepcopy(value))
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    async def ping(self) -> bool:
        """
        Health check calls this; always True so the API reports the cache as
        connected in local/dev mode.
        """
        return True

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._entries[key]
