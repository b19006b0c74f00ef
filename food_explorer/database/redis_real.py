"""
Real Redis-backed response cache for deployments where REDIS_URL is set.
Implements the same interface as food_explorer.database.redis (in-memory).

The cache is best-effort: a Redis failure is logged and behaves like a miss
(get) or a skipped write (set), so an unreachable Redis never fails a request.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis
import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class RedisResponseCache:
    """
    Redis-backed cache of raw upstream JSON, keyed by request URL.
    """

    def __init__(self, url: str, prefix: str = "off", default_ttl: int = 3600) -> None:
        self._client = aioredis.from_url(url, decode_responses=True)
        self._prefix = prefix
        self._default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning("Redis cache read failed for %s: %s", key, e)
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry for %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: int = 3600) -> None:
        if ttl is not None and ttl <= 0:
            return
        payload = json.dumps(value, default=str)
        try:
            await self._client.setex(self._key(key), ttl or self._default_ttl, payload)
        except redis.RedisError as e:
            logger.warning("Redis cache write failed for %s: %s", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except redis.RedisError as e:
            logger.warning("Redis cache delete failed for %s: %s", key, e)

    async def clear(self) -> None:
        try:
            async for key in self._client.scan_iter(match=f"{self._prefix}:*"):
                await self._client.delete(key)
        except redis.RedisError as e:
            logger.warning("Redis cache clear failed: %s", e)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False
