from __future__ import annotations

import json
import typing as t

from redis.asyncio import Redis

from .base import CacheStore


class RedisStore(CacheStore):
    """Redis-backed cache store.

    - Values are stored as JSON strings at key: `{prefix}:{key}`
    - List values use Redis lists (`RPUSH` / `LRANGE`) at the same key layout
    - Expiry uses millisecond precision (`PX` / `PEXPIRE`)
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        prefix: str = "trustkit",
        client: t.Optional[Redis] = None,
    ) -> None:
        self._url = url
        self._prefix = prefix.rstrip(":")
        self._redis = client if client is not None else Redis.from_url(url, decode_responses=True)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> t.Optional[t.Any]:
        raw = await self._redis.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: t.Any, ttl_seconds: t.Optional[float] = None) -> None:
        payload = json.dumps(value)
        if ttl_seconds is not None and ttl_seconds > 0:
            await self._redis.set(self._key(key), payload, px=int(ttl_seconds * 1000))
        else:
            await self._redis.set(self._key(key), payload)

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._key(key))

    async def exists(self, key: str) -> bool:
        count = await self._redis.exists(self._key(key))
        return bool(count)

    async def range_get(self, key: str) -> t.List[t.Any]:
        rows = await self._redis.lrange(self._key(key), 0, -1)
        return [json.loads(row) for row in rows or []]

    async def range_push_all(
        self, key: str, values: t.Sequence[t.Any], ttl_seconds: t.Optional[float] = None
    ) -> None:
        if not values:
            return
        redis_key = self._key(key)
        # push and expiry land together or not at all
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.rpush(redis_key, *[json.dumps(v) for v in values])
            if ttl_seconds is not None and ttl_seconds > 0:
                pipe.pexpire(redis_key, int(ttl_seconds * 1000))
            await pipe.execute()

    async def flush_all(self) -> None:
        # Only keys under our prefix; other tenants of the database are left alone
        batch: t.List[str] = []
        async for redis_key in self._redis.scan_iter(match=f"{self._prefix}:*", count=500):
            batch.append(redis_key)
            if len(batch) >= 500:
                await self._redis.delete(*batch)
                batch = []
        if batch:
            await self._redis.delete(*batch)

    async def is_healthy(self) -> bool:
        try:
            pong = await self._redis.ping()
            return bool(pong)
        except Exception:
            return False

    async def close(self) -> None:
        await self._redis.aclose()
