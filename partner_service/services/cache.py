from __future__ import annotations

from typing import Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from partner_service.core.errors import CacheError


class ReferenceCache(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, *, ttl_seconds: int) -> None: ...


class RedisReferenceCache:
    def __init__(self, redis_url: str):
        self.r = redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        try:
            return await self.r.get(key)
        except RedisError as e:
            raise CacheError(f"cache read failed for {key}: {e}") from e

    async def set(self, key: str, value: str, *, ttl_seconds: int) -> None:
        try:
            await self.r.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheError(f"cache write failed for {key}: {e}") from e

    async def aclose(self) -> None:
        await self.r.aclose()
