import json
import logging
from typing import Any
import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


def cache_key(*parts: str | int) -> str:
    return ":".join(str(p) for p in parts)


class ContentCache:
    """JSON payload cache on top of Redis.

    Reads are best effort: a Redis failure is logged and treated as a miss so
    the caller falls through to the database.
    """

    def __init__(self, redis: aioredis.Redis, default_ttl: int = 1800):
        self.redis = redis
        self.default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: str, default_ttl: int = 1800) -> "ContentCache":
        return cls(aioredis.from_url(url, decode_responses=True), default_ttl)

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        try:
            await self.redis.set(key, json.dumps(value, ensure_ascii=False), ex=ttl or self.default_ttl)
        except RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def close(self) -> None:
        await self.redis.aclose()
