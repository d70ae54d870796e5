# app/infrastructure/cache/redis_client.py

from typing import Optional

import redis.asyncio as redis


class RedisClient:
    def __init__(self, redis_url: str):
        self.client = redis.from_url(
            redis_url,
            decode_responses=True,
        )

    async def lpush(self, key: str, value: str) -> int:
        """Push value onto the head of list key; return the new length."""
        return await self.client.lpush(key, value)

    async def brpop(self, key: str, timeout: int = 0) -> Optional[str]:
        """Pop from the tail of list key, blocking up to timeout seconds (0 = forever)."""
        result = await self.client.brpop([key], timeout=timeout)
        if result is None:
            return None
        _, value = result
        return value

    async def llen(self, key: str) -> int:
        return await self.client.llen(key)

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        await self.client.aclose()
