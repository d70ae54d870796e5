"""Redis-list event queue. LPUSH onto the head, BRPOP from the tail: FIFO per category."""

from typing import Optional

from redis.exceptions import RedisError

from app.application.exceptions import QueueUnavailableError
from app.infrastructure.cache.redis_client import RedisClient

QUEUE_PREFIX = "payment_events:"
MAIN_QUEUE = "main"
DEAD_LETTER_QUEUE = "dead-letter"


def queue_key(category: str, name: str) -> str:
    return f"{QUEUE_PREFIX}{category}:{name}"


class RedisEventQueue:
    """Implements EventQueue. Messages are plain event id strings."""

    def __init__(self, redis_client: RedisClient, category: str) -> None:
        self._redis = redis_client
        self._category = category
        self._main_key = queue_key(category, MAIN_QUEUE)
        self._dead_letter_key = queue_key(category, DEAD_LETTER_QUEUE)

    @property
    def main_key(self) -> str:
        return self._main_key

    @property
    def dead_letter_key(self) -> str:
        return self._dead_letter_key

    async def push(self, event_id: str) -> None:
        try:
            await self._redis.lpush(self._main_key, event_id)
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(f"Queue {self._main_key} unavailable: {e}") from e

    async def pop(self, timeout: int = 0) -> Optional[str]:
        try:
            return await self._redis.brpop(self._main_key, timeout=timeout)
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(f"Queue {self._main_key} unavailable: {e}") from e

    async def push_dead_letter(self, event_id: str) -> None:
        try:
            await self._redis.lpush(self._dead_letter_key, event_id)
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(f"Queue {self._dead_letter_key} unavailable: {e}") from e

    async def depth(self) -> int:
        try:
            return await self._redis.llen(self._main_key)
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(f"Queue {self._main_key} unavailable: {e}") from e

    async def dead_letter_depth(self) -> int:
        try:
            return await self._redis.llen(self._dead_letter_key)
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(f"Queue {self._dead_letter_key} unavailable: {e}") from e

    async def ping(self) -> None:
        try:
            await self._redis.ping()
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(f"Queue backend for {self._category} unavailable: {e}") from e
