"""RedisEventQueue over a fake Redis client: key layout, FIFO order, error wrapping."""

from collections import defaultdict, deque

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.application.exceptions import QueueUnavailableError
from app.infrastructure.cache.event_queue_redis import RedisEventQueue, queue_key


class FakeRedisClient:
    """Mimics RedisClient list semantics: lpush onto the head, brpop from the tail."""

    def __init__(self):
        self.lists = defaultdict(deque)
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def lpush(self, key, value):
        self._check()
        self.lists[key].appendleft(value)
        return len(self.lists[key])

    async def brpop(self, key, timeout=0):
        self._check()
        if not self.lists[key]:
            return None
        return self.lists[key].pop()

    async def llen(self, key):
        self._check()
        return len(self.lists[key])

    async def ping(self):
        self._check()
        return True


def test_queue_keys_per_category():
    queue = RedisEventQueue(FakeRedisClient(), "stripe")
    assert queue.main_key == "payment_events:stripe:main"
    assert queue.dead_letter_key == "payment_events:stripe:dead-letter"
    assert queue_key("mollie", "main") == "payment_events:mollie:main"


@pytest.mark.asyncio
async def test_push_pop_is_fifo():
    queue = RedisEventQueue(FakeRedisClient(), "stripe")
    for event_id in ("evt_1", "evt_2", "evt_3"):
        await queue.push(event_id)

    assert await queue.depth() == 3
    assert [await queue.pop(timeout=1) for _ in range(3)] == ["evt_1", "evt_2", "evt_3"]
    assert await queue.pop(timeout=1) is None


@pytest.mark.asyncio
async def test_dead_letter_separate_from_main():
    redis = FakeRedisClient()
    queue = RedisEventQueue(redis, "mollie")
    await queue.push_dead_letter("tr_1_1")

    assert await queue.depth() == 0
    assert await queue.dead_letter_depth() == 1
    assert list(redis.lists["payment_events:mollie:dead-letter"]) == ["tr_1_1"]


@pytest.mark.asyncio
async def test_categories_do_not_share_queues():
    redis = FakeRedisClient()
    await RedisEventQueue(redis, "stripe").push("evt_1")
    assert await RedisEventQueue(redis, "mollie").depth() == 0


@pytest.mark.asyncio
async def test_redis_errors_wrapped():
    redis = FakeRedisClient()
    redis.fail = True
    queue = RedisEventQueue(redis, "stripe")

    with pytest.raises(QueueUnavailableError):
        await queue.push("evt_1")
    with pytest.raises(QueueUnavailableError):
        await queue.pop()
    with pytest.raises(QueueUnavailableError):
        await queue.dead_letter_depth()


@pytest.mark.asyncio
async def test_ping_wraps_redis_errors():
    redis = FakeRedisClient()
    queue = RedisEventQueue(redis, "stripe")
    await queue.ping()

    redis.fail = True
    with pytest.raises(QueueUnavailableError):
        await queue.ping()
