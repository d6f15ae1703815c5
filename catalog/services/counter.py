"""Counter service handing out per-name monotonically increasing integers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import redis.asyncio as redis

from catalog.config import settings
from catalog.services.redis_client import get_redis_client, unavailable_as

logger = logging.getLogger(__name__)


class CounterService(ABC):
    """Durable sequence source; a returned value is never handed out again."""

    @abstractmethod
    async def next(self, counter_name: str) -> int:
        """Return the next value of the named counter."""


class RedisCounterService(CounterService):
    """Counter backed by Redis INCR, atomic across processes."""

    def __init__(self, client: redis.Redis, key_prefix: str) -> None:
        self._client = client
        self._prefix = key_prefix

    def _key(self, counter_name: str) -> str:
        return f"{self._prefix}{counter_name}"

    async def next(self, counter_name: str) -> int:
        async with unavailable_as("counter service"):
            value = await self._client.incr(self._key(counter_name))
        logger.debug("Counter %s advanced to %s", counter_name, value)
        return int(value)


def create_counter_service(client: redis.Redis | None = None) -> RedisCounterService:
    """Factory function to create a counter service."""
    return RedisCounterService(client or get_redis_client(), settings.COUNTER_KEY_PREFIX)
