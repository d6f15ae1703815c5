"""Shared Redis client and connection-failure translation."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from catalog.config import settings
from catalog.errors import DependencyUnavailable

logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return a singleton Redis client for the current process."""

    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=30,
        )
    return _redis_client


@asynccontextmanager
async def unavailable_as(dependency: str) -> AsyncGenerator[None, None]:
    """Re-raise Redis connectivity failures as DependencyUnavailable."""

    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as exc:
        logger.error("%s unreachable: %s", dependency, exc)
        raise DependencyUnavailable(dependency, str(exc)) from exc
