"""URL slug generation and the Redis index that keeps slugs unique."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

import redis.asyncio as redis

from catalog.config import settings
from catalog.errors import ValidationError
from catalog.models.validation import ValidationIssue
from catalog.services.redis_client import get_redis_client, unavailable_as
from catalog.services.transliteration import collation_key, to_latin

logger = logging.getLogger(__name__)


def base_slug(source_fields: Iterable[Any], separator: str = "-") -> str:
    """Join the source values into a lowercase ASCII slug."""

    text = " ".join(str(value) for value in source_fields if value not in (None, ""))
    slug = re.sub(r"[^a-z0-9]+", separator, to_latin(text).lower())
    return slug.strip(separator) or "product"


def candidate_slugs(base: str, separator: str = "-") -> Iterator[str]:
    """Yield `base`, then `base-2`, `base-3`, ..."""

    yield base
    suffix = 2
    while True:
        yield f"{base}{separator}{suffix}"
        suffix += 1


def slugify(
    source_fields: Iterable[Any],
    existing_slugs: Iterable[str],
    separator: str = "-",
) -> str:
    """Return the first candidate slug not colliding with `existing_slugs`.

    Collisions are judged case- and accent-insensitively.
    """

    taken = {collation_key(slug) for slug in existing_slugs}
    candidates = candidate_slugs(base_slug(source_fields, separator), separator)
    return next(c for c in candidates if collation_key(c) not in taken)


class SlugService(ABC):
    """Assigns slugs that are unique within the product collection."""

    @abstractmethod
    async def assign(self, source_fields: Iterable[Any], owner_id: str) -> str:
        """Reserve and return a fresh slug for `owner_id`."""

    @abstractmethod
    async def claim(self, slug: str, owner_id: str) -> bool:
        """Reserve an explicit slug; False when another owner holds it."""

    @abstractmethod
    async def release(self, slug: str, owner_id: str) -> None:
        """Free a slug held by `owner_id`."""


class RedisSlugService(SlugService):
    """Slug index stored as a Redis hash of collation key -> owner id.

    HSETNX makes each reservation atomic, so concurrent creators can never
    end up with the same slug.
    """

    def __init__(
        self,
        client: redis.Redis,
        index_key: str,
        separator: str = "-",
        max_attempts: int = 50,
    ) -> None:
        self._client = client
        self._index_key = index_key
        self._separator = separator
        self._max_attempts = max_attempts

    async def assign(self, source_fields: Iterable[Any], owner_id: str) -> str:
        base = base_slug(source_fields, self._separator)
        candidates = candidate_slugs(base, self._separator)
        for _ in range(self._max_attempts):
            candidate = next(candidates)
            if await self.claim(candidate, owner_id):
                logger.info("Assigned slug %s to product %s", candidate, owner_id)
                return candidate

        raise ValidationError(
            [
                ValidationIssue(
                    path="slug",
                    kind="uniqueness",
                    message=f"No free slug for {base!r} after {self._max_attempts} attempts",
                )
            ]
        )

    async def claim(self, slug: str, owner_id: str) -> bool:
        key = collation_key(slug)
        async with unavailable_as("slug service"):
            if await self._client.hsetnx(self._index_key, key, owner_id):
                return True
            holder = await self._client.hget(self._index_key, key)
        return holder == owner_id

    async def release(self, slug: str, owner_id: str) -> None:
        key = collation_key(slug)
        async with unavailable_as("slug service"):
            holder = await self._client.hget(self._index_key, key)
            if holder == owner_id:
                await self._client.hdel(self._index_key, key)
                logger.info("Released slug %s of product %s", slug, owner_id)

    async def owner_of(self, slug: str) -> str | None:
        async with unavailable_as("slug service"):
            return await self._client.hget(self._index_key, collation_key(slug))


def create_slug_service(client: redis.Redis | None = None) -> RedisSlugService:
    """Factory function to create a slug service."""
    return RedisSlugService(
        client or get_redis_client(),
        settings.SLUG_INDEX_KEY,
        separator=settings.SLUG_SEPARATOR,
        max_attempts=settings.SLUG_MAX_ATTEMPTS,
    )
