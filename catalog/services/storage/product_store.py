"""Redis-backed persistence for product documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import redis.asyncio as redis
from redis.exceptions import WatchError

from catalog.config import settings
from catalog.errors import DependencyUnavailable, ProductNotFoundError, ValidationError
from catalog.models.validation import ValidationIssue
from catalog.services.redis_client import get_redis_client, unavailable_as

logger = logging.getLogger(__name__)


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay `patch` onto `base`; nested mappings merge, everything else is replaced."""

    merged = dict(base)
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def combination_sql_ids(document: Mapping[str, Any]) -> set[int]:
    return {
        combination["my_sociolla_sql_id"]
        for combination in document.get("combinations") or []
        if isinstance(combination, Mapping)
        and combination.get("my_sociolla_sql_id") is not None
    }


class ProductStore:
    """Stores each product as a JSON document keyed by its id.

    A hash index maps every combination `my_sociolla_sql_id` to the id of the
    product that owns it. `created_at`/`updated_at` are maintained here.
    """

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str,
        combination_index_key: str,
        max_retries: int = 5,
    ) -> None:
        self._client = client
        self._prefix = key_prefix
        self._combination_index = combination_index_key
        self._max_retries = max_retries

    def _key(self, product_id: int | str) -> str:
        return f"{self._prefix}{product_id}"

    async def fetch(self, product_id: int | str) -> dict[str, Any] | None:
        async with unavailable_as("product store"):
            raw = await self._client.get(self._key(product_id))
        if not raw:
            return None
        return json.loads(raw)

    async def insert(self, product_id: int | str, document: Mapping[str, Any]) -> dict[str, Any]:
        """Persist a new document, setting both timestamps.

        The product key and the combination index are both watched, so a
        combination id claimed by a concurrent write is re-checked on retry.
        """

        key = self._key(product_id)
        for attempt in range(1, self._max_retries + 1):
            now = self._timestamp()
            stored = {**document, "created_at": now, "updated_at": now}
            try:
                async with unavailable_as("product store"):
                    async with self._client.pipeline(transaction=True) as pipe:
                        await pipe.watch(key, self._combination_index)
                        if await pipe.exists(key):
                            raise ValidationError(
                                [
                                    ValidationIssue(
                                        path="id",
                                        kind="uniqueness",
                                        message=f"Product {product_id} already exists",
                                    )
                                ]
                            )
                        await self._reject_taken_combinations(pipe, str(product_id), stored)

                        pipe.multi()
                        pipe.set(key, json.dumps(stored))
                        self._queue_index_changes(pipe, str(product_id), {}, stored)
                        await pipe.execute()
            except WatchError:
                logger.info(
                    "Concurrent write while inserting product %s, retrying (attempt %d)",
                    product_id,
                    attempt,
                )
                continue

            logger.info("Inserted product %s", product_id)
            return stored

        raise DependencyUnavailable(
            "product store",
            f"product {product_id} could not be inserted in {self._max_retries} attempts",
        )

    async def update(self, product_id: int | str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Merge a partial payload into the stored document and bump `updated_at`.

        Uses an optimistic WATCH check; a concurrent write to the same
        product or to the combination index causes a retry against fresh data.
        """

        key = self._key(product_id)
        for attempt in range(1, self._max_retries + 1):
            try:
                async with unavailable_as("product store"):
                    async with self._client.pipeline(transaction=True) as pipe:
                        await pipe.watch(key, self._combination_index)
                        raw = await pipe.get(key)
                        if not raw:
                            raise ProductNotFoundError(f"Product {product_id} not found")
                        existing = json.loads(raw)
                        merged = deep_merge(existing, payload)
                        merged["updated_at"] = self._timestamp()
                        await self._reject_taken_combinations(pipe, str(product_id), merged)

                        pipe.multi()
                        pipe.set(key, json.dumps(merged))
                        self._queue_index_changes(pipe, str(product_id), existing, merged)
                        await pipe.execute()
            except WatchError:
                logger.info(
                    "Concurrent write on product %s, retrying (attempt %d)",
                    product_id,
                    attempt,
                )
                continue

            logger.info("Updated product %s", product_id, extra={"fields": sorted(payload)})
            return merged

        raise DependencyUnavailable(
            "product store",
            f"product {product_id} kept changing during {self._max_retries} attempts",
        )

    async def combination_owners(self, sql_ids: Iterable[int]) -> dict[int, str]:
        """Return the owning product id for each already indexed combination id."""

        async with unavailable_as("product store"):
            return await self._lookup_owners(self._client, sql_ids)

    async def _lookup_owners(self, client: Any, sql_ids: Iterable[int]) -> dict[int, str]:
        ids = list(sql_ids)
        if not ids:
            return {}
        owners = await client.hmget(self._combination_index, [str(i) for i in ids])
        return {sql_id: owner for sql_id, owner in zip(ids, owners) if owner is not None}

    async def _reject_taken_combinations(
        self,
        pipe: Any,
        product_id: str,
        document: Mapping[str, Any],
    ) -> None:
        owners = await self._lookup_owners(pipe, combination_sql_ids(document))
        issues = [
            ValidationIssue(
                path=f"combinations.{index}.my_sociolla_sql_id",
                kind="uniqueness",
                message=(
                    f"my_sociolla_sql_id {combination['my_sociolla_sql_id']} "
                    f"already belongs to product {owners[combination['my_sociolla_sql_id']]}"
                ),
            )
            for index, combination in enumerate(document.get("combinations") or [])
            if isinstance(combination, Mapping)
            and owners.get(combination.get("my_sociolla_sql_id"), product_id) != product_id
        ]
        if issues:
            raise ValidationError(issues)

    def _queue_index_changes(
        self,
        pipe: Any,
        product_id: str,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
    ) -> None:
        old_ids = combination_sql_ids(before)
        new_ids = combination_sql_ids(after)
        removed = old_ids - new_ids
        if removed:
            pipe.hdel(self._combination_index, *(str(i) for i in removed))
        if new_ids:
            pipe.hset(
                self._combination_index,
                mapping={str(i): product_id for i in new_ids},
            )

    @staticmethod
    def _timestamp() -> str:
        return datetime.now(UTC).isoformat()


def create_product_store(client: redis.Redis | None = None) -> ProductStore:
    """Factory function to create a product store."""
    return ProductStore(
        client or get_redis_client(),
        settings.PRODUCT_KEY_PREFIX,
        settings.COMBINATION_INDEX_KEY,
        max_retries=settings.UPDATE_MAX_RETRIES,
    )
