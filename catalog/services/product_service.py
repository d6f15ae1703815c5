"""Create/update orchestration for product documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from catalog.config import settings
from catalog.errors import DependencyUnavailable, ProductNotFoundError, ValidationError
from catalog.models.product import Product
from catalog.models.validation import ValidationIssue
from catalog.services.counter import CounterService, create_counter_service
from catalog.services.normalizer import normalize_on_create, normalize_on_update
from catalog.services.slug import SlugService, create_slug_service
from catalog.services.storage.product_store import (
    ProductStore,
    create_product_store,
    deep_merge,
)
from catalog.services.transliteration import collation_key
from catalog.services.validator import validate

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "my_sociolla_sql_id")


class ProductService:
    """Runs every product write through normalization, validation and the store."""

    def __init__(
        self,
        store: ProductStore,
        counter: CounterService,
        slugs: SlugService,
    ) -> None:
        self._store = store
        self._counter = counter
        self._slugs = slugs

    async def get(self, product_id: int) -> Product | None:
        document = await self._store.fetch(product_id)
        if document is None:
            return None
        return Product.model_validate(document)

    async def create(self, document: Mapping[str, Any]) -> Product:
        """Create a product and assign its id, legacy sql id and slug.

        Identity is only attached once every collaborator call succeeded; a
        counter value drawn before a later failure is simply never used.
        """

        normalized = normalize_on_create(document)
        result = validate(normalized)
        if not result.ok:
            raise ValidationError(result.issues)

        product = Product.model_validate(normalized)
        await self._check_combination_ids(product, owner_id=None)

        product_id = await self._counter.next(settings.PRODUCT_ID_COUNTER)
        sql_id = await self._counter.next(settings.PRODUCT_SQL_ID_COUNTER)
        owner_id = str(product_id)
        slug = await self._slugs.assign([sql_id, product.name], owner_id)

        product = product.model_copy(
            update={"id": product_id, "my_sociolla_sql_id": sql_id, "slug": slug}
        )
        try:
            stored = await self._store.insert(product_id, product.to_document())
        except Exception:
            await self._release_slug(slug, owner_id)
            raise

        logger.info(
            "Created product %s",
            product_id,
            extra={"slug": slug, "my_sociolla_sql_id": sql_id},
        )
        return Product.model_validate(stored)

    async def update(self, product_id: int, payload: Mapping[str, Any]) -> Product:
        """Apply a partial update.

        The normalizer only sees `payload`; validation runs on the stored
        document with the payload merged in.
        """

        existing = await self._store.fetch(product_id)
        if existing is None:
            raise ProductNotFoundError(f"Product {product_id} not found")

        patch = normalize_on_update(payload)
        issues = [
            ValidationIssue(
                path=field,
                kind="immutable_field",
                message=f"{field} cannot change once assigned",
            )
            for field in IMMUTABLE_FIELDS
            if field in patch and patch[field] != existing.get(field)
        ]
        if "slug" in patch and not patch["slug"]:
            issues.append(
                ValidationIssue(
                    path="slug",
                    kind="immutable_field",
                    message="slug cannot be cleared",
                )
            )
        merged = deep_merge(existing, patch)
        issues.extend(validate(merged).issues)
        if issues:
            raise ValidationError(issues)

        product = Product.model_validate(merged)
        owner_id = str(product_id)
        if "combinations" in patch:
            await self._check_combination_ids(product, owner_id=owner_id)

        old_slug = existing.get("slug")
        slug_changed = "slug" in patch and not _same_slug(patch["slug"], old_slug)
        # soft delete freed the slug, restoring must win it back
        restored = bool(existing.get("is_deleted")) and patch.get("is_deleted") is False
        reclaimed = restored and not slug_changed and bool(old_slug)
        if slug_changed:
            await self._claim_slug(patch["slug"], owner_id)
        elif reclaimed:
            await self._claim_slug(old_slug, owner_id)

        full = product.to_document()
        try:
            stored = await self._store.update(
                product_id, {key: full[key] for key in patch if key in full}
            )
        except Exception:
            if slug_changed:
                await self._release_slug(patch["slug"], owner_id)
            elif reclaimed:
                await self._release_slug(old_slug, owner_id)
            raise

        if slug_changed and old_slug:
            await self._release_slug(old_slug, owner_id)
        return Product.model_validate(stored)

    async def soft_delete(self, product_id: int) -> Product:
        """Flag a product as deleted and free its slug for reuse."""

        existing = await self._store.fetch(product_id)
        if existing is None:
            raise ProductNotFoundError(f"Product {product_id} not found")

        stored = await self._store.update(product_id, {"is_deleted": True})
        if existing.get("slug"):
            await self._slugs.release(existing["slug"], str(product_id))
        logger.info("Soft-deleted product %s", product_id)
        return Product.model_validate(stored)

    async def _check_combination_ids(self, product: Product, owner_id: str | None) -> None:
        indexed = {
            combination.my_sociolla_sql_id: index
            for index, combination in enumerate(product.combinations)
            if combination.my_sociolla_sql_id is not None
        }
        owners = await self._store.combination_owners(indexed)
        issues = [
            ValidationIssue(
                path=f"combinations.{indexed[sql_id]}.my_sociolla_sql_id",
                kind="uniqueness",
                message=f"my_sociolla_sql_id {sql_id} already belongs to product {owner}",
            )
            for sql_id, owner in owners.items()
            if owner != owner_id
        ]
        if issues:
            raise ValidationError(issues)

    async def _claim_slug(self, slug: str, owner_id: str) -> None:
        if not await self._slugs.claim(slug, owner_id):
            raise ValidationError(
                [
                    ValidationIssue(
                        path="slug",
                        kind="uniqueness",
                        message=f"Slug {slug!r} is already taken",
                    )
                ]
            )

    async def _release_slug(self, slug: str, owner_id: str) -> None:
        try:
            await self._slugs.release(slug, owner_id)
        except DependencyUnavailable:
            logger.error(
                "Failed to release slug %s of product %s",
                slug,
                owner_id,
                exc_info=True,
            )


def _same_slug(left: Any, right: Any) -> bool:
    if not isinstance(left, str) or not isinstance(right, str):
        return left == right
    return collation_key(left) == collation_key(right)


def create_product_service() -> ProductService:
    """Factory function wiring the service to the shared Redis client."""
    return ProductService(
        create_product_store(),
        create_counter_service(),
        create_slug_service(),
    )
