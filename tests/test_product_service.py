"""End-to-end tests of product creation and update against fake Redis."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from catalog.errors import DependencyUnavailable, ProductNotFoundError, ValidationError
from catalog.services.product_service import ProductService
from catalog.services.transliteration import to_latin


@pytest.mark.asyncio
async def test_create_assigns_identity_and_derived_fields(product_service, product_document):
    product = await product_service.create(product_document)

    assert product.id == 1
    assert product.my_sociolla_sql_id == 1
    assert product.slug == "1-son-moi-li"
    assert product.i18n.vi.name == "Son Môi Lì"
    assert product.i18n.vi.name_latin == "Son Moi Li"
    assert product.brand.name_latin == to_latin("Hương Thảo")
    assert product.created_at is not None
    assert product.created_at == product.updated_at


@pytest.mark.asyncio
async def test_created_product_can_be_read_back(product_service, product_document):
    created = await product_service.create(product_document)

    fetched = await product_service.get(created.id)

    assert fetched == created
    assert await product_service.get(999) is None


@pytest.mark.asyncio
async def test_colliding_slug_sources_get_distinct_slugs(product_service, slug_service):
    await slug_service.claim("2-serum", "legacy")

    first = await product_service.create({"name": "Serum", "classification": "paper_bag"})
    second = await product_service.create({"name": "Serum", "classification": "paper_bag"})

    assert first.slug == "1-serum"
    assert second.slug == "2-serum-2"


@pytest.mark.asyncio
async def test_invalid_document_is_not_persisted(product_service, counter):
    with pytest.raises(ValidationError) as exc_info:
        await product_service.create({"name": "Serum", "classification": "not_a_real_value"})

    assert exc_info.value.issues[0].path == "classification"
    # no identity was drawn for the rejected document
    assert await counter.next("products.id") == 1


@pytest.mark.asyncio
async def test_combination_sql_id_is_unique_across_products(product_service, product_document):
    await product_service.create(product_document)

    with pytest.raises(ValidationError) as exc_info:
        await product_service.create(
            {
                "name": "Other",
                "classification": "sellable_products",
                "combinations": [{"my_sociolla_sql_id": 9002}],
            }
        )

    issue = exc_info.value.issues[0]
    assert issue.kind == "uniqueness"
    assert issue.path == "combinations.0.my_sociolla_sql_id"


@pytest.mark.asyncio
async def test_update_scopes_changes_to_payload(product_service, product_document):
    created = await product_service.create(product_document)

    updated = await product_service.update(created.id, {"i18n": {"vi": {"name": "Z"}}})

    assert updated.i18n.vi.name == "Z"
    assert updated.i18n.vi.name_latin == "Z"
    assert updated.name == created.name
    assert updated.brand == created.brand
    assert updated.combinations == created.combinations
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_with_brand_recomputes_brand_latin(product_service, product_document):
    created = await product_service.create(product_document)

    updated = await product_service.update(
        created.id,
        {"i18n": {"vi": {"name": "Son Lì"}}, "brand": {"name": "Đông Á"}},
    )

    assert updated.brand.name_latin == "Dong A"
    assert updated.brand.id == "brand-1"


@pytest.mark.asyncio
async def test_update_rejects_identity_changes(product_service, product_document):
    created = await product_service.create(product_document)

    with pytest.raises(ValidationError) as exc_info:
        await product_service.update(created.id, {"id": created.id + 1})

    assert exc_info.value.issues[0].kind == "immutable_field"


@pytest.mark.asyncio
async def test_update_validates_merged_document(product_service, product_document):
    created = await product_service.create(product_document)

    with pytest.raises(ValidationError) as exc_info:
        await product_service.update(created.id, {"combinations": []})

    assert exc_info.value.issues[0].path == "combinations"


@pytest.mark.asyncio
async def test_update_missing_product(product_service):
    with pytest.raises(ProductNotFoundError):
        await product_service.update(404, {"name": "ghost"})


@pytest.mark.asyncio
async def test_update_can_move_slug(product_service, product_document, slug_service):
    created = await product_service.create(product_document)

    updated = await product_service.update(created.id, {"slug": "son-moi"})

    assert updated.slug == "son-moi"
    assert await slug_service.owner_of(created.slug) is None
    assert await slug_service.owner_of("son-moi") == str(created.id)


@pytest.mark.asyncio
async def test_update_rejects_taken_slug(product_service, product_document, slug_service):
    created = await product_service.create(product_document)
    await slug_service.claim("taken", "other")

    with pytest.raises(ValidationError) as exc_info:
        await product_service.update(created.id, {"slug": "TAKEN"})

    assert exc_info.value.issues[0].path == "slug"


@pytest.mark.asyncio
async def test_soft_delete_releases_slug(product_service, product_document, slug_service):
    created = await product_service.create(product_document)

    deleted = await product_service.soft_delete(created.id)

    assert deleted.is_deleted
    assert await slug_service.owner_of(created.slug) is None


@pytest.mark.asyncio
async def test_failed_slug_assignment_assigns_no_identity(
    product_store, counter, product_document
):
    slugs = AsyncMock()
    slugs.assign.side_effect = DependencyUnavailable("slug service", "timeout")
    service = ProductService(product_store, counter, slugs)

    with pytest.raises(DependencyUnavailable):
        await service.create(product_document)

    assert await product_store.fetch(1) is None
    assert await product_store.combination_owners([9001]) == {}


@pytest.mark.asyncio
async def test_failed_insert_releases_reserved_slug(
    product_store, counter, slug_service, product_document
):
    product_store.insert = AsyncMock(
        side_effect=DependencyUnavailable("product store", "connection reset")
    )
    service = ProductService(product_store, counter, slug_service)

    with pytest.raises(DependencyUnavailable):
        await service.create(product_document)

    assert await slug_service.owner_of("1-son-moi-li") is None


@pytest.mark.asyncio
async def test_concurrent_creates_cannot_share_combination_sql_id(
    product_service, product_store
):
    results = await asyncio.gather(
        *(
            product_service.create(
                {
                    "name": name,
                    "classification": "sellable_products",
                    "combinations": [{"my_sociolla_sql_id": 777}],
                }
            )
            for name in ("Serum A", "Serum B")
        ),
        return_exceptions=True,
    )

    created = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, ValidationError)]
    assert len(created) == 1
    assert len(rejected) == 1
    assert rejected[0].issues[0].kind == "uniqueness"
    assert await product_store.combination_owners([777]) == {777: str(created[0].id)}


@pytest.mark.asyncio
async def test_restore_reclaims_released_slug(product_service, product_document, slug_service):
    created = await product_service.create(product_document)
    await product_service.soft_delete(created.id)

    restored = await product_service.update(created.id, {"is_deleted": False})

    assert not restored.is_deleted
    assert await slug_service.owner_of(created.slug) == str(created.id)


@pytest.mark.asyncio
async def test_restore_rejected_when_slug_was_taken(product_service, slug_service):
    first = await product_service.create({"name": "Serum", "classification": "paper_bag"})
    await product_service.soft_delete(first.id)
    second = await product_service.create({"name": "Serum", "classification": "paper_bag"})
    await product_service.update(second.id, {"slug": first.slug})

    with pytest.raises(ValidationError) as exc_info:
        await product_service.update(first.id, {"is_deleted": False})

    assert exc_info.value.issues[0].kind == "uniqueness"
    assert exc_info.value.issues[0].path == "slug"
    assert (await product_service.get(first.id)).is_deleted
    assert await slug_service.owner_of(first.slug) == str(second.id)
