"""Tests for slug generation and the Redis slug index."""

import pytest

from catalog.errors import ValidationError
from catalog.services.slug import base_slug, slugify


def test_base_slug_uses_all_source_fields():
    assert base_slug([1024, "Son Môi Lì"]) == "1024-son-moi-li"


def test_base_slug_skips_missing_fields():
    assert base_slug([None, "Toner"]) == "toner"
    assert base_slug([None, ""]) == "product"


def test_slugify_disambiguates_collisions():
    assert slugify(["Toner"], []) == "toner"
    assert slugify(["Toner"], ["toner"]) == "toner-2"
    assert slugify(["Toner"], ["toner", "toner-2"]) == "toner-3"


def test_slugify_collision_is_case_and_accent_insensitive():
    assert slugify(["Sữa"], ["SUA"]) == "sua-2"


@pytest.mark.asyncio
async def test_assign_reserves_distinct_slugs(slug_service):
    first = await slug_service.assign(["Serum"], "1")
    second = await slug_service.assign(["Serum"], "2")

    assert first == "serum"
    assert second == "serum-2"
    assert await slug_service.owner_of("SERUM") == "1"


@pytest.mark.asyncio
async def test_claim_is_reentrant_for_owner(slug_service):
    assert await slug_service.claim("mask", "7")
    assert await slug_service.claim("mask", "7")
    assert not await slug_service.claim("Mask", "8")


@pytest.mark.asyncio
async def test_release_frees_slug_only_for_owner(slug_service):
    await slug_service.claim("mask", "7")

    await slug_service.release("mask", "8")
    assert await slug_service.owner_of("mask") == "7"

    await slug_service.release("mask", "7")
    assert await slug_service.owner_of("mask") is None


@pytest.mark.asyncio
async def test_assign_gives_up_after_max_attempts(slug_service):
    for owner in range(5):
        await slug_service.assign(["Cushion"], str(owner))

    with pytest.raises(ValidationError) as exc_info:
        await slug_service.assign(["Cushion"], "99")

    assert exc_info.value.issues[0].kind == "uniqueness"
