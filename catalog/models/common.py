"""Shared record types embedded at several depths of the product document."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from catalog.models.enums import (
    DeductionType,
    DiscountPlatform,
    EslSize,
    StoreType,
    TacticalPromoType,
)

# Opaque reference to a document owned by another collection.
ObjectId = str

TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]


class LocaleMap(BaseModel):
    """Base for every `i18n` container: only declared locales are accepted."""

    model_config = ConfigDict(extra="forbid")


class Attribute(BaseModel):
    id: ObjectId | None = None
    value: str | None = None
    my_soco_sql_id: int | None = None
    name: str | None = None


class AttributeSet(BaseModel):
    """The variant axes a combination can be defined by."""

    size: Attribute | None = None
    shade: Attribute | None = None
    variant: Attribute | None = None
    non_specify: Attribute | None = None


class Image(BaseModel):
    my_sociolla_sql_id: int | None = None
    url: str | None = None
    is_cover: bool = False
    is_lilla_cover: bool = False
    is_cosrx_cover: bool = False
    position: int | None = None
    legend: str | None = Field(None, description="Alt text")
    deleted_at: datetime | None = None


class Video(BaseModel):
    url: str | None = None
    position: int | None = None
    description: str | None = None
    my_sociolla_sql_id: int | None = None


class Store(BaseModel):
    """Physical store or vending machine holding stock of a combination."""

    id: ObjectId | None = None
    sociolla_my_sql_id: int = 0
    pos_my_sql_id: int = 0
    alias: str | None = None
    stock: int = 0
    safety_stock: int | None = None
    is_sellable: bool = True
    is_active: bool = True
    type: StoreType = "physical_store"


class StoreRef(BaseModel):
    id: ObjectId | None = None
    alias: str | None = None


class DigitalPriceTag(BaseModel):
    esl_id: str | None = None
    esl_size: EslSize | None = None
    store_id: ObjectId | None = None


class Category(BaseModel):
    id: ObjectId | None = None
    my_soco_sql_id: int | None = None
    my_sociolla_sql_id: int | None = None
    is_show_category: bool | None = None
    name: str | None = None
    slug: str | None = None
    is_promotion: bool = False
    is_shop_by_departement: bool = False
    product_price_rule_id: ObjectId | None = None


class DefaultCategory(BaseModel):
    """Category used for review ratings."""

    id: ObjectId | None = None
    name: str | None = None
    slug: str | None = None
    my_soco_sql_id: int | None = None
    rating_types: list[str] = Field(default_factory=list)


class ParentCategory(BaseModel):
    """Root of the category tree; not necessarily the default category."""

    id: ObjectId | None = None
    name: str | None = None
    slug: str | None = None
    link_rewrite: str | None = None
    my_soco_sql_id: int | None = None


class Discount(BaseModel):
    """Time-boxed deduction scoped to a set of storefronts.

    Quota counters are only meaningful for flash sales; whether
    `sold_quota <= total_quota` still holds is decided by the pricing
    consumer, not here.
    """

    my_sociolla_sql_id: int | None = None
    from_date: datetime | None = None
    end_date: datetime | None = None
    updated_at: datetime | None = None
    deduction_type: DeductionType | None = None
    deduction_percentage: float | None = None
    deduction_amount: float | None = None
    deduction_for_sociolla: float | None = None
    deduction_for_brand: float | None = None
    apply_discount_for: list[DiscountPlatform] = Field(default_factory=list)
    stores: list[StoreRef] = Field(default_factory=list)
    tactical_promo_type: TacticalPromoType | None = None
    is_flashsale: bool = False
    is_tactical_sales: bool = False
    product_price_rule_id: ObjectId | None = None
    product_price_rule_name: str | None = None
    total_quota: int = 0
    max_item: int = 0
    sold_quota: int = 0
    starting_counter: int = 0
    is_show_as_percentage: bool | None = None


class Preorder(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None
    product_preorder_rules_id: ObjectId | None = None
    total_quota: int = 0
    sold_quota: int = 0
    per_user_quota: int = 0
    delivery_date: datetime | None = None
    is_active_in_sociolla: bool | None = None
    is_active_in_lulla: bool | None = None
    is_active_in_sociolla_vn: bool | None = None
    is_active_in_carasun: bool | None = None
    is_active_in_cosrx: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewStats(BaseModel):
    total_reviews: int = 0
    average_rating: float = 0
    average_rating_by_types: dict[str, Any] = Field(default_factory=dict)
    total_recommended_count: int = 0
    total_repurchase_maybe_count: int = 0
    total_repurchase_no_count: int = 0
    total_repurchase_yes_count: int = 0


class ContentFields(BaseModel):
    """Long-form display text shared by products, locales and pack members."""

    description: str | None = None
    short_description: str | None = None
    how_to_use: str | None = None
    ingredients: str | None = None


class HighlightFlags(BaseModel):
    """Per-storefront switch for a merchandising section."""

    is_active: bool | None = None
    is_active_in_sociolla: bool | None = None
    is_active_in_lulla: bool | None = None
    is_active_in_sociolla_vn: bool = False
    is_active_in_carasun: bool = False
    is_active_in_cosrx: bool = False
    created_at: datetime | None = None


class Award(BaseModel):
    name: str | None = None
    image: str | None = None
    title: str | None = None
    description: str | None = None
    year: int = 0


class Tag(BaseModel):
    id: ObjectId | None = None
    my_soco_sql_id: int | None = None
    name: str | None = None
    level_name: str | None = None
    is_campaign: bool | None = None


class LocaleTag(Tag):
    name_latin: str | None = None
