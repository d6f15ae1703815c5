"""Combination (purchasable variant) models.

A full combination lives inside a product; a trimmed-down copy of the same
shape lives inside each pack_detail member. Both share CombinationBase and
their locale overrides share CombinationLocaleBase.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from catalog.models.common import (
    AttributeSet,
    DigitalPriceTag,
    Discount,
    Image,
    LocaleMap,
    ObjectId,
    Preorder,
    Store,
)
from catalog.models.enums import StatusItem, Visibility


class CombinationLocaleBase(BaseModel):
    price: float | None = None
    video_url: str | None = None
    warehouse_location: str | None = None
    total_masks: int | None = None
    stock: int = 0
    safety_stock: int | None = None
    meta_keyword: str | None = None
    product_number: str | None = None
    max_limit_per_order: int | None = None
    images: list[Image] = Field(default_factory=list)
    ean_no: str | None = None
    reference: str | None = None


class CombinationLocale(CombinationLocaleBase):
    attributes: AttributeSet | None = None
    is_default: bool | None = None
    others_ean_no: list[str] = Field(default_factory=list)
    stores: list[Store] = Field(default_factory=list)
    stock_market_place: int = 0
    reserved_qty: int = 0
    reserved_stock_marketplace: int = 0
    is_kill_product: bool = False
    weight: float = 0
    status_item: StatusItem = "not_selected"


class CombinationI18n(LocaleMap):
    vi: CombinationLocale | None = None


class PackCombinationI18n(LocaleMap):
    vi: CombinationLocaleBase | None = None


class CombinationBase(BaseModel):
    id: ObjectId | None = None
    my_soco_sql_id: int | None = None
    my_sociolla_sql_id: int | None = None
    is_default: bool | None = None
    attributes: AttributeSet | None = None
    images: list[Image] = Field(default_factory=list)
    video_url: str | None = None
    ean_no: str | None = None
    product_number: str | None = None
    reference: str | None = None
    price: float | None = None
    stock: int = 0
    safety_stock: int | None = None
    max_limit_per_order: int | None = None

    is_active_in_review: bool = False
    is_active_in_sociolla: bool = False
    is_active_in_event_microsite: bool = False
    is_active_in_event_microsite_vn: bool = False
    is_active_in_lulla: bool = False
    is_active_in_sociolla_vn: bool = False
    is_active_in_offline_store: bool = False
    is_active_in_carasun: bool = False
    is_active_in_cosrx: bool = False

    is_deleted: bool = False
    is_limited: bool = False
    is_exclusive: bool = False
    is_out_of_stock_sociolla: bool = False
    is_out_of_stock_lulla: bool = False
    is_out_of_stock_sociolla_vn: bool = False
    is_out_of_stock_carasun: bool = False
    is_out_of_stock_cosrx: bool = False


class BusinessType(BaseModel):
    id: ObjectId | None = None
    code: str | None = None


class B2BMarketType(BaseModel):
    id: ObjectId | None = None
    code: str | None = None
    business_type: BusinessType | None = None


class Combination(CombinationBase):
    """One purchasable variant of a product.

    `my_sociolla_sql_id` must be unique across every product's combinations.
    """

    # mask packages
    total_masks: int | None = None
    saving: str | None = None
    weight: float = 0

    bpom_reg_no: str | None = None
    bpom_expired_at: datetime | None = None
    others_ean_no: list[str] = Field(default_factory=list)
    warehouse_location: str | None = None
    margin: float | None = None
    available_for_guest: bool = False
    reserved_qty: int = 0  # ordered but not shipped
    reserved_stock_marketplace: int = 0
    tax: float | None = None
    soco_stock: int = 0
    stock_market_place: int = 0

    i18n: CombinationI18n = Field(default_factory=CombinationI18n)

    is_active_in_review_vn: bool = False
    is_active_in_offline_store_vn: bool = False
    is_active_in_offline_store_lilla: bool = False
    is_active_in_b2b: bool = False
    is_kill_product: bool = False
    enabled_in_freebies: bool = False

    discounts: list[Discount] = Field(default_factory=list)
    preorder: list[Preorder] = Field(default_factory=list)
    stores: list[Store] = Field(default_factory=list)
    digital_price_tag: list[DigitalPriceTag] = Field(default_factory=list)

    created_at: datetime | None = None
    deleted_at: datetime | None = None
    is_discontinue: bool = False
    b2b_market_type: B2BMarketType | None = None
    status_item: StatusItem = "not_selected"


class PackCombination(CombinationBase):
    """Combination chosen for a member of a bundle."""

    visibility: Visibility = "Nowhere"
    i18n: PackCombinationI18n = Field(default_factory=PackCombinationI18n)
