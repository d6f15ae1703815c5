"""Product aggregate schema.

The whole document, including every embedded combination, rule and
locale override, is one unit of consistency.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, get_args

from pydantic import BaseModel, ConfigDict, Field

from catalog.models.combination import Combination, PackCombination
from catalog.models.common import (
    Award,
    Category,
    ContentFields,
    DefaultCategory,
    Discount,
    HighlightFlags,
    Image,
    LocaleMap,
    LocaleTag,
    ObjectId,
    ParentCategory,
    Preorder,
    ReviewStats,
    Store,
    Tag,
    TrimmedStr,
    Video,
)
from catalog.models.enums import (
    BogoPlatform,
    Classification,
    Condition,
    FramePlatform,
    InactiveState,
    PackClassification,
    Platform,
    ProductStatus,
    PurchaseType,
    TacticalPromoType,
)


class SeoFields(BaseModel):
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None


class StorefrontContent(ContentFields, SeoFields):
    """Storefront-specific copy overriding the default text."""


class CosrxContent(StorefrontContent):
    skincare_step: str | None = None
    product_comparison: str | None = None


class BrandLocale(BaseModel):
    country: str | None = None


class BrandI18n(LocaleMap):
    vi: BrandLocale | None = None


class PackBrand(BaseModel):
    id: ObjectId | None = None
    name: str | None = None
    slug: str | None = None
    logo: str | None = None
    region: str | None = None
    country: str | None = None
    country_tag_id: int | None = None
    flag: str | None = None
    i18n: BrandI18n = Field(default_factory=BrandI18n)


class Brand(PackBrand):
    """Point-in-time copy of the brand; renames are not propagated here."""

    name_latin: str | None = None
    my_soco_sql_id: int | None = None
    my_sociolla_sql_id: int | None = None
    is_active_in_lulla: bool | None = None
    is_active_in_sociolla: bool | None = None
    is_active_in_sociolla_vn: bool | None = None
    is_active_in_carasun: bool | None = None
    is_active_in_cosrx: bool | None = None
    is_active_in_review: bool | None = None
    is_active_in_event_microsite: bool | None = None
    is_active_in_event_microsite_vn: bool | None = None


class BogoRuleBase(BaseModel):
    """Buy-one-get-one rule pointing at the free product/combination."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    voucher_id: ObjectId | None = None
    id: int | None = None
    combination_id: ObjectId | None = None
    quantity: int = 0
    stock: int = 0
    from_: datetime | None = Field(None, alias="from")
    to: datetime | None = None


class BogoRule(BogoRuleBase):
    apply_discount_for: list[BogoPlatform] = Field(default_factory=list)


class FrameRule(BaseModel):
    id: ObjectId | None = None
    is_active: bool | None = None
    combination_ids: list[ObjectId] = Field(default_factory=list)
    image: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    applicable_for: list[FramePlatform] = Field(default_factory=list)
    created_at: datetime | None = None


class ProductLocale(ContentFields):
    """Sparse per-locale override of the root display fields."""

    name: TrimmedStr | None = None
    name_latin: TrimmedStr | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keyword: str | None = None
    categories: list[Category] = Field(default_factory=list)
    default_category: DefaultCategory | None = None
    parent_category: ParentCategory | None = None
    tags: list[LocaleTag] = Field(default_factory=list)
    is_whats_new: HighlightFlags | None = None
    is_bundle_pack: HighlightFlags | None = None
    is_limited: bool = False
    is_active_in_review: bool = True
    is_exclusive: bool = False
    is_online: bool = False
    is_product_testing: bool = False
    is_dangerous: bool = False
    is_kill_product: bool = False
    is_liquid: bool = False
    is_most_popular: bool = False
    is_product_ticket: bool = False
    is_soco_event: bool = False
    is_non_discounted: bool = False
    images: list[Image] = Field(default_factory=list)
    bogo_rules: list[BogoRuleBase] = Field(default_factory=list)
    two_days_total_views: int = 0
    total_orders: int = 0
    url_sociolla: str | None = None
    margin: float | None = None
    awards: list[Award] = Field(default_factory=list)
    review_stats: ReviewStats = Field(default_factory=ReviewStats)


class ProductI18n(LocaleMap):
    vi: ProductLocale | None = None


class PackDetailLocale(ContentFields):
    name: TrimmedStr | None = None
    images: list[Image] = Field(default_factory=list)
    review_stats: ReviewStats = Field(default_factory=ReviewStats)


class PackDetailI18n(LocaleMap):
    vi: PackDetailLocale | None = None


class PackDetail(ContentFields):
    """Summary of a product contained in a bundle. Members are never bundles of bundles."""

    id: int | None = None
    name: str | None = None
    classification: PackClassification | None = None
    slug: str | None = None

    is_active_in_sociolla: bool = False
    is_active_in_sociolla_vn: bool = False
    is_active_in_event_microsite: bool = False
    is_active_in_event_microsite_vn: bool = False
    is_active_in_lulla: bool = False
    is_active_in_carasun: bool = False
    is_active_in_cosrx: bool = False
    is_out_of_stock_sociolla: bool = False
    is_out_of_stock_lilla: bool = False
    is_out_of_stock_sociolla_vn: bool = False
    is_out_of_stock_carasun: bool = False
    is_out_of_stock_cosrx: bool = False

    brand: PackBrand | None = None
    images: list[Image] = Field(default_factory=list)
    i18n: PackDetailI18n = Field(default_factory=PackDetailI18n)
    combinations: list[PackCombination] = Field(default_factory=list)
    quantity: int = 1
    review_stats: ReviewStats = Field(default_factory=ReviewStats)
    is_deleted: bool = False
    default_category: DefaultCategory | None = None


class MaskTierProduct(BaseModel):
    id: int | None = None
    combination_id: ObjectId | None = None


class MaskTier(BaseModel):
    limit: int | None = None
    products: list[MaskTierProduct] = Field(default_factory=list)


class MaskDetail(BaseModel):
    """Quota tiers of a mask subscription package."""

    tier1: MaskTier = Field(default_factory=MaskTier)
    tier2: MaskTier = Field(default_factory=MaskTier)
    tier3: MaskTier = Field(default_factory=MaskTier)


class HighestOrderPrice(BaseModel):
    total_price: float = 0
    combination_id: ObjectId | None = None


class SizeChartDimensions(BaseModel):
    row: int = 0
    column: int = 0


class SizeChartCell(BaseModel):
    value: str | None = None


class SizeChartColumn(BaseModel):
    title: str | None = None
    rows: list[SizeChartCell] = Field(default_factory=list)


class SizeChartTable(BaseModel):
    size: SizeChartDimensions = Field(default_factory=SizeChartDimensions)
    table: list[SizeChartColumn] = Field(default_factory=list)
    units: str | None = None
    image: str | None = None
    enabled: bool = False


class OurPick(BaseModel):
    is_active: bool | None = None
    created_at: datetime | None = None


class CuratedMaskBox(BaseModel):
    id: int | None = None


class CuratedPlan(BaseModel):
    id: int | None = None
    name: str | None = None


class PinkUniversityGame(BaseModel):
    is_active: bool = False
    url: str | None = None
    play_url: str | None = None
    points: int | None = None


class OdooCategory(BaseModel):
    id: ObjectId | None = None
    name: str | None = None


class UserContribution(BaseModel):
    is_user_contribution: bool = False
    user_id: ObjectId | None = None
    user_name: str | None = None


class Product(ContentFields, SeoFields):
    """Root of the product aggregate.

    `id` and `my_sociolla_sql_id` come from the counter service and `slug`
    from the slug service on creation; none of them change afterwards.
    The first entry of `combinations` is the default variant by convention.
    """

    id: int | None = None
    my_sociolla_sql_id: int | None = None
    slug: str | None = None
    is_slug_updated: bool = False

    name: TrimmedStr | None = None
    i18n: ProductI18n = Field(default_factory=ProductI18n)

    ninty_days_total_views: int = 0
    ninty_days_total_views_vn: int = 0
    highest_order_price_lilla: HighestOrderPrice = Field(default_factory=HighestOrderPrice)
    url_sociolla: str | None = None

    disclamer: str | None = None
    size_chart_table: SizeChartTable = Field(default_factory=SizeChartTable)

    images: list[Image] = Field(default_factory=list)
    videos: list[Video] = Field(default_factory=list)
    lulla: SeoFields | None = None
    carasun: StorefrontContent | None = None
    cosrx: CosrxContent | None = None

    is_sale: bool = False
    is_sale_lilla: bool = False
    is_sale_sociolla_vn: bool = False
    is_sale_cosrx: bool = False
    is_flashsale: bool = False
    is_pre_order: bool = False
    is_pre_order_lilla: bool = False
    is_pre_order_sociolla_vn: bool = False
    tactical_promo_type: TacticalPromoType | None = None
    is_featured_tracking_promo: bool = False
    is_deleted: bool = False
    status: ProductStatus = "waiting-approval"
    inactive_state: InactiveState | None = None

    is_active_in_review: bool = False
    is_active_in_sociolla: bool = False
    enabled_at_sociolla: datetime = Field(default_factory=lambda: datetime.now(UTC))
    is_active_in_lulla: bool = False
    is_active_in_offline_store: bool = False
    is_active_in_event_microsite: bool = False
    is_active_in_event_microsite_vn: bool = False
    is_active_in_sociolla_vn: bool = False
    is_active_in_review_vn: bool = False
    is_active_in_lulla_vn: bool = False
    is_active_in_offline_store_vn: bool = False
    is_active_in_offline_store_lilla: bool = False
    is_active_in_carasun: bool = False
    is_active_in_cosrx: bool = False
    is_active_in_b2b: bool = False
    is_limited: bool = False
    is_exclusive: bool = False
    is_online: bool = False
    is_disable_in_apps: bool = False
    is_organic_product: bool = False
    is_kill_product: bool = False

    pick_up_at_stores: list[Store] = Field(default_factory=list)

    is_product_testing: bool = False
    is_dangerous: bool = False
    is_liquid: bool = False
    condition: Condition | None = None
    purchase_type: PurchaseType | None = None
    bpom_reg_no: str | None = None
    margin: float | None = None
    total_orders: int = 0
    total_store_orders: int = 0
    total_wishlist: int = 0

    is_featured: bool | None = None
    is_our_pick: OurPick | None = None
    is_whats_new: HighlightFlags | None = None
    is_bundle_pack: HighlightFlags | None = None
    is_most_popular: bool = False
    is_product_ticket: bool = False
    is_soco_event: bool = False
    is_non_discounted: bool = False
    classification: Classification | None = None
    hide_pack_content: bool = False

    curated_mask_boxes: list[CuratedMaskBox] = Field(default_factory=list)
    pack_detail: list[PackDetail] = Field(default_factory=list)
    curated_plans: list[CuratedPlan] = Field(default_factory=list)
    has_free_products: bool = False
    plan_logo_url: str | None = None
    background_image_url: str | None = None
    ranking: int | None = None
    plan_ranking: int | None = None
    is_mask: bool = False
    mask_detail: MaskDetail | None = None
    bogo_rules: list[BogoRule] = Field(default_factory=list)
    is_pink_university_game: PinkUniversityGame | None = None

    discounts: list[Discount] = Field(default_factory=list)
    preorder: list[Preorder] = Field(default_factory=list)

    brand: Brand | None = None
    sbd_categories: list[Category] = Field(
        default_factory=list,
        max_length=3,
        description="Shop-by-department categories",
    )
    categories: list[Category] = Field(default_factory=list)
    odoo_category: OdooCategory | None = None
    default_category: DefaultCategory | None = None
    parent_category: ParentCategory | None = None

    combinations: list[Combination] = Field(default_factory=list)
    default_combination: Combination | None = None

    review_stats: ReviewStats = Field(default_factory=ReviewStats)
    awards: list[Award] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)

    added_by_user: ObjectId | None = None
    user_contribution: UserContribution = Field(default_factory=UserContribution)
    is_priority: bool = False
    platforms: list[Platform] = Field(default_factory=list)
    two_days_total_views: int | None = None

    is_out_of_stock_sociolla: bool = False
    is_out_of_stock_lilla: bool = False
    is_out_of_stock_carasun: bool = False
    is_out_of_stock_cosrx: bool = False
    is_out_of_stock_sociolla_vn: bool = False
    is_in_stock_sociolla: bool = True
    is_in_stock_lulla: bool = True
    is_in_stock_sociolla_vn: bool = True
    is_in_stock_carasun: bool = True
    is_in_stock_cosrx: bool = True
    active_for_sociolla_at: datetime | None = None
    active_for_sociolla_vn_at: datetime | None = None
    active_for_lilla_at: datetime | None = None

    is_internal_brand_lulla: bool = False
    is_internal_brand_sociolla: bool = False
    is_internal_brand_sociolla_vn: bool = False
    is_internal_brand_carasun: bool = False
    is_internal_brand_cosrx: bool = False

    two_days_total_orders: int | None = None
    just_arrived: bool = False
    position: int = 0
    seven_days_total_orders: int = 0
    thirty_days_total_orders: int = 0
    is_discontinue: bool = False
    created_by: ObjectId | None = None
    updated_by: ObjectId | None = None
    frame_rules: list[FrameRule] = Field(default_factory=list)
    bpom_expired_at: datetime | None = None
    is_for_moms: bool = False
    is_for_baby_kids: bool = False
    is_red_carpet: bool = False

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted JSON layout."""

        return self.model_dump(mode="json", by_alias=True)


def localized_name_locales() -> tuple[str, ...]:
    """Locales whose override record declares a `name` field."""

    locales = []
    for locale, field in ProductI18n.model_fields.items():
        records = [
            arg
            for arg in get_args(field.annotation)
            if isinstance(arg, type) and issubclass(arg, BaseModel)
        ]
        if any("name" in record.model_fields for record in records):
            locales.append(locale)
    return tuple(locales)
