"""Closed value sets used across the product document.

The three storefront scoping sets (discounts, bogo rules, frame rules) overlap
but are not identical, so each gets its own alias.
"""

from __future__ import annotations

from typing import Literal, get_args

Locale = Literal["vi"]

Classification = Literal[
    "sellable_products",  # ordinary product
    "gwp_non_sellable",  # gift with purchase
    "bundle_virtual",  # virtual bundle pack product
    "bundle_non_sellable",  # curated mask boxes
    "bundle_physical",  # physical bundle
    "egift",
    "mask_packages",  # mask subscription packages
    "paper_bag",
    "testers",
]

# pack_detail members cannot be paper bags
PackClassification = Literal[
    "sellable_products",
    "gwp_non_sellable",
    "bundle_virtual",
    "bundle_non_sellable",
    "bundle_physical",
    "egift",
    "mask_packages",
    "testers",
]

ProductStatus = Literal["approved", "waiting-approval", "rejected"]
InactiveState = Literal["no", "temporary", "permanent"]
Condition = Literal["new", "used", "refurbished"]
PurchaseType = Literal["direct_purchase", "consignment"]
DeductionType = Literal["percentage", "amount"]
TacticalPromoType = Literal["sociolla_sale", "sociolla_deals"]

DiscountPlatform = Literal[
    "all",
    "sociolla",
    "ios",
    "android",
    "brand_page",
    "offline_store",
    "offline_store_vn",
    "lulla",
    "lulla_ios",
    "lulla_android",
    "sociolla_vn",
    "sociolla_vn_android",
    "sociolla_vn_ios",
    "all_vn",
    "carasun",
    "cosrx",
]

BogoPlatform = Literal[
    "offline_store",
    "ios",
    "android",
    "sociolla",
    "lulla",
    "lulla_ios",
    "lulla_android",
    "sociolla_vn",
    "sociolla_vn_android",
    "sociolla_vn_ios",
    "offline_store_vn",
    "carasun",
    "cosrx",
    "sociolla_store",
]

FramePlatform = Literal[
    "all",
    "sociolla",
    "ios",
    "android",
    "sociolla_vn",
    "sociolla_vn_android",
    "sociolla_vn_ios",
]

Platform = Literal["sociolla", "sociolla_vn", "lulla", "carasun", "cosrx"]
StoreType = Literal["physical_store", "vending_machine"]
EslSize = Literal["S", "M", "XL"]
StatusItem = Literal["not_selected", "active", "to_be_discontinue", "discontinue", "new"]
Visibility = Literal["Everywhere", "Nowhere"]

SUPPORTED_LOCALES: tuple[str, ...] = get_args(Locale)

# classifications that are sold as-is and therefore need at least one combination
SELLABLE_CLASSIFICATIONS: frozenset[str] = frozenset(
    {
        "sellable_products",
        "bundle_virtual",
        "bundle_physical",
        "egift",
        "mask_packages",
    }
)
