"""Tests for schema and invariant validation."""

from typing import get_args

import pytest

from catalog.models.enums import BogoPlatform, Classification, DiscountPlatform, FramePlatform
from catalog.models.product import Product
from catalog.services.validator import validate


def _issues_by_path(result):
    return {issue.path: issue for issue in result.issues}


@pytest.mark.unit
def test_valid_document_passes(product_document):
    result = validate(product_document)

    assert result.ok
    assert result.issues == []


def test_partial_document_passes():
    assert validate({"i18n": {"vi": {"name": "Z"}}}).ok


def test_unknown_classification_is_rejected():
    result = validate({"classification": "not_a_real_value"})

    issue = _issues_by_path(result)["classification"]
    assert issue.kind == "enum_violation"
    assert "sellable_products" in issue.message
    assert "not_a_real_value" in issue.message


def test_classification_set_is_closed():
    assert len(get_args(Classification)) == 9


def test_platform_sets_are_distinct():
    discount, bogo, frame = (
        set(get_args(DiscountPlatform)),
        set(get_args(BogoPlatform)),
        set(get_args(FramePlatform)),
    )

    assert len(discount) == 16
    assert "sociolla_store" in bogo and "sociolla_store" not in discount
    assert "brand_page" in discount and "brand_page" not in bogo
    assert frame < discount
    assert discount != bogo != frame


def test_bogo_rule_platform_outside_its_set_is_rejected():
    result = validate({"bogo_rules": [{"apply_discount_for": ["brand_page"]}]})

    assert _issues_by_path(result)["bogo_rules.0.apply_discount_for.0"].kind == "enum_violation"


def test_nested_enum_is_rejected():
    result = validate(
        {"combinations": [{"discounts": [{"deduction_type": "fixed"}]}]}
    )

    issue = _issues_by_path(result)["combinations.0.discounts.0.deduction_type"]
    assert issue.kind == "enum_violation"


def test_unknown_locale_is_rejected():
    result = validate({"i18n": {"vi": {"name": "A"}, "en": {"name": "B"}}})

    issue = _issues_by_path(result)["i18n.en"]
    assert issue.kind == "unknown_locale"


def test_unknown_combination_locale_is_rejected():
    result = validate({"combinations": [{"i18n": {"th": {"price": 1}}}]})

    assert _issues_by_path(result)["combinations.0.i18n.th"].kind == "unknown_locale"


def test_type_mismatch_is_reported():
    result = validate({"combinations": [{"stock": "plenty"}]})

    assert _issues_by_path(result)["combinations.0.stock"].kind == "type_mismatch"


def test_sbd_categories_capped_at_three():
    categories = [{"name": f"dept-{i}"} for i in range(4)]

    result = validate({"sbd_categories": categories})

    assert _issues_by_path(result)["sbd_categories"].kind == "cardinality"
    assert validate({"sbd_categories": categories[:3]}).ok


def test_sellable_product_needs_a_combination():
    result = validate({"name": "Serum", "classification": "sellable_products"})

    assert _issues_by_path(result)["combinations"].kind == "cardinality"


def test_non_sellable_product_may_have_no_combination():
    assert validate({"name": "Bag", "classification": "paper_bag"}).ok


def test_multiple_default_combinations_are_rejected(product_document):
    product_document["combinations"][1]["is_default"] = True

    result = validate(product_document)

    issue = _issues_by_path(result)["combinations"]
    assert issue.kind == "cardinality"
    assert "default" in issue.message


def test_repeated_combination_sql_id_is_rejected(product_document):
    product_document["combinations"][1]["my_sociolla_sql_id"] = 9001

    result = validate(product_document)

    assert set(result.paths()) == {
        "combinations.0.my_sociolla_sql_id",
        "combinations.1.my_sociolla_sql_id",
    }
    assert {issue.kind for issue in result.issues} == {"uniqueness"}


def test_bundle_members_cannot_nest_bundles():
    document = {
        "classification": "bundle_virtual",
        "combinations": [{"my_sociolla_sql_id": 1}],
        "pack_detail": [{"id": 3, "pack_detail": [{"id": 4}]}],
    }

    result = validate(document)

    assert _issues_by_path(result)["pack_detail.0.pack_detail"].kind == "nesting"


def test_pack_member_cannot_be_paper_bag():
    result = validate({"pack_detail": [{"id": 3, "classification": "paper_bag"}]})

    assert _issues_by_path(result)["pack_detail.0.classification"].kind == "enum_violation"


def test_defaults_match_persisted_layout():
    product = Product.model_validate({"combinations": [{}]})

    assert product.status == "waiting-approval"
    assert product.is_in_stock_sociolla is True
    assert product.combinations[0].status_item == "not_selected"
    assert product.mask_detail is None
    assert product.to_document()["user_contribution"] == {
        "is_user_contribution": False,
        "user_id": None,
        "user_name": None,
    }


def test_bogo_rule_from_field_round_trips_alias():
    product = Product.model_validate(
        {"bogo_rules": [{"name": "b1g1", "from": "2026-01-01T00:00:00Z"}]}
    )

    document = product.to_document()

    assert product.bogo_rules[0].from_ is not None
    assert document["bogo_rules"][0]["from"].startswith("2026-01-01")
