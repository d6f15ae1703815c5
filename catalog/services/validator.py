"""Pure validation of candidate product documents.

`validate` never touches storage; uniqueness against other products is
checked by the product service using the store indexes.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from catalog.models.enums import SELLABLE_CLASSIFICATIONS, SUPPORTED_LOCALES
from catalog.models.product import Product
from catalog.models.validation import IssueKind, ValidationIssue, ValidationResult

_CARDINALITY_ERRORS = {"too_long", "too_short"}


def validate(document: Mapping[str, Any]) -> ValidationResult:
    """Check a (partial or full) product document against the schema and invariants."""

    issues: list[ValidationIssue] = []
    product: Product | None = None
    try:
        product = Product.model_validate(document)
    except PydanticValidationError as exc:
        issues.extend(_issue_from_error(error) for error in exc.errors())

    issues.extend(_nesting_issues(document))
    if product is not None:
        issues.extend(_invariant_issues(product))
    return ValidationResult(issues=issues)


def _issue_from_error(error: Mapping[str, Any]) -> ValidationIssue:
    loc = error["loc"]
    path = ".".join(str(part) for part in loc)
    kind: IssueKind = "type_mismatch"
    message = error["msg"]

    if error["type"] == "literal_error":
        kind = "enum_violation"
        message = f"{error['msg']} (got {error.get('input')!r})"
    elif error["type"] == "extra_forbidden":
        # only i18n containers forbid extra keys
        kind = "unknown_locale"
        message = (
            f"Locale {loc[-1]!r} is not supported, "
            f"expected one of {list(SUPPORTED_LOCALES)}"
        )
    elif error["type"] in _CARDINALITY_ERRORS:
        kind = "cardinality"

    return ValidationIssue(path=path, kind=kind, message=message)


def _nesting_issues(document: Mapping[str, Any]) -> Iterable[ValidationIssue]:
    members = document.get("pack_detail")
    if not isinstance(members, list):
        return
    for index, member in enumerate(members):
        if isinstance(member, Mapping) and member.get("pack_detail"):
            yield ValidationIssue(
                path=f"pack_detail.{index}.pack_detail",
                kind="nesting",
                message="Bundle members cannot contain bundles",
            )


def _invariant_issues(product: Product) -> Iterable[ValidationIssue]:
    if product.classification in SELLABLE_CLASSIFICATIONS and not product.combinations:
        yield ValidationIssue(
            path="combinations",
            kind="cardinality",
            message=(
                f"Classification {product.classification!r} requires "
                "at least one combination"
            ),
        )

    defaults = [i for i, c in enumerate(product.combinations) if c.is_default]
    if len(defaults) > 1:
        yield ValidationIssue(
            path="combinations",
            kind="cardinality",
            message=f"Only one default combination allowed, found {len(defaults)} at {defaults}",
        )

    sql_ids = Counter(
        c.my_sociolla_sql_id
        for c in product.combinations
        if c.my_sociolla_sql_id is not None
    )
    for index, combination in enumerate(product.combinations):
        if sql_ids.get(combination.my_sociolla_sql_id, 0) > 1:
            yield ValidationIssue(
                path=f"combinations.{index}.my_sociolla_sql_id",
                kind="uniqueness",
                message=(
                    f"my_sociolla_sql_id {combination.my_sociolla_sql_id} "
                    "is repeated within the product"
                ),
            )
