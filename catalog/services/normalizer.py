"""Derivations applied to product documents before they are persisted.

Both passes work on plain mappings (the raw document on create, the partial
payload on update) and return a normalized copy. Absent or malformed `i18n`,
`i18n.vi` and `brand` sub-objects are skipped rather than treated as errors;
schema validation reports them afterwards.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from catalog.models.product import localized_name_locales
from catalog.services.transliteration import to_latin

logger = logging.getLogger(__name__)

LATIN_LOCALE = "vi"


def normalize_on_create(doc: Mapping[str, Any]) -> dict[str, Any]:
    """Reconcile root and locale names, then derive latin names."""

    doc = copy.deepcopy(dict(doc))
    _trim_names(doc)
    i18n = doc.get("i18n")

    if not doc.get("name") and isinstance(i18n, dict) and i18n:
        # created from a locale: the first locale given names the product
        first_locale = next(iter(i18n.values()))
        if isinstance(first_locale, dict):
            doc["name"] = first_locale.get("name")
    elif doc.get("name"):
        _backfill_locale_names(doc)

    _derive_latin_names(doc)
    return doc


def normalize_on_update(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Recompute latin names carried by a partial update payload.

    Only the fields present in the payload are visible here. When the payload
    renames the `vi` locale and carries a `brand` object without `name`,
    `brand.name_latin` is still overwritten (with an empty string); stored
    documents have always behaved this way.
    """

    payload = copy.deepcopy(dict(payload))
    if _derive_latin_names(payload) and isinstance(payload.get("brand"), dict):
        if not payload["brand"].get("name"):
            logger.warning(
                "Update payload resets brand.name_latin without brand.name",
                extra={"payload_keys": sorted(payload)},
            )
    return payload


def _trim_names(doc: dict[str, Any]) -> None:
    # names are stored trimmed, a blank name counts as missing
    if isinstance(doc.get("name"), str):
        doc["name"] = doc["name"].strip()
    i18n = doc.get("i18n")
    if not isinstance(i18n, dict):
        return
    for override in i18n.values():
        if isinstance(override, dict) and isinstance(override.get("name"), str):
            override["name"] = override["name"].strip()


def _backfill_locale_names(doc: dict[str, Any]) -> None:
    locales = localized_name_locales()
    if not locales:
        return

    if doc.get("i18n") is None:
        doc["i18n"] = {}
    i18n = doc["i18n"]
    if not isinstance(i18n, dict):
        return

    for locale in locales:
        if i18n.get(locale) is None:
            i18n[locale] = {}
        override = i18n[locale]
        if isinstance(override, dict) and not override.get("name"):
            override["name"] = doc["name"]


def _derive_latin_names(doc: dict[str, Any]) -> bool:
    """Set `i18n.vi.name_latin` and `brand.name_latin`; return whether it ran."""

    i18n = doc.get("i18n")
    if not isinstance(i18n, dict):
        return False
    override = i18n.get(LATIN_LOCALE)
    if not isinstance(override, dict):
        return False
    name = override.get("name")
    if not name or not isinstance(name, str):
        return False

    override["name_latin"] = to_latin(name)
    brand = doc.get("brand")
    if isinstance(brand, dict):
        brand_name = brand.get("name")
        brand["name_latin"] = to_latin(brand_name if isinstance(brand_name, str) else None)
    return True
