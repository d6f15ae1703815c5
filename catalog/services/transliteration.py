"""Vietnamese to latin transliteration used for search-friendly names."""

from __future__ import annotations

import unicodedata

# Letters that do not decompose into base letter + combining mark.
_SPECIAL_LETTERS = str.maketrans({"đ": "d", "Đ": "D"})


def to_latin(text: str | None) -> str:
    """Strip Vietnamese diacritics, keeping case and spacing.

    Missing text yields an empty string.
    """

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.translate(_SPECIAL_LETTERS))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def collation_key(value: str) -> str:
    """Comparison key for locale `en`, strength primary.

    Case and accents are ignored, so `Son-Moi` and `son-môi` collide.
    """

    return to_latin(value).casefold()
