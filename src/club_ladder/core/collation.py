"""Locale-aware collation keys for sorting player names."""

from __future__ import annotations

import unicodedata
from collections.abc import Callable

# Letters that the locale's alphabet places after "z", in order.
_AFTER_Z: dict[str, tuple[tuple[str, ...], ...]] = {
    "sv": (("å",), ("ä", "æ"), ("ö", "ø")),
    "fi": (("å",), ("ä", "æ"), ("ö", "ø")),
    "da": (("æ", "ä"), ("ø", "ö"), ("å",)),
    "nb": (("æ", "ä"), ("ø", "ö"), ("å",)),
    "nn": (("æ", "ä"), ("ø", "ö"), ("å",)),
}

# Letters the locale folds onto another base letter.
_EQUIVALENTS: dict[str, dict[str, str]] = {
    "sv": {"ü": "y"},
    "fi": {"ü": "y"},
}


def _language(locale: str) -> str:
    return locale.replace("_", "-").split("-")[0].lower()


def _tailoring(locale: str) -> dict[str, int]:
    weights: dict[str, int] = {}
    base = ord("z")
    for offset, letters in enumerate(_AFTER_Z.get(_language(locale), ()), start=1):
        for letter in letters:
            weights[letter] = base + offset
    for letter, target in _EQUIVALENTS.get(_language(locale), {}).items():
        weights.setdefault(letter, ord(target))
    return weights


def _primary_weights(value: str, tailoring: dict[str, int]) -> tuple[int, ...]:
    weights: list[int] = []
    for char in unicodedata.normalize("NFC", value).casefold():
        if char in tailoring:
            weights.append(tailoring[char])
            continue
        for part in unicodedata.normalize("NFD", char):
            if not unicodedata.combining(part):
                weights.append(ord(part))
    return tuple(weights)


def collation_key(locale: str = "sv") -> Callable[[str], tuple[tuple[int, ...], str, str]]:
    """Build a sort key function for the given locale.

    Comparison is case-insensitive and accent-insensitive at the first level,
    except for letters the locale's alphabet treats as separate letters (for
    Swedish, å, ä and ö sort after z). Ties fall back to the accented, then the
    raw spelling so the order stays deterministic.

    Args:
        locale: BCP 47 style locale tag, e.g. "sv" or "sv-SE".

    Returns:
        Function mapping a string to its sort key.
    """
    tailoring = _tailoring(locale)

    def _key(value: str) -> tuple[tuple[int, ...], str, str]:
        return (
            _primary_weights(value, tailoring),
            unicodedata.normalize("NFC", value).casefold(),
            value,
        )

    return _key
