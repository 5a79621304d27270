"""
Diacritic stripping ("deburring") for text that ends up on a payment slip.

HUB3 barcodes and the printed slip only carry plain Latin characters, so every
text field is folded before it is stored or shared.
"""

from __future__ import annotations

import unicodedata

# Letters that have no canonical decomposition and therefore survive NFD.
_LETTER_MAP: dict[str, str] = {
    "Đ": "D", "đ": "d",
    "Ð": "D", "ð": "d",
    "Ħ": "H", "ħ": "h",
    "Ł": "L", "ł": "l",
    "Ŀ": "L", "ŀ": "l",
    "Ø": "O", "ø": "o",
    "Ŧ": "T", "ŧ": "t",
    "Ŋ": "N", "ŋ": "n",
    "Æ": "Ae", "æ": "ae",
    "Œ": "Oe", "œ": "oe",
    "Þ": "Th", "þ": "th",
    "Ĳ": "IJ", "ĳ": "ij",
    "ß": "ss",
    "ı": "i",
    "ĸ": "k",
    "ŉ": "'n",
    "ſ": "s",
}

_TRANSLATION = str.maketrans(_LETTER_MAP)


def deburr(text: str) -> str:
    """
    Strip accents and fold special Latin letters to their basic form.

    >>> deburr("Đurđevac, Šibenik")
    'Durdevac, Sibenik'
    """
    if not text:
        return text
    decomposed = unicodedata.normalize("NFD", text.translate(_TRANSLATION))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)
