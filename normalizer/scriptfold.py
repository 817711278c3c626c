"""
normalizer/scriptfold.py — script-, diacritic-, case- and spacing-invariant
string folding.

  "Žalba", "zalba", "ŽALBA", "Жалба"  →  "zalba"

Steps:
  1. NFC (decomposed "c + caron" becomes "č" and hits the tables)
  2. Cyrillic → Latin table (Serbian/Montenegrin azbuka + Macedonian letters)
  3. Latin diacritic table (č ć đ š ž; đ → "dj")
  4. NFKD + drop combining marks — safety net for anything not tabled
  5. lowercase
  6. every run outside [a-z0-9] → one space, trim

Output alphabet: lowercase ASCII letters, digits, single spaces.
scriptfold(scriptfold(x)) == scriptfold(x).
"""

from __future__ import annotations

import re
import unicodedata

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_CYRILLIC_LOWER: dict[str, str] = {
    "а": "a",  "б": "b",  "в": "v",  "г": "g",  "д": "d",  "ђ": "dj",
    "е": "e",  "ж": "z",  "з": "z",  "и": "i",  "ј": "j",  "к": "k",
    "л": "l",  "љ": "lj", "м": "m",  "н": "n",  "њ": "nj", "о": "o",
    "п": "p",  "р": "r",  "с": "s",  "т": "t",  "ћ": "c",  "у": "u",
    "ф": "f",  "х": "h",  "ц": "c",  "ч": "c",  "џ": "dz", "ш": "s",
    # Macedonian
    "ѓ": "gj", "ќ": "kj", "ѕ": "dz",
}

_LATIN_DIACRITICS: dict[str, str] = {
    "č": "c", "ć": "c", "đ": "dj", "š": "s", "ž": "z",
    "Č": "c", "Ć": "c", "Đ": "dj", "Š": "s", "Ž": "z",
}


def _build_table() -> dict[int, str]:
    table: dict[int, str] = {}
    for cyr, lat in _CYRILLIC_LOWER.items():
        table[ord(cyr)] = lat
        table[ord(cyr.upper())] = lat
    for ch, lat in _LATIN_DIACRITICS.items():
        table[ord(ch)] = lat
    return table


_TRANSLATE = _build_table()

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def transliterate(text: str) -> str:
    """Cyrillic → Latin and Latin diacritics → ASCII; case is preserved
    only for letters outside the tables."""
    return unicodedata.normalize("NFC", text).translate(_TRANSLATE)


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def scriptfold(text: str | None) -> str:
    if not text:
        return ""
    s = transliterate(text)
    s = strip_diacritics(s)
    s = s.lower()
    return _NON_ALNUM_RE.sub(" ", s).strip()
