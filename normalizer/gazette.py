"""
normalizer/gazette.py — official gazette references.

  "Službeni glasnik RS, broj 12/05 od 3.2.2005."
      → GazetteInfo(number="12/05", key="12_05", date="2005-02-03")

Two-digit years up to 39 are read as 20xx, the rest as 19xx.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

_NUMBER_RE = re.compile(r"(?:broj\s*)?(\d{1,3})\s*/\s*(\d{2,4})(?!\d)", re.IGNORECASE)
_DATE_RE   = re.compile(r"(?<!\d)(\d{1,2})\.\s*(\d{1,2})\.\s*(\d{4}|\d{2})(?!\d)")
_KEY_RE    = re.compile(r"^\s*(\d{1,3})\s*[_/\-]\s*(\d{2,4})\s*$")

_CENTURY_PIVOT = 39

@dataclass(frozen=True, slots=True)
class GazetteInfo:
    number: str | None
    key: str | None
    date: str | None

def parse_gazette(text: str | None) -> GazetteInfo:
    if not text:
        return GazetteInfo(None, None, None)
    txt = re.sub(r"\s+", " ", text).strip()

    number = key = None
    m = _NUMBER_RE.search(txt)
    if m:
        number = f"{m.group(1)}/{m.group(2)}"
        key = f"{int(m.group(1))}_{m.group(2)[-2:]}"

    return GazetteInfo(number=number, key=key, date=_parse_date(txt))

def gazette_key_from_number(number: str | None) -> str | None:
    """'12/2005' → '12_05'; None when the input is not an issue/year pair."""
    if not number:
        return None
    m = _KEY_RE.match(number)
    if not m:
        return None
    return f"{int(m.group(1))}_{m.group(2)[-2:]}"

def normalize_gazette_key(key: str | None) -> str | None:
    if not key or not key.strip():
        return None
    return gazette_key_from_number(key) or key.strip().lower()

def _expand_year(raw: str) -> int:
    y = int(raw)
    if len(raw) == 2:
        return 2000 + y if y <= _CENTURY_PIVOT else 1900 + y
    return y

def _parse_date(txt: str) -> str | None:
    m = _DATE_RE.search(txt)
    if not m:
        return None
    try:
        return datetime.date(_expand_year(m.group(3)), int(m.group(2)), int(m.group(1))).isoformat()
    except ValueError:
        return None
