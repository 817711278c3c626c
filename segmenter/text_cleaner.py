"""
segmenter/text_cleaner.py — cleanup of extracted page text before scanning.

What we fix:
  - UTF-8 text that was decoded as Latin-1 ("ÄŒlan" → "Član")
  - decomposed characters (NFC)
  - Windows line endings, NBSP and zero-width characters
  - stray spacing inside heading words ("Č lan" → "Član")
  - more than two consecutive empty lines

What we keep:
  - line structure (\n and \n\n), the heading scanner relies on it
  - markup residue — ArtifactFilter must still be able to see it

Output: plain text, never raises on odd input.
"""

from __future__ import annotations

import re
import unicodedata

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Typical lead bytes of UTF-8 Balkan letters read as Latin-1 (Č → "ÄŒ").
_MOJIBAKE_RE = re.compile(r"[\u00c3\u00c4\u00c5\u00d0\u00d1][\x80-\xbf\u0152\u0153\u0160\u0161\u017d\u017e\u0178\u2018-\u201e\u2020-\u2022\u2026\u2030\u2039\u203a\u20ac\u2122]")

_ZERO_WIDTH_RE = re.compile(r"[\u200b\u200c\u200d\u2060\ufeff\u00ad]")

_SPACE_LIKE_RE = re.compile(r"[\u00a0\u2000-\u200a\u202f\u205f\u3000]")

_HEADING_SPACING: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Č[ \t]+lan"), "Član"),
    (re.compile(r"C[ \t]+lan"), "Clan"),
    (re.compile(r"Č[ \t]+l\."), "Čl."),
    (re.compile(r"Ч[ \t]+лан"), "Члан"),
]

_MANY_NEWLINES_RE = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clean_page_text(text: object) -> str:
    """Cleans one page; non-text content becomes an empty string."""
    if not isinstance(text, str) or not text:
        return ""

    out = repair_mojibake(text)
    out = unicodedata.normalize("NFC", out)
    out = out.replace("\r\n", "\n").replace("\r", "\n")
    out = _ZERO_WIDTH_RE.sub("", out)
    out = _SPACE_LIKE_RE.sub(" ", out)
    for regex, repl in _HEADING_SPACING:
        out = regex.sub(repl, out)
    out = _MANY_NEWLINES_RE.sub("\n\n", out)
    return out.strip()


def repair_mojibake(text: str) -> str:
    """
    Re-decodes UTF-8 that went through a Latin-1/CP1252 decoder.

    Only applied when the typical lead-byte pairs are present; if the
    round trip fails the text is returned unchanged.
    """
    if not _MOJIBAKE_RE.search(text):
        return text
    for codec in ("cp1252", "latin-1"):
        try:
            return text.encode(codec).decode("utf-8")
        except (UnicodeEncodeError, UnicodeDecodeError):
            continue
    return text
