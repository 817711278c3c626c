"""
segmenter/heading_scanner.py — recognition of numbered article headings.

  "Č l a n  12." / "ЧЛАН 3" / "Čl. 7 -"  →  HeadingMatch(ordinal=…, …)

Between and inside token characters any run of whitespace-class characters
is tolerated (broken conversions insert NBSP, thin spaces and zero-width
spaces inside words). The ordinal (1–3 digits) may carry one trailing
. - : ) – or —, and must be followed by whitespace, punctuation or end of text.

Token alternatives are ordered longest first, so at one offset "Članak"
wins over "Član".

Matches are taken in two tiers. A match that opens its line is always a
heading. A match inside a line ("prava iz čl. 5. ovog zakona") is kept only
when no line-opening match carries the same ordinal, so cross-references do
not split articles while one-line dumps ("Article 1. … Article 2. …") still
segment.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from data_model.laws import HeadingMatch
from segmenter.script_profiles import DEFAULT_PROFILE, ScriptProfile

# \s already covers NBSP, U+2000–U+200A, U+202F, U+205F and U+3000 in str
# patterns; zero-width space and BOM are not whitespace for re.
WS = r"[\s\u200b\ufeff]"

_TRAILER = r"[.\-:)–—]"

_LINE_LEAD = re.compile(rf"{WS}*")


def opens_line(text: str, offset: int) -> bool:
    """True when only whitespace-class characters precede offset on its line."""
    line_start = text.rfind("\n", 0, offset) + 1
    return _LINE_LEAD.fullmatch(text, line_start, offset) is not None


def _token_pattern(token: str) -> str:
    return f"{WS}*".join(re.escape(ch) for ch in token)


def compile_heading_regex(tokens: tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(dict.fromkeys(tokens), key=len, reverse=True)
    alternatives = "|".join(_token_pattern(t) for t in ordered)
    pattern = (
        rf"(?<!\w)(?P<token>{alternatives})"
        rf"{WS}*(?P<number>[0-9]{{1,3}})(?![0-9])"
        rf"(?:{WS}*{_TRAILER})?"
        rf"(?={WS}|{_TRAILER}|$)"
    )
    return re.compile(pattern, re.IGNORECASE)


class HeadingScan:
    """Lazy, finite, restartable sequence of matches over one text."""

    __slots__ = ("_regex", "_text", "_page")

    def __init__(self, regex: re.Pattern[str], text: str, page: int) -> None:
        self._regex = regex
        self._text = text
        self._page = page

    def __iter__(self) -> Iterator[HeadingMatch]:
        line_ordinals = {
            int(m.group("number"))
            for m in self._regex.finditer(self._text)
            if opens_line(self._text, m.start())
        }
        for m in self._regex.finditer(self._text):
            ordinal = int(m.group("number"))
            if ordinal in line_ordinals and not opens_line(self._text, m.start()):
                continue
            yield HeadingMatch(
                ordinal=ordinal,
                start_offset=m.start(),
                end_offset=m.end(),
                raw_token=m.group(0),
                page=self._page,
            )


class HeadingScanner:
    def __init__(self, profile: ScriptProfile = DEFAULT_PROFILE) -> None:
        self.profile = profile
        self._regex = compile_heading_regex(profile.tokens)

    def scan(self, text: str | None, page: int = 1) -> HeadingScan:
        return HeadingScan(self._regex, text if isinstance(text, str) else "", page)
