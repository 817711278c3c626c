"""
segmenter/parser.py — splitting extracted page text into article segments.

Architecture:
  [(page_number, page_text), ...] → clean_page_text() per page
  → _Stream (pages joined with "\\n\\n", offset → page lookup)
  → HeadingScanner.scan() → HeadingMatch per heading
  → _build_segments() → list[Segment] (text up to the next heading)
  → ArtifactFilter → excluded segments + ReprocessEvent

A document without any recognizable heading still gets exactly one
FALLBACK segment, so a law is never stored without text.

Key public functions:
  Segmenter(profile).segment(pages, law_id) -> SegmentationResult
  segment_pages(pages, jurisdiction, law_id) -> SegmentationResult
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from data_model.laws import HeadingMatch, ReprocessEvent, Segment, SegmentType
from segmenter.artifact_filter import ArtifactFilter
from segmenter.heading_scanner import HeadingScanner
from segmenter.script_profiles import DEFAULT_PROFILE, ScriptProfile, get_profile
from segmenter.text_cleaner import clean_page_text

log = logging.getLogger(__name__)

PAGE_SEP = "\n\n"
FALLBACK_EXCERPT_CHARS = 4000

PageInput: TypeAlias = tuple[int, Any] | Mapping[str, Any]


@dataclass(slots=True)
class SegmentationResult:
    segments: list[Segment]
    reprocess: list[ReprocessEvent] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return len(self.segments) == 1 and self.segments[0].segment_type is SegmentType.FALLBACK

    @property
    def indexable(self) -> list[Segment]:
        return [s for s in self.segments if not s.excluded]


# ---------------------------------------------------------------------------
# Internal types
# ---------------------------------------------------------------------------

class _Stream:
    """Page texts joined into one logical stream with page attribution."""

    __slots__ = ("text", "_starts", "_numbers")

    def __init__(self, pages: list[tuple[int, str]]) -> None:
        parts: list[str] = []
        self._starts: list[int] = []
        self._numbers: list[int] = []
        acc = 0
        for number, text in pages:
            self._starts.append(acc)
            self._numbers.append(number)
            parts.append(text)
            acc += len(text) + len(PAGE_SEP)
        self.text = PAGE_SEP.join(parts)

    @property
    def first_page(self) -> int:
        return self._numbers[0] if self._numbers else 1

    def page_at(self, offset: int) -> int:
        if not self._starts:
            return 1
        idx = bisect.bisect_right(self._starts, offset) - 1
        return self._numbers[max(idx, 0)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class Segmenter:
    def __init__(
        self,
        profile: ScriptProfile = DEFAULT_PROFILE,
        fallback_chars: int = FALLBACK_EXCERPT_CHARS,
    ) -> None:
        self.profile = profile
        self.scanner = HeadingScanner(profile)
        self.artifacts = ArtifactFilter()
        self.fallback_chars = fallback_chars

    def segment(self, pages: Iterable[PageInput], law_id: int | None = None) -> SegmentationResult:
        stream = _Stream(_coerce_pages(pages))

        matches = [
            HeadingMatch(
                ordinal=m.ordinal,
                start_offset=m.start_offset,
                end_offset=m.end_offset,
                raw_token=m.raw_token,
                page=stream.page_at(m.start_offset),
            )
            for m in self.scanner.scan(stream.text)
        ]

        if matches:
            segments = _build_segments(stream.text, matches, self.profile, law_id)
        else:
            segments = [self._fallback(stream, law_id)]
            log.debug("law_id=%s: no headings, fallback segment", law_id)

        return self._filter(segments, law_id)

    def _fallback(self, stream: _Stream, law_id: int | None) -> Segment:
        return Segment(
            law_id=law_id,
            segment_type=SegmentType.FALLBACK,
            label=self.profile.fallback_label,
            number=0,
            text=stream.text[: self.fallback_chars].strip(),
            page_hint=stream.first_page,
        )

    def _filter(self, segments: list[Segment], law_id: int | None) -> SegmentationResult:
        out: list[Segment] = []
        reasons: list[str] = []
        for seg in segments:
            tagged, verdict = self.artifacts.check(seg)
            out.append(tagged)
            if verdict.is_artifact and verdict.reason:
                reasons.append(f"{tagged.label}: {verdict.reason}")

        events: list[ReprocessEvent] = []
        if reasons:
            log.warning(
                "law_id=%s: %d segment(s) look like markup residue, flagged for reprocessing",
                law_id, len(reasons),
            )
            events.append(ReprocessEvent(law_id=law_id, reason="; ".join(reasons[:5])))
        return SegmentationResult(segments=out, reprocess=events)


def segment_pages(
    pages: Iterable[PageInput],
    jurisdiction: str | None = None,
    law_id: int | None = None,
) -> SegmentationResult:
    return Segmenter(get_profile(jurisdiction)).segment(pages, law_id)


# ---------------------------------------------------------------------------
# Internal implementation
# ---------------------------------------------------------------------------

def _coerce_pages(pages: Iterable[PageInput]) -> list[tuple[int, str]]:
    """
    Accepts (page_number, text) pairs or {"page": n, "text": ...} mappings.
    Missing page numbers continue the sequence; non-text content becomes "".
    """
    out: list[tuple[int, str]] = []
    for item in pages or ():
        if isinstance(item, Mapping):
            number, text = item.get("page"), item.get("text")
        else:
            try:
                number, text = item
            except (TypeError, ValueError):
                number, text = None, None
        if not isinstance(number, int) or isinstance(number, bool) or number < 1:
            number = out[-1][0] + 1 if out else 1
        out.append((number, clean_page_text(text)))
    return out


def _build_segments(
    text: str,
    matches: list[HeadingMatch],
    profile: ScriptProfile,
    law_id: int | None,
) -> list[Segment]:
    """
    One segment per heading; the body runs from just after the heading to
    just before the next one. Repeated ordinals stay separate segments.
    """
    segments: list[Segment] = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start_offset if i + 1 < len(matches) else len(text)
        segments.append(Segment(
            law_id=law_id,
            segment_type=SegmentType.ARTICLE,
            label=profile.label(match.ordinal),
            number=match.ordinal,
            text=text[match.end_offset:end].strip(),
            page_hint=match.page,
        ))
    return segments
