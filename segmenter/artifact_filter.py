"""
segmenter/artifact_filter.py — detection of residual document markup.

A failed office-format conversion leaves RTF control syntax instead of
prose:  {\\rtf1\\ansi\\ansicpg1250\\deff0{\\fonttbl ...

Such a segment is not dropped silently: it is tagged as excluded (consumers
must not index it) and the owning law is flagged for re-extraction.

Rules only fire on unmistakable control syntax; prose that merely mentions
RTF or contains a stray backslash stays clean.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass

from data_model.laws import Segment

# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------

_RTF_HEADER_RE = re.compile(r"\{\s*\\rtf", re.IGNORECASE)
_RTF_HEADER_WINDOW = 64

_RTF_TABLE_KEYWORDS = ("\\fonttbl", "\\colortbl", "\\stylesheet", "\\listtable")
_RTF_TABLE_WINDOW = 500

# Backslash control words at the very start: \ansi\ansicpg1250\deff0 ...
_CONTROL_RUN_RE = re.compile(r"\A\s*[{}]?\s*(?:\\[a-z]{1,32}-?\d*[ ]?[{}]?\s*){6,}", re.IGNORECASE)

# \u268?  \'e8  &#268;
_ESCAPED_CODEPOINT_RE = re.compile(r"\\u-?\d{2,5}\??|\\'[0-9a-f]{2}|&#x?[0-9a-f]{2,5};", re.IGNORECASE)
_ESCAPED_MIN_COUNT = 8
_ESCAPED_MIN_SHARE = 0.30


@dataclass(frozen=True, slots=True)
class ArtifactVerdict:
    is_artifact: bool
    reason: str | None = None


CLEAN = ArtifactVerdict(False)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_artifact(text: str | None) -> ArtifactVerdict:
    if not text:
        return CLEAN

    head = text.lstrip()
    if _RTF_HEADER_RE.search(head[:_RTF_HEADER_WINDOW]):
        return ArtifactVerdict(True, "rtf_header")

    window = head[:_RTF_TABLE_WINDOW].lower()
    for keyword in _RTF_TABLE_KEYWORDS:
        if keyword in window:
            return ArtifactVerdict(True, f"rtf_table:{keyword[1:]}")

    if _CONTROL_RUN_RE.match(head):
        return ArtifactVerdict(True, "control_word_run")

    escaped = _ESCAPED_CODEPOINT_RE.findall(text)
    if len(escaped) >= _ESCAPED_MIN_COUNT:
        visible = sum(1 for ch in text if not ch.isspace())
        covered = sum(len(e) for e in escaped)
        if visible and covered / visible >= _ESCAPED_MIN_SHARE:
            return ArtifactVerdict(True, "escaped_codepoints")

    return CLEAN


class ArtifactFilter:
    """Tags segments whose text is markup residue."""

    def check(self, segment: Segment) -> tuple[Segment, ArtifactVerdict]:
        verdict = detect_artifact(segment.text)
        if not verdict.is_artifact:
            return segment, verdict
        tagged = dataclasses.replace(
            segment,
            excluded=True,
            exclusion_reason=verdict.reason,
        )
        return tagged, verdict
