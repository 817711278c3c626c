"""
data_model/laws.py — law records, their segments and transient dedup types.

Law      one statute/regulation as known to the repository
Segment  one addressable unit of a law's text (usually one article)

Segment identity inside a law is the pair (number, segment_type); merges
rely on it to detect exact duplicates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class SegmentType(StrEnum):
    ARTICLE  = "article"
    FALLBACK = "fallback"   # whole-document excerpt, no heading detected


class GroupStatus(StrEnum):
    EXACT     = "exact"       # same fingerprint on every member
    LOOSE     = "loose"       # no fingerprint available, weaker key
    AMBIGUOUS = "ambiguous"   # fingerprints disagree, never merged


@dataclass(slots=True)
class Law:
    id: int | None
    jurisdiction: str
    title: str
    title_normalized: str | None = None
    root_title: str | None = None
    slug: str | None = None
    gazette_key: str | None = None        # "12_05"
    gazette_number: str | None = None     # "12/05"
    gazette_date: str | None = None       # ISO date once enriched
    document_path: str | None = None
    source_url: str | None = None
    document_fingerprint: str | None = None
    needs_reprocessing: bool = False
    reprocess_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class Segment:
    law_id: int | None
    segment_type: SegmentType
    label: str
    number: int
    text: str
    page_hint: int        # 1-based page where the heading starts
    id: int | None = None
    excluded: bool = False
    exclusion_reason: str | None = None

    @property
    def identity(self) -> tuple[int, str]:
        return self.number, str(self.segment_type)


@dataclass(frozen=True, slots=True)
class HeadingMatch:
    """
    A single recognized heading occurrence.

    - ordinal:      article number parsed from the heading
    - start_offset: offset of the first token character
    - end_offset:   offset just past the number and its trailing punctuation
    - raw_token:    literal matched text, stray spacing included
    - page:         1-based page the heading starts on
    """
    ordinal: int
    start_offset: int
    end_offset: int
    raw_token: str
    page: int = 1


@dataclass(frozen=True, slots=True)
class ReprocessEvent:
    law_id: int | None
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"law_id": self.law_id, "reason": self.reason}


@dataclass(slots=True)
class DuplicateGroup:
    """
    Laws sharing one composite key.

    canonical_id is None for AMBIGUOUS groups: fingerprints that actively
    disagree are reported, never resolved automatically.
    """
    jurisdiction: str
    title_key: str
    gazette_key: str
    document_fingerprint: str | None
    member_ids: list[int]
    status: GroupStatus
    canonical_id: int | None = None
    conflicting_fingerprints: list[str] = field(default_factory=list)

    @property
    def delete_ids(self) -> list[int]:
        if self.canonical_id is None:
            return []
        return [i for i in self.member_ids if i != self.canonical_id]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "jurisdiction":         self.jurisdiction,
            "root_title":           self.title_key,
            "gazette_key":          self.gazette_key,
            "document_fingerprint": self.document_fingerprint,
            "member_ids":           list(self.member_ids),
            "proposed_keep":        self.canonical_id,
            "proposed_delete":      self.delete_ids,
            "status":               str(self.status),
        }
        if self.conflicting_fingerprints:
            data["conflicting_fingerprints"] = list(self.conflicting_fingerprints)
        return data
