"""
segmenter/ingest.py — storing a law's segments.

segment_and_store(repo, law, pages) / store_segmentation(repo, law, result):
  1. refreshes the law's derived keys (title keys, gazette key, fingerprint)
  2. segments the pages
  3. collapses repeated (number, segment_type), keeping the first copy that
     is not markup residue; the storage layer keeps that pair unique per law
  4. replaces the law's stored segments
  5. flags the law for reprocessing when the artifact filter fired

All of it runs in one repository transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from data_model.laws import Law, ReprocessEvent, Segment
from normalizer.law_keys import compute_law_keys
from repository.base import LawRepository
from segmenter.parser import PageInput, SegmentationResult, Segmenter
from segmenter.script_profiles import ScriptProfile, get_profile

log = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestResult:
    law_id: int
    stored: list[Segment]
    dropped_duplicates: int = 0
    replaced: int = 0
    reprocess: list[ReprocessEvent] = field(default_factory=list)


def collapse_duplicates(segments: list[Segment]) -> tuple[list[Segment], int]:
    """First clean copy of each (number, segment_type) wins; an excluded copy only when no clean one exists."""
    chosen: dict[tuple[int, str], int] = {}
    for i, seg in enumerate(segments):
        j = chosen.get(seg.identity)
        if j is None or (segments[j].excluded and not seg.excluded):
            chosen[seg.identity] = i
    kept = [segments[i] for i in sorted(chosen.values())]
    return kept, len(segments) - len(kept)


def store_segmentation(repo: LawRepository, law: Law, result: SegmentationResult) -> IngestResult:
    """Steps 1 and 3-5 for a result that is already segmented."""
    if law.id is None:
        raise ValueError("Law must be stored before its segments (law.id is None).")

    segments, dropped = collapse_duplicates(result.segments)
    if dropped:
        log.info("law_id=%s: %d repeated heading(s) collapsed", law.id, dropped)

    with repo.transaction():
        fields = compute_law_keys(law)
        if result.reprocess:
            fields["needs_reprocessing"] = True
            fields["reprocess_reason"] = result.reprocess[0].reason
        elif law.needs_reprocessing:
            fields["needs_reprocessing"] = False
            fields["reprocess_reason"] = None
        if fields:
            repo.update_law(law.id, fields)

        old = repo.get_segments(law.id)
        for seg in old:
            repo.delete_segment(seg.id)
        stored = [repo.insert_segment(replace(seg, law_id=law.id)) for seg in segments]

    return IngestResult(
        law_id=law.id,
        stored=stored,
        dropped_duplicates=dropped,
        replaced=len(old),
        reprocess=[replace(e, law_id=law.id) for e in result.reprocess],
    )


def segment_and_store(
    repo: LawRepository,
    law: Law,
    pages: Iterable[PageInput],
    profile: ScriptProfile | None = None,
) -> IngestResult:
    if law.id is None:
        raise ValueError("Law must be stored before its segments (law.id is None).")

    segmenter = Segmenter(profile or get_profile(law.jurisdiction))
    return store_segmentation(repo, law, segmenter.segment(pages, law_id=law.id))
