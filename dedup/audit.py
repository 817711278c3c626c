"""
dedup/audit.py — laws whose stored text is likely incomplete.

  no_segments        nothing stored at all
  fallback_only      no heading was recognized, only the excerpt is stored
  needs_reprocessing artifact filter flagged the extracted text
  all_excluded       every stored segment is markup residue
"""

from __future__ import annotations

from dataclasses import dataclass

from data_model.laws import SegmentType
from repository.base import LawFilter, LawRepository


@dataclass(frozen=True, slots=True)
class AuditFinding:
    law_id: int
    jurisdiction: str
    title: str
    reason: str
    segment_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "law_id":        self.law_id,
            "jurisdiction":  self.jurisdiction,
            "title":         self.title,
            "reason":        self.reason,
            "segment_count": self.segment_count,
        }


def find_incomplete_laws(repo: LawRepository, jurisdiction: str | None = None) -> list[AuditFinding]:
    findings: list[AuditFinding] = []
    for law in repo.list_laws(LawFilter(jurisdiction=jurisdiction)):
        segments = repo.get_segments(law.id)
        reason: str | None = None
        if law.needs_reprocessing:
            reason = "needs_reprocessing"
        elif not segments:
            reason = "no_segments"
        elif all(s.excluded for s in segments):
            reason = "all_excluded"
        elif all(s.segment_type == SegmentType.FALLBACK for s in segments):
            reason = "fallback_only"
        if reason:
            findings.append(AuditFinding(
                law_id=law.id,
                jurisdiction=law.jurisdiction,
                title=law.title,
                reason=reason,
                segment_count=len(segments),
            ))
    return findings
