"""
dedup — entity resolution of law records.

Public API:
  DedupResolver(repo, weights).run(jurisdiction, confirm)  → DedupReport
  DedupResolver.find_groups(laws)                          → (groups, ungroupable ids)
  ScoringWeights, MergeStats, pick_canonical, score
  find_incomplete_laws(repo, jurisdiction)                 → list[AuditFinding]
"""

from .resolver import (
    DedupResolver,
    DedupReport,
    MergeStats,
    ScoringWeights,
    grouping_key,
    pick_canonical,
    score,
)
from .audit import AuditFinding, find_incomplete_laws

__all__ = [
    "DedupResolver",
    "DedupReport",
    "MergeStats",
    "ScoringWeights",
    "grouping_key",
    "pick_canonical",
    "score",
    "AuditFinding",
    "find_incomplete_laws",
]
