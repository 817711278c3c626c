"""
dedup/resolver.py — detection and merge of duplicate law records.

Two-phase protocol:
  run(confirm=False)  read-only; proposes {keep, delete[]} per group
  run(confirm=True)   merges every unambiguous group, one transaction each

Grouping key: (jurisdiction, title key, gazette_key, document fingerprint).
The title key is root_title when known, else title_normalized. Laws without
a title key or a gazette key are never grouped: an amending act and its base
act share a root title and only the gazette issue tells them apart.

Inside one (jurisdiction, title key, gazette_key) bucket:
  - members with the same fingerprint form an EXACT group
  - members without a fingerprint join the only fingerprint present, or
    form a LOOSE group when nobody has one
  - members without a fingerprint next to two or more different
    fingerprints make the bucket AMBIGUOUS: reported, never merged

Canonical record: highest score (+2 slug, +2 gazette_number, +1 document
path), ties → lowest id. Weights are configurable through ScoringWeights.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from data_model.laws import DuplicateGroup, GroupStatus, Law
from normalizer.fingerprint import law_fingerprint
from normalizer.gazette import gazette_key_from_number, normalize_gazette_key
from normalizer.law_keys import title_key_of
from repository.base import LawFilter, LawRepository
from segmenter.script_profiles import jurisdiction_code

log = logging.getLogger(__name__)

_BucketKey: TypeAlias = tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    slug: int = 2
    gazette_number: int = 2
    document_path: int = 1


@dataclass(slots=True)
class MergeStats:
    reassigned: int = 0
    collisions: int = 0       # duplicate's segment discarded, same (number, type)
    laws_deleted: int = 0
    paths_copied: int = 0

    def add(self, other: MergeStats) -> None:
        self.reassigned += other.reassigned
        self.collisions += other.collisions
        self.laws_deleted += other.laws_deleted
        self.paths_copied += other.paths_copied


@dataclass(slots=True)
class DedupReport:
    groups: list[DuplicateGroup]
    applied: bool = False
    stats: MergeStats = field(default_factory=MergeStats)
    ungroupable: list[int] = field(default_factory=list)

    @property
    def ambiguous(self) -> list[DuplicateGroup]:
        return [g for g in self.groups if g.status is GroupStatus.AMBIGUOUS]

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied":    self.applied,
            "group_count": len(self.groups),
            "ambiguous_count": len(self.ambiguous),
            "groups":     [g.to_dict() for g in self.groups],
            "stats": {
                "segments_reassigned": self.stats.reassigned,
                "segment_collisions":  self.stats.collisions,
                "laws_deleted":        self.stats.laws_deleted,
                "paths_copied":        self.stats.paths_copied,
            },
            "ungroupable_ids": list(self.ungroupable),
        }


# ---------------------------------------------------------------------------
# Keys and scoring
# ---------------------------------------------------------------------------

def grouping_key(law: Law) -> tuple[_BucketKey | None, str | None]:
    """(jurisdiction, title key, gazette key), fingerprint — bucket None
    when the law cannot be grouped safely."""
    title_key = title_key_of(law)
    gazette_key = normalize_gazette_key(law.gazette_key) or gazette_key_from_number(law.gazette_number)
    fingerprint = law.document_fingerprint or law_fingerprint(law.document_path, law.source_url)
    if not title_key or not gazette_key:
        return None, fingerprint
    return (jurisdiction_code(law.jurisdiction), title_key, gazette_key), fingerprint


def score(law: Law, weights: ScoringWeights = ScoringWeights()) -> int:
    total = 0
    if law.slug and law.slug.strip():
        total += weights.slug
    if law.gazette_number and law.gazette_number.strip():
        total += weights.gazette_number
    if law.document_path and law.document_path.strip():
        total += weights.document_path
    return total


def pick_canonical(members: list[Law], weights: ScoringWeights = ScoringWeights()) -> Law:
    return min(members, key=lambda l: (-score(l, weights), l.id))


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class DedupResolver:
    def __init__(self, repository: LawRepository, weights: ScoringWeights = ScoringWeights()) -> None:
        self.repo = repository
        self.weights = weights

    def find_groups(self, laws: list[Law]) -> tuple[list[DuplicateGroup], list[int]]:
        """Pure grouping step; returns (groups, ids of ungroupable laws)."""
        buckets: dict[_BucketKey, list[tuple[Law, str | None]]] = defaultdict(list)
        ungroupable: list[int] = []
        for law in laws:
            bucket, fingerprint = grouping_key(law)
            if bucket is None:
                ungroupable.append(law.id)
                continue
            buckets[bucket].append((law, fingerprint))

        groups: list[DuplicateGroup] = []
        for bucket in sorted(buckets, key=lambda k: (k[0], k[2], k[1])):
            groups.extend(self._split_bucket(bucket, buckets[bucket]))
        return groups, ungroupable

    def _split_bucket(
        self,
        bucket: _BucketKey,
        members: list[tuple[Law, str | None]],
    ) -> list[DuplicateGroup]:
        jurisdiction, title_key, gazette_key = bucket
        by_fp: dict[str, list[Law]] = defaultdict(list)
        bare: list[Law] = []
        for law, fp in members:
            if fp:
                by_fp[fp].append(law)
            else:
                bare.append(law)

        def make(laws: list[Law], fp: str | None, status: GroupStatus) -> DuplicateGroup:
            return DuplicateGroup(
                jurisdiction=jurisdiction,
                title_key=title_key,
                gazette_key=gazette_key,
                document_fingerprint=fp,
                member_ids=sorted(l.id for l in laws),
                status=status,
                canonical_id=pick_canonical(laws, self.weights).id,
            )

        out: list[DuplicateGroup] = []

        if bare and len(by_fp) >= 2:
            fingerprints = sorted(by_fp)
            out.append(DuplicateGroup(
                jurisdiction=jurisdiction,
                title_key=title_key,
                gazette_key=gazette_key,
                document_fingerprint=None,
                member_ids=sorted(l.id for l, _ in members),
                status=GroupStatus.AMBIGUOUS,
                canonical_id=None,
                conflicting_fingerprints=fingerprints,
            ))
            bare = []

        if bare and len(by_fp) == 1:
            only_fp = next(iter(by_fp))
            by_fp[only_fp].extend(bare)
            bare = []

        for fp in sorted(by_fp):
            if len(by_fp[fp]) > 1:
                out.append(make(by_fp[fp], fp, GroupStatus.EXACT))

        if len(bare) > 1:
            out.append(make(bare, None, GroupStatus.LOOSE))

        return out

    # -----------------------------------------------------------------------
    # Two-phase entry point
    # -----------------------------------------------------------------------

    def run(
        self,
        jurisdiction: str | None = None,
        *,
        ids: tuple[int, ...] | None = None,
        confirm: bool = False,
    ) -> DedupReport:
        laws = self.repo.list_laws(LawFilter(jurisdiction=jurisdiction, ids=ids))
        groups, ungroupable = self.find_groups(laws)
        report = DedupReport(groups=groups, ungroupable=ungroupable)

        log.info(
            "dedup: %d law(s), %d group(s), %d ambiguous, %d ungroupable",
            len(laws), len(groups), len(report.ambiguous), len(ungroupable),
        )
        if not confirm:
            return report

        for group in groups:
            if group.status is GroupStatus.AMBIGUOUS:
                log.warning(
                    "dedup: skipping ambiguous group %s/%s/%s ids=%s",
                    group.jurisdiction, group.title_key, group.gazette_key, group.member_ids,
                )
                continue
            report.stats.add(self.merge_group(group))

        report.applied = True
        if report.stats.collisions:
            log.info("dedup: %d colliding segment(s) discarded", report.stats.collisions)
        return report

    def merge_group(self, group: DuplicateGroup) -> MergeStats:
        """
        Folds every non-canonical member into the canonical one.

        Read, decision and mutation happen in one transaction: members are
        re-read under a row lock and the canonical record re-picked, so a run that
        merged the group concurrently leaves fewer than two members and this
        becomes a no-op.
        """
        stats = MergeStats()
        if group.status is GroupStatus.AMBIGUOUS:
            return stats

        with self.repo.transaction():
            members = self.repo.list_laws(LawFilter(ids=tuple(group.member_ids), for_update=True))
            if len(members) < 2:
                return stats
            keep = pick_canonical(members, self.weights)
            if keep.id != group.canonical_id:
                log.info("dedup: canonical of %s changed to %s", group.member_ids, keep.id)

            have = {seg.identity for seg in self.repo.get_segments(keep.id)}
            for dup in members:
                if dup.id == keep.id:
                    continue

                if not (keep.document_path or "").strip() and (dup.document_path or "").strip():
                    keep.document_path = dup.document_path
                    self.repo.update_law(keep.id, {
                        "document_path": dup.document_path,
                        "document_fingerprint": law_fingerprint(dup.document_path, keep.source_url),
                    })
                    stats.paths_copied += 1

                for seg in self.repo.get_segments(dup.id):
                    if seg.identity in have:
                        self.repo.delete_segment(seg.id)
                        stats.collisions += 1
                        continue
                    self.repo.reassign_segment(seg.id, keep.id)
                    have.add(seg.identity)
                    stats.reassigned += 1

                self.repo.delete_law(dup.id)
                stats.laws_deleted += 1

        log.debug(
            "dedup: kept %s, deleted %d, reassigned %d, collisions %d",
            keep.id, stats.laws_deleted, stats.reassigned, stats.collisions,
        )
        return stats
