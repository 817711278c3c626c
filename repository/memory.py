"""
repository/memory.py — in-process LawRepository.

Used by the test suite and by callers that keep laws in memory. Ids are
assigned on insert (1, 2, ...); transaction() restores a snapshot when the
block raises.
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from data_model.laws import Law, Segment
from repository.base import LawFilter, RecordNotFound, check_law_fields


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRepository:
    def __init__(self) -> None:
        self._laws: dict[int, Law] = {}
        self._segments: dict[int, Segment] = {}
        self._next_law_id = 1
        self._next_segment_id = 1

    # -----------------------------------------------------------------------
    # Laws
    # -----------------------------------------------------------------------

    def list_laws(self, filter: LawFilter | None = None) -> list[Law]:
        f = filter or LawFilter()
        out: list[Law] = []
        for law in sorted(self._laws.values(), key=lambda l: l.id or 0):
            if f.jurisdiction is not None and law.jurisdiction != f.jurisdiction:
                continue
            if f.ids is not None and law.id not in f.ids:
                continue
            if f.needs_reprocessing is not None and law.needs_reprocessing != f.needs_reprocessing:
                continue
            out.append(copy.copy(law))
        return out

    def get_law(self, law_id: int) -> Law:
        law = self._laws.get(law_id)
        if law is None:
            raise RecordNotFound("law", law_id)
        return copy.copy(law)

    def insert_law(self, law: Law) -> Law:
        now = _now()
        stored = dataclasses.replace(law, id=self._next_law_id, created_at=now, updated_at=now)
        self._laws[stored.id] = stored
        self._next_law_id += 1
        return copy.copy(stored)

    def update_law(self, law_id: int, fields: dict[str, Any]) -> None:
        check_law_fields(fields)
        law = self._laws.get(law_id)
        if law is None:
            raise RecordNotFound("law", law_id)
        self._laws[law_id] = dataclasses.replace(law, updated_at=_now(), **fields)

    def delete_law(self, law_id: int) -> None:
        if self._laws.pop(law_id, None) is None:
            raise RecordNotFound("law", law_id)
        # segments never outlive their law
        for seg_id in [s.id for s in self._segments.values() if s.law_id == law_id]:
            del self._segments[seg_id]

    # -----------------------------------------------------------------------
    # Segments
    # -----------------------------------------------------------------------

    def get_segments(self, law_id: int) -> list[Segment]:
        segs = [s for s in self._segments.values() if s.law_id == law_id]
        return [copy.copy(s) for s in sorted(segs, key=lambda s: s.id or 0)]

    def insert_segment(self, segment: Segment) -> Segment:
        if segment.law_id not in self._laws:
            raise RecordNotFound("law", segment.law_id)
        stored = dataclasses.replace(segment, id=self._next_segment_id)
        self._segments[stored.id] = stored
        self._next_segment_id += 1
        return copy.copy(stored)

    def reassign_segment(self, segment_id: int, new_law_id: int) -> None:
        seg = self._segments.get(segment_id)
        if seg is None:
            raise RecordNotFound("segment", segment_id)
        if new_law_id not in self._laws:
            raise RecordNotFound("law", new_law_id)
        self._segments[segment_id] = dataclasses.replace(seg, law_id=new_law_id)

    def delete_segment(self, segment_id: int) -> None:
        if self._segments.pop(segment_id, None) is None:
            raise RecordNotFound("segment", segment_id)

    # -----------------------------------------------------------------------
    # Transactions
    # -----------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = (
            copy.deepcopy(self._laws),
            copy.deepcopy(self._segments),
            self._next_law_id,
            self._next_segment_id,
        )
        try:
            yield
        except BaseException:
            self._laws, self._segments, self._next_law_id, self._next_segment_id = snapshot
            raise
