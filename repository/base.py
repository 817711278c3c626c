"""
repository/base.py — the storage boundary of the engine.

Every single-row operation is assumed atomic. Multi-row work (one duplicate
group merge, one law re-segmentation) runs inside transaction(); nothing in
the engine retries — storage errors propagate to the caller unchanged.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

from data_model.laws import Law, Segment


class RepositoryError(Exception):
    pass


class RecordNotFound(RepositoryError, LookupError):
    def __init__(self, kind: str, record_id: int | None) -> None:
        super().__init__(f"{kind} id={record_id} not found")
        self.kind = kind
        self.record_id = record_id


# Columns callers may change through update_law().
LAW_UPDATABLE_FIELDS: frozenset[str] = frozenset({
    "title",
    "title_normalized",
    "root_title",
    "slug",
    "gazette_key",
    "gazette_number",
    "gazette_date",
    "document_path",
    "source_url",
    "document_fingerprint",
    "needs_reprocessing",
    "reprocess_reason",
})


@dataclass(frozen=True, slots=True)
class LawFilter:
    jurisdiction: str | None = None
    ids: tuple[int, ...] | None = None
    needs_reprocessing: bool | None = None
    # Row locks until the surrounding transaction ends; only meaningful inside transaction().
    for_update: bool = False


def check_law_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - LAW_UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown law field(s): {', '.join(sorted(unknown))}")


class LawRepository(Protocol):
    def list_laws(self, filter: LawFilter | None = None) -> list[Law]: ...

    def get_law(self, law_id: int) -> Law: ...

    def insert_law(self, law: Law) -> Law: ...

    def update_law(self, law_id: int, fields: dict[str, Any]) -> None: ...

    def delete_law(self, law_id: int) -> None: ...

    def get_segments(self, law_id: int) -> list[Segment]: ...

    def insert_segment(self, segment: Segment) -> Segment: ...

    def reassign_segment(self, segment_id: int, new_law_id: int) -> None: ...

    def delete_segment(self, segment_id: int) -> None: ...

    def transaction(self) -> AbstractContextManager[None]: ...
