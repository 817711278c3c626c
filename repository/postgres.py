"""
repository/postgres.py — LawRepository on PostgreSQL (psycopg2).

Tables: law, segment (db/schema.sql).

Outside transaction() every call commits on its own. Inside it, all calls
share one database transaction: commit when the block finishes, rollback
when it raises. psycopg2 errors propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2.extensions
import psycopg2.extras

from data_model.laws import Law, Segment, SegmentType
from repository.base import LawFilter, RecordNotFound, check_law_fields

_LAW_COLUMNS = """
    id, jurisdiction, title, title_normalized, root_title, slug,
    gazette_key, gazette_number, gazette_date::text AS gazette_date,
    document_path, source_url, document_fingerprint,
    needs_reprocessing, reprocess_reason, created_at, updated_at
"""

_SEGMENT_COLUMNS = """
    id, law_id, segment_type::text AS segment_type, label, number, text,
    page_hint, excluded, exclusion_reason
"""


def _row_to_law(row: dict[str, Any]) -> Law:
    return Law(**row)


def _row_to_segment(row: dict[str, Any]) -> Segment:
    data = dict(row)
    data["segment_type"] = SegmentType(data["segment_type"])
    return Segment(**data)


class PostgresRepository:
    def __init__(self, conn: psycopg2.extensions.connection) -> None:
        self._conn = conn
        self._depth = 0

    # -----------------------------------------------------------------------
    # Transactions
    # -----------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth:
            # nested block joins the outer transaction
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            with self._conn:
                yield
        finally:
            self._depth = 0

    @contextmanager
    def _cursor(self) -> Iterator[psycopg2.extras.RealDictCursor]:
        if self._depth:
            with self._conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                yield cur
            return
        with self._conn, self._conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            yield cur

    # -----------------------------------------------------------------------
    # Laws
    # -----------------------------------------------------------------------

    def list_laws(self, filter: LawFilter | None = None) -> list[Law]:
        f = filter or LawFilter()
        conditions: list[str] = []
        params: list[Any] = []
        if f.jurisdiction is not None:
            conditions.append("jurisdiction = %s")
            params.append(f.jurisdiction)
        if f.ids is not None:
            conditions.append("id = ANY(%s)")
            params.append(list(f.ids))
        if f.needs_reprocessing is not None:
            conditions.append("needs_reprocessing = %s")
            params.append(f.needs_reprocessing)

        where = ("WHERE " + " AND ".join(conditions)) if conditions else ""
        with self._cursor() as cur:
            lock = " FOR UPDATE" if f.for_update else ""
            cur.execute(f"SELECT {_LAW_COLUMNS} FROM law {where} ORDER BY id{lock}", params)
            return [_row_to_law(r) for r in cur.fetchall()]

    def get_law(self, law_id: int) -> Law:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_LAW_COLUMNS} FROM law WHERE id = %s", (law_id,))
            row = cur.fetchone()
        if row is None:
            raise RecordNotFound("law", law_id)
        return _row_to_law(row)

    def insert_law(self, law: Law) -> Law:
        with self._cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO law (
                    jurisdiction, title, title_normalized, root_title, slug,
                    gazette_key, gazette_number, gazette_date,
                    document_path, source_url, document_fingerprint,
                    needs_reprocessing, reprocess_reason
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {_LAW_COLUMNS}
                """,
                (
                    law.jurisdiction, law.title, law.title_normalized, law.root_title, law.slug,
                    law.gazette_key, law.gazette_number, law.gazette_date,
                    law.document_path, law.source_url, law.document_fingerprint,
                    law.needs_reprocessing, law.reprocess_reason,
                ),
            )
            return _row_to_law(cur.fetchone())

    def update_law(self, law_id: int, fields: dict[str, Any]) -> None:
        check_law_fields(fields)
        if not fields:
            return
        # column names come from LAW_UPDATABLE_FIELDS, never from input text
        assignments = ", ".join(f"{name} = %s" for name in fields)
        with self._cursor() as cur:
            cur.execute(
                f"UPDATE law SET {assignments}, updated_at = now() WHERE id = %s",
                (*fields.values(), law_id),
            )
            if cur.rowcount == 0:
                raise RecordNotFound("law", law_id)

    def delete_law(self, law_id: int) -> None:
        with self._cursor() as cur:
            cur.execute("DELETE FROM law WHERE id = %s", (law_id,))
            if cur.rowcount == 0:
                raise RecordNotFound("law", law_id)

    # -----------------------------------------------------------------------
    # Segments
    # -----------------------------------------------------------------------

    def get_segments(self, law_id: int) -> list[Segment]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_SEGMENT_COLUMNS} FROM segment WHERE law_id = %s ORDER BY id",
                (law_id,),
            )
            return [_row_to_segment(r) for r in cur.fetchall()]

    def insert_segment(self, segment: Segment) -> Segment:
        with self._cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO segment (
                    law_id, segment_type, label, number, text,
                    page_hint, excluded, exclusion_reason
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {_SEGMENT_COLUMNS}
                """,
                (
                    segment.law_id, str(segment.segment_type), segment.label,
                    segment.number, segment.text, segment.page_hint,
                    segment.excluded, segment.exclusion_reason,
                ),
            )
            return _row_to_segment(cur.fetchone())

    def reassign_segment(self, segment_id: int, new_law_id: int) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE segment SET law_id = %s, updated_at = now() WHERE id = %s",
                (new_law_id, segment_id),
            )
            if cur.rowcount == 0:
                raise RecordNotFound("segment", segment_id)

    def delete_segment(self, segment_id: int) -> None:
        with self._cursor() as cur:
            cur.execute("DELETE FROM segment WHERE id = %s", (segment_id,))
            if cur.rowcount == 0:
                raise RecordNotFound("segment", segment_id)
