"""
Command: lexnorm apply-schema — creates the law/segment schema and checks it
against the data model.

Applying runs every statement of db/schema.sql in one transaction, so a
failing statement leaves the database untouched. Afterwards (or alone, with
--check) the live catalog is compared with data_model:

  tables        law, segment
  enum          segment_type labels == SegmentType values, in order
  columns       every Law / Segment field has a column
"""

from __future__ import annotations

import argparse
import pathlib
import re
from dataclasses import dataclass, fields

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.laws import Law, Segment, SegmentType

console = Console()

ROOT        = pathlib.Path(__file__).resolve().parent.parent.parent
SCHEMA_PATH = ROOT / "db" / "schema.sql"

# $$ toggles a function body; ";" inside a body or a line comment is not a terminator.
_SQL_TOKEN = re.compile(r"\$\$|--[^\n]*|;")
_SQL_COMMENT = re.compile(r"--[^\n]*")

EXPECTED_COLUMNS: dict[str, frozenset[str]] = {
    "law":     frozenset(f.name for f in fields(Law)),
    "segment": frozenset(f.name for f in fields(Segment)),
}


def split_statements(sql: str) -> list[str]:
    stmts: list[str] = []
    start = 0
    in_body = False
    for m in _SQL_TOKEN.finditer(sql):
        if m.group() == "$$":
            in_body = not in_body
        elif m.group() == ";" and not in_body:
            _append_statement(stmts, sql[start:m.end()])
            start = m.end()
    _append_statement(stmts, sql[start:])
    return stmts


def _append_statement(stmts: list[str], chunk: str) -> None:
    if _SQL_COMMENT.sub("", chunk).strip(" \t\r\n;"):
        stmts.append(chunk.strip())


# ---------------------------------------------------------------------------
# Catalog check
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SchemaCheck:
    name: str
    ok: bool
    detail: str = ""


def compare_schema(
    tables: set[str],
    enum_labels: list[str],
    columns: dict[str, set[str]],
) -> list[SchemaCheck]:
    checks: list[SchemaCheck] = []
    for table in EXPECTED_COLUMNS:
        checks.append(SchemaCheck(f"table {table}", table in tables, "" if table in tables else "missing"))

    expected_labels = [t.value for t in SegmentType]
    if not enum_labels:
        checks.append(SchemaCheck("enum segment_type", False, "missing"))
    else:
        checks.append(SchemaCheck(
            "enum segment_type",
            enum_labels == expected_labels,
            "" if enum_labels == expected_labels else f"labels {enum_labels}, expected {expected_labels}",
        ))

    for table, expected in EXPECTED_COLUMNS.items():
        if table not in tables:
            continue
        missing = sorted(expected - columns.get(table, set()))
        checks.append(SchemaCheck(
            f"columns {table}",
            not missing,
            f"missing: {', '.join(missing)}" if missing else f"{len(expected)} mapped",
        ))
    return checks


def inspect_schema(cur) -> list[SchemaCheck]:
    cur.execute(
        "SELECT table_name FROM information_schema.tables"
        " WHERE table_schema = current_schema() AND table_name = ANY(%s)",
        (list(EXPECTED_COLUMNS),),
    )
    tables = {row[0] for row in cur.fetchall()}

    cur.execute(
        "SELECT e.enumlabel FROM pg_type t JOIN pg_enum e ON e.enumtypid = t.oid"
        " WHERE t.typname = 'segment_type' ORDER BY e.enumsortorder"
    )
    enum_labels = [row[0] for row in cur.fetchall()]

    cur.execute(
        "SELECT table_name, column_name FROM information_schema.columns"
        " WHERE table_schema = current_schema() AND table_name = ANY(%s)",
        (list(EXPECTED_COLUMNS),),
    )
    columns: dict[str, set[str]] = {}
    for table, column in cur.fetchall():
        columns.setdefault(table, set()).add(column)

    return compare_schema(tables, enum_labels, columns)


def _show_checks(checks: list[SchemaCheck]) -> None:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", row_styles=["", "dim"])
    table.add_column("OBJECT", style="bold cyan", no_wrap=True)
    table.add_column("STATUS", no_wrap=True)
    table.add_column("DETAIL", style="dim")
    for check in checks:
        status = "[green]ok[/green]" if check.ok else "[red]FAIL[/red]"
        table.add_row(check.name, status, check.detail)
    console.print()
    console.print(table)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from lexnorm._db import get_connection

    stmts: list[str] = []
    if not args.check:
        schema_path = pathlib.Path(args.schema) if args.schema else SCHEMA_PATH
        if not schema_path.exists():
            console.print(f"[red]Schema file not found:[/red] {schema_path}")
            raise SystemExit(1)
        stmts = split_statements(schema_path.read_text(encoding="utf-8"))

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    try:
        if stmts:
            try:
                with conn, conn.cursor() as cur:
                    for stmt in stmts:
                        cur.execute(stmt)
            except Exception as e:
                console.print(f"[red]Schema execution error (rolled back):[/red] {e}")
                raise SystemExit(1)
            console.print(f"[green]Schema applied:[/green] {len(stmts)} statements")

        with conn, conn.cursor() as cur:
            checks = inspect_schema(cur)
    finally:
        conn.close()

    _show_checks(checks)
    failed = [c for c in checks if not c.ok]
    if failed:
        console.print(f"[red]{len(failed)} schema check(s) failed.[/red]")
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Applies db/schema.sql and verifies tables, enum and columns.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Runs db/schema.sql against the configured PostgreSQL database in a single
transaction, then checks the catalog against the data model.

Examples:
  lexnorm apply-schema
  lexnorm apply-schema --schema /path/to/schema.sql
  lexnorm apply-schema --check
        """,
    )
    p.add_argument(
        "--schema",
        metavar="PATH",
        default=None,
        help="Alternative schema file (default: db/schema.sql).",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Only verify the existing schema, apply nothing.",
    )
    p.set_defaults(func=run)
