"""Command: lexnorm audit — laws with missing, fallback-only or corrupted text."""

from __future__ import annotations

import argparse
import json
from collections import Counter

from rich.console import Console
from rich.table import Table
from rich import box

from dedup.audit import find_incomplete_laws

console = Console()


def run(args: argparse.Namespace) -> None:
    from lexnorm._db import get_repository

    try:
        repo = get_repository()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    findings = find_incomplete_laws(repo, args.jurisdiction)
    if args.reason:
        findings = [f for f in findings if f.reason == args.reason]

    if args.json:
        console.print_json(json.dumps([f.to_dict() for f in findings], ensure_ascii=False))
        return

    if not findings:
        console.print("[green]No incomplete laws.[/green]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", row_styles=["", "dim"])
    table.add_column("ID",     justify="right", no_wrap=True, style="dim")
    table.add_column("JUR",    no_wrap=True, style="cyan")
    table.add_column("TITLE",  max_width=60)
    table.add_column("REASON", no_wrap=True, style="yellow")
    table.add_column("SEGS",   justify="right", no_wrap=True)
    for f in findings:
        table.add_row(str(f.law_id), f.jurisdiction, f.title, f.reason, str(f.segment_count))

    console.print()
    console.print(table)
    counts = Counter(f.reason for f in findings)
    summary = ", ".join(f"{reason}={n}" for reason, n in sorted(counts.items()))
    console.print(f"  [dim]{len(findings)} laws: {summary}[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "audit",
        help="Lists laws whose stored text is likely incomplete.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Reports laws flagged for reprocessing, laws without segments, laws with
only the fallback excerpt and laws whose segments are all excluded.

Examples:
  lexnorm audit
  lexnorm audit --jurisdiction SRB --reason fallback_only
  lexnorm audit --json
        """,
    )
    p.add_argument("--jurisdiction", metavar="CODE", default=None, help="Limit to one jurisdiction.")
    p.add_argument(
        "--reason",
        choices=["needs_reprocessing", "no_segments", "all_excluded", "fallback_only"],
        default=None,
        help="Show only one kind of finding.",
    )
    p.add_argument("--json", action="store_true", help="Print findings as JSON.")
    p.set_defaults(func=run)
