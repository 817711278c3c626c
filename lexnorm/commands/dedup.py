"""Command: lexnorm dedup — duplicate law detection; merge only with --apply."""

from __future__ import annotations

import argparse
import json

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.laws import GroupStatus
from dedup.resolver import DedupReport, DedupResolver

console = Console()

_STATUS_STYLE = {
    GroupStatus.EXACT:     "green",
    GroupStatus.LOOSE:     "yellow",
    GroupStatus.AMBIGUOUS: "bold red",
}


def _show_report(report: DedupReport) -> None:
    if not report.groups:
        console.print("[green]No duplicate groups.[/green]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("JUR",    no_wrap=True, style="cyan")
    table.add_column("ROOT",   max_width=40)
    table.add_column("GAZETTE", no_wrap=True)
    table.add_column("STATUS", no_wrap=True)
    table.add_column("KEEP",   justify="right", no_wrap=True, style="bold")
    table.add_column("DELETE", max_width=30)

    for g in report.groups:
        style = _STATUS_STYLE[g.status]
        keep = str(g.canonical_id) if g.canonical_id is not None else "-"
        delete = ", ".join(str(i) for i in g.delete_ids) or "-"
        if g.status is GroupStatus.AMBIGUOUS:
            delete = f"ids {', '.join(str(i) for i in g.member_ids)}"
        table.add_row(
            g.jurisdiction,
            g.title_key,
            g.gazette_key,
            f"[{style}]{g.status}[/{style}]",
            keep,
            delete,
        )

    console.print()
    console.print(table)
    console.print(
        f"  [dim]{len(report.groups)} groups, {len(report.ambiguous)} ambiguous,"
        f" {len(report.ungroupable)} laws without title/gazette key[/dim]\n"
    )


def run(args: argparse.Namespace) -> None:
    from lexnorm._db import get_repository

    try:
        repo = get_repository()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    resolver = DedupResolver(repo)
    report = resolver.run(args.jurisdiction, confirm=args.apply)

    if args.json:
        console.print_json(json.dumps(report.to_dict(), ensure_ascii=False))
        return

    _show_report(report)
    if not args.apply:
        console.print("[dim]Dry run. Re-run with --apply to merge.[/dim]")
        return

    s = report.stats
    console.print(
        f"[green]Merged:[/green] {s.laws_deleted} laws deleted, {s.reassigned} segments reassigned,"
        f" {s.collisions} colliding segments discarded, {s.paths_copied} document paths copied"
    )
    if report.ambiguous:
        console.print(f"[yellow]{len(report.ambiguous)} ambiguous group(s) left for review.[/yellow]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "dedup",
        help="Finds duplicate law records; merges them only with --apply.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Groups laws by (jurisdiction, root title, gazette key, document fingerprint)
and proposes one record to keep per group. Without --apply nothing is written.

Examples:
  lexnorm dedup
  lexnorm dedup --jurisdiction RS --json
  lexnorm dedup --jurisdiction FBIH --apply
        """,
    )
    p.add_argument(
        "--jurisdiction",
        metavar="CODE",
        default=None,
        help="Limit to one jurisdiction.",
    )
    p.add_argument(
        "--apply",
        action="store_true",
        help="Merge the proposed groups (ambiguous groups are never merged).",
    )
    p.add_argument("--json", action="store_true", help="Print the report as JSON.")
    p.set_defaults(func=run)
