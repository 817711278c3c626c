"""Command: lexnorm normalize — comparison keys of law titles."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict

from rich.console import Console
from rich.table import Table
from rich import box

from normalizer.gazette import parse_gazette
from normalizer.title_key import title_keys

console = Console()


def run(args: argparse.Namespace) -> None:
    rows = []
    for title in args.titles:
        keys = title_keys(title)
        row = {"title": title, **asdict(keys)}
        if args.gazette:
            row["gazette"] = asdict(parse_gazette(args.gazette))
        rows.append(row)

    if args.json:
        console.print_json(json.dumps(rows, ensure_ascii=False))
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", row_styles=["", "dim"])
    table.add_column("TITLE", max_width=60)
    table.add_column("NORMALIZED", style="cyan", max_width=60)
    table.add_column("ROOT", style="bold green")
    table.add_column("SLUG", style="dim")
    for row in rows:
        table.add_row(row["title"], row["title_normalized"], row["root_title"], row["slug"])

    console.print()
    console.print(table)
    if args.gazette:
        info = parse_gazette(args.gazette)
        console.print(
            f"  gazette: number=[cyan]{info.number}[/cyan] key=[cyan]{info.key}[/cyan]"
            f" date=[cyan]{info.date}[/cyan]\n"
        )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "normalize",
        help="Shows normalized title, root title and slug for titles.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Computes the comparison keys used by dedup for one or more titles.

Examples:
  lexnorm normalize "Zakon o radu" "ЗАКОН О ИЗМЈЕНАМА И ДОПУНАМА ЗАКОНА О РАДУ"
  lexnorm normalize "Zakon o radu" --gazette "Službeni glasnik RS, broj 12/05"
  lexnorm normalize "Zakon o radu" --json
        """,
    )
    p.add_argument("titles", metavar="TITLE", nargs="+", help="Law title(s).")
    p.add_argument(
        "--gazette",
        metavar="TEXT",
        default=None,
        help="Also parse a gazette reference (number, key, date).",
    )
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table.")
    p.set_defaults(func=run)
