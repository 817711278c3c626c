"""Command: lexnorm segment — extracted pages (JSON) to article segments."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.laws import Law, Segment
from repository.base import LawRepository
from segmenter.parser import SegmentationResult, Segmenter
from segmenter.script_profiles import get_profile

console = Console()


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

def _load_pages(path: Path) -> list:
    """
    Accepted shapes (output of the document-to-pages extractor):
      [{"page": 1, "text": "..."}, ...]
      [[1, "..."], ...]
      {"pages": [...]}
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("pages", [])
    if not isinstance(data, list):
        raise ValueError("expected a list of pages")
    return data


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _write_json(segments: list[Segment], json_path: Path) -> None:
    data = [asdict(s) for s in segments]
    json_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"[green]JSON:[/green] {json_path}  ({len(segments)} segments)")


def _open_law(law_id: int) -> tuple[LawRepository, Law]:
    from lexnorm._db import get_repository
    from repository.base import RecordNotFound

    try:
        repo = get_repository()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    try:
        return repo, repo.get_law(law_id)
    except RecordNotFound as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


def _write_db(repo: LawRepository, law: Law, result: SegmentationResult) -> None:
    from segmenter.ingest import store_segmentation

    stored = store_segmentation(repo, law, result)
    console.print(
        f"[green]DB:[/green] law_id={law.id}: stored {len(stored.stored)} segments"
        f" (replaced {stored.replaced}, collapsed {stored.dropped_duplicates})"
    )


def _show_table(segments: list[Segment]) -> None:
    if not segments:
        console.print("[yellow]No segments.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("NO",    justify="right", no_wrap=True, style="dim")
    table.add_column("LABEL", no_wrap=True, style="bold cyan")
    table.add_column("TYPE",  no_wrap=True, style="dim")
    table.add_column("PAGE",  justify="center", no_wrap=True)
    table.add_column("LEN",   justify="right", no_wrap=True)
    table.add_column("TEXT",  no_wrap=False, max_width=60)

    for seg in segments:
        label = f"[red]{seg.label} ✗[/red]" if seg.excluded else seg.label
        table.add_row(
            str(seg.number),
            label,
            str(seg.segment_type),
            str(seg.page_hint),
            str(len(seg.text)),
            seg.text[:80].replace("\n", " "),
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(segments)} segments[/dim]\n")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    pages_path = Path(args.pages_file)
    if not pages_path.exists():
        console.print(f"[red]File does not exist:[/red] {pages_path}")
        raise SystemExit(1)

    try:
        pages = _load_pages(pages_path)
    except (ValueError, json.JSONDecodeError) as e:
        console.print(f"[red]Invalid pages file:[/red] {e}")
        raise SystemExit(1)

    out = args.out  # "json" | "db" | "both"
    if out in ("db", "both") and args.law_id is None:
        console.print("[red]--law-id is required for --out db/both.[/red]")
        raise SystemExit(1)

    repo, law = _open_law(args.law_id) if out in ("db", "both") else (None, None)
    jurisdiction = args.jurisdiction or (law.jurisdiction if law else None)

    console.print(
        f"Segmenting [bold]{pages_path}[/bold] ({len(pages)} pages,"
        f" jurisdiction=[cyan]{jurisdiction or '-'}[/cyan]) …"
    )
    result = Segmenter(get_profile(jurisdiction)).segment(pages, args.law_id)
    console.print(f"Found [bold]{len(result.segments)}[/bold] segments.")
    if result.is_fallback:
        console.print("[yellow]No article heading recognized — fallback segment only.[/yellow]")

    if out in ("json", "both"):
        _write_json(result.segments, pages_path.with_suffix(".segments.json"))
    if repo is not None:
        _write_db(repo, law, result)

    for event in result.reprocess:
        console.print(f"[yellow]Reprocess:[/yellow] {json.dumps(event.to_dict(), ensure_ascii=False)}")

    if args.show:
        _show_table(result.segments)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "segment",
        help="Splits extracted pages into article segments (JSON / database).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Splits page-structured text produced by the extractor into segments.

Examples:
  lexnorm segment zakon_o_radu.pages.json --show
  lexnorm segment zakon_o_radu.pages.json --jurisdiction SRB --out json
  lexnorm segment zakon_o_radu.pages.json --law-id 1042 --out db
        """,
    )
    p.add_argument(
        "pages_file",
        metavar="PAGES.json",
        help="Path to the extracted pages JSON.",
    )
    p.add_argument(
        "--jurisdiction",
        metavar="CODE",
        default=None,
        help="Jurisdiction code for the script profile (RS, FBIH, BRCKO, BIH, SRB, CG);"
             " defaults to the stored law's jurisdiction with --out db/both.",
    )
    p.add_argument(
        "--law-id",
        metavar="ID",
        type=int,
        default=None,
        help="Law id whose segments are replaced (required for --out db/both).",
    )
    p.add_argument(
        "--out",
        choices=["json", "db", "both"],
        default="json",
        help="Output target: json, db or both (default: json).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print the segment table.",
    )
    p.set_defaults(func=run)
