"""
lexnorm — CLI of the normalization & segmentation engine.

Usage:
  lexnorm <command> [options]

Commands:
  normalize     Shows the comparison keys of law titles.
  segment       Splits extracted pages (JSON) into article segments.
  dedup         Finds duplicate laws; merges them only with --apply.
  audit         Lists laws with missing, fallback-only or corrupted text.
  apply-schema  Applies db/schema.sql and checks it against the data model.

Environment:
  PGHOST PGPORT PGDATABASE PGUSER PGPASSWORD   database (.env supported)
  LEXNORM_LOG_LEVEL                            DEBUG / INFO / WARNING
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

# Windows consoles may default to cp1252; Cyrillic titles need UTF-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from lexnorm import __version__
from lexnorm.commands import normalize as cmd_normalize
from lexnorm.commands import segment as cmd_segment
from lexnorm.commands import dedup as cmd_dedup
from lexnorm.commands import audit as cmd_audit
from lexnorm.commands import apply_schema as cmd_apply_schema


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("LEXNORM_LOG_LEVEL", "INFO")).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexnorm",
        description="lexnorm — legal text normalization, segmentation and dedup.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"lexnorm {__version__}"
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        default=None,
        help="Logging level (default: $LEXNORM_LOG_LEVEL or INFO).",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_normalize.add_parser(subparsers)
    cmd_segment.add_parser(subparsers)
    cmd_dedup.add_parser(subparsers)
    cmd_audit.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
