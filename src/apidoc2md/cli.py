"""Command line entry point: parse API docs and print their entries."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from apidoc2md.exceptions import Apidoc2mdError
from apidoc2md.loader import resolve_api_doc
from apidoc2md.output_formatter import entries_to_json, format_entries
from apidoc2md.parser import parse_api_docs
from apidoc2md.schemas import ApiDocMetadataEntry
from apidoc2md.sections import filter_entries

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidoc2md",
        description="Split Markdown API docs into per-heading entries with metadata.",
    )
    parser.add_argument("sources", nargs="+", help="API doc file paths or http(s) URLs")
    parser.add_argument("-o", "--output", help="Write output to this file instead of stdout")
    parser.add_argument(
        "--format",
        choices=("json", "markdown"),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--section-filter-mode",
        choices=("include", "exclude"),
        default="exclude",
        help="Whether --section names entries to keep or to drop",
    )
    parser.add_argument(
        "--section",
        action="append",
        default=[],
        help="Entry title or slug to include/exclude (repeatable)",
    )
    parser.add_argument("--toc", action="store_true", help="Add a table of contents to Markdown output")
    parser.add_argument("--no-cache", action="store_true", help="Always refetch remote API docs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


async def collect_entries(
    sources: Sequence[str], *, use_cache: bool = True
) -> list[ApiDocMetadataEntry]:
    """Resolve and parse every source, keeping the order of ``sources``."""
    return await parse_api_docs(
        [resolve_api_doc(source, use_cache=use_cache) for source in sources]
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        entries = asyncio.run(collect_entries(args.sources, use_cache=not args.no_cache))
    except Apidoc2mdError as exc:
        logger.error("%s", exc)
        return 1

    entries = filter_entries(entries, mode=args.section_filter_mode, selected=args.section)

    if args.format == "json":
        output = json.dumps(entries_to_json(entries), indent=2, ensure_ascii=False)
    else:
        formatted = format_entries(entries, include_toc=args.toc)
        output = formatted.sections_tree + "\n\n" + formatted.content
        sys.stderr.write(formatted.summary + "\n")

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info("Wrote %d entries to %s", len(entries), args.output)
    else:
        sys.stdout.write(output + "\n")
    return 0
