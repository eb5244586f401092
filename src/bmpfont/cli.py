"""Command line entry point for bmpfont."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import config
from .backend import BACKENDS, FontSelection
from .catalog import GLYPH_CATALOG, index_of
from .errors import ExportError
from .export import export_font
from .serialize import parse_table

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="bmpfont",
        description="Compile an outline font into a packed bitmap glyph table.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(config.ENV_LOG_LEVEL, "INFO"),
        help="Logging level (DEBUG shows per-glyph metrics).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser("export", help="Render the glyph catalog and write a table.")
    export.add_argument(
        "font",
        help="Font file or installed font name, 'default' for Pillow's bundled font, "
        "or a glyph JSON file with --backend svg.",
    )
    export.add_argument("output", type=Path, help="Destination file.")
    export.add_argument(
        "--size",
        type=int,
        default=os.environ.get(config.ENV_SIZE, str(config.DEFAULT_SIZE)),
        help="Pixel size (svg backend: line height in pixels).",
    )
    export.add_argument(
        "--style",
        default=None,
        help="Face or named instance (svg backend: fontKey inside the JSON file).",
    )
    export.add_argument("--backend", choices=sorted(BACKENDS), default=config.DEFAULT_BACKEND)
    export.add_argument(
        "--format",
        dest="output_format",
        choices=config.OUTPUT_FORMATS,
        default=os.environ.get(config.ENV_FORMAT, config.DEFAULT_FORMAT),
    )
    export.add_argument(
        "--align-tail",
        choices=config.TAIL_ALIGNMENTS,
        default="left",
        help="Where the pixels of a short last byte in a row go.",
    )
    export.add_argument("--workers", type=int, default=1, help="Glyphs rendered in parallel.")

    commands.add_parser("catalog", help="List the glyph catalog with indices.")

    show = commands.add_parser("show", help="Draw glyphs from a table file as text.")
    show.add_argument("table", type=Path, help="Table written with --format table.")
    show.add_argument("symbols", nargs="+", help="Symbols to draw.")
    show.add_argument("--align-tail", choices=config.TAIL_ALIGNMENTS, default="left")

    return parser.parse_args(argv)


def run_export(args: argparse.Namespace) -> int:
    selection = FontSelection(family=args.font, size=args.size, style=args.style)
    font = export_font(
        selection,
        args.output,
        backend=args.backend,
        output_format=args.output_format,
        align_tail=args.align_tail,
        workers=args.workers,
    )
    print(f"Wrote {len(font.glyphs)} glyphs, line height {font.line_height}, to {args.output}")
    return 0


def run_catalog(args: argparse.Namespace) -> int:
    for index, symbol in enumerate(GLYPH_CATALOG):
        print(f"{index}\tU+{ord(symbol):04X}\t{symbol}")
    return 0


def run_show(args: argparse.Namespace) -> int:
    font = parse_table(args.table.read_text(encoding="utf-8"))
    for text in args.symbols:
        for symbol in text:
            try:
                index = index_of(symbol)
            except KeyError:
                print(f"ERROR: {symbol!r} is not in the glyph catalog", file=sys.stderr)
                return 2
            if index >= len(font.glyphs):
                print(f"ERROR: {args.table} has no entry {index} for {symbol!r}", file=sys.stderr)
                return 2
            print(f"[{index}] {symbol!r} width={font.widths[index]} advance={font.advances[index]}")
            for row in font.glyph_rows(index, args.align_tail):
                print("".join("#" if ink else "." for ink in row))
    return 0


COMMANDS = {
    "export": run_export,
    "catalog": run_catalog,
    "show": run_show,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the exit code."""
    load_dotenv()
    args = parse_args(argv)
    level = logging.getLevelName(args.log_level.upper())
    if not isinstance(level, int):
        print(f"ERROR: unknown log level {args.log_level!r}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return COMMANDS[args.command](args)
    except ExportError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
