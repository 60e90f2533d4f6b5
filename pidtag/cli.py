"""
pidtag — command line tool for P&ID tag extraction.

Usage:
  pidtag [-v] <command> [options]

Commands:
  extract   Extracts tags and raw text from a PDF, writes <name>.tags.json.
  link      Runs the auto-link matchers on a result file.
  opc       Reports off-page connector groups of a result file.
  config    Prints the effective extraction settings.
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.logging import RichHandler

from pidtag import __version__
from pidtag.commands import config as cmd_config
from pidtag.commands import extract as cmd_extract
from pidtag.commands import link as cmd_link
from pidtag.commands import opc as cmd_opc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pidtag",
        description="pidtag — P&ID tag extraction.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"pidtag {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="More log output (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_extract.add_parser(subparsers)
    cmd_link.add_parser(subparsers)
    cmd_opc.add_parser(subparsers)
    cmd_config.add_parser(subparsers)

    return parser


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def main(argv: list[str] | None = None) -> None:
    # Windows consoles may default to cp1252; tag texts often carry ″, ø, µ.
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    if hasattr(sys.stderr, "reconfigure"):
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
