"""Command: pidtag config — prints the effective settings as JSON."""

from __future__ import annotations

import argparse
import json

from rich.console import Console

from pidtag._config import ConfigError, config_path, load_settings, settings_to_dict

console = Console()


def run(args: argparse.Namespace) -> None:
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise SystemExit(1)

    path = config_path(args.config)
    console.print(f"[dim]source: {path or 'built-in defaults'}[/dim]")
    console.print_json(json.dumps(settings_to_dict(settings), ensure_ascii=False))


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "config",
        help="Prints the effective extraction settings.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Prints the settings `pidtag extract` would use, after defaults are filled
in and invalid tolerances rejected. The output is a valid settings file.

Examples:
  pidtag config
  pidtag config --config project.json > checked.json
        """,
    )
    p.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Settings JSON (default: $PIDTAG_CONFIG, else built-in defaults).",
    )
    p.set_defaults(func=run)
