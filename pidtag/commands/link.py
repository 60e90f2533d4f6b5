"""Command: pidtag link — auto-link matchers on a saved result file."""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from data_model import Relationship
from linker import (
    link_equipment_to_short_specs,
    link_instruments_to_text,
    link_notes_to_descriptions,
)
from pidtag._config import ConfigError, load_settings
from pidtag._io import ResultFileError, read_result, write_result

console = Console()


def _show_created(created: list[Relationship]) -> None:
    if not created:
        console.print("[yellow]No new relationships.[/yellow]")
        return
    counts = Counter(str(r.type) for r in created)
    table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold white")
    table.add_column("TYPE", style="bold cyan", no_wrap=True)
    table.add_column("NEW", justify="right", no_wrap=True)
    for kind, count in sorted(counts.items()):
        table.add_row(kind, str(count))
    console.print(table)


def run(args: argparse.Namespace) -> None:
    path = Path(args.result_file)
    try:
        result = read_result(path)
        settings = load_settings(args.config)
    except (ResultFileError, ConfigError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    # no selection flag means every matcher
    run_all = not (args.instruments or args.notes or args.specs)
    created: list[Relationship] = []

    if run_all or args.instruments:
        created += link_instruments_to_text(
            result.tags, result.raw_text_items, result.relationships + created,
            settings.tolerances.instrument.auto_link_distance)
    if run_all or args.notes:
        created += link_notes_to_descriptions(
            result.tags, result.descriptions, result.relationships + created)
    if run_all or args.specs:
        created += link_equipment_to_short_specs(
            result.tags, result.equipment_short_specs, result.relationships + created)

    _show_created(created)
    if created:
        result.relationships.extend(created)
        write_result(result, path)
        console.print(f"[green]JSON:[/green] {path}  (+{len(created)} relationships)")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "link",
        help="Adds auto-link relationships to a .tags.json result file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Runs the auto-link matchers on a result file written by `pidtag extract`
and appends the new relationships in place. Relationships already present
are never duplicated.

  --instruments  instrument tag → nearest raw text (Annotation)
  --notes        NOTE/HOLD tag → numbered description (Description)
  --specs        equipment tag → short spec (EquipmentShortSpec)

Without a selection flag all three run.

Examples:
  pidtag link drawing.tags.json
  pidtag link drawing.tags.json --specs
        """,
    )
    p.add_argument(
        "result_file",
        metavar="RESULT.json",
        help="Result file written by `pidtag extract`.",
    )
    p.add_argument("--instruments", action="store_true", help="Instrument ↔ raw text links.")
    p.add_argument("--notes", action="store_true", help="Note/hold ↔ description links.")
    p.add_argument("--specs", action="store_true", help="Equipment ↔ short spec links.")
    p.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Settings JSON (auto-link distance; default: $PIDTAG_CONFIG).",
    )
    p.set_defaults(func=run)
