"""Command: pidtag opc — off-page connector report."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from linker import OpcGroup, OpcStatus, build_off_page_relationships, group_off_page_connectors
from pidtag._io import ResultFileError, read_result, write_result

console = Console()

_STATUS_STYLE: dict[OpcStatus, str] = {
    OpcStatus.CONNECTED:   "green",
    OpcStatus.UNCONNECTED: "yellow",
    OpcStatus.INVALID:     "red",
}


def _show_groups(groups: list[OpcGroup]) -> None:
    if not groups:
        console.print("[yellow]No off-page connectors.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("REF", style="bold cyan", no_wrap=True)
    table.add_column("PAGES", no_wrap=True)
    table.add_column("TAGS", justify="right", no_wrap=True)
    table.add_column("STATUS", no_wrap=True)

    for group in groups:
        table.add_row(
            group.reference,
            ", ".join(str(p) for p in group.pages),
            str(len(group.tags)),
            Text(str(group.status), style=_STATUS_STYLE[group.status]),
        )

    connected = sum(1 for g in groups if g.status is OpcStatus.CONNECTED)
    console.print()
    console.print(table)
    console.print(f"  [dim]{len(groups)} reference(s), {connected} connected[/dim]\n")


def run(args: argparse.Namespace) -> None:
    path = Path(args.result_file)
    try:
        result = read_result(path)
    except ResultFileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if args.rebuild:
        result.relationships = build_off_page_relationships(result.tags, result.relationships)
        write_result(result, path)
        console.print(f"[green]JSON:[/green] {path}  (off-page connections rebuilt)")

    _show_groups(group_off_page_connectors(result.tags, result.relationships))


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "opc",
        help="Lists off-page connector groups and their link status.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Groups off-page connector tags by reference text and reports each group:

  connected    two tags on two pages, linked both ways
  unconnected  two tags on two pages, links missing
  invalid      any other number of tags or pages

Examples:
  pidtag opc drawing.tags.json
  pidtag opc drawing.tags.json --rebuild
        """,
    )
    p.add_argument(
        "result_file",
        metavar="RESULT.json",
        help="Result file written by `pidtag extract`.",
    )
    p.add_argument(
        "--rebuild",
        action="store_true",
        help="Rebuild OffPageConnection relationships from the tags and save.",
    )
    p.set_defaults(func=run)
