"""Command: pidtag extract — tags, raw text and off-page links from a PDF."""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from pathlib import Path

from rich import box
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from data_model import Settings
from extractor import DocumentResult, extract_document
from linker import auto_link_all
from pidtag._config import ConfigError, load_settings
from pidtag._io import ResultFile, write_result

console = Console()
log = logging.getLogger(__name__)


def result_path(pdf_path: Path) -> Path:
    return pdf_path.with_suffix("").with_suffix(".tags.json")


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _extract(pdf_path: Path, settings: Settings, page_range: str | None) -> DocumentResult:
    from pdf.parser import read_pages

    pages = read_pages(pdf_path, page_range)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Extracting", total=len(pages))
        return extract_document(
            pages, settings,
            on_progress=lambda done, total: progress.update(task, completed=done, total=total),
        )


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def _show_summary(result: ResultFile) -> None:
    counts = Counter(str(t.category) for t in result.tags)
    table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold white")
    table.add_column("CATEGORY", style="bold cyan", no_wrap=True)
    table.add_column("TAGS", justify="right", no_wrap=True)
    for category, count in sorted(counts.items()):
        table.add_row(category, str(count))
    table.add_row("[dim]raw text[/dim]", f"[dim]{len(result.raw_text_items)}[/dim]")

    console.print()
    console.print(table)
    console.print(
        f"  [dim]{len(result.pages)} page(s), {len(result.relationships)} relationship(s), "
        f"{len(result.loops)} loop(s)[/dim]\n")


def _show_tags(doc: DocumentResult) -> None:
    if not doc.tags:
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("PAGE", justify="right", no_wrap=True)
    table.add_column("CATEGORY", no_wrap=True, style="cyan")
    table.add_column("TEXT", style="bold", no_wrap=False, max_width=40)
    table.add_column("BBOX", no_wrap=True, style="dim")

    for tag in sorted(doc.tags, key=lambda t: (t.page, t.category, t.bbox.y1, t.bbox.x1)):
        b = tag.bbox
        table.add_row(
            str(tag.page),
            str(tag.category),
            tag.text,
            f"{b.x1:.1f}, {b.y1:.1f}, {b.x2:.1f}, {b.y2:.1f}",
        )

    console.print(table)


def _show_warnings(doc: DocumentResult) -> None:
    for w in doc.warnings:
        where = f"page {w.page}" if w.page is not None else "document"
        console.print(f"[yellow]{w.code}[/yellow] ({where}) {w.message}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    pdf_path = Path(args.pdf_file)
    if not pdf_path.exists():
        console.print(f"[red]File does not exist:[/red] {pdf_path}")
        raise SystemExit(1)
    if pdf_path.suffix.lower() != ".pdf":
        console.print(f"[red]Expected a .pdf file, got:[/red] {pdf_path.suffix}")
        raise SystemExit(1)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"Extracting [bold]{pdf_path}[/bold] …")

    try:
        doc = _extract(pdf_path, settings, args.pages)
    except ImportError as e:
        console.print(f"[red]Import error (PyMuPDF missing?):[/red] {e}")
        raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red]Invalid page range:[/red] {e}")
        raise SystemExit(1)
    except RuntimeError as e:
        console.print(f"[red]Cannot read PDF:[/red] {e}")
        raise SystemExit(1)

    result = ResultFile.from_document(doc, source=pdf_path.name)
    if args.link:
        created = auto_link_all(
            result.tags, result.raw_text_items, result.descriptions,
            result.equipment_short_specs, result.relationships, settings)
        result.relationships.extend(created)
        log.info("auto-link: %d relationship(s) added", len(created))

    _show_summary(result)
    _show_warnings(doc)

    if args.out == "json":
        path = Path(args.output) if args.output else result_path(pdf_path)
        write_result(result, path)
        console.print(f"[green]JSON:[/green] {path}  ({len(result.tags)} tags)")

    if args.show:
        _show_tags(doc)


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "extract",
        help="Extracts tags from a P&ID PDF and writes <name>.tags.json.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Extracts tags (equipment, lines, instruments, drawing numbers, notes,
off-page connectors) and leftover raw text from every page of a PDF.

Examples:
  pidtag extract drawing.pdf --show
  pidtag extract drawing.pdf --pages 1-3,7 --link
  pidtag extract drawing.pdf --config project.json --out none --show
        """,
    )
    p.add_argument(
        "pdf_file",
        metavar="FILE.pdf",
        help="Path to the PDF file.",
    )
    p.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Settings JSON (default: $PIDTAG_CONFIG, else built-in defaults).",
    )
    p.add_argument(
        "--pages",
        metavar="RANGE",
        default=None,
        help='1-based page selection, e.g. "1-3,5" (default: all pages).',
    )
    p.add_argument(
        "--out",
        choices=["json", "none"],
        default="json",
        help="Where to write the result (default: json).",
    )
    p.add_argument(
        "-o", "--output",
        metavar="PATH",
        default=None,
        help="Result file path (default: <name>.tags.json next to the PDF).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print the extracted tags as a table.",
    )
    p.add_argument(
        "--link",
        action="store_true",
        help="Run the auto-link matchers after extraction.",
    )
    p.set_defaults(func=run)
