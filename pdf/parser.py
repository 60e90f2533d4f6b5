"""
pdf/parser.py — page text provider backed by PyMuPDF.

Architecture:
  pdf_path → fitz.open() → selected pages → get_text("dict") spans
  → _span_item() → TextItem (PDF user space, pdf.js-style transform)
  → PageInput(page_number, items, rotation, view_box)

PyMuPDF reports span positions on the rotated page with a top-left origin.
They are brought back to the unrotated page (derotation_matrix) and flipped
to a bottom-left origin, so the extractor sees the same kind of input a
browser text layer would give it.

Public API:
  read_pages(path, page_range=None) -> list[PageInput]
  parse_page_range(selection, page_count) -> list[int]
"""

from __future__ import annotations

import math
from pathlib import Path

import fitz  # PyMuPDF

from data_model import TextItem
from extractor.types import PageInput

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_pages(path: str | Path, page_range: str | None = None) -> list[PageInput]:
    """
    Reads the positioned text of a PDF.

    Args:
        path:       PDF file.
        page_range: 1-based selection such as "1-3,5" (default: all pages).
    """
    doc = fitz.open(str(path))
    try:
        numbers = parse_page_range(page_range, doc.page_count)
        return [_page_input(doc[n - 1]) for n in numbers]
    finally:
        doc.close()


def parse_page_range(selection: str | None, page_count: int) -> list[int]:
    """
    "1-3,5" → [1, 2, 3, 5]. Out-of-range numbers are dropped, duplicates
    removed, order kept. None or "" means every page.
    """
    if not selection:
        return list(range(1, page_count + 1))
    result: list[int] = []
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start_s, end_s = part.split("-", 1)
            start = int(start_s) if start_s.strip() else 1
            end = int(end_s) if end_s.strip() else page_count
            numbers = range(start, end + 1)
        else:
            numbers = [int(part)]
        for n in numbers:
            if 1 <= n <= page_count and n not in result:
                result.append(n)
    return result


# ---------------------------------------------------------------------------
# Internal implementation
# ---------------------------------------------------------------------------

def _page_input(page: fitz.Page) -> PageInput:
    box = page.cropbox  # unrotated, top-left origin
    width, height = box.width, box.height
    derotate = page.derotation_matrix

    items: list[TextItem] = []
    page_dict = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)
    for block in page_dict.get("blocks", []):
        if block.get("type") != 0:
            continue
        for line in block.get("lines", []):
            direction = line.get("dir", (1.0, 0.0))
            for span in line.get("spans", []):
                item = _span_item(span, direction, derotate, height)
                if item is not None:
                    items.append(item)

    return PageInput(
        page_number=page.number + 1,  # 1-based
        items=tuple(items),
        rotation=page.rotation,
        view_box=(0.0, 0.0, width, height),
    )


def _span_item(
    span: dict,
    direction: tuple[float, float],
    derotate: fitz.Matrix,
    page_height: float,
) -> TextItem | None:
    text = span.get("text", "")
    if not text:
        return None

    origin = fitz.Point(span["origin"]) * derotate
    ahead = (fitz.Point(span["origin"]) + fitz.Point(direction)) * derotate
    dx, dy = ahead.x - origin.x, ahead.y - origin.y
    norm = math.hypot(dx, dy) or 1.0
    cos, sin = dx / norm, -dy / norm  # y axis flipped: PDF space grows upwards

    rect = fitz.Rect(span["bbox"]) * derotate
    width = abs(rect.width) if abs(cos) >= abs(sin) else abs(rect.height)
    size = float(span.get("size", 0.0))

    return TextItem(
        text=text,
        transform=(size * cos, size * sin, -size * sin, size * cos, origin.x, page_height - origin.y),
        width=width,
        height=size,
    )
