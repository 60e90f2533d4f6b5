"""
extractor/normalizer.py — glyph transform → canonical bounding box.

Two stages:
  1. pdf_bbox(): decompose the run's affine transform into angle atan2(b, a)
     and translation (e, f), build the four local corners (descent 0.2·h
     below the baseline, h above it), rotate + translate them, shift by the
     view-box origin and take the axis-aligned hull. Result: PDF space
     (bottom-left origin).
  2. normalize_bbox(): page-level transform into the canonical frame
     (top-left origin), one branch per page rotation:
        0   → flip Y with the page height
        90  → swap X and Y
        180 → flip both axes with the page width / height
        270 → swap X and Y, then flip both with the rotated viewport size
              (viewport width = page height, viewport height = page width)

denormalize_bbox() is the exact inverse of normalize_bbox() for each
rotation.

The 180 branch flips both axes literally: y' = H - y_pdf. On a page shown
with /Rotate 180 that is the display frame mirrored top to bottom, so a
function label drawn above its number ends up with the larger y' there.
Instrument pairing on such pages follows that mirrored order; changing the
branch changes which tokens merge.

Public API:
  normalize_rotation(value)                    -> 0 | 90 | 180 | 270
  pdf_bbox(item, origin)                       -> (BoundingBox, degenerate)
  normalize_bbox(box, rotation, view_box)      -> BoundingBox
  denormalize_bbox(box, rotation, view_box)    -> BoundingBox
  text_item_bbox(item, rotation, view_box)     -> BoundingBox
  build_tokens(page)                           -> (list[Token], warnings)
"""

from __future__ import annotations

import logging
import math

from data_model import IDENTITY, BoundingBox, TextItem, finite

from .types import ExtractionWarning, PageInput, Token, ViewBox, WarningCode

log = logging.getLogger(__name__)

# Portion of the font height reserved below the baseline for descenders.
DESCENT_RATIO = 0.2


def normalize_rotation(value: object) -> int:
    """Maps any angle to the nearest of 0/90/180/270 (non-numbers → 0)."""
    degrees = finite(value)
    return int(round(degrees / 90.0)) % 4 * 90


# ---------------------------------------------------------------------------
# Stage 1: PDF space
# ---------------------------------------------------------------------------

def _is_degenerate(item: TextItem) -> bool:
    raw = tuple(item.transform or ())
    if len(raw) < 6:
        return True
    for value in (*raw[:6], item.width, item.height):
        try:
            if not math.isfinite(float(value)):
                return True
        except (TypeError, ValueError):
            return True
    return False


def pdf_bbox(item: TextItem, origin: tuple[float, float] = (0.0, 0.0)) -> tuple[BoundingBox, bool]:
    """
    Returns the run's box in PDF space and whether the input was degenerate.

    Missing transform entries are padded from the identity matrix and
    non-finite numbers are read as 0.0, so the result is always a finite box.
    """
    raw = tuple(item.transform or ())[:6]
    a, b, _c, _d, e, f = (finite(v) for v in raw + IDENTITY[len(raw):])
    width = finite(item.width)
    height = finite(item.height)

    angle = math.atan2(b, a)
    cos, sin = math.cos(angle), math.sin(angle)
    descent = height * DESCENT_RATIO
    tx = e - finite(origin[0])
    ty = f - finite(origin[1])

    local = ((0.0, -descent), (width, -descent), (width, height), (0.0, height))
    xs = [px * cos - py * sin + tx for px, py in local]
    ys = [px * sin + py * cos + ty for px, py in local]
    return BoundingBox.from_points(xs, ys), _is_degenerate(item)


# ---------------------------------------------------------------------------
# Stage 2: canonical frame
# ---------------------------------------------------------------------------

def normalize_bbox(box: BoundingBox, rotation: int, view_box: ViewBox) -> BoundingBox:
    """PDF-space box → canonical (top-left origin) box for the given rotation."""
    width, height = finite(view_box[2]), finite(view_box[3])
    match normalize_rotation(rotation):
        case 0:
            return BoundingBox(box.x1, height - box.y2, box.x2, height - box.y1)
        case 90:
            return BoundingBox(box.y1, box.x1, box.y2, box.x2)
        case 180:
            return BoundingBox(width - box.x2, height - box.y2, width - box.x1, height - box.y1)
        case _:  # 270: the rotated viewport is height × width
            vp_width, vp_height = height, width
            return BoundingBox(vp_width - box.y2, vp_height - box.x2, vp_width - box.y1, vp_height - box.x1)


def denormalize_bbox(box: BoundingBox, rotation: int, view_box: ViewBox) -> BoundingBox:
    """Canonical box → PDF-space box; inverse of normalize_bbox()."""
    width, height = finite(view_box[2]), finite(view_box[3])
    match normalize_rotation(rotation):
        case 0:
            return BoundingBox(box.x1, height - box.y2, box.x2, height - box.y1)
        case 90:
            return BoundingBox(box.y1, box.x1, box.y2, box.x2)
        case 180:
            return BoundingBox(width - box.x2, height - box.y2, width - box.x1, height - box.y1)
        case _:
            vp_width, vp_height = height, width
            return BoundingBox(vp_height - box.y2, vp_width - box.x2, vp_height - box.y1, vp_width - box.x1)


def text_item_bbox(item: TextItem, rotation: int, view_box: ViewBox) -> BoundingBox:
    box, _ = pdf_bbox(item, (view_box[0], view_box[1]))
    return normalize_bbox(box, rotation, view_box)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def build_tokens(page: PageInput) -> tuple[list[Token], list[ExtractionWarning]]:
    """
    Drops blank runs and computes every remaining run's canonical bbox once.

    Token indices are positions in the filtered list; they are the identity
    used by the ConsumedSet.
    """
    tokens: list[Token] = []
    warnings: list[ExtractionWarning] = []
    origin = (page.view_box[0], page.view_box[1])

    for item in page.items:
        if not isinstance(item.text, str) or not item.text.strip():
            continue
        box, degenerate = pdf_bbox(item, origin)
        if degenerate:
            log.warning("page %d: degenerate geometry for %r", page.page_number, item.text)
            warnings.append(ExtractionWarning(
                code=WarningCode.DEGENERATE_GEOMETRY,
                message=f"Text run {item.text!r} has a missing or non-finite transform",
                page=page.page_number,
                details={"transform": list(item.transform or ()), "width": item.width, "height": item.height},
            ))
        canonical = normalize_bbox(box, page.rotation, page.view_box)
        tokens.append(Token(index=len(tokens), item=item, bbox=canonical))

    return tokens, warnings
