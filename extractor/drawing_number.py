"""
extractor/drawing_number.py — one drawing number per page.

Title blocks sit in a fixed corner of the sheet, so among all unconsumed
tokens matching the DrawingNumber pattern the one whose (x2, bottom edge)
point lies nearest to the rotation-dependent reference corner wins.

Reference corner (pre-rotation page width W / height H):
  0   → (W, H)      90  → (0, H)
  180 → (0, 0)      270 → (H, 0)
Bottom edge: max(y1, y2) for 0/90, min(y1, y2) for 180/270.

Zero candidates is legal and yields no tag.
"""

from __future__ import annotations

import logging
import math
import re

from data_model import Category, Point, Tag, squared_distance

from .normalizer import normalize_rotation
from .patterns import find_all
from .text import clean_tag_text
from .types import ConsumedSet, PassResult, Token, ViewBox

log = logging.getLogger(__name__)


def reference_corner(rotation: int, view_box: ViewBox) -> Point:
    width, height = view_box[2], view_box[3]
    match normalize_rotation(rotation):
        case 0:
            return width, height
        case 90:
            return 0.0, height
        case 180:
            return 0.0, 0.0
        case _:
            return height, 0.0


def anchor_point(token: Token, rotation: int) -> Point:
    """The candidate's (right edge, bottom edge) point for the given rotation."""
    box = token.bbox
    if normalize_rotation(rotation) in (0, 90):
        return box.x2, max(box.y1, box.y2)
    return box.x2, min(box.y1, box.y2)


def drawing_number_candidates(tokens: list[Token], regex: re.Pattern[str]) -> list[tuple[Token, str]]:
    """Every token with a non-empty match, paired with the first such match text."""
    found: list[tuple[Token, str]] = []
    for token in tokens:
        matches = find_all(regex, token.text)
        if matches:
            found.append((token, matches[0]))
    return found


def select_drawing_number(
    tokens: list[Token],
    consumed: ConsumedSet,
    regex: re.Pattern[str] | None,
    rotation: int,
    view_box: ViewBox,
    page: int,
    compact: bool = True,
) -> PassResult:
    if regex is None:
        return PassResult(tags=[], consumed=consumed)

    corner = reference_corner(rotation, view_box)
    free = [t for t in tokens if t.index not in consumed]

    best: tuple[Token, str] | None = None
    best_distance = math.inf
    for token, text in drawing_number_candidates(free, regex):
        distance = squared_distance(anchor_point(token, rotation), corner)
        if distance < best_distance:
            best_distance = distance
            best = (token, text)

    if best is None:
        log.debug("page %d: no drawing number candidate", page)
        return PassResult(tags=[], consumed=consumed)

    token, text = best
    log.debug("page %d: drawing number %r (d²=%.1f)", page, text, best_distance)
    tag = Tag(
        text=clean_tag_text(text, Category.DRAWING_NUMBER, compact),
        page=page,
        bbox=token.bbox,
        category=Category.DRAWING_NUMBER,
        source_items=[token.source(page)],
    )
    return PassResult(tags=[tag], consumed=consumed | {token.index})
