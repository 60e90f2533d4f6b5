"""
linker/annotations.py — instrument ↔ nearby raw text (Annotation links).

For every raw text item without an Annotation yet, the distance to an
Instrument tag on the same page is the smallest distance from the tag's
center to one of the item's reference points (four corners and center).
The closest instrument within auto_link_distance gets the link; each item
is decided on its own, so one item links to at most one instrument.
"""

from __future__ import annotations

import logging
import math

from data_model import (
    Category,
    RawTextItem,
    Relationship,
    RelationshipType,
    Tag,
    is_valid_distance,
)

from .common import unique_new

log = logging.getLogger(__name__)


def text_distance(instrument: Tag, item: RawTextItem) -> float:
    cx, cy = instrument.bbox.center
    return min(math.hypot(px - cx, py - cy) for px, py in item.bbox.reference_points())


def link_instruments_to_text(
    tags: list[Tag],
    raw_text_items: list[RawTextItem],
    relationships: list[Relationship],
    max_distance: float,
) -> list[Relationship]:
    """New Annotation relationships (existing triples filtered out)."""
    if not is_valid_distance(max_distance):
        log.warning("auto-link distance %r rejected, no annotation links created", max_distance)
        return []

    annotated = {r.to_id for r in relationships if r.type == RelationshipType.ANNOTATION}
    instruments_by_page: dict[int, list[Tag]] = {}
    for tag in tags:
        if tag.category == Category.INSTRUMENT:
            instruments_by_page.setdefault(tag.page, []).append(tag)

    candidates: list[Relationship] = []
    for item in raw_text_items:
        if item.id in annotated:
            continue
        best: Tag | None = None
        best_distance = math.inf
        for instrument in instruments_by_page.get(item.page, ()):
            distance = text_distance(instrument, item)
            if distance <= max_distance and distance < best_distance:
                best, best_distance = instrument, distance
        if best is not None:
            candidates.append(Relationship(from_id=best.id, to_id=item.id, type=RelationshipType.ANNOTATION))

    created = unique_new(candidates, relationships)
    log.debug("annotation links: %d new", len(created))
    return created
