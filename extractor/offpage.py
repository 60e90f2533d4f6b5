"""
extractor/offpage.py — off-page connectors on a single page.

An off-page connector prints the target drawing number next to a short
reference ("A", "12", "B3"). For every token matching the DrawingNumber
pattern (the title-block one included; drawing-number tokens are never
consumed here) the nearest free reference token within the
OffPageConnector tolerance is taken. Each reference is used at most once and
is consumed; the resulting tag's text is the reference text.

Cross-page pairing of the produced tags lives in linker.offpage.
"""

from __future__ import annotations

import logging
import re

from data_model import Category, Tag, Tolerance

from .drawing_number import drawing_number_candidates
from .proximity import nearest_partner
from .text import clean_tag_text
from .types import ConsumedSet, PassResult, Token

log = logging.getLogger(__name__)


def link_off_page_connectors(
    tokens: list[Token],
    consumed: ConsumedSet,
    drawing_number_re: re.Pattern[str] | None,
    reference_re: re.Pattern[str] | None,
    tolerance: Tolerance,
    page: int,
    compact: bool = True,
) -> PassResult:
    if drawing_number_re is None or reference_re is None:
        return PassResult(tags=[], consumed=consumed)

    drawing_numbers = [token for token, _ in drawing_number_candidates(tokens, drawing_number_re)]
    references = [
        t for t in tokens
        if t.index not in consumed and reference_re.search(t.text)
    ]

    used = set(consumed)
    tags: list[Tag] = []
    for anchor in drawing_numbers:
        reference = nearest_partner(
            anchor,
            references,
            tolerance,
            taken=lambda t: t.index in used,
            accept=lambda a, c: a.index != c.index,
        )
        if reference is None:
            continue

        used.add(reference.index)
        tags.append(Tag(
            text=clean_tag_text(reference.text, Category.OFF_PAGE_CONNECTOR, compact),
            page=page,
            bbox=anchor.bbox.union(reference.bbox),
            category=Category.OFF_PAGE_CONNECTOR,
            source_items=[anchor.source(page), reference.source(page)],
        ))

    log.debug(
        "page %d: %d drawing-number / %d reference tokens → %d connectors",
        page, len(drawing_numbers), len(references), len(tags),
    )
    return PassResult(tags=tags, consumed=frozenset(used))
