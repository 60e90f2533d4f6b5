"""
linker/descriptions.py — NotesAndHolds tags ↔ descriptions.

"NOTE 3, 5" on a page refers to the specific note descriptions 3 and 5 of
the same page. The tag's kind comes from a case-insensitive "note" / "hold"
substring ("note" wins when both appear); every number in its text selects
descriptions with the same kind, number and the Specific scope.
"""

from __future__ import annotations

import logging
import re

from data_model import (
    Category,
    Description,
    DescriptionScope,
    NoteKind,
    Relationship,
    RelationshipType,
    Tag,
)

from .common import unique_new

log = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d+")


def note_kind(text: str) -> NoteKind | None:
    lowered = text.lower()
    if "note" in lowered:
        return NoteKind.NOTE
    if "hold" in lowered:
        return NoteKind.HOLD
    return None


def note_numbers(text: str) -> list[int]:
    """Distinct decimal numbers in order of appearance."""
    return list(dict.fromkeys(int(n) for n in _NUMBER_RE.findall(text)))


def link_notes_to_descriptions(
    tags: list[Tag],
    descriptions: list[Description],
    relationships: list[Relationship],
) -> list[Relationship]:
    """New Description relationships (existing triples filtered out)."""
    specific: dict[tuple[int, NoteKind, int], list[Description]] = {}
    for desc in descriptions:
        meta = desc.metadata
        if meta.scope != DescriptionScope.SPECIFIC:
            continue
        specific.setdefault((desc.page, NoteKind(meta.type), meta.number), []).append(desc)

    candidates: list[Relationship] = []
    for tag in tags:
        if tag.category != Category.NOTES_AND_HOLDS:
            continue
        kind = note_kind(tag.text)
        if kind is None:
            continue
        for number in note_numbers(tag.text):
            for desc in specific.get((tag.page, kind, number), ()):
                candidates.append(Relationship(from_id=tag.id, to_id=desc.id, type=RelationshipType.DESCRIPTION))

    created = unique_new(candidates, relationships)
    log.debug("description links: %d new", len(created))
    return created
