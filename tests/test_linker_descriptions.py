from __future__ import annotations

import pytest

from builders import tag
from data_model import (
    BoundingBox,
    Category,
    Description,
    DescriptionMetadata,
    DescriptionScope,
    NoteKind,
)
from linker import link_notes_to_descriptions, note_kind, note_numbers


def _description(number: int, kind=NoteKind.NOTE, scope=DescriptionScope.SPECIFIC, page: int = 1) -> Description:
    return Description(
        text=f"{kind} {number}: text",
        page=page,
        bbox=BoundingBox(0, 0, 100, 10),
        metadata=DescriptionMetadata(type=kind, scope=scope, number=number),
    )


@pytest.mark.parametrize(
    "text, kind",
    [("NOTE 3", NoteKind.NOTE), ("hold 2", NoteKind.HOLD), ("Note / Hold 1", NoteKind.NOTE), ("SEE 4", None)],
)
def test_note_kind(text: str, kind) -> None:
    assert note_kind(text) is kind


def test_note_numbers_are_distinct_and_ordered() -> None:
    assert note_numbers("NOTES 5, 3 AND 5, 012") == [5, 3, 12]


def test_note_links_to_each_numbered_description() -> None:
    note = tag("NOTE 3, 5", Category.NOTES_AND_HOLDS)
    d3, d4, d5 = _description(3), _description(4), _description(5)

    created = link_notes_to_descriptions([note], [d3, d4, d5], [])

    assert [(r.from_id, r.to_id) for r in created] == [(note.id, d3.id), (note.id, d5.id)]


@pytest.mark.parametrize(
    "description",
    [
        _description(3, kind=NoteKind.HOLD),
        _description(3, scope=DescriptionScope.GENERAL),
        _description(3, page=2),
        _description(4),
    ],
)
def test_mismatched_descriptions_are_not_linked(description: Description) -> None:
    note = tag("NOTE 3", Category.NOTES_AND_HOLDS)
    assert link_notes_to_descriptions([note], [description], []) == []


def test_only_notes_and_holds_tags_link() -> None:
    equipment = tag("NOTE-3-X", Category.EQUIPMENT)
    assert link_notes_to_descriptions([equipment], [_description(3)], []) == []


def test_hold_links_hold_descriptions() -> None:
    hold = tag("HOLD 1", Category.NOTES_AND_HOLDS)
    h1 = _description(1, kind=NoteKind.HOLD)
    n1 = _description(1)

    created = link_notes_to_descriptions([hold], [n1, h1], [])
    assert [r.to_id for r in created] == [h1.id]


def test_running_twice_adds_nothing() -> None:
    note = tag("NOTE 3", Category.NOTES_AND_HOLDS)
    descriptions = [_description(3)]

    created = link_notes_to_descriptions([note], descriptions, [])
    assert len(created) == 1
    assert link_notes_to_descriptions([note], descriptions, created) == []
