from __future__ import annotations

import pytest

from builders import raw, tag
from data_model import (
    BoundingBox,
    Category,
    Description,
    DescriptionMetadata,
    DescriptionScope,
    EquipmentShortSpec,
    NoteKind,
    RelationshipType,
)
from linker import (
    auto_link_all,
    has_ab_pattern,
    link_equipment_to_short_specs,
    short_spec_matches,
    split_suffix,
)


def _spec(text: str, original: str | None = None, page: int = 1) -> EquipmentShortSpec:
    return EquipmentShortSpec(text=text, page=page, bbox=BoundingBox(0, 0, 50, 10), original_tag_text=original)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("10-P-001A", ("10-P-001", "A")),
        ("10-P-001A/B", ("10-P-001", "A/B")),
        ("10-P-001A/B/C", ("10-P-001", "A/B/C")),
        ("10-P-001", ("10-P-001", None)),
        ("A", ("A", None)),
    ],
)
def test_split_suffix(text: str, expected) -> None:
    assert split_suffix(text) == expected


def test_has_ab_pattern() -> None:
    assert has_ab_pattern("A/B")
    assert not has_ab_pattern("A")
    assert not has_ab_pattern(None)


@pytest.mark.parametrize(
    "tag_text, spec_text, expected",
    [
        ("10-P-001A/B", "10-P-001A/B", True),
        ("10-P-001A/B", "10-P-001A", True),
        ("10-P-001A/B", "10-P-001C", True),
        ("10-P-001A", "10-P-001A/B", True),
        ("10-P-001", "10-P-001", True),
        ("10-P-001A", "10-P-001B", False),
        ("10-P-001A", "10-P-001", False),
        ("10-P-001A/B", "10-P-002A", False),
    ],
)
def test_short_spec_matches(tag_text: str, spec_text: str, expected: bool) -> None:
    assert short_spec_matches(tag_text, spec_text) is expected


def test_ab_tag_links_every_same_base_spec() -> None:
    pump = tag("10-P-001A/B", Category.EQUIPMENT)
    specs = [_spec("10-P-001A/B"), _spec("10-P-001A"), _spec("10-P-001C"), _spec("10-P-002A")]

    created = link_equipment_to_short_specs([pump], specs, [])

    assert [r.to_id for r in created] == [specs[0].id, specs[1].id, specs[2].id]
    assert all(r.type == RelationshipType.EQUIPMENT_SHORT_SPEC for r in created)


def test_original_tag_text_is_preferred() -> None:
    pump = tag("10-P-001A", Category.EQUIPMENT)
    spec = _spec("CENTRIFUGAL PUMP 50 m3/h", original="10-P-001A")

    created = link_equipment_to_short_specs([pump], [spec], [])
    assert [(r.from_id, r.to_id) for r in created] == [(pump.id, spec.id)]


def test_specs_on_other_pages_still_link() -> None:
    pump = tag("10-P-001", Category.EQUIPMENT, page=1)
    spec = _spec("10-P-001", page=7)

    assert len(link_equipment_to_short_specs([pump], [spec], [])) == 1


def test_only_equipment_tags_link() -> None:
    line = tag("10-P-001", Category.LINE)
    assert link_equipment_to_short_specs([line], [_spec("10-P-001")], []) == []


def test_running_twice_adds_nothing() -> None:
    pump = tag("10-P-001A/B", Category.EQUIPMENT)
    specs = [_spec("10-P-001A"), _spec("10-P-001B")]

    created = link_equipment_to_short_specs([pump], specs, [])
    assert len(created) == 2
    assert link_equipment_to_short_specs([pump], specs, created) == []


def test_auto_link_all_runs_every_matcher() -> None:
    instrument = tag("PT-7083", Category.INSTRUMENT, bbox=(100, 100, 120, 120))
    note = tag("NOTE 2", Category.NOTES_AND_HOLDS)
    pump = tag("10-P-001", Category.EQUIPMENT)
    text = raw("SET 5 BAR", bbox=(125, 105, 160, 115))
    description = Description(
        text="2. VENT TO SAFE LOCATION",
        page=1,
        bbox=BoundingBox(0, 700, 200, 710),
        metadata=DescriptionMetadata(type=NoteKind.NOTE, scope=DescriptionScope.SPECIFIC, number=2),
    )
    spec = _spec("10-P-001")

    created = auto_link_all([instrument, note, pump], [text], [description], [spec], [])

    assert [(r.from_id, r.to_id, r.type) for r in created] == [
        (instrument.id, text.id, RelationshipType.ANNOTATION),
        (note.id, description.id, RelationshipType.DESCRIPTION),
        (pump.id, spec.id, RelationshipType.EQUIPMENT_SHORT_SPEC),
    ]
    assert auto_link_all([instrument, note, pump], [text], [description], [spec], created) == []
