from __future__ import annotations

import math

import pytest

from builders import raw, tag
from data_model import Category, Relationship, RelationshipType
from linker import link_instruments_to_text, text_distance


def _instrument(page: int = 1, bbox=(100, 100, 120, 120)):
    return tag("PT-7083", Category.INSTRUMENT, page=page, bbox=bbox)


def test_distance_uses_nearest_reference_point() -> None:
    instrument = _instrument(bbox=(100, 100, 120, 120))    # center (110, 110)
    item = raw("SET 5 BAR", bbox=(130, 110, 200, 130))     # nearest corner (130, 110)

    assert text_distance(instrument, item) == pytest.approx(20.0)


def test_nearby_text_is_annotated() -> None:
    instrument = _instrument()
    near = raw("SET 5 BAR", bbox=(125, 105, 160, 115))
    far = raw("PUMP SUCTION", bbox=(400, 400, 480, 412))

    created = link_instruments_to_text([instrument], [near, far], [], max_distance=30)

    assert [(r.from_id, r.to_id, r.type) for r in created] == [
        (instrument.id, near.id, RelationshipType.ANNOTATION),
    ]


def test_closest_instrument_wins() -> None:
    left = _instrument(bbox=(100, 100, 120, 120))
    right = _instrument(bbox=(160, 100, 180, 120))
    item = raw("FC", bbox=(145, 105, 150, 115))

    created = link_instruments_to_text([left, right], [item], [], max_distance=30)
    assert [r.from_id for r in created] == [right.id]


def test_other_pages_are_ignored() -> None:
    instrument = _instrument(page=2)
    item = raw("SET 5 BAR", page=1, bbox=(125, 105, 160, 115))

    assert link_instruments_to_text([instrument], [item], [], max_distance=30) == []


def test_only_instrument_tags_annotate() -> None:
    equipment = tag("10-P-001", Category.EQUIPMENT, bbox=(100, 100, 120, 120))
    item = raw("SET 5 BAR", bbox=(125, 105, 160, 115))

    assert link_instruments_to_text([equipment], [item], [], max_distance=30) == []


def test_already_annotated_items_are_skipped() -> None:
    first, second = _instrument(), _instrument(bbox=(110, 100, 130, 120))
    item = raw("SET 5 BAR", bbox=(125, 105, 160, 115))
    existing = [Relationship(from_id=first.id, to_id=item.id, type=RelationshipType.ANNOTATION)]

    assert link_instruments_to_text([first, second], [item], existing, max_distance=30) == []


def test_running_twice_adds_nothing() -> None:
    instrument = _instrument()
    items = [raw("SET 5 BAR", bbox=(125, 105, 160, 115)), raw("FO", bbox=(95, 125, 105, 130))]

    created = link_instruments_to_text([instrument], items, [], max_distance=30)
    again = link_instruments_to_text([instrument], items, created, max_distance=30)

    assert len(created) == 2
    assert again == []


@pytest.mark.parametrize("distance", [-1, math.nan, math.inf, "30", True])
def test_invalid_distance_creates_nothing(distance) -> None:
    instrument = _instrument()
    item = raw("SET 5 BAR", bbox=(125, 105, 160, 115))

    assert link_instruments_to_text([instrument], [item], [], max_distance=distance) == []
