from __future__ import annotations

import pytest

from builders import tag
from data_model import Category
from linker import InstrumentParts, common_prefix, generate_loops, parse_instrument_tag


def _instrument(text: str, page: int = 1):
    return tag(text, Category.INSTRUMENT, page=page)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("PT-7083", InstrumentParts("PT", 7083, "")),
        ("PZV-7012 A", InstrumentParts("PZV", 7012, "A")),
        ("PIC101", InstrumentParts("PIC", 101, "")),
        ("PT7083C", InstrumentParts("PT", 7083, "C")),
        ("  FT-007 ", InstrumentParts("FT", 7, "")),
        ("pt-7083", None),
        ("PT-", None),
        ("ABCDE-1", None),
    ],
)
def test_parse_instrument_tag(text: str, expected) -> None:
    assert parse_instrument_tag(text) == expected


def test_common_prefix() -> None:
    assert common_prefix(["PIC", "PIT", "PI"]) == "PI"
    assert common_prefix(["PT"]) == "PT"
    assert common_prefix(["PT", "QT"]) == ""


def test_same_letter_and_number_form_one_loop() -> None:
    pt = _instrument("PT-7083")
    pic = _instrument("PIC-7083", page=2)
    pv = _instrument("PV-7083 A")
    ft = _instrument("FT-7083")

    loops = generate_loops([pt, ft, pic, pv])

    assert [(lp.id, lp.tag_ids) for lp in loops] == [("P-7083", [pt.id, pic.id, pv.id])]
    assert loops[0].auto_generated


def test_loop_name_uses_the_longest_shared_function_prefix() -> None:
    loops = generate_loops([_instrument("PIT-101"), _instrument("PIC-101"), _instrument("PI-0101")])
    assert [lp.id for lp in loops] == ["PI-101"]


def test_single_tag_groups_make_no_loop() -> None:
    assert generate_loops([_instrument("PT-7083"), _instrument("PT-7084"), _instrument("TT-7083")]) == []


def test_only_parseable_instrument_tags_take_part() -> None:
    tags = [
        _instrument("PT-7083"),
        tag("PT-7083", Category.EQUIPMENT),
        _instrument("PT-7083 / SPARE"),
        _instrument("PSV-7083"),
    ]

    loops = generate_loops(tags)

    assert [(lp.id, lp.tag_ids) for lp in loops] == [("P-7083", [tags[0].id, tags[3].id])]


def test_loops_follow_first_appearance() -> None:
    tags = [_instrument(t) for t in ("TT-2", "PT-1", "TIC-2", "PI-1")]
    assert [lp.id for lp in generate_loops(tags)] == ["T-2", "P-1"]
