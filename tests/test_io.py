from __future__ import annotations

import json

import pytest

from builders import item_at, page_of
from data_model import (
    BoundingBox,
    Description,
    DescriptionMetadata,
    DescriptionScope,
    EquipmentShortSpec,
    Loop,
    NoteKind,
)
from extractor import extract_document
from pidtag._io import ResultFile, ResultFileError, read_result, write_result


def _document():
    page = page_of(
        item_at("PT", 100, 100, 120, 112),
        item_at("7083", 98, 114, 140, 126),
        item_at("10-P-001", 300, 100, 360, 112),
        item_at("SET 5 BAR", 125, 104, 170, 114),
    )
    return extract_document([page])


def test_result_file_survives_write_and_read(tmp_path) -> None:
    result = ResultFile.from_document(_document(), source="sheet.pdf")
    result.descriptions.append(Description(
        text="3. LOCKED OPEN",
        page=1,
        bbox=BoundingBox(10, 700, 200, 712),
        metadata=DescriptionMetadata(type=NoteKind.NOTE, scope=DescriptionScope.SPECIFIC, number=3),
    ))
    result.equipment_short_specs.append(EquipmentShortSpec(
        text="FEED PUMP", page=1, bbox=BoundingBox(10, 720, 90, 732), original_tag_text="10-P-001"))
    result.loops.append(Loop(id="P-7083", tag_ids=[t.id for t in result.tags[:1]], auto_generated=True))

    path = tmp_path / "sheet.tags.json"
    write_result(result, path)
    loaded = read_result(path)

    assert loaded.source == "sheet.pdf"
    assert loaded.pages == [1]
    assert loaded.tags == result.tags
    assert loaded.raw_text_items == result.raw_text_items
    assert loaded.descriptions == result.descriptions
    assert loaded.equipment_short_specs == result.equipment_short_specs
    assert loaded.relationships == result.relationships
    assert loaded.loops == result.loops


def test_written_file_uses_plain_json_values(tmp_path) -> None:
    path = tmp_path / "sheet.tags.json"
    write_result(ResultFile.from_document(_document()), path)

    data = json.loads(path.read_text(encoding="utf-8"))
    instrument = next(t for t in data["tags"] if t["category"] == "Instrument")
    assert instrument["text"] == "PT-7083"
    assert set(instrument["bbox"]) == {"x1", "y1", "x2", "y2"}
    assert [s["item"]["text"] for s in instrument["source_items"]] == ["PT", "7083"]


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[]",
        json.dumps({"tags": [{"text": "X", "page": 1}]}),
        json.dumps({"relationships": [{"from_id": "a", "to_id": "b", "type": "Unknown", "id": "r"}]}),
    ],
)
def test_malformed_files_raise(tmp_path, content: str) -> None:
    path = tmp_path / "bad.tags.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ResultFileError):
        read_result(path)
