"""
pidtag/_io.py — result files (<pdf stem>.tags.json).

Format::

    {
      "source": "drawing.pdf",
      "pages": [1, 2],
      "tags": [{"text": "PT-7083", "page": 1, "bbox": {...}, "category": "Instrument",
                "source_items": [...], "id": "..."}],
      "raw_text_items": [...],
      "descriptions": [...],
      "equipment_short_specs": [...],
      "relationships": [{"from_id": "...", "to_id": "...", "type": "Annotation", "id": "..."}],
      "loops": [{"id": "P-7083", "tag_ids": ["...", "..."], "auto_generated": true}],
      "warnings": [{"code": "W_INVALID_PATTERN", "message": "...", ...}]
    }

Descriptions and short specs are never produced by extraction; they are
added by the operator (or another tool) and kept across `pidtag link` runs.

Public API:
  ResultFile.from_document(doc, source)
  write_result(result, path)
  read_result(path) -> ResultFile
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from data_model import (
    BoundingBox,
    Category,
    Description,
    DescriptionMetadata,
    DescriptionScope,
    EquipmentShortSpec,
    Loop,
    NoteKind,
    RawTextItem,
    Relationship,
    RelationshipType,
    SourceItem,
    Tag,
    TextItem,
)
from extractor import DocumentResult


class ResultFileError(Exception):
    """Result file unreadable or structurally invalid."""


@dataclass(slots=True)
class ResultFile:
    source: str | None = None
    pages: list[int] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    raw_text_items: list[RawTextItem] = field(default_factory=list)
    descriptions: list[Description] = field(default_factory=list)
    equipment_short_specs: list[EquipmentShortSpec] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    loops: list[Loop] = field(default_factory=list)
    warnings: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: DocumentResult, source: str | None = None) -> ResultFile:
        return cls(
            source=source,
            pages=list(doc.pages),
            tags=list(doc.tags),
            raw_text_items=list(doc.raw_text_items),
            relationships=list(doc.relationships),
            loops=list(doc.loops),
            warnings=[asdict(w) for w in doc.warnings],
        )


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def write_result(result: ResultFile, path: Path) -> None:
    data = asdict(result)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_result(path: Path) -> ResultFile:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ResultFileError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ResultFileError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ResultFileError(f"{path}: expected a JSON object")

    try:
        return ResultFile(
            source=raw.get("source"),
            pages=[int(p) for p in raw.get("pages", [])],
            tags=[_tag(t) for t in raw.get("tags", [])],
            raw_text_items=[_raw_text(r) for r in raw.get("raw_text_items", [])],
            descriptions=[_description(d) for d in raw.get("descriptions", [])],
            equipment_short_specs=[_short_spec(s) for s in raw.get("equipment_short_specs", [])],
            relationships=[_relationship(r) for r in raw.get("relationships", [])],
            loops=[_loop(lp) for lp in raw.get("loops", [])],
            warnings=list(raw.get("warnings", [])),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ResultFileError(f"{path}: malformed entry ({e!r})") from e


def _bbox(raw: dict[str, Any]) -> BoundingBox:
    return BoundingBox(float(raw["x1"]), float(raw["y1"]), float(raw["x2"]), float(raw["y2"]))


def _source_item(raw: dict[str, Any]) -> SourceItem:
    item = raw["item"]
    text_item = TextItem(
        text=item["text"],
        transform=tuple(float(v) for v in item["transform"]),  # type: ignore[arg-type]
        width=float(item.get("width", 0.0)),
        height=float(item.get("height", 0.0)),
    )
    return SourceItem(item=text_item, page=int(raw["page"]), bbox=_bbox(raw["bbox"]), id=raw["id"])


def _tag(raw: dict[str, Any]) -> Tag:
    return Tag(
        text=raw["text"],
        page=int(raw["page"]),
        bbox=_bbox(raw["bbox"]),
        category=Category(raw["category"]),
        source_items=[_source_item(s) for s in raw.get("source_items", [])],
        id=raw["id"],
    )


def _raw_text(raw: dict[str, Any]) -> RawTextItem:
    return RawTextItem(text=raw["text"], page=int(raw["page"]), bbox=_bbox(raw["bbox"]), id=raw["id"])


def _description(raw: dict[str, Any]) -> Description:
    meta = raw["metadata"]
    return Description(
        text=raw["text"],
        page=int(raw["page"]),
        bbox=_bbox(raw["bbox"]),
        metadata=DescriptionMetadata(
            type=NoteKind(meta["type"]),
            scope=DescriptionScope(meta["scope"]),
            number=int(meta["number"]),
        ),
        id=raw["id"],
    )


def _short_spec(raw: dict[str, Any]) -> EquipmentShortSpec:
    return EquipmentShortSpec(
        text=raw["text"],
        page=int(raw["page"]),
        bbox=_bbox(raw["bbox"]),
        original_tag_text=raw.get("original_tag_text"),
        id=raw["id"],
    )


def _relationship(raw: dict[str, Any]) -> Relationship:
    return Relationship(
        from_id=raw["from_id"],
        to_id=raw["to_id"],
        type=RelationshipType(raw["type"]),
        id=raw["id"],
    )


def _loop(raw: dict[str, Any]) -> Loop:
    return Loop(
        id=raw["id"],
        tag_ids=list(raw["tag_ids"]),
        auto_generated=bool(raw.get("auto_generated", False)),
    )
