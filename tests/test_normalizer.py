from __future__ import annotations

import math

import pytest

from builders import VIEW_BOX, item_at, page_of
from data_model import BoundingBox, TextItem
from extractor import (
    WarningCode,
    build_tokens,
    denormalize_bbox,
    normalize_bbox,
    normalize_rotation,
    pdf_bbox,
    text_item_bbox,
)


def _approx(box: BoundingBox, expected: tuple[float, float, float, float]) -> None:
    assert (box.x1, box.y1, box.x2, box.y2) == pytest.approx(expected, abs=1e-6)


def test_pdf_bbox_upright_run_includes_descent() -> None:
    item = TextItem("P-101", transform=(10, 0, 0, 10, 100, 500), width=40, height=10)
    box, degenerate = pdf_bbox(item)

    assert not degenerate
    _approx(box, (100, 498, 140, 510))


def test_pdf_bbox_rotated_run_is_axis_aligned_hull() -> None:
    item = TextItem("P-101", transform=(0, 10, -10, 0, 100, 500), width=40, height=10)
    box, _ = pdf_bbox(item)

    # 90° run: the advance goes up, the glyph height goes left
    _approx(box, (90, 500, 102, 540))


def test_pdf_bbox_subtracts_view_box_origin() -> None:
    item = TextItem("X", transform=(10, 0, 0, 10, 150, 250), width=5, height=10)
    box, _ = pdf_bbox(item, origin=(50, 50))
    _approx(box, (100, 198, 105, 210))


def test_normalize_rotation_0_flips_y() -> None:
    box = normalize_bbox(BoundingBox(100, 498, 140, 510), 0, VIEW_BOX)
    _approx(box, (100, 792 - 510, 140, 792 - 498))


def test_normalize_rotation_90_swaps_axes() -> None:
    box = normalize_bbox(BoundingBox(10, 20, 30, 40), 90, VIEW_BOX)
    _approx(box, (20, 10, 40, 30))


def test_normalize_rotation_180_flips_both_axes() -> None:
    box = normalize_bbox(BoundingBox(10, 20, 30, 40), 180, VIEW_BOX)
    _approx(box, (612 - 30, 792 - 40, 612 - 10, 792 - 20))


def test_normalize_rotation_270_uses_rotated_viewport() -> None:
    box = normalize_bbox(BoundingBox(10, 20, 30, 40), 270, VIEW_BOX)
    _approx(box, (792 - 40, 612 - 30, 792 - 20, 612 - 10))


@pytest.mark.parametrize("rotation", [0, 90, 180, 270])
@pytest.mark.parametrize(
    "view_box",
    [(0.0, 0.0, 612.0, 792.0), (0.0, 0.0, 1190.0, 842.0), (20.0, 30.0, 1000.0, 800.0)],
)
def test_denormalize_inverts_normalize(rotation: int, view_box) -> None:
    original = BoundingBox(12.5, 40.0, 96.25, 58.0)
    back = normalize_bbox(denormalize_bbox(original, rotation, view_box), rotation, view_box)
    _approx(back, (original.x1, original.y1, original.x2, original.y2))


@pytest.mark.parametrize("rotation", [0, 90, 180, 270])
def test_text_item_bbox_lands_on_requested_position(rotation: int) -> None:
    item = item_at("FV-101", 200, 300, 240, 312, rotation=rotation)
    _approx(text_item_bbox(item, rotation, VIEW_BOX), (200, 300, 240, 312))


@pytest.mark.parametrize("value, expected", [(0, 0), (90, 90), (-90, 270), (360, 0), (450, 90), (91, 90), ("x", 0)])
def test_normalize_rotation_values(value, expected) -> None:
    assert normalize_rotation(value) == expected


def test_build_tokens_skips_blank_runs_and_reindexes() -> None:
    page = page_of(
        item_at("P-101", 10, 10, 40, 20),
        item_at("   ", 50, 10, 60, 20),
        item_at("", 70, 10, 80, 20),
        item_at("P-102", 90, 10, 120, 20),
    )
    tokens, warnings = build_tokens(page)

    assert [t.text for t in tokens] == ["P-101", "P-102"]
    assert [t.index for t in tokens] == [0, 1]
    assert warnings == []


def test_build_tokens_reports_degenerate_geometry() -> None:
    page = page_of(
        TextItem("P-101", transform=(10, 0, 0), width=10, height=10),
        TextItem("P-102", transform=(10, 0, 0, 10, math.nan, 5), width=10, height=10),
    )
    tokens, warnings = build_tokens(page)

    assert len(tokens) == 2
    assert [w.code for w in warnings] == [WarningCode.DEGENERATE_GEOMETRY] * 2
    for token in tokens:
        assert all(math.isfinite(v) for v in (token.bbox.x1, token.bbox.y1, token.bbox.x2, token.bbox.y2))
