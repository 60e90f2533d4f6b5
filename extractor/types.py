"""
extractor/types.py — page input, working tokens and pass results.

Token         — one non-blank TextItem with its index on the page and its
                canonical bbox (computed once, shared by every pass).
ConsumedSet   — indices of tokens already claimed by a pass; threaded
                explicitly through the pipeline.
ExtractionWarning — soft failure (bad pattern, bad tolerance, ...) reported
                to the caller; never fatal.
PageResult    — tags + raw text items produced for one page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

from data_model import BoundingBox, Category, RawTextItem, SourceItem, Tag, TextItem

# (x0, y0, width, height) of the unrotated page
ViewBox: TypeAlias = tuple[float, float, float, float]

ConsumedSet: TypeAlias = frozenset[int]


class WarningCode(StrEnum):
    """Stable codes for soft extraction failures."""

    INVALID_PATTERN     = "W_INVALID_PATTERN"
    INVALID_TOLERANCE   = "W_INVALID_TOLERANCE"
    INVALID_OPC_GROUP   = "W_INVALID_OPC_GROUP"
    DEGENERATE_GEOMETRY = "W_DEGENERATE_GEOMETRY"


@dataclass(slots=True)
class ExtractionWarning:
    """
    Single soft failure.

    - code:     WarningCode
    - message:  human readable description
    - category: category the warning concerns (None when not category-bound)
    - page:     1-based page number (None for document-level warnings)
    - details:  optional extra data (pattern source, offending value, ...)
    """

    code: WarningCode
    message: str
    category: Category | None = None
    page: int | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class PageInput:
    """Everything the page text provider reports for one page."""

    page_number: int
    items: tuple[TextItem, ...]
    rotation: int = 0
    view_box: ViewBox = (0.0, 0.0, 612.0, 792.0)


@dataclass(frozen=True, slots=True)
class Token:
    index: int
    item: TextItem
    bbox: BoundingBox

    @property
    def text(self) -> str:
        return self.item.text

    def source(self, page: int) -> SourceItem:
        return SourceItem(item=self.item, page=page, bbox=self.bbox)


@dataclass(slots=True)
class PassResult:
    """What one pass hands back to the pipeline."""

    tags: list[Tag]
    consumed: ConsumedSet
    warnings: list[ExtractionWarning] = field(default_factory=list)


@dataclass(slots=True)
class PageResult:
    page: int
    tags: list[Tag] = field(default_factory=list)
    raw_text_items: list[RawTextItem] = field(default_factory=list)
    warnings: list[ExtractionWarning] = field(default_factory=list)
    consumed: ConsumedSet = frozenset()
