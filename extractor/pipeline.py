"""
extractor/pipeline.py — page and document extraction.

Architecture (one page):
  PageInput → build_tokens()            canonical bbox per non-blank run
  → match_instruments()                 function + number pairs
  → classify_tokens()                   Equipment / Line / NotesAndHolds / SpecialItem
  → select_drawing_number()             at most one per page
  → link_off_page_connectors()          drawing number + nearby reference
  → _collect_residuals()                everything still unconsumed
  → PageResult

Each pass receives the ConsumedSet of the previous one and returns the
updated set; nothing is shared between pages.

Document level:
  iter_document()    yields PageResult in increasing page order; stopping
                     early leaves every yielded page valid
  extract_document() runs iter_document(), then the cross-page
                     off-page-connection builder and, when
                     auto_generate_loops is set, loop generation

Public API:
  extract_page(page, settings)                    -> PageResult
  iter_document(pages, settings)                  -> Iterator[PageResult]
  extract_document(pages, settings, on_progress)  -> DocumentResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Iterable, Iterator, TypeAlias

from data_model import (
    DEFAULT_SETTINGS,
    Category,
    Loop,
    RawTextItem,
    Relationship,
    Settings,
    Tag,
    Tolerance,
    ToleranceConfig,
    is_valid_distance,
)
from linker.loops import generate_loops
from linker.offpage import OpcGroup, OpcStatus, build_off_page_relationships, group_off_page_connectors

from .classifier import classify_tokens
from .drawing_number import select_drawing_number
from .instruments import match_instruments
from .normalizer import build_tokens
from .offpage import link_off_page_connectors
from .patterns import compile_pattern
from .types import ConsumedSet, ExtractionWarning, PageInput, PageResult, PassResult, Token, WarningCode

log = logging.getLogger(__name__)

ProgressCallback: TypeAlias = Callable[[int, int], None]


@dataclass(slots=True)
class DocumentResult:
    tags: list[Tag] = field(default_factory=list)
    raw_text_items: list[RawTextItem] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    warnings: list[ExtractionWarning] = field(default_factory=list)
    opc_groups: list[OpcGroup] = field(default_factory=list)
    pages: list[int] = field(default_factory=list)
    loops: list[Loop] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Tolerances
# ---------------------------------------------------------------------------

def _checked_tolerance(
    tolerance: Tolerance,
    default: Tolerance,
    category: Category,
    page: int | None,
    warnings: list[ExtractionWarning],
) -> Tolerance:
    """Replaces negative / non-numeric fields by their defaults (with a warning)."""
    fixes: dict[str, float] = {}
    for f in fields(Tolerance):
        value = getattr(tolerance, f.name)
        if is_valid_distance(value):
            continue
        fallback = getattr(default, f.name)
        fixes[f.name] = fallback
        log.warning("%s tolerance %s=%r rejected, using %r", category, f.name, value, fallback)
        warnings.append(ExtractionWarning(
            code=WarningCode.INVALID_TOLERANCE,
            message=f"{category} tolerance {f.name}={value!r} is not a non-negative number",
            category=category,
            page=page,
            details={"field": f.name, "value": repr(value), "used": fallback},
        ))
    return replace(tolerance, **fixes) if fixes else tolerance


def checked_tolerances(
    tolerances: ToleranceConfig,
    page: int | None,
    warnings: list[ExtractionWarning],
) -> ToleranceConfig:
    defaults = DEFAULT_SETTINGS.tolerances
    return ToleranceConfig(
        instrument=_checked_tolerance(
            tolerances.instrument, defaults.instrument, Category.INSTRUMENT, page, warnings),
        off_page_connector=_checked_tolerance(
            tolerances.off_page_connector, defaults.off_page_connector, Category.OFF_PAGE_CONNECTOR,
            page, warnings),
    )


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

def _collect_residuals(tokens: list[Token], consumed: ConsumedSet, page: int) -> list[RawTextItem]:
    return [
        RawTextItem(text=t.text, page=page, bbox=t.bbox)
        for t in tokens
        if t.index not in consumed
    ]


def extract_page(page: PageInput, settings: Settings = DEFAULT_SETTINGS) -> PageResult:
    number = page.page_number
    patterns = settings.patterns
    compact = settings.auto_remove_whitespace

    tokens, warnings = build_tokens(page)
    tolerances = checked_tolerances(settings.tolerances, number, warnings)
    consumed: ConsumedSet = frozenset()
    tags: list[Tag] = []

    def _absorb(result: PassResult) -> ConsumedSet:
        tags.extend(result.tags)
        warnings.extend(result.warnings)
        return result.consumed

    consumed = _absorb(match_instruments(
        tokens, consumed, patterns.instrument, tolerances.instrument, number, compact))
    consumed = _absorb(classify_tokens(tokens, consumed, patterns, number, compact))

    drawing_number_re = compile_pattern(patterns.drawing_number, Category.DRAWING_NUMBER, number, warnings)
    consumed = _absorb(select_drawing_number(
        tokens, consumed, drawing_number_re, page.rotation, page.view_box, number, compact))

    reference_re = compile_pattern(
        patterns.off_page_connector, Category.OFF_PAGE_CONNECTOR, number, warnings, flags=0)
    consumed = _absorb(link_off_page_connectors(
        tokens, consumed, drawing_number_re, reference_re, tolerances.off_page_connector, number, compact))

    raw = _collect_residuals(tokens, consumed, number)
    log.info("page %d: %d tokens → %d tags, %d raw text items", number, len(tokens), len(tags), len(raw))
    return PageResult(page=number, tags=tags, raw_text_items=raw, warnings=warnings, consumed=consumed)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def iter_document(pages: Iterable[PageInput], settings: Settings = DEFAULT_SETTINGS) -> Iterator[PageResult]:
    for page in sorted(pages, key=lambda p: p.page_number):
        yield extract_page(page, settings)


def extract_document(
    pages: Iterable[PageInput],
    settings: Settings = DEFAULT_SETTINGS,
    on_progress: ProgressCallback | None = None,
) -> DocumentResult:
    pages = list(pages)
    result = DocumentResult()

    for done, page_result in enumerate(iter_document(pages, settings), 1):
        result.tags.extend(page_result.tags)
        result.raw_text_items.extend(page_result.raw_text_items)
        result.warnings.extend(page_result.warnings)
        result.pages.append(page_result.page)
        if on_progress is not None:
            on_progress(done, len(pages))

    result.relationships = build_off_page_relationships(result.tags, result.relationships)
    result.opc_groups = group_off_page_connectors(result.tags, result.relationships)
    for group in result.opc_groups:
        if group.status is OpcStatus.INVALID:
            result.warnings.append(ExtractionWarning(
                code=WarningCode.INVALID_OPC_GROUP,
                message=f"Off-page reference {group.reference!r}: {len(group.tags)} connector(s) "
                        f"on page(s) {', '.join(map(str, group.pages))}",
                category=Category.OFF_PAGE_CONNECTOR,
                details={"reference": group.reference, "tag_ids": [t.id for t in group.tags]},
            ))

    if settings.auto_generate_loops:
        result.loops = generate_loops(result.tags)
    return result
