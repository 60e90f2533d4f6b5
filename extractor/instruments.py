"""
extractor/instruments.py — pairs instrument function letters with loop numbers.

An instrument bubble prints its function letters ("PT") above the loop
number ("7083"); the text layer reports them as two runs. match_instruments()
merges such pairs into one Instrument tag "PT-7083".

Rules:
  - function candidates fully match InstrumentPattern.func, number
    candidates fully match InstrumentPattern.num (case-sensitive)
  - the number's center must be strictly below the function's center
  - |dx| <= horizontal and |dy| <= vertical between centers
  - among valid numbers the nearest (squared distance) wins, first found on
    ties; function candidates are visited in page order
Unpaired runs stay unconsumed for the later passes.
"""

from __future__ import annotations

import logging

from data_model import Category, InstrumentPattern, Tag, Tolerance

from .patterns import compile_anchored
from .proximity import nearest_partner
from .text import clean_tag_text
from .types import ConsumedSet, ExtractionWarning, PassResult, Token

log = logging.getLogger(__name__)


def _is_below(func: Token, num: Token) -> bool:
    return func.bbox.center[1] < num.bbox.center[1]


def match_instruments(
    tokens: list[Token],
    consumed: ConsumedSet,
    pattern: InstrumentPattern,
    tolerance: Tolerance,
    page: int,
    compact: bool = True,
) -> PassResult:
    warnings: list[ExtractionWarning] = []
    func_re = compile_anchored(pattern.func, Category.INSTRUMENT, page, warnings)
    num_re = compile_anchored(pattern.num, Category.INSTRUMENT, page, warnings)
    if func_re is None or num_re is None:
        return PassResult(tags=[], consumed=consumed, warnings=warnings)

    func_candidates: list[Token] = []
    num_candidates: list[Token] = []
    for token in tokens:
        if token.index in consumed:
            continue
        if func_re.match(token.text):
            func_candidates.append(token)
        elif num_re.match(token.text):
            num_candidates.append(token)

    used = set(consumed)
    tags: list[Tag] = []
    for func in func_candidates:
        if func.index in used:
            continue
        num = nearest_partner(
            func,
            num_candidates,
            tolerance,
            taken=lambda t: t.index in used,
            accept=_is_below,
        )
        if num is None:
            continue

        used.update((func.index, num.index))
        tags.append(Tag(
            text=clean_tag_text(f"{func.text}-{num.text}", Category.INSTRUMENT, compact),
            page=page,
            bbox=func.bbox.union(num.bbox),
            category=Category.INSTRUMENT,
            source_items=[func.source(page), num.source(page)],
        ))

    log.debug(
        "page %d: %d function / %d number candidates → %d instruments",
        page, len(func_candidates), len(num_candidates), len(tags),
    )
    return PassResult(tags=tags, consumed=frozenset(used), warnings=warnings)
