"""
extractor/classifier.py — regex classification of the remaining tokens.

Categories are tried in CLASSIFIER_ORDER; the first one with at least one
match claims the token and emits one tag per match (a single run such as
"P-101A P-101B" can carry several references). Patterns are compiled with
IGNORECASE; an invalid one skips its category with a warning while the
others keep running.
"""

from __future__ import annotations

import logging
import re

from data_model import Category, PatternConfig, Tag

from .patterns import compile_pattern, find_all
from .text import clean_tag_text
from .types import ConsumedSet, ExtractionWarning, PassResult, Token

log = logging.getLogger(__name__)

CLASSIFIER_ORDER: tuple[Category, ...] = (
    Category.EQUIPMENT,
    Category.LINE,
    Category.NOTES_AND_HOLDS,
    Category.SPECIAL_ITEM,
)


def classifier_source(patterns: PatternConfig, category: Category) -> str:
    """Pattern source for a classifier category."""
    match category:
        case Category.EQUIPMENT:
            return patterns.equipment
        case Category.LINE:
            return patterns.line
        case Category.NOTES_AND_HOLDS:
            return patterns.notes_and_holds
        case Category.SPECIAL_ITEM:
            return patterns.special_item
        case _:
            raise ValueError(f"{category} is not handled by the pattern classifier")


def compile_classifiers(
    patterns: PatternConfig,
    page: int | None,
    warnings: list[ExtractionWarning],
) -> list[tuple[Category, re.Pattern[str]]]:
    compiled: list[tuple[Category, re.Pattern[str]]] = []
    for category in CLASSIFIER_ORDER:
        regex = compile_pattern(classifier_source(patterns, category), category, page, warnings)
        if regex is not None:
            compiled.append((category, regex))
    return compiled


def classify_tokens(
    tokens: list[Token],
    consumed: ConsumedSet,
    patterns: PatternConfig,
    page: int,
    compact: bool = True,
) -> PassResult:
    warnings: list[ExtractionWarning] = []
    classifiers = compile_classifiers(patterns, page, warnings)

    used = set(consumed)
    tags: list[Tag] = []
    for token in tokens:
        if token.index in used:
            continue
        for category, regex in classifiers:
            matches = find_all(regex, token.text)
            if not matches:
                continue
            for text in matches:
                tags.append(_tag(token, category, text, page, compact))
            used.add(token.index)
            break

    log.debug("page %d: classifier produced %d tags", page, len(tags))
    return PassResult(tags=tags, consumed=frozenset(used), warnings=warnings)


def _tag(token: Token, category: Category, text: str, page: int, compact: bool) -> Tag:
    return Tag(
        text=clean_tag_text(text, category, compact),
        page=page,
        bbox=token.bbox,
        category=category,
        source_items=[token.source(page)],
    )
