"""
extractor/patterns.py — compiling user-supplied patterns without aborting.

Configured expressions come from operators and may be malformed. compile_*()
returns None for an empty or invalid source; an invalid one additionally
produces an INVALID_PATTERN warning so the caller can skip just that
category.
"""

from __future__ import annotations

import logging
import re

from data_model import Category

from .types import ExtractionWarning, WarningCode

log = logging.getLogger(__name__)

# Flags for the classifier, drawing-number and similar searches.
SEARCH_FLAGS = re.IGNORECASE | re.UNICODE


def compile_pattern(
    source: str,
    category: Category,
    page: int | None,
    warnings: list[ExtractionWarning],
    flags: int = SEARCH_FLAGS,
) -> re.Pattern[str] | None:
    if not source:
        return None
    try:
        return re.compile(source, flags)
    except re.error as exc:
        log.warning("invalid pattern for %s: %r (%s)", category, source, exc)
        warnings.append(ExtractionWarning(
            code=WarningCode.INVALID_PATTERN,
            message=f"Invalid pattern for {category}: {exc}",
            category=category,
            page=page,
            details={"pattern": source},
        ))
        return None


def compile_anchored(
    source: str,
    category: Category,
    page: int | None,
    warnings: list[ExtractionWarning],
) -> re.Pattern[str] | None:
    """Whole-token pattern (^source$), case-sensitive."""
    if not source:
        return None
    return compile_pattern(rf"\A(?:{source})\Z", category, page, warnings, flags=re.UNICODE)


def find_all(pattern: re.Pattern[str], text: str) -> list[str]:
    """Every non-empty match of pattern in text, in order."""
    return [m.group(0) for m in pattern.finditer(text) if m.group(0)]
