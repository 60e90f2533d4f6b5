"""
extractor/text.py — tag text clean-up.

NotesAndHolds text is free-form prose and keeps its formatting; every other
category may be compacted by removing all whitespace.
"""

from __future__ import annotations

import dataclasses
import re

from data_model import Category, Tag

_WHITESPACE_RE = re.compile(r"\s+")


def strip_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("", text)


def clean_tag_text(text: str, category: Category, compact: bool) -> str:
    if compact and category != Category.NOTES_AND_HOLDS:
        return strip_whitespace(text)
    return text


def remove_whitespace(tags: list[Tag], include_notes: bool = False) -> list[Tag]:
    """
    Returns copies of tags with all whitespace removed from their text.

    NotesAndHolds tags are left untouched unless include_notes is set.
    Ids, positions and source items are preserved.
    """
    result: list[Tag] = []
    for tag in tags:
        if tag.category == Category.NOTES_AND_HOLDS and not include_notes:
            result.append(tag)
            continue
        result.append(dataclasses.replace(tag, text=strip_whitespace(tag.text)))
    return result
