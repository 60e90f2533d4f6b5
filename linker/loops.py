"""
linker/loops.py — instrument loops generated from tag texts.

An instrument tag text reads as function letters, loop number and an
optional suffix: "PT-7083", "PZV-7012 A", "PIC101", "PT7083C". Tags whose
function starts with the same letter and whose numbers are equal form one
loop ("PT-7083" and "PIC-7083" → loop "P-7083"). Groups with a single tag
make no loop.

The loop is named after the longest function prefix its members share,
then the number without leading zeros ("PT-007", "PTX-7" → "PT-7").
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from data_model import Category, Loop, Tag

log = logging.getLogger(__name__)

# dash and space are both optional, so "PT7083C" parses like "PT-7083 C"
_INSTRUMENT_RE = re.compile(r"^([A-Z]{1,4})-?(\d+)\s*([A-Z]*)$", re.ASCII)


class InstrumentParts(NamedTuple):
    function: str
    number: int
    suffix: str


def parse_instrument_tag(text: str) -> InstrumentParts | None:
    m = _INSTRUMENT_RE.match(text.strip())
    if m is None:
        return None
    return InstrumentParts(m.group(1), int(m.group(2)), m.group(3))


def common_prefix(words: list[str]) -> str:
    prefix = words[0] if words else ""
    for word in words[1:]:
        i = 0
        while i < len(prefix) and i < len(word) and prefix[i] == word[i]:
            i += 1
        prefix = prefix[:i]
    return prefix


def loop_name(parts: list[InstrumentParts]) -> str:
    prefix = common_prefix([p.function for p in parts]) or parts[0].function[0]
    return f"{prefix}-{parts[0].number}"


def generate_loops(tags: list[Tag]) -> list[Loop]:
    """
    Loops over the Instrument tags of a whole document, in order of the
    first tag of each group. Unparseable instrument texts are skipped.
    """
    groups: dict[tuple[str, int], list[tuple[Tag, InstrumentParts]]] = {}
    for tag in tags:
        if tag.category != Category.INSTRUMENT:
            continue
        parts = parse_instrument_tag(tag.text)
        if parts is None:
            log.debug("instrument %r has no loop number", tag.text)
            continue
        groups.setdefault((parts.function[0], parts.number), []).append((tag, parts))

    loops = [
        Loop(
            id=loop_name([parts for _, parts in members]),
            tag_ids=[tag.id for tag, _ in members],
            auto_generated=True,
        )
        for members in groups.values()
        if len(members) > 1
    ]
    log.info("loops: %d generated from %d groups", len(loops), len(groups))
    return loops
