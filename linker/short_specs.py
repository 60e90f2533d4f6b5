"""
linker/short_specs.py — Equipment tags ↔ equipment short specs.

A tag text splits into (base, suffix) where the suffix is a trailing
capital letter ("10-P-001A" → "10-P-001", "A") or a slash-separated run of
them ("10-P-001A/B" → "10-P-001", "A/B"). A tag and a spec link when

  - their texts are identical, or
  - their bases are equal and either side carries an A/B-style suffix
    (every same-base item then links, whatever its own suffix), or
  - their bases are equal and neither side has a suffix.

The A/B rule links all same-base items: "10-P-001A/B" also reaches
"10-P-001C".

The spec side is matched by its original equipment tag text when it has
one, otherwise by its own text.
"""

from __future__ import annotations

import logging
import re

from data_model import Category, EquipmentShortSpec, Relationship, RelationshipType, Tag

from .common import unique_new

log = logging.getLogger(__name__)

_SUFFIX_RE = re.compile(r"^(.+?)([A-Z](?:/[A-Z])+|[A-Z])$")


def split_suffix(text: str) -> tuple[str, str | None]:
    m = _SUFFIX_RE.match(text)
    if m is None:
        return text, None
    return m.group(1), m.group(2)


def has_ab_pattern(suffix: str | None) -> bool:
    return suffix is not None and "/" in suffix


def short_spec_matches(tag_text: str, spec_text: str) -> bool:
    if tag_text == spec_text:
        return True
    tag_base, tag_suffix = split_suffix(tag_text)
    spec_base, spec_suffix = split_suffix(spec_text)
    if tag_base != spec_base:
        return False
    if has_ab_pattern(tag_suffix) or has_ab_pattern(spec_suffix):
        return True
    return tag_suffix is None and spec_suffix is None


def link_equipment_to_short_specs(
    tags: list[Tag],
    specs: list[EquipmentShortSpec],
    relationships: list[Relationship],
) -> list[Relationship]:
    """New EquipmentShortSpec relationships (existing triples filtered out)."""
    candidates: list[Relationship] = []
    for tag in tags:
        if tag.category != Category.EQUIPMENT:
            continue
        for spec in specs:
            if short_spec_matches(tag.text, spec.original_tag_text or spec.text):
                candidates.append(Relationship(
                    from_id=tag.id, to_id=spec.id, type=RelationshipType.EQUIPMENT_SHORT_SPEC))

    created = unique_new(candidates, relationships)
    log.debug("short spec links: %d new", len(created))
    return created
