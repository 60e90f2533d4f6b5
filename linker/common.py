"""
linker/common.py — relationship de-duplication.

Auto-link passes never insert a (from, to, type) triple that already exists;
unique_new() filters a candidate batch against the existing set and against
itself.
"""

from __future__ import annotations

from typing import Iterable

from data_model import Relationship, RelationshipKey


def existing_keys(relationships: Iterable[Relationship]) -> set[RelationshipKey]:
    return {r.key for r in relationships}


def unique_new(candidates: Iterable[Relationship], existing: Iterable[Relationship]) -> list[Relationship]:
    seen = existing_keys(existing)
    result: list[Relationship] = []
    for rel in candidates:
        if rel.key in seen:
            continue
        seen.add(rel.key)
        result.append(rel)
    return result
