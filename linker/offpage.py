"""
linker/offpage.py — pairing off-page connectors across the document.

OPC tags are grouped by exact text. A group is a valid pair when it holds
exactly two tags on two different pages; such a pair gets two
OffPageConnection relationships (A→B and B→A). Any other group is invalid
and left for the operator.

build_off_page_relationships() replaces every OffPageConnection already in
the set instead of appending, so re-running it after tags were added or
deleted never leaves stale pairs behind.

Public API:
  group_off_page_connectors(tags, relationships)    -> list[OpcGroup]
  build_off_page_relationships(tags, relationships) -> list[Relationship]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from data_model import Category, Relationship, RelationshipType, Tag

log = logging.getLogger(__name__)


class OpcStatus(StrEnum):
    CONNECTED   = "connected"     # valid pair, linked both ways
    UNCONNECTED = "unconnected"   # valid pair, links missing
    INVALID     = "invalid"       # not exactly two tags on two pages


@dataclass(slots=True)
class OpcGroup:
    reference: str
    tags: list[Tag] = field(default_factory=list)
    status: OpcStatus = OpcStatus.INVALID

    @property
    def pages(self) -> list[int]:
        return sorted({t.page for t in self.tags})

    @property
    def is_pair(self) -> bool:
        return len(self.tags) == 2 and len(self.pages) == 2


def _group_by_text(tags: list[Tag]) -> dict[str, list[Tag]]:
    groups: dict[str, list[Tag]] = {}
    for tag in tags:
        if tag.category == Category.OFF_PAGE_CONNECTOR:
            groups.setdefault(tag.text, []).append(tag)
    return groups


def build_off_page_relationships(tags: list[Tag], relationships: list[Relationship]) -> list[Relationship]:
    """
    Returns relationships with every OffPageConnection rebuilt from tags.

    Relationships of other types are kept unchanged and in order.
    """
    kept = [r for r in relationships if r.type != RelationshipType.OFF_PAGE_CONNECTION]
    rebuilt: list[Relationship] = []
    invalid = 0

    for reference, members in _group_by_text(tags).items():
        group = OpcGroup(reference=reference, tags=members)
        if not group.is_pair:
            invalid += 1
            continue
        a, b = members
        rebuilt.append(Relationship(from_id=a.id, to_id=b.id, type=RelationshipType.OFF_PAGE_CONNECTION))
        rebuilt.append(Relationship(from_id=b.id, to_id=a.id, type=RelationshipType.OFF_PAGE_CONNECTION))

    log.debug("off-page connections: %d pairs, %d invalid groups", len(rebuilt) // 2, invalid)
    return kept + rebuilt


def group_off_page_connectors(tags: list[Tag], relationships: list[Relationship]) -> list[OpcGroup]:
    """Status report for every OPC reference text, sorted by text."""
    links = {
        (r.from_id, r.to_id)
        for r in relationships
        if r.type == RelationshipType.OFF_PAGE_CONNECTION
    }

    result: list[OpcGroup] = []
    for reference, members in sorted(_group_by_text(tags).items()):
        group = OpcGroup(reference=reference, tags=members)
        if group.is_pair:
            a, b = members
            linked = (a.id, b.id) in links and (b.id, a.id) in links
            group.status = OpcStatus.CONNECTED if linked else OpcStatus.UNCONNECTED
        else:
            log.warning(
                "off-page reference %r is ambiguous: %d connector(s) on page(s) %s",
                reference, len(members), group.pages,
            )
        result.append(group)
    return result
