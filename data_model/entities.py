"""
data_model/entities.py — extraction outputs: tags, raw text, relationships.

Every entity carrying a position holds exactly one BoundingBox in the
canonical frame. Ids are opaque hex strings (uuid4) unique per entity.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from .geometry import BoundingBox, TextItem

EntityId: TypeAlias = str


def new_id() -> EntityId:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Category(StrEnum):
    """Tag category. Values match the keys used in configuration files."""
    EQUIPMENT          = "Equipment"
    LINE               = "Line"
    INSTRUMENT         = "Instrument"
    DRAWING_NUMBER     = "DrawingNumber"
    NOTES_AND_HOLDS    = "NotesAndHolds"
    SPECIAL_ITEM       = "SpecialItem"
    OFF_PAGE_CONNECTOR = "OffPageConnector"
    UNCATEGORIZED      = "Uncategorized"


class RelationshipType(StrEnum):
    """
    Directed link kinds.

    Connection / Installation / Note are created manually by the operator;
    they are listed so relationship sets loaded from result files keep them.
    """
    CONNECTION           = "Connection"          # A -> B
    INSTALLATION         = "Installation"        # A is installed on B
    ANNOTATION           = "Annotation"          # tag -> raw text item
    NOTE                 = "Note"                # tag -> NotesAndHolds tag
    DESCRIPTION          = "Description"         # NotesAndHolds tag -> description
    EQUIPMENT_SHORT_SPEC = "EquipmentShortSpec"  # Equipment tag -> short spec
    OFF_PAGE_CONNECTION  = "OffPageConnection"   # OPC tag <-> OPC tag


class NoteKind(StrEnum):
    NOTE = "Note"
    HOLD = "Hold"


class DescriptionScope(StrEnum):
    GENERAL  = "General"
    SPECIFIC = "Specific"


# ---------------------------------------------------------------------------
# Page entities
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SourceItem:
    """A TextItem that was absorbed into a tag, with its page position."""
    item: TextItem
    page: int
    bbox: BoundingBox
    id: EntityId = field(default_factory=new_id)

    @property
    def text(self) -> str:
        return self.item.text


@dataclass(slots=True)
class Tag:
    """
    Classified engineering reference.

    - page:         1-based page number
    - source_items: empty for manually drawn tags, 1+ for extracted ones
                    (2 for merged instrument and off-page-connector tags)
    """
    text: str
    page: int
    bbox: BoundingBox
    category: Category
    source_items: list[SourceItem] = field(default_factory=list)
    id: EntityId = field(default_factory=new_id)


@dataclass(slots=True)
class RawTextItem:
    """Token left unclaimed after every extraction pass."""
    text: str
    page: int
    bbox: BoundingBox
    id: EntityId = field(default_factory=new_id)


@dataclass(slots=True)
class DescriptionMetadata:
    type: NoteKind
    scope: DescriptionScope
    number: int


@dataclass(slots=True)
class Description:
    """Note/hold body text, created by the operator from raw text or tags."""
    text: str
    page: int
    bbox: BoundingBox
    metadata: DescriptionMetadata
    id: EntityId = field(default_factory=new_id)


@dataclass(slots=True)
class EquipmentShortSpec:
    """Short equipment specification line (e.g. from an equipment list block)."""
    text: str
    page: int
    bbox: BoundingBox
    original_tag_text: str | None = None
    id: EntityId = field(default_factory=new_id)


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------

RelationshipKey: TypeAlias = tuple[EntityId, EntityId, RelationshipType]


@dataclass(slots=True)
class Relationship:
    from_id: EntityId
    to_id: EntityId
    type: RelationshipType
    id: EntityId = field(default_factory=new_id)

    @property
    def key(self) -> RelationshipKey:
        """Identity triple; two relationships with equal keys are duplicates."""
        return self.from_id, self.to_id, self.type


# ---------------------------------------------------------------------------
# Loops
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Loop:
    """
    Instrument loop: instrument tags sharing a measured variable and number.

    - id:             loop name, e.g. "PT-7083" or "P-7083"
    - tag_ids:        member tags, in extraction order
    - auto_generated: False for loops assembled by hand
    """
    id: str
    tag_ids: list[EntityId] = field(default_factory=list)
    auto_generated: bool = False
