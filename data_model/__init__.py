"""
data_model — data structures shared by the extractor, the linker and the CLI.

Usage:
  from data_model import Tag, RawTextItem, Relationship, Settings, ...

Modules:
  geometry  — TextItem, BoundingBox, Transform, Point, squared_distance
  entities  — Category, RelationshipType, Tag, SourceItem, RawTextItem,
              Description, DescriptionMetadata, EquipmentShortSpec,
              Relationship, Loop, new_id
  settings  — InstrumentPattern, PatternConfig, Tolerance, ToleranceConfig,
              Settings, DEFAULT_SETTINGS, is_valid_distance
"""

from .geometry import (
    IDENTITY,
    Transform,
    Point,
    BoundingBox,
    TextItem,
    finite,
    squared_distance,
)
from .entities import (
    EntityId,
    Category,
    RelationshipType,
    NoteKind,
    DescriptionScope,
    SourceItem,
    Tag,
    RawTextItem,
    DescriptionMetadata,
    Description,
    EquipmentShortSpec,
    RelationshipKey,
    Relationship,
    Loop,
    new_id,
)
from .settings import (
    InstrumentPattern,
    PatternConfig,
    Tolerance,
    ToleranceConfig,
    Settings,
    DEFAULT_SETTINGS,
    is_valid_distance,
)

__all__ = [
    # geometry
    "IDENTITY",
    "Transform",
    "Point",
    "BoundingBox",
    "TextItem",
    "finite",
    "squared_distance",
    # entities
    "EntityId",
    "Category",
    "RelationshipType",
    "NoteKind",
    "DescriptionScope",
    "SourceItem",
    "Tag",
    "RawTextItem",
    "DescriptionMetadata",
    "Description",
    "EquipmentShortSpec",
    "RelationshipKey",
    "Relationship",
    "Loop",
    "new_id",
    # settings
    "InstrumentPattern",
    "PatternConfig",
    "Tolerance",
    "ToleranceConfig",
    "Settings",
    "DEFAULT_SETTINGS",
    "is_valid_distance",
]
