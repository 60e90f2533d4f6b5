"""
linker — whole-document relationship passes, run after extraction.

Public API:
  build_off_page_relationships(tags, rels)          OPC pairs, replaces old ones
  group_off_page_connectors(tags, rels)             OPC status report
  link_instruments_to_text(tags, raw, rels, dist)   Annotation links
  link_notes_to_descriptions(tags, descs, rels)     Description links
  link_equipment_to_short_specs(tags, specs, rels)  EquipmentShortSpec links
  auto_link_all(...)                                the three matchers in sequence
  generate_loops(tags)                              instrument loops by letter and number

Every link_* function returns only the new relationships to append; triples
already present are filtered, so running a matcher twice adds nothing.
"""

from __future__ import annotations

from data_model import (
    DEFAULT_SETTINGS,
    Description,
    EquipmentShortSpec,
    RawTextItem,
    Relationship,
    Settings,
    Tag,
)

from .common import existing_keys, unique_new
from .offpage import OpcGroup, OpcStatus, build_off_page_relationships, group_off_page_connectors
from .annotations import link_instruments_to_text, text_distance
from .descriptions import link_notes_to_descriptions, note_kind, note_numbers
from .short_specs import has_ab_pattern, link_equipment_to_short_specs, short_spec_matches, split_suffix
from .loops import InstrumentParts, common_prefix, generate_loops, loop_name, parse_instrument_tag


def auto_link_all(
    tags: list[Tag],
    raw_text_items: list[RawTextItem],
    descriptions: list[Description],
    specs: list[EquipmentShortSpec],
    relationships: list[Relationship],
    settings: Settings = DEFAULT_SETTINGS,
) -> list[Relationship]:
    """Runs the three matchers; each one sees the links created before it."""
    created: list[Relationship] = []
    created += link_instruments_to_text(
        tags, raw_text_items, relationships + created, settings.tolerances.instrument.auto_link_distance)
    created += link_notes_to_descriptions(tags, descriptions, relationships + created)
    created += link_equipment_to_short_specs(tags, specs, relationships + created)
    return created


__all__ = [
    "existing_keys",
    "unique_new",
    "OpcGroup",
    "OpcStatus",
    "build_off_page_relationships",
    "group_off_page_connectors",
    "link_instruments_to_text",
    "text_distance",
    "link_notes_to_descriptions",
    "note_kind",
    "note_numbers",
    "link_equipment_to_short_specs",
    "has_ab_pattern",
    "short_spec_matches",
    "split_suffix",
    "auto_link_all",
    "InstrumentParts",
    "common_prefix",
    "generate_loops",
    "loop_name",
    "parse_instrument_tag",
]
