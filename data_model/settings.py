"""
data_model/settings.py — extraction configuration: patterns and tolerances.

Pattern strings stay uncompiled here. Compilation happens in the extractor,
per category and per page, so a malformed expression only disables its own
category.

Tolerances share the bounding-box length unit (page space at scale 1.0).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field


def is_valid_distance(value: object) -> bool:
    """True for finite, non-negative real numbers (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


@dataclass(frozen=True, slots=True)
class InstrumentPattern:
    """
    Two-part instrument pattern.

    - func: function letters, matched against the whole token (e.g. "PT")
    - num:  loop number, matched against the whole token (e.g. "7083")
    """
    func: str = r"[A-Z]{2,4}"
    num:  str = r"\d{3,4}(?:\s?[A-Z])?"


@dataclass(frozen=True, slots=True)
class PatternConfig:
    """Regex source per category. An empty string disables the category."""
    equipment:          str = r"^([^-]*-){2}[^-]*$"
    line:               str = r'^(?=.{10,25}$)(?=.*")([^-]*-){3,}[^-]*$'
    instrument:         InstrumentPattern = field(default_factory=InstrumentPattern)
    drawing_number:     str = r"[A-Z\d-]{5,}-[A-Z\d-]{5,}-\d{3,}"
    notes_and_holds:    str = r"^(NOTE|HOLD).*"
    special_item:       str = ""
    off_page_connector: str = r"^[A-Z0-9]{1,3}$"


@dataclass(frozen=True, slots=True)
class Tolerance:
    """
    - vertical:           max |dy| between centers when merging two tokens
    - horizontal:         max |dx| between centers when merging two tokens
    - auto_link_distance: max distance for the instrument ↔ text auto-link
    """
    vertical:           float = 15.0
    horizontal:         float = 20.0
    auto_link_distance: float = 30.0


@dataclass(frozen=True, slots=True)
class ToleranceConfig:
    instrument:         Tolerance = field(default_factory=Tolerance)
    off_page_connector: Tolerance = field(default_factory=Tolerance)


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Complete extraction configuration.

    auto_generate_loops — group instrument tags into loops after extraction.
    auto_remove_whitespace — strip whitespace from extracted tag text for
    every category except NotesAndHolds, which keeps the operator's prose.
    """
    patterns:               PatternConfig = field(default_factory=PatternConfig)
    tolerances:             ToleranceConfig = field(default_factory=ToleranceConfig)
    auto_remove_whitespace: bool = True
    auto_generate_loops:    bool = True


DEFAULT_SETTINGS = Settings()
