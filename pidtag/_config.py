"""
pidtag/_config.py — loading extraction settings from JSON.

Source, first one found:
  1. explicit path (--config)
  2. environment variable PIDTAG_CONFIG
  3. built-in defaults (data_model.DEFAULT_SETTINGS)

File shape (keys as in the original project files; a project export with a
top-level "settings" object is accepted too):

    {
      "patterns": {
        "Equipment": "...", "Line": "...",
        "Instrument": {"func": "...", "num": "..."},
        "DrawingNumber": "...", "NotesAndHolds": "...",
        "SpecialItem": "...", "OffPageConnector": "..."
      },
      "tolerances": {
        "Instrument":       {"vertical": 15, "horizontal": 20, "autoLinkDistance": 30},
        "OffPageConnector": {"vertical": 15, "horizontal": 20, "autoLinkDistance": 30}
      },
      "autoRemoveWhitespace": true,
      "autoGenerateLoops": true
    }

Missing keys keep their defaults. Negative, non-numeric or non-finite
tolerances are rejected here (default kept, warning logged) so they never
reach distance math.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

from data_model import (
    DEFAULT_SETTINGS,
    Category,
    PatternConfig,
    Settings,
    Tolerance,
    ToleranceConfig,
    is_valid_distance,
)

log = logging.getLogger(__name__)

CONFIG_ENV = "PIDTAG_CONFIG"


class ConfigError(Exception):
    """Configuration file missing, unreadable or not a JSON object."""


_PATTERN_FIELDS: dict[Category, str] = {
    Category.EQUIPMENT:          "equipment",
    Category.LINE:               "line",
    Category.DRAWING_NUMBER:     "drawing_number",
    Category.NOTES_AND_HOLDS:    "notes_and_holds",
    Category.SPECIAL_ITEM:       "special_item",
    Category.OFF_PAGE_CONNECTOR: "off_page_connector",
}

_TOLERANCE_FIELDS: dict[Category, str] = {
    Category.INSTRUMENT:         "instrument",
    Category.OFF_PAGE_CONNECTOR: "off_page_connector",
}

_TOLERANCE_KEYS: dict[str, str] = {
    "vertical":         "vertical",
    "horizontal":       "horizontal",
    "autoLinkDistance": "auto_link_distance",
}

_FLAG_FIELDS: dict[str, str] = {
    "autoRemoveWhitespace": "auto_remove_whitespace",
    "autoGenerateLoops":    "auto_generate_loops",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def config_path(explicit: str | Path | None = None) -> Path | None:
    if explicit:
        return Path(explicit)
    env = os.getenv(CONFIG_ENV)
    return Path(env) if env else None


def load_settings(explicit: str | Path | None = None) -> Settings:
    path = config_path(explicit)
    if path is None:
        return DEFAULT_SETTINGS
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    log.debug("settings loaded from %s", path)
    return settings_from_dict(raw)


def settings_from_dict(raw: dict[str, Any]) -> Settings:
    if isinstance(raw.get("settings"), dict):
        raw = raw["settings"]

    settings = DEFAULT_SETTINGS
    patterns = raw.get("patterns")
    if isinstance(patterns, dict):
        settings = replace(settings, patterns=_patterns(patterns, settings.patterns))

    tolerances = raw.get("tolerances")
    if isinstance(tolerances, dict):
        settings = replace(settings, tolerances=_tolerances(tolerances, settings.tolerances))

    for key, name in _FLAG_FIELDS.items():
        flag = raw.get(key)
        if isinstance(flag, bool):
            settings = replace(settings, **{name: flag})
        elif flag is not None:
            log.warning("%s=%r ignored (expected true/false)", key, flag)

    return settings


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    patterns: dict[str, Any] = {
        str(category): getattr(settings.patterns, name)
        for category, name in _PATTERN_FIELDS.items()
    }
    patterns[str(Category.INSTRUMENT)] = {
        "func": settings.patterns.instrument.func,
        "num":  settings.patterns.instrument.num,
    }
    tolerances = {
        str(category): {
            key: getattr(getattr(settings.tolerances, name), attr)
            for key, attr in _TOLERANCE_KEYS.items()
        }
        for category, name in _TOLERANCE_FIELDS.items()
    }
    return {
        "patterns": patterns,
        "tolerances": tolerances,
        **{key: getattr(settings, name) for key, name in _FLAG_FIELDS.items()},
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _patterns(raw: dict[str, Any], current: PatternConfig) -> PatternConfig:
    changes: dict[str, Any] = {}
    for category, name in _PATTERN_FIELDS.items():
        value = raw.get(str(category))
        if value is None:
            continue
        if isinstance(value, str):
            changes[name] = value
        else:
            log.warning("pattern for %s ignored (expected a string, got %r)", category, value)

    instrument = raw.get(str(Category.INSTRUMENT))
    if isinstance(instrument, dict):
        parts = {
            key: instrument[key]
            for key in ("func", "num")
            if isinstance(instrument.get(key), str)
        }
        changes["instrument"] = replace(current.instrument, **parts)
    elif instrument is not None:
        log.warning("Instrument pattern ignored (expected {func, num}, got %r)", instrument)

    return replace(current, **changes)


def _tolerances(raw: dict[str, Any], current: ToleranceConfig) -> ToleranceConfig:
    changes: dict[str, Tolerance] = {}
    for category, name in _TOLERANCE_FIELDS.items():
        entry = raw.get(str(category))
        if not isinstance(entry, dict):
            continue
        changes[name] = _tolerance(category, entry, getattr(current, name))
    return replace(current, **changes)


def _tolerance(category: Category, raw: dict[str, Any], current: Tolerance) -> Tolerance:
    changes: dict[str, float] = {}
    for key, attr in _TOLERANCE_KEYS.items():
        if key not in raw:
            continue
        value = raw[key]
        if is_valid_distance(value):
            changes[attr] = float(value)
        else:
            log.warning(
                "%s tolerance %s=%r rejected, keeping %r",
                category, key, value, getattr(current, attr),
            )
    return replace(current, **changes)
