from __future__ import annotations

import json
import logging
import math

import pytest

from data_model import DEFAULT_SETTINGS, InstrumentPattern, Tolerance
from pidtag._config import CONFIG_ENV, ConfigError, load_settings, settings_from_dict, settings_to_dict


def test_defaults_when_nothing_is_configured(monkeypatch) -> None:
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    assert load_settings() is DEFAULT_SETTINGS


def test_dict_round_trip_keeps_defaults() -> None:
    assert settings_from_dict(settings_to_dict(DEFAULT_SETTINGS)) == DEFAULT_SETTINGS


def test_partial_file_overrides_only_given_keys() -> None:
    settings = settings_from_dict({
        "patterns": {"Equipment": r"\d+-[A-Z]+-\d+", "Instrument": {"num": r"\d{4}"}},
        "tolerances": {"OffPageConnector": {"horizontal": 40, "autoLinkDistance": 12.5}},
        "autoRemoveWhitespace": False,
        "autoGenerateLoops": False,
    })

    assert settings.patterns.equipment == r"\d+-[A-Z]+-\d+"
    assert settings.patterns.line == DEFAULT_SETTINGS.patterns.line
    assert settings.patterns.instrument == InstrumentPattern(func=r"[A-Z]{2,4}", num=r"\d{4}")
    assert settings.tolerances.off_page_connector == Tolerance(vertical=15, horizontal=40, auto_link_distance=12.5)
    assert settings.tolerances.instrument == DEFAULT_SETTINGS.tolerances.instrument
    assert settings.auto_remove_whitespace is False
    assert settings.auto_generate_loops is False


def test_project_export_with_settings_object() -> None:
    settings = settings_from_dict({"settings": {"patterns": {"SpecialItem": "SP-\\d+"}}})
    assert settings.patterns.special_item == "SP-\\d+"


@pytest.mark.parametrize("value", [-5, "20", None, True, math.nan, math.inf, [1]])
def test_invalid_tolerance_keeps_default(value, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="pidtag._config"):
        settings = settings_from_dict({"tolerances": {"Instrument": {"vertical": value}}})

    assert settings.tolerances.instrument.vertical == DEFAULT_SETTINGS.tolerances.instrument.vertical
    assert "rejected" in caplog.text


def test_non_string_pattern_is_ignored() -> None:
    settings = settings_from_dict({"patterns": {"Line": 42, "Instrument": "PT"}})

    assert settings.patterns.line == DEFAULT_SETTINGS.patterns.line
    assert settings.patterns.instrument == DEFAULT_SETTINGS.patterns.instrument


def test_load_from_explicit_path(tmp_path) -> None:
    path = tmp_path / "project.json"
    path.write_text(json.dumps({"patterns": {"OffPageConnector": "^[A-Z]$"}}), encoding="utf-8")

    assert load_settings(path).patterns.off_page_connector == "^[A-Z]$"


def test_load_from_environment(tmp_path, monkeypatch) -> None:
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"autoRemoveWhitespace": False}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV, str(path))

    assert load_settings().auto_remove_whitespace is False


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_broken_file_raises_config_error(tmp_path, content: str) -> None:
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(path)


def test_missing_file_raises_config_error(tmp_path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.json")
