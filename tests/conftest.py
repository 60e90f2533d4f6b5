from __future__ import annotations

import pytest

from data_model import Tolerance


@pytest.fixture
def instrument_tolerance() -> Tolerance:
    return Tolerance(vertical=15, horizontal=20, auto_link_distance=30)


@pytest.fixture(autouse=True)
def _no_config_from_environment(monkeypatch) -> None:
    monkeypatch.delenv("PIDTAG_CONFIG", raising=False)
