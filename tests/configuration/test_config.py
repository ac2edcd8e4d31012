from __future__ import annotations

import os

import pytest

from config import DEFAULT_TIME_SLOTS, ConfigError, load_settings, parse_control_sources

pytestmark = pytest.mark.config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("COMFORT_"):
            monkeypatch.delenv(name)


def test_defaults_describe_the_classroom() -> None:
    settings = load_settings()

    assert (settings.grid_width, settings.grid_height) == (6, 5)
    assert list(settings.time_slots) == DEFAULT_TIME_SLOTS
    assert settings.scoring.effect_coefficient == 0.5
    assert settings.scoring.min_distance == 1.0
    assert [(s.col, s.row) for s in settings.control_sources] == [(1, 0), (1, 4)]
    assert all(s.active and s.effect == 1.0 for s in settings.control_sources)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMFORT_GRID_WIDTH", "4")
    monkeypatch.setenv("COMFORT_GRID_HEIGHT", "3")
    monkeypatch.setenv("COMFORT_EFFECT_COEFFICIENT", "0.8")
    monkeypatch.setenv("COMFORT_TIME_SLOTS", "08:30, 12:30")
    monkeypatch.setenv(
        "COMFORT_CONTROL_SOURCES",
        '[{"id": 5, "col": 3, "row": 2, "active": false, "effect": -1.0}]',
    )

    settings = load_settings()

    assert (settings.grid_width, settings.grid_height) == (4, 3)
    assert settings.scoring.effect_coefficient == 0.8
    assert settings.time_slots == ("08:30", "12:30")
    assert len(settings.control_sources) == 1
    assert settings.control_sources[0].effect == -1.0
    assert settings.control_sources[0].active is False


def test_weights_must_sum_to_one(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMFORT_WEIGHT_LIGHT", "0.5")

    with pytest.raises(ConfigError, match="sum to 1.0"):
        load_settings()


@pytest.mark.parametrize(
    "name,value",
    [
        ("COMFORT_GRID_WIDTH", "six"),
        ("COMFORT_GRID_HEIGHT", "0"),
        ("COMFORT_MIN_DISTANCE", "0"),
        ("COMFORT_TIME_SLOTS", " , "),
        ("COMFORT_TIME_SLOTS", "10:00,10:00"),
        ("COMFORT_CONTROL_SOURCES", "not json"),
        ("COMFORT_CONTROL_SOURCES", '[{"id": 1, "col": 9, "row": 0}]'),
    ],
)
def test_bad_values_raise_config_error(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        load_settings()


def test_duplicate_source_ids_rejected() -> None:
    with pytest.raises(ConfigError, match="Duplicate"):
        parse_control_sources(
            [{"id": 1, "col": 0, "row": 0}, {"id": 1, "col": 1, "row": 1}], 6, 5
        )


@pytest.mark.parametrize(
    "name,value",
    [
        ("COMFORT_EFFECT_COEFFICIENT", "nan"),
        ("COMFORT_EFFECT_COEFFICIENT", "inf"),
        ("COMFORT_MIN_DISTANCE", "inf"),
        ("COMFORT_OPTIMAL_LIGHT", "nan"),
        ("COMFORT_OPTIMAL_TEMP", "inf"),
        ("COMFORT_WEIGHT_LIGHT", "nan"),
    ],
)
def test_non_finite_scoring_parameters_rejected(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError, match="finite"):
        load_settings()


def test_non_finite_source_effect_rejected_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMFORT_CONTROL_SOURCES", '[{"id": 1, "col": 1, "row": 0, "effect": NaN}]')

    with pytest.raises(ConfigError):
        load_settings()


@pytest.mark.parametrize("effect", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_source_effect_rejected(effect: float) -> None:
    with pytest.raises(ConfigError, match="Invalid control source"):
        parse_control_sources([{"id": 1, "col": 1, "row": 0, "effect": effect}], 6, 5)
