"""Settings for the seat comfort service, read from the environment."""
import json
import math
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from models import ControlSourceConfig
from rule_engine import (
    DEFAULT_EFFECT_COEFFICIENT,
    DEFAULT_MIN_DISTANCE,
    OPTIMAL_LIGHT,
    OPTIMAL_TEMP,
    WEIGHT_LIGHT,
    WEIGHT_TEMP,
    ScoringParameters,
)

DEFAULT_GRID_WIDTH = 6
DEFAULT_GRID_HEIGHT = 5
DEFAULT_TIME_SLOTS = ["09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00"]

# Seats 6 and 10 of the 6x5 classroom (column 1, front and back row)
DEFAULT_CONTROL_SOURCES = [
    {"id": 1, "col": 1, "row": 0, "active": True, "activated_at": "09:00"},
    {"id": 2, "col": 1, "row": 4, "active": True, "activated_at": "09:00"},
]

_SOURCES_ADAPTER = TypeAdapter(List[ControlSourceConfig])


class ConfigError(RuntimeError):
    """Raised when configuration loading fails."""


@dataclass(frozen=True)
class Settings:
    grid_width: int = DEFAULT_GRID_WIDTH
    grid_height: int = DEFAULT_GRID_HEIGHT
    scoring: ScoringParameters = field(default_factory=ScoringParameters)
    time_slots: tuple = tuple(DEFAULT_TIME_SLOTS)
    control_sources: tuple = ()
    log_level: str = "INFO"
    log_json: bool = False


def load_settings(env_file: str = None) -> Settings:
    """Build Settings from environment variables (and a .env file if present)."""
    load_dotenv(env_file)

    width = _get_int("COMFORT_GRID_WIDTH", DEFAULT_GRID_WIDTH)
    height = _get_int("COMFORT_GRID_HEIGHT", DEFAULT_GRID_HEIGHT)
    if width <= 0 or height <= 0:
        raise ConfigError(f"Grid dimensions must be positive, got {width}x{height}")

    scoring = ScoringParameters(
        effect_coefficient=_get_float("COMFORT_EFFECT_COEFFICIENT", DEFAULT_EFFECT_COEFFICIENT),
        min_distance=_get_float("COMFORT_MIN_DISTANCE", DEFAULT_MIN_DISTANCE),
        optimal_light=_get_float("COMFORT_OPTIMAL_LIGHT", OPTIMAL_LIGHT),
        optimal_temp=_get_float("COMFORT_OPTIMAL_TEMP", OPTIMAL_TEMP),
        weight_light=_get_float("COMFORT_WEIGHT_LIGHT", WEIGHT_LIGHT),
        weight_temp=_get_float("COMFORT_WEIGHT_TEMP", WEIGHT_TEMP),
    )
    validate_scoring(scoring)

    time_slots = _get_time_slots()
    sources = _get_control_sources(width, height)

    return Settings(
        grid_width=width,
        grid_height=height,
        scoring=scoring,
        time_slots=tuple(time_slots),
        control_sources=tuple(sources),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").strip().lower() in ("1", "true", "yes"),
    )


def validate_scoring(scoring: ScoringParameters) -> None:
    for name in (
        "effect_coefficient",
        "min_distance",
        "optimal_light",
        "optimal_temp",
        "weight_light",
        "weight_temp",
    ):
        value = getattr(scoring, name)
        if not math.isfinite(value):
            raise ConfigError(f"Scoring parameter {name} must be finite, got {value}")
    if not abs(scoring.weight_light + scoring.weight_temp - 1.0) < 1e-9:
        raise ConfigError(
            f"Weights must sum to 1.0, got {scoring.weight_light} + {scoring.weight_temp}"
        )
    if scoring.weight_light < 0 or scoring.weight_temp < 0:
        raise ConfigError("Weights must be non-negative")
    if scoring.min_distance <= 0:
        raise ConfigError(f"Minimum distance must be positive, got {scoring.min_distance}")
    if scoring.optimal_light <= 0 or scoring.optimal_temp <= 0:
        raise ConfigError("Optimal light and temperature must be positive")


def parse_control_sources(raw, width: int, height: int) -> list:
    """Validate control source entries (a JSON string or a list of dicts)."""
    try:
        if isinstance(raw, str):
            sources = _SOURCES_ADAPTER.validate_json(raw)
        else:
            sources = _SOURCES_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid control source configuration: {exc}") from exc

    seen = set()
    for source in sources:
        if source.id in seen:
            raise ConfigError(f"Duplicate control source id {source.id}")
        seen.add(source.id)
        if source.col >= width or source.row >= height:
            raise ConfigError(
                f"Control source {source.id} at ({source.col}, {source.row}) "
                f"is outside the {width}x{height} grid"
            )
    return sources


def _get_control_sources(width: int, height: int) -> list:
    raw = os.getenv("COMFORT_CONTROL_SOURCES")
    if raw is None or not raw.strip():
        return parse_control_sources(DEFAULT_CONTROL_SOURCES, width, height)
    return parse_control_sources(raw, width, height)


def _get_time_slots() -> list:
    raw = os.getenv("COMFORT_TIME_SLOTS")
    if raw is None:
        return list(DEFAULT_TIME_SLOTS)
    slots = [slot.strip() for slot in raw.split(",") if slot.strip()]
    if not slots:
        raise ConfigError("COMFORT_TIME_SLOTS must name at least one time slot")
    if len(set(slots)) != len(slots):
        raise ConfigError(f"Duplicate time slots in {json.dumps(slots)}")
    return slots


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for {name}: '{raw}'") from exc


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for {name}: '{raw}'") from exc
