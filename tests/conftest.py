from __future__ import annotations

import pytest

from comfort_service import ComfortService
from config import Settings, parse_control_sources
from rule_engine import ControlSource, Grid, Position, ScoringParameters


@pytest.fixture()
def grid() -> Grid:
    return Grid(6, 5)


@pytest.fixture()
def params() -> ScoringParameters:
    return ScoringParameters()


@pytest.fixture()
def source_a() -> ControlSource:
    return ControlSource(id=1, position=Position(1, 0), active=True, activated_at="09:00")


@pytest.fixture()
def make_settings():
    def _make(sources=None, **overrides) -> Settings:
        raw_sources = sources if sources is not None else []
        return Settings(
            control_sources=tuple(parse_control_sources(raw_sources, 6, 5)),
            **overrides,
        )

    return _make


@pytest.fixture()
def service(make_settings) -> ComfortService:
    """6x5 classroom with no control sources."""
    return ComfortService(make_settings())


@pytest.fixture()
def classroom_service(make_settings) -> ComfortService:
    """6x5 classroom with the two default air conditioners at seats 6 and 10."""
    return ComfortService(make_settings([
        {"id": 1, "col": 1, "row": 0, "active": True, "activated_at": "09:00"},
        {"id": 2, "col": 1, "row": 4, "active": True, "activated_at": "09:00"},
    ]))
