from __future__ import annotations

import pytest

from rule_engine import ControlSource, Grid, Position, Reading, rank_positions

pytestmark = pytest.mark.ranking


def test_empty_input_ranks_to_empty_list(grid: Grid) -> None:
    assert rank_positions([], [], grid) == []


def test_higher_score_comes_first(grid: Grid) -> None:
    entries = [
        (Position(5, 4), Reading(illuminance=250, temp_rating=1)),  # 40
        (Position(0, 0), Reading(illuminance=375, temp_rating=3)),  # 90
    ]

    ranked = rank_positions(entries, [], grid)

    assert [item.position for item in ranked] == [Position(0, 0), Position(5, 4)]
    assert ranked[0].score == pytest.approx(90.0)
    assert ranked[1].score == pytest.approx(40.0)
    assert ranked[0].reading.illuminance == 375


def test_ties_follow_position_id_order(grid: Grid) -> None:
    same = Reading(illuminance=500, temp_rating=3)
    entries = [
        (Position(4, 4), same),
        (Position(0, 2), same),
        (Position(2, 1), same),
    ]

    first = rank_positions(entries, [], grid)
    second = rank_positions(list(reversed(entries)), [], grid)

    expected = [Position(0, 2), Position(2, 1), Position(4, 4)]
    assert [item.position for item in first] == expected
    assert [item.position for item in second] == expected


def test_active_source_changes_the_order(grid: Grid) -> None:
    # Both seats report "slightly warm"; the air conditioner cools only one of them
    entries = [
        (Position(5, 4), Reading(illuminance=500, temp_rating=4)),
        (Position(1, 0), Reading(illuminance=500, temp_rating=4)),
    ]
    source = ControlSource(id=1, position=Position(1, 0))

    ranked = rank_positions(entries, [source], grid)
    assert ranked[0].position == Position(1, 0)

    idle = rank_positions(entries, [ControlSource(id=1, position=Position(1, 0), active=False)], grid)
    assert [item.position for item in idle] == [Position(1, 0), Position(5, 4)]
    assert idle[0].score == idle[1].score


def test_limit_returns_prefix(grid: Grid) -> None:
    entries = [
        (grid.id_to_position(position_id), Reading(illuminance=500 + position_id * 10, temp_rating=3))
        for position_id in range(1, 11)
    ]

    ranked = rank_positions(entries, [], grid, limit=3)

    assert [grid.position_to_id(item.position.col, item.position.row) for item in ranked] == [1, 2, 3]
    assert rank_positions(entries, [], grid, limit=0) == []
