"""Comfort Service: the operations the presentation layer calls.

Validates input at the boundary, keeps the reading store and control sources,
and delegates scoring and ranking to the rule engine.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from config import Settings, load_settings
from rule_engine import (
    NO_DATA,
    ComfortResult,
    ControlSource,
    Grid,
    InvalidInput,
    Position,
    RankedPosition,
    Reading,
    evaluate,
    rank_positions,
    validate_reading,
)
from store import ControlSourceRegistry, ReadingStore

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ComfortService:
    """Service holding one room's seats, readings and air conditioners."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self.grid = Grid(self.settings.grid_width, self.settings.grid_height)
        self.params = self.settings.scoring
        self.readings = ReadingStore()
        self.sources = ControlSourceRegistry(
            ControlSource(
                id=cfg.id,
                position=self.grid.validate_position(Position(col=cfg.col, row=cfg.row)),
                active=cfg.active,
                activated_at=cfg.activated_at,
                effect=cfg.effect,
            )
            for cfg in self.settings.control_sources
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def submit_reading(
        self,
        position_id: int,
        time_slot: str,
        illuminance: float,
        temp_rating: int,
        comment: str = "",
        timestamp: Optional[str] = None,
    ) -> Reading:
        """Store a reading, replacing any earlier one for the same seat and slot."""
        reading, _ = self.submit_reading_with_status(
            position_id, time_slot, illuminance, temp_rating, comment, timestamp
        )
        return reading

    def submit_reading_with_status(
        self,
        position_id: int,
        time_slot: str,
        illuminance: float,
        temp_rating: int,
        comment: str = "",
        timestamp: Optional[str] = None,
    ) -> tuple:
        """Like submit_reading, but also reports whether an earlier reading was replaced."""
        try:
            position = self.grid.validate_id(position_id)
            self._validate_time_slot(time_slot)
            validate_reading(illuminance, temp_rating)
        except InvalidInput as exc:
            logger.warning("Rejected reading for seat %s at %s: %s", position_id, time_slot, exc)
            raise

        reading = Reading(
            illuminance=float(illuminance),
            temp_rating=temp_rating,
            comment=comment or "",
            timestamp=timestamp or _utc_now(),
        )
        replaced = self.readings.put(position, time_slot, reading)
        logger.info(
            "%s reading for seat %s at %s (%.1f lux, rating %s)",
            "Replaced" if replaced else "Stored",
            position_id, time_slot, reading.illuminance, reading.temp_rating,
        )
        return reading, replaced

    def set_control_source_state(self, source_id: int, active: bool) -> ControlSource:
        if not isinstance(active, bool):
            raise InvalidInput(f"Active flag must be a boolean, got {active!r}")
        return self.sources.set_state(source_id, active, activated_at=_utc_now())

    def list_control_sources(self) -> List[ControlSource]:
        return self.sources.list_sources()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_reading(self, position_id: int, time_slot: str) -> Optional[Reading]:
        position = self.grid.validate_id(position_id)
        self._validate_time_slot(time_slot)
        return self.readings.get(position, time_slot)

    def score_and_color(self, position_id: int, time_slot: str) -> Optional[ComfortResult]:
        """
        Score one seat for one slot.

        Returns None when the seat has no reading at that slot; callers show
        that as the 'no-data' category.
        """
        reading = self.get_reading(position_id, time_slot)
        if reading is None:
            return None
        position = self.grid.id_to_position(position_id)
        return evaluate(position, reading, self.sources.list_sources(), self.params)

    def ranked_recommendations(self, time_slot: str, limit: Optional[int] = None) -> List[RankedPosition]:
        """Seats with data at this slot, best first. Empty when nobody has reported."""
        self._validate_time_slot(time_slot)
        if limit is not None and limit < 0:
            raise InvalidInput(f"Limit must be non-negative, got {limit}")
        entries = self.readings.all_for_time_slot(time_slot)
        return rank_positions(
            entries, self.sources.list_sources(), self.grid, self.params, limit=limit
        )

    def heatmap(self, time_slot: str) -> list:
        """(position_id, score or None, category) for every seat, in id order."""
        self._validate_time_slot(time_slot)
        sources = self.sources.list_sources()
        readings = self.readings.snapshot()
        cells = []
        for position in self.grid.positions():
            position_id = self.grid.position_to_id(position.col, position.row)
            reading = readings.get((position, time_slot))
            if reading is None:
                cells.append((position_id, None, NO_DATA))
                continue
            result = evaluate(position, reading, sources, self.params)
            cells.append((position_id, result.score, result.category))
        return cells

    def statistics(self) -> dict:
        return self.readings.statistics()

    def grid_dimensions(self) -> tuple:
        return self.grid.width, self.grid.height

    def time_slots(self) -> List[str]:
        return list(self.settings.time_slots)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _validate_time_slot(self, time_slot: str) -> None:
        if time_slot not in self.settings.time_slots:
            raise InvalidInput(
                f"Unknown time slot '{time_slot}' (valid: {', '.join(self.settings.time_slots)})"
            )
