"""In-memory stores for readings and control sources.

Both stores guard mutation with a single lock and hand out copies, so scoring
and ranking always work on a stable snapshot.
"""
import logging
import threading
from dataclasses import replace

from rule_engine import ControlSource, InvalidInput, Position, Reading

logger = logging.getLogger(__name__)


class ReadingStore:
    """Readings keyed by (position, time slot). Last write wins."""

    def __init__(self):
        self._lock = threading.Lock()
        self._readings = {}

    def put(self, position: Position, time_slot: str, reading: Reading) -> bool:
        """Store a reading; returns True when it replaced an earlier one."""
        key = (position, time_slot)
        with self._lock:
            replaced = key in self._readings
            self._readings[key] = reading
        return replaced

    def get(self, position: Position, time_slot: str):
        with self._lock:
            return self._readings.get((position, time_slot))

    def all_for_time_slot(self, time_slot: str) -> list:
        """(position, reading) pairs that have a reading at this slot. Unordered."""
        with self._lock:
            return [
                (position, reading)
                for (position, slot), reading in self._readings.items()
                if slot == time_slot
            ]

    def snapshot(self) -> dict:
        with self._lock:
            return dict(self._readings)

    def statistics(self) -> dict:
        """Positions with at least one reading, and the total reading count."""
        with self._lock:
            positions = {position for position, _ in self._readings}
            return {
                "positions_with_data": len(positions),
                "total_readings": len(self._readings),
            }

    def clear(self) -> None:
        with self._lock:
            self._readings.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)


class ControlSourceRegistry:
    """The fixed set of control sources; only their active flag changes."""

    def __init__(self, sources):
        self._lock = threading.Lock()
        self._sources = {}
        for source in sources:
            if source.id in self._sources:
                raise InvalidInput(f"Duplicate control source id {source.id}")
            self._sources[source.id] = source

    def get(self, source_id: int) -> ControlSource:
        with self._lock:
            source = self._sources.get(source_id)
        if source is None:
            raise InvalidInput(f"Unknown control source id {source_id}")
        return source

    def set_state(self, source_id: int, active: bool, activated_at: str = None) -> ControlSource:
        """Switch a source on or off. activated_at is only updated on an off→on switch."""
        with self._lock:
            current = self._sources.get(source_id)
            if current is None:
                raise InvalidInput(f"Unknown control source id {source_id}")
            if active and not current.active and activated_at is not None:
                updated = replace(current, active=True, activated_at=activated_at)
            else:
                updated = replace(current, active=active)
            self._sources[source_id] = updated

        if updated.active != current.active:
            logger.info(
                "Control source %s switched %s", source_id, "on" if updated.active else "off"
            )
        return updated

    def list_sources(self) -> list:
        """All sources ordered by id."""
        with self._lock:
            return [self._sources[key] for key in sorted(self._sources)]
