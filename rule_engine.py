"""Rule Engine for seat comfort scoring and ranking.

MAIN CONCEPTS:
══════════════════════════════════════════════════════════════════════════════════
1. GRID → Seats are fixed cells of a W × H grid
   - Seat ids are 1-based and column-major: id = col·H + row + 1
   - id ↔ (col, row) is a bijection over the whole grid

2. INFLUENCE → Air conditioners shift the felt temperature of nearby seats
   - contribution = effect · k / (distance + c)
   - c is a minimum-distance floor, so a seat under the unit stays finite
   - Inactive sources contribute nothing

3. SCORE → One bounded number per seat and time slot
   - effective_temp = rating - influence
   - score = 100 - (w_light·light_error + w_temp·temp_error)·100
   - Clamped to [0, 100] AFTER combining both errors

MODEL CONSTRAINTS:
══════════════════════════════════════════════════════════════════════════════════
- light_error is relative to the optimum and unbounded above; a very bright
  seat saturates at 0 through the final clamp, not through the error term.
- The temperature rating is a 1-5 vote (3 = neutral), not degrees.
- effect > 0 cools (default), effect < 0 warms.
"""
import math
from dataclasses import dataclass


# ============================================================================
# DEFAULT CONSTANTS
# ============================================================================
DEFAULT_EFFECT_COEFFICIENT = 0.5  # k
DEFAULT_MIN_DISTANCE = 1.0  # c
OPTIMAL_LIGHT = 500.0  # lux
OPTIMAL_TEMP = 3.0  # neutral on the 1-5 scale
WEIGHT_LIGHT = 0.4
WEIGHT_TEMP = 0.6

TEMP_RATING_MIN = 1
TEMP_RATING_MAX = 5

# ============================================================================
# CATEGORY MAPPING
# ============================================================================
# Format: (min_score, category), checked top-down
CATEGORY_MAP = [
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
    (0, "poor"),
]
NO_DATA = "no-data"


class InvalidInput(ValueError):
    """Raised when a caller passes a value outside the model's domain."""


@dataclass(frozen=True)
class Position:
    """A seat cell. Frozen so it can key the reading store."""
    col: int
    row: int


@dataclass(frozen=True)
class ControlSource:
    """An air conditioner (or heater) fixed at one seat cell."""
    id: int
    position: Position
    active: bool = True
    activated_at: str = ""  # informational only, never scored
    effect: float = 1.0  # signed magnitude: > 0 cools, < 0 warms


@dataclass(frozen=True)
class Reading:
    """One submission for a (position, time slot) key."""
    illuminance: float
    temp_rating: int
    comment: str = ""
    timestamp: str = ""


@dataclass(frozen=True)
class ScoringParameters:
    """Fixed targets, weights and influence constants."""
    effect_coefficient: float = DEFAULT_EFFECT_COEFFICIENT
    min_distance: float = DEFAULT_MIN_DISTANCE
    optimal_light: float = OPTIMAL_LIGHT
    optimal_temp: float = OPTIMAL_TEMP
    weight_light: float = WEIGHT_LIGHT
    weight_temp: float = WEIGHT_TEMP


@dataclass
class ComfortResult:
    """Result of scoring one reading.

    The intermediate values are kept for transparency, so a consumer can
    explain why a seat scored the way it did.
    """
    position: Position
    score: float
    category: str
    influence: float
    effective_temp: float
    light_error: float
    temp_error: float


@dataclass
class RankedPosition:
    """One entry of the ranking."""
    position: Position
    score: float
    category: str
    reading: Reading


# ============================================================================
# GRID MODEL
# ============================================================================
class Grid:
    """Fixed W × H seat layout with a 1-based, column-major id."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise InvalidInput(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    @property
    def size(self) -> int:
        return self.width * self.height

    def position_to_id(self, col: int, row: int) -> int:
        return col * self.height + row + 1

    def id_to_position(self, position_id: int) -> Position:
        return Position(
            col=(position_id - 1) // self.height,
            row=(position_id - 1) % self.height,
        )

    def contains(self, position: Position) -> bool:
        return 0 <= position.col < self.width and 0 <= position.row < self.height

    def validate_id(self, position_id: int) -> Position:
        """Map an id to its position, rejecting ids outside 1..W·H."""
        if isinstance(position_id, bool) or not isinstance(position_id, int):
            raise InvalidInput(f"Position id must be an integer, got {position_id!r}")
        if not 1 <= position_id <= self.size:
            raise InvalidInput(f"Unknown position id {position_id} (valid: 1-{self.size})")
        return self.id_to_position(position_id)

    def validate_position(self, position: Position) -> Position:
        if not self.contains(position):
            raise InvalidInput(
                f"Position ({position.col}, {position.row}) is outside the "
                f"{self.width}x{self.height} grid"
            )
        return position

    def positions(self) -> list:
        """All positions in id order (column by column)."""
        return [
            Position(col=col, row=row)
            for col in range(self.width)
            for row in range(self.height)
        ]


# ============================================================================
# INFLUENCE MODEL
# ============================================================================
def calculate_distance(a: Position, b: Position) -> float:
    return math.hypot(a.col - b.col, a.row - b.row)


def calculate_influence(
    position: Position,
    sources: list,
    k: float = DEFAULT_EFFECT_COEFFICIENT,
    c: float = DEFAULT_MIN_DISTANCE,
) -> float:
    """
    Net effect of every active source on one position.

    Each active source contributes effect · k / (distance + c). Positive
    totals mean the seat feels cooler than reported.
    """
    total = 0.0
    for source in sources:
        if not source.active:
            continue
        distance = calculate_distance(position, source.position)
        total += source.effect * k / (distance + c)
    return total


# ============================================================================
# COMFORT SCORER
# ============================================================================
def validate_reading(illuminance: float, temp_rating: int) -> None:
    """Reject readings outside the scale; never clamp them."""
    if isinstance(illuminance, bool) or not isinstance(illuminance, (int, float)):
        raise InvalidInput(f"Illuminance must be a number, got {illuminance!r}")
    if math.isnan(illuminance) or math.isinf(illuminance):
        raise InvalidInput(f"Illuminance must be finite, got {illuminance}")
    if illuminance < 0:
        raise InvalidInput(f"Illuminance must be non-negative, got {illuminance}")
    if isinstance(temp_rating, bool) or not isinstance(temp_rating, int):
        raise InvalidInput(f"Temperature rating must be an integer, got {temp_rating!r}")
    if not TEMP_RATING_MIN <= temp_rating <= TEMP_RATING_MAX:
        raise InvalidInput(
            f"Temperature rating must be between {TEMP_RATING_MIN} and "
            f"{TEMP_RATING_MAX}, got {temp_rating}"
        )


def calculate_comfort_score(
    illuminance: float,
    temp_rating: float,
    influence: float = 0.0,
    params: ScoringParameters = ScoringParameters(),
) -> float:
    """
    Combine light and temperature deviation into a score in [0, 100].

    score = 100 - (w_light·|L* - L|/L* + w_temp·|T* - (T - influence)|/T*)·100
    """
    return _score_components(illuminance, temp_rating, influence, params)[3]


def _score_components(
    illuminance: float,
    temp_rating: float,
    influence: float,
    params: ScoringParameters,
) -> tuple:
    """(effective_temp, light_error, temp_error, clamped score)"""
    effective_temp = temp_rating - influence
    light_error = abs(params.optimal_light - illuminance) / params.optimal_light
    temp_error = abs(params.optimal_temp - effective_temp) / params.optimal_temp

    score = 100 - (params.weight_light * light_error + params.weight_temp * temp_error) * 100
    return effective_temp, light_error, temp_error, max(0.0, min(100.0, score))


def get_category(score) -> str:
    """Map a score to its category; None means no reading."""
    if score is None:
        return NO_DATA
    for min_score, category in CATEGORY_MAP:
        if score >= min_score:
            return category
    return CATEGORY_MAP[-1][1]


def evaluate(
    position: Position,
    reading: Reading,
    sources: list,
    params: ScoringParameters = ScoringParameters(),
) -> ComfortResult:
    """
    Score one reading at one position.

    Flow:
    1. Sum the influence of active sources at the position
    2. Shift the rating by that influence
    3. Compute both relative errors and the clamped score
    4. Map the score to a category

    Pure: the sources are read, never mutated.
    """
    influence = calculate_influence(
        position, sources, params.effect_coefficient, params.min_distance
    )
    effective_temp, light_error, temp_error, score = _score_components(
        reading.illuminance, reading.temp_rating, influence, params
    )

    return ComfortResult(
        position=position,
        score=score,
        category=get_category(score),
        influence=influence,
        effective_temp=effective_temp,
        light_error=light_error,
        temp_error=temp_error,
    )


# ============================================================================
# RANKING ENGINE
# ============================================================================
def rank_positions(
    entries: list,
    sources: list,
    grid: Grid,
    params: ScoringParameters = ScoringParameters(),
    limit: int = None,
) -> list:
    """
    Score every (position, reading) pair and order by descending score.

    Entries are first put in position-id order, then sorted with a stable
    sort, so equal scores always come out in id order. No entries gives an
    empty list.
    """
    ordered = sorted(entries, key=lambda entry: grid.position_to_id(entry[0].col, entry[0].row))

    ranked = []
    for position, reading in ordered:
        result = evaluate(position, reading, sources, params)
        ranked.append(RankedPosition(
            position=position,
            score=result.score,
            category=result.category,
            reading=reading,
        ))

    ranked.sort(key=lambda item: item.score, reverse=True)
    if limit is not None:
        return ranked[:max(0, limit)]
    return ranked
