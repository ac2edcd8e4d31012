"""Pydantic models for request and response schemas."""
from typing import List, Optional

from pydantic import BaseModel, Field


class ReadingSubmission(BaseModel):
    """Input payload for one seat measurement."""
    position_id: int = Field(..., description="Seat number (1 to W·H)")
    time_slot: str = Field(..., description="Time slot label, e.g. '10:00'")
    illuminance: float = Field(..., ge=0, description="Light level (lux)")
    temp_rating: int = Field(..., ge=1, le=5, description="Felt temperature: 1 very cold, 3 neutral, 5 very hot")
    comment: str = Field("", description="Optional free-text comment")


class ReadingRecord(BaseModel):
    """Stored reading, in its exchange encoding."""
    illuminance: float = Field(..., description="Light level (lux)")
    temp_rating: int = Field(..., description="Felt temperature (1-5)")
    comment: str = Field("", description="Free-text comment")
    timestamp: str = Field(..., description="Submission time (ISO-8601)")


class SubmissionResponse(BaseModel):
    position_id: int
    time_slot: str
    replaced: bool = Field(..., description="True when an earlier reading was overwritten")
    reading: ReadingRecord


class PositionInfo(BaseModel):
    id: int = Field(..., description="Seat number")
    col: int
    row: int


class ControlSourceConfig(BaseModel):
    """One control source as written in configuration."""
    id: int
    col: int = Field(..., ge=0)
    row: int = Field(..., ge=0)
    active: bool = True
    activated_at: str = "09:00"
    effect: float = Field(1.0, allow_inf_nan=False, description="Signed effect magnitude: > 0 cools, < 0 warms")


class ControlSourceInfo(BaseModel):
    """Air conditioner state."""
    id: int
    position: PositionInfo
    active: bool
    activated_at: str = Field(..., description="Informational; not used in scoring")
    effect: float


class ControlSourceUpdate(BaseModel):
    active: bool = Field(..., description="Switch the source on (true) or off (false)")


class ScoreResponse(BaseModel):
    """Comfort score and category for one seat."""
    position: PositionInfo
    time_slot: str
    score: Optional[float] = Field(None, description="Comfort score (0-100); null without data")
    category: str = Field(..., description="'excellent', 'good', 'fair', 'poor' or 'no-data'")


class RecommendationItem(BaseModel):
    rank: int
    position: PositionInfo
    score: float = Field(..., description="Comfort score (0-100)")
    category: str
    reading: ReadingRecord


class RecommendationResponse(BaseModel):
    """Seats ordered from most to least comfortable."""
    time_slot: str
    recommendations: List[RecommendationItem]


class HeatmapResponse(BaseModel):
    time_slot: str
    width: int
    height: int
    cells: List[ScoreResponse]


class GridResponse(BaseModel):
    width: int
    height: int
    positions: int
    time_slots: List[str]


class StatisticsResponse(BaseModel):
    positions_with_data: int = Field(..., description="Seats with at least one reading")
    total_readings: int
