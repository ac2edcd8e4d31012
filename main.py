"""FastAPI service for seat comfort scoring and seat recommendations."""
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query
from dotenv import load_dotenv

from comfort_service import ComfortService
from config import load_settings
from logging_setup import configure_logging
from models import (
    ControlSourceInfo,
    ControlSourceUpdate,
    GridResponse,
    HeatmapResponse,
    PositionInfo,
    ReadingRecord,
    ReadingSubmission,
    RecommendationItem,
    RecommendationResponse,
    ScoreResponse,
    StatisticsResponse,
    SubmissionResponse,
)
from rule_engine import NO_DATA, InvalidInput

# Load environment variables
load_dotenv()

settings = load_settings()
configure_logging(level=settings.log_level, json_format=settings.log_json)

app = FastAPI(
    title="Seat Comfort API",
    description="Scores classroom seats from crowd-sourced light and temperature readings and recommends the most comfortable seat per time slot",
    version="1.0.0"
)

# Single in-process owner of readings and air conditioner state
comfort_service = ComfortService(settings)


def get_service() -> ComfortService:
    return comfort_service


def _position_info(service: ComfortService, position) -> PositionInfo:
    return PositionInfo(
        id=service.grid.position_to_id(position.col, position.row),
        col=position.col,
        row=position.row,
    )


def _reading_record(reading) -> ReadingRecord:
    return ReadingRecord(
        illuminance=reading.illuminance,
        temp_rating=reading.temp_rating,
        comment=reading.comment,
        timestamp=reading.timestamp,
    )


def _source_info(service: ComfortService, source) -> ControlSourceInfo:
    return ControlSourceInfo(
        id=source.id,
        position=_position_info(service, source.position),
        active=source.active,
        activated_at=source.activated_at,
        effect=source.effect,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/grid", response_model=GridResponse)
async def grid_info(service: ComfortService = Depends(get_service)) -> GridResponse:
    """Grid dimensions and the accepted time slots."""
    width, height = service.grid_dimensions()
    return GridResponse(
        width=width,
        height=height,
        positions=width * height,
        time_slots=service.time_slots(),
    )


@app.post("/readings", response_model=SubmissionResponse, status_code=201)
async def submit_reading(
    submission: ReadingSubmission,
    service: ComfortService = Depends(get_service),
) -> SubmissionResponse:
    """
    Store one seat measurement.

    A second submission for the same seat and time slot replaces the first.
    """
    try:
        reading, replaced = service.submit_reading_with_status(
            submission.position_id,
            submission.time_slot,
            submission.illuminance,
            submission.temp_rating,
            submission.comment,
        )
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SubmissionResponse(
        position_id=submission.position_id,
        time_slot=submission.time_slot,
        replaced=replaced,
        reading=_reading_record(reading),
    )


@app.get("/readings/{position_id}", response_model=ReadingRecord)
async def get_reading(
    position_id: int,
    time_slot: str = Query(..., description="Time slot label"),
    service: ComfortService = Depends(get_service),
) -> ReadingRecord:
    try:
        reading = service.get_reading(position_id, time_slot)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    if reading is None:
        raise HTTPException(status_code=404, detail=f"No reading for seat {position_id} at {time_slot}")
    return _reading_record(reading)


@app.get("/control-sources", response_model=List[ControlSourceInfo])
async def list_control_sources(service: ComfortService = Depends(get_service)):
    return [_source_info(service, source) for source in service.list_control_sources()]


@app.put("/control-sources/{source_id}", response_model=ControlSourceInfo)
async def set_control_source_state(
    source_id: int,
    update: ControlSourceUpdate,
    service: ComfortService = Depends(get_service),
) -> ControlSourceInfo:
    """Switch an air conditioner on or off."""
    try:
        source = service.set_control_source_state(source_id, update.active)
    except InvalidInput as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _source_info(service, source)


@app.get("/positions/{position_id}/score", response_model=ScoreResponse)
async def score_position(
    position_id: int,
    time_slot: str = Query(..., description="Time slot label"),
    service: ComfortService = Depends(get_service),
) -> ScoreResponse:
    """
    Comfort score and category of one seat.

    Seats without a reading come back with score null and category 'no-data'.
    """
    try:
        result = service.score_and_color(position_id, time_slot)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ScoreResponse(
        position=_position_info(service, service.grid.id_to_position(position_id)),
        time_slot=time_slot,
        score=round(result.score, 2) if result else None,
        category=result.category if result else NO_DATA,
    )


@app.get("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    time_slot: str = Query(..., description="Time slot label"),
    limit: int = Query(5, ge=0, description="Number of seats to return"),
    service: ComfortService = Depends(get_service),
) -> RecommendationResponse:
    """
    Seats ranked from most to least comfortable.

    An empty list means nobody has reported for this time slot yet.
    """
    try:
        ranked = service.ranked_recommendations(time_slot, limit=limit)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return RecommendationResponse(
        time_slot=time_slot,
        recommendations=[
            RecommendationItem(
                rank=index + 1,
                position=_position_info(service, item.position),
                score=round(item.score, 2),
                category=item.category,
                reading=_reading_record(item.reading),
            )
            for index, item in enumerate(ranked)
        ],
    )


@app.get("/heatmap", response_model=HeatmapResponse)
async def heatmap(
    time_slot: str = Query(..., description="Time slot label"),
    service: ComfortService = Depends(get_service),
) -> HeatmapResponse:
    """Category of every seat, for colouring the classroom plan."""
    try:
        cells = service.heatmap(time_slot)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    width, height = service.grid_dimensions()
    return HeatmapResponse(
        time_slot=time_slot,
        width=width,
        height=height,
        cells=[
            ScoreResponse(
                position=_position_info(service, service.grid.id_to_position(position_id)),
                time_slot=time_slot,
                score=round(score, 2) if score is not None else None,
                category=category,
            )
            for position_id, score, category in cells
        ],
    )


@app.get("/statistics", response_model=StatisticsResponse)
async def statistics(service: ComfortService = Depends(get_service)) -> StatisticsResponse:
    return StatisticsResponse(**service.statistics())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_config=None)
