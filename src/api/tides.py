"""Tide forecast API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.schemas.tides import FloodForecastResponse, FloodPredictionResponse
from src.services.tides import get_flood_predictions

router = APIRouter(prefix="/api/v1", tags=["tides"])


@router.get("/floods", response_model=FloodForecastResponse)
async def get_floods(db: Annotated[Session, Depends(get_db)]):
    """Get upcoming tides at or above the flood threshold."""
    settings = get_settings()
    predictions = get_flood_predictions(db, threshold=settings.flood_threshold_ft)
    return FloodForecastResponse(
        forecast_days=settings.forecast_days,
        flood_threshold=settings.flood_threshold_ft,
        predictions=[FloodPredictionResponse.model_validate(p) for p in predictions],
    )
