"""Tide forecast schemas."""

from pydantic import BaseModel, ConfigDict


class FloodPredictionResponse(BaseModel):
    """A flood-level tide formatted for display."""

    model_config = ConfigDict(from_attributes=True)

    datetime: str
    height: str


class FloodForecastResponse(BaseModel):
    """Upcoming flood tides for the home page."""

    forecast_days: int
    flood_threshold: float
    predictions: list[FloodPredictionResponse]
