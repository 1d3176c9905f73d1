"""Pydantic schemas for API requests and responses."""

from src.schemas.signup import SignUpRequest
from src.schemas.tides import FloodForecastResponse, FloodPredictionResponse

__all__ = [
    "SignUpRequest",
    "FloodForecastResponse",
    "FloodPredictionResponse",
]
