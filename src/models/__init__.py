"""SQLAlchemy models."""

from src.models.enums import TideType
from src.models.tide import TidePrediction
from src.models.user import User

__all__ = [
    "User",
    "TidePrediction",
    "TideType",
]
