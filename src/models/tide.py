"""Tide prediction cache model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Float, String

from src.database import Base
from src.models.mixins import utcnow


class TidePrediction(Base):
    """One predicted high or low tide.

    ``prediction_time`` is station local time (LST/LDT), as NOAA reports it.
    """

    __tablename__ = "tides"
    __table_args__ = (
        CheckConstraint(
            "tide_type IN ('High', 'Low')",
            name="ck_tides_tide_type",
        ),
    )

    prediction_time = Column(DateTime, primary_key=True)
    height_ft = Column(Float, nullable=False)
    tide_type = Column(String(4), nullable=True)
    last_updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<TidePrediction {self.prediction_time} {self.height_ft}ft {self.tide_type}>"
