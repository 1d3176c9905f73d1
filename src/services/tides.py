"""Tide cache reads and writes."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.enums import TideType
from src.models.mixins import utcnow
from src.models.tide import TidePrediction
from src.services.exceptions import InvalidTideTypeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prediction:
    """A tide prediction as fetched from the source, before caching."""

    prediction_time: datetime
    height_ft: float
    tide_type: TideType | None


@dataclass(frozen=True)
class FloodPrediction:
    """A flood-level tide formatted for display."""

    datetime: str
    height: str

    @classmethod
    def from_tide(cls, prediction_time: datetime, height_ft: float) -> "FloodPrediction":
        hour = prediction_time.strftime("%I").lstrip("0") or "12"
        return cls(
            datetime=(
                f"{prediction_time:%A, %B} {prediction_time.day} at "
                f"{hour}:{prediction_time:%M%p}"
            ),
            height=f"{height_ft:.2f}",
        )


def validate_tide_type(tide_type: str | TideType | None) -> TideType | None:
    """Coerce a tide type, rejecting anything but High or Low."""
    if tide_type is None:
        return None
    try:
        return TideType(tide_type)
    except ValueError as e:
        raise InvalidTideTypeError(f"Invalid tide type: {tide_type!r}") from e


def upsert_tide(
    db: Session,
    prediction_time: datetime,
    height_ft: float,
    tide_type: str | TideType,
) -> TidePrediction:
    """Insert or replace the cached prediction for a timestamp."""
    checked_type = validate_tide_type(tide_type)
    if checked_type is None:
        raise InvalidTideTypeError()

    tide = db.get(TidePrediction, prediction_time)
    if tide is None:
        tide = TidePrediction(prediction_time=prediction_time)
        db.add(tide)

    tide.height_ft = height_ft
    tide.tide_type = checked_type.value
    tide.last_updated = utcnow()
    db.commit()
    db.refresh(tide)
    return tide


def replace_tide_window(
    db: Session,
    begin: datetime,
    end: datetime,
    predictions: list[Prediction],
) -> int:
    """Replace every cached prediction in ``[begin, end]`` in one transaction.

    Predictions without a tide type are skipped. Returns the number of rows
    written.
    """
    rows = [
        TidePrediction(
            prediction_time=p.prediction_time,
            height_ft=p.height_ft,
            tide_type=validate_tide_type(p.tide_type).value,
            last_updated=utcnow(),
        )
        for p in predictions
        if p.tide_type is not None
    ]

    try:
        db.query(TidePrediction).filter(
            TidePrediction.prediction_time >= begin,
            TidePrediction.prediction_time <= end,
        ).delete(synchronize_session="fetch")
        db.add_all(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Replaced tide cache between {begin} and {end} with {len(rows)} rows")
    return len(rows)


def to_station_time(moment: datetime, timezone: str | None = None) -> datetime:
    """Convert an aware datetime to naive station local time."""
    tz = ZoneInfo(timezone or get_settings().noaa_timezone)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz).replace(tzinfo=None)


def get_flood_tides(
    db: Session,
    start: datetime,
    end: datetime | None = None,
    threshold: float | None = None,
) -> list[TidePrediction]:
    """Get cached predictions at or above the flood threshold, soonest first.

    ``start`` and ``end`` are aware datetimes.
    """
    if threshold is None:
        threshold = get_settings().flood_threshold_ft

    query = db.query(TidePrediction).filter(
        TidePrediction.prediction_time >= to_station_time(start),
        TidePrediction.height_ft >= threshold,
    )
    if end is not None:
        query = query.filter(TidePrediction.prediction_time <= to_station_time(end))
    return query.order_by(TidePrediction.prediction_time.asc()).all()


def get_flood_predictions(
    db: Session,
    now: datetime | None = None,
    threshold: float | None = None,
) -> list[FloodPrediction]:
    """Get upcoming flood-level tides formatted for display."""
    now = now or datetime.now(UTC)
    return [
        FloodPrediction.from_tide(tide.prediction_time, tide.height_ft)
        for tide in get_flood_tides(db, now, threshold=threshold)
    ]
