"""Refresh the tide cache from NOAA."""

import logging
from datetime import datetime, time

from sqlalchemy.orm import Session

from src.config import get_settings
from src.services.noaa import NoaaTideClient
from src.services.tides import replace_tide_window

logger = logging.getLogger(__name__)


async def update_tide_predictions(
    db: Session,
    client: NoaaTideClient | None = None,
    days: int | None = None,
    now: datetime | None = None,
) -> int:
    """Fetch the forecast window and replace the cached rows for it.

    Returns the number of predictions cached.

    Raises:
        TideFetchError: if NOAA cannot be reached; the cache is left untouched
    """
    client = client or NoaaTideClient()
    days = days if days is not None else get_settings().forecast_days

    begin_date, end_date = client.forecast_window(days, now)
    predictions = await client.fetch_predictions(begin_date, end_date)
    logger.info(
        f"Fetched {len(predictions)} predictions for station {client.station_id} "
        f"({begin_date} to {end_date})"
    )

    return replace_tide_window(
        db,
        datetime.combine(begin_date, time.min),
        datetime.combine(end_date, time(23, 59, 59)),
        predictions,
    )
