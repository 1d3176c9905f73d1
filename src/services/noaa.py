"""NOAA CO-OPS tide prediction client."""

import logging
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import httpx

from src.config import get_settings
from src.models.enums import TideType
from src.services.exceptions import TideFetchError
from src.services.tides import Prediction

logger = logging.getLogger(__name__)


class NoaaTideClient:
    """Fetches high/low tide predictions from the NOAA data getter API."""

    API_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    APPLICATION = "bikepath_flood_alert"

    def __init__(
        self,
        station_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.station_id = station_id or settings.noaa_station_id
        self.timezone = ZoneInfo(settings.noaa_timezone)
        self._transport = transport

    def forecast_window(self, days: int, now: datetime | None = None) -> tuple[date, date]:
        """Get the (begin, end) station-local dates for a forecast of ``days`` days."""
        now = now or datetime.now(UTC)
        begin = now.astimezone(self.timezone).date()
        return begin, begin + timedelta(days=days)

    async def fetch_predictions(self, begin: date, end: date) -> list[Prediction]:
        """Fetch predictions for the inclusive date range.

        Raises:
            TideFetchError: on transport errors, HTTP errors or an API error payload
        """
        params = {
            "product": "predictions",
            "application": self.APPLICATION,
            "station": self.station_id,
            "begin_date": begin.strftime("%Y%m%d"),
            "end_date": end.strftime("%Y%m%d"),
            "datum": "MLLW",
            "time_zone": "lst_ldt",
            "interval": "hilo",
            "units": "english",
            "format": "json",
        }

        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.get(self.API_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"NOAA request for station {self.station_id} failed: {e}")
            raise TideFetchError(f"NOAA request failed: {e}") from e

        if "error" in data:
            message = data["error"].get("message", "unknown error")
            logger.error(f"NOAA returned an error for station {self.station_id}: {message}")
            raise TideFetchError(f"NOAA error: {message}")

        return [self._parse_prediction(row) for row in data.get("predictions", [])]

    @staticmethod
    def _parse_prediction(row: dict) -> Prediction:
        """Parse a ``{"t": ..., "v": ..., "type": ...}`` row."""
        try:
            return Prediction(
                prediction_time=datetime.strptime(row["t"], "%Y-%m-%d %H:%M"),
                height_ft=float(row["v"]),
                tide_type=TideType.from_noaa(row.get("type")),
            )
        except (KeyError, ValueError) as e:
            raise TideFetchError(f"Malformed NOAA prediction: {row}") from e
