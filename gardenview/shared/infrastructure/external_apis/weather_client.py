# 📄 File: gardenview/shared/infrastructure/external_apis/weather_client.py

# 🧭 Purpose (Layman Explanation):
# Looks up the weather at the user's home: right now for the dashboard, or on a past
# day when a log is written for that date.

# 🧪 Purpose (Technical Summary):
# Open-Meteo adapter. Today's weather comes from the forecast "current" block; other
# dates come from the archive daily max temperature and weather code (is_day forced
# true). Any failure yields None.

# 🔗 Dependencies:
# - aiohttp (via APIClient)
# - gardenview domain WeatherSnapshot

# 🔄 Connected Modules / Calls From:
# Called by: session handlers (refresh_weather), log handlers (weather attachment)

from datetime import date
from typing import Any, Dict, Optional

from gardenview.modules.garden_management.domain.models.weather import WeatherSnapshot
from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.core.exceptions import GardenViewException
from gardenview.shared.utils.helpers import safe_get, today
from gardenview.shared.utils.logging import get_logger
from .api_client import APIClient

logger = get_logger(__name__)

CURRENT_FIELDS = "temperature_2m,weather_code,is_day"
ARCHIVE_FIELDS = "temperature_2m_max,weather_code"


class WeatherClient:
    """Open-Meteo weather lookups."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.forecast = APIClient(
            base_url=self.settings.WEATHER_FORECAST_URL,
            api_name="open-meteo",
            timeout=self.settings.WEATHER_TIMEOUT,
            user_agent=f"{self.settings.APP_NAME}/{self.settings.APP_VERSION}",
        )
        self.archive = APIClient(
            base_url=self.settings.WEATHER_ARCHIVE_URL,
            api_name="open-meteo-archive",
            timeout=self.settings.WEATHER_TIMEOUT,
            user_agent=f"{self.settings.APP_NAME}/{self.settings.APP_VERSION}",
        )

    async def current(self, latitude: float, longitude: float) -> Optional[WeatherSnapshot]:
        """Current conditions at a coordinate, or None."""
        try:
            data = await self.forecast.get(params={
                "latitude": latitude,
                "longitude": longitude,
                "current": CURRENT_FIELDS,
                "timezone": "auto",
            })
        except GardenViewException as e:
            logger.warning(f"Current weather lookup failed: {e.message}")
            return None
        return self._parse_current(data)

    async def for_date(self, latitude: float, longitude: float, day: date) -> Optional[WeatherSnapshot]:
        """
        Weather for a calendar day.

        Today is served from live conditions; any other day from the archive,
        using the daily maximum as the reference temperature.
        """
        if day == today():
            return await self.current(latitude, longitude)

        iso_day = day.isoformat()
        try:
            data = await self.archive.get(params={
                "latitude": latitude,
                "longitude": longitude,
                "start_date": iso_day,
                "end_date": iso_day,
                "daily": ARCHIVE_FIELDS,
                "timezone": "auto",
            })
        except GardenViewException as e:
            logger.warning(f"Archive weather lookup failed for {iso_day}: {e.message}")
            return None
        return self._parse_archive(data)

    @staticmethod
    def _parse_current(data: Dict[str, Any]) -> Optional[WeatherSnapshot]:
        current = safe_get(data, ["current"])
        if not isinstance(current, dict) or current.get("temperature_2m") is None:
            return None
        return WeatherSnapshot(
            temperature=current["temperature_2m"],
            weather_code=current.get("weather_code") or 0,
            is_day=bool(current.get("is_day", 1)),
        )

    @staticmethod
    def _parse_archive(data: Dict[str, Any]) -> Optional[WeatherSnapshot]:
        temperatures = safe_get(data, ["daily", "temperature_2m_max"]) or []
        codes = safe_get(data, ["daily", "weather_code"]) or []
        if not temperatures or temperatures[0] is None:
            return None
        return WeatherSnapshot(
            temperature=temperatures[0],
            weather_code=(codes[0] if codes and codes[0] is not None else 0),
            is_day=True,
        )

    async def close(self):
        await self.forecast.close()
        await self.archive.close()
