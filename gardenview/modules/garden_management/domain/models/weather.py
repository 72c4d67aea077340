# 📄 File: gardenview/modules/garden_management/domain/models/weather.py
# 🧭 Purpose (Layman Explanation):
# Describes the little weather note attached to a log: how warm it was, what the sky
# looked like, and whether it was day or night.
# 🧪 Purpose (Technical Summary):
# WeatherSnapshot value object (temperature, WMO weather code, day flag) shared by
# log entries, social posts and the cached "current weather" in the store.
# 🔗 Dependencies:
# pydantic, typing
# 🔄 Connected Modules / Calls From:
# log_entry.py, social.py, weather_client.py, store.py

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class WeatherSnapshot(BaseModel):
    """Weather at a place and time, stored as-is with logs and posts."""
    temperature: float
    weather_code: int = Field(0, ge=0)
    is_day: bool = True

    class Config:
        frozen = True

    def to_row(self) -> Dict[str, Any]:
        """Persisted JSON shape."""
        return {
            "temperature": self.temperature,
            "weatherCode": self.weather_code,
            "isDay": 1 if self.is_day else 0,
        }

    @classmethod
    def from_row(cls, data: Optional[Dict[str, Any]]) -> Optional["WeatherSnapshot"]:
        if not data or data.get("temperature") is None:
            return None
        return cls(
            temperature=data["temperature"],
            weather_code=data.get("weatherCode", data.get("weather_code", 0)) or 0,
            is_day=bool(data.get("isDay", data.get("is_day", 1))),
        )
