# 📄 File: gardenview/modules/garden_management/domain/models/settings.py
# 🧭 Purpose (Layman Explanation):
# Your personal preferences: language, dark mode, units, which optional garden features
# are switched on, and your home location for weather.
# 🧪 Purpose (Technical Summary):
# UserSettings aggregate with nested module toggles, chat-dock state and HomeLocation.
# Serializes to the camelCase persisted shape and merges partial remote objects on top
# of local values.
# 🔗 Dependencies:
# pydantic (aliases, validators), typing, enum
# 🔄 Connected Modules / Calls From:
# settings_sync.py, session handlers, store.py, navigation (module-gated tabs)

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, validator
from pydantic.alias_generators import to_camel


class Tier(str, Enum):
    FREE = "FREE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    DIAMOND = "DIAMOND"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, loc_by_alias=False)


class HomeLocation(_CamelModel):
    """The user's home, used for weather lookups."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: str = ""
    country_code: Optional[str] = None


class ModuleToggles(_CamelModel):
    """Optional feature areas the user can switch on or off"""
    garden_logs: bool = True
    garden_view: bool = True
    social: bool = False
    notebook: bool = True


class FloraState(_CamelModel):
    """Assistant chat panel state"""
    is_docked: bool = False
    is_open: bool = False


class UserSettings(_CamelModel):
    """
    Flat record of user preferences.

    Persisted as ``{lang, darkMode, homeLocation, useWeather, tempUnit, lengthUnit,
    windUnit, firstDayOfWeek, timeFormat, limitAI, modules, tier, flora}``.
    """
    lang: str = "en"
    dark_mode: bool = False
    home_location: Optional[HomeLocation] = None
    use_weather: bool = True
    temp_unit: str = "C"
    length_unit: str = "mm"
    wind_unit: str = "kmh"
    first_day_of_week: str = "mon"
    time_format: str = "24h"
    limit_ai: bool = False
    modules: ModuleToggles = Field(default_factory=ModuleToggles)
    tier: Tier = Tier.FREE
    flora: FloraState = Field(default_factory=FloraState)

    @validator('temp_unit')
    def validate_temp_unit(cls, v):
        if v not in ("C", "F"):
            raise ValueError("temp_unit must be C or F")
        return v

    @validator('length_unit')
    def validate_length_unit(cls, v):
        if v not in ("mm", "in"):
            raise ValueError("length_unit must be mm or in")
        return v

    @validator('wind_unit')
    def validate_wind_unit(cls, v):
        if v not in ("kmh", "mph", "bft"):
            raise ValueError("wind_unit must be kmh, mph or bft")
        return v

    @validator('first_day_of_week')
    def validate_first_day(cls, v):
        if v not in ("mon", "sun", "sat"):
            raise ValueError("first_day_of_week must be mon, sun or sat")
        return v

    @validator('time_format')
    def validate_time_format(cls, v):
        if v not in ("12h", "24h"):
            raise ValueError("time_format must be 12h or 24h")
        return v

    @property
    def weather_enabled(self) -> bool:
        """Weather features need a home location and the weather toggle."""
        return self.home_location is not None and self.use_weather

    def to_storage(self) -> Dict[str, Any]:
        """Persisted camelCase shape."""
        data = self.model_dump(by_alias=True, mode="json")
        # The persisted key is "limitAI", not the generated "limitAi".
        data["limitAI"] = data.pop("limitAi")
        return data

    @classmethod
    def from_storage(cls, data: Optional[Dict[str, Any]]) -> "UserSettings":
        return cls.model_validate(_normalize_keys(data or {}))

    def merged_with(self, overlay: Optional[Dict[str, Any]]) -> "UserSettings":
        """
        Apply a (possibly partial) persisted settings object on top of this one.

        Nested ``modules`` / ``flora`` objects are merged key by key.
        """
        if not overlay:
            return self
        base = _normalize_keys(self.to_storage())
        for key, value in _normalize_keys(overlay).items():
            if key in ("modules", "flora") and isinstance(value, dict):
                base[key] = {**base.get(key, {}), **value}
            else:
                base[key] = value
        return UserSettings.model_validate(base)

    def updated(self, **changes: Any) -> "UserSettings":
        """Validated copy with snake_case field changes applied."""
        data = self.model_dump()
        data.update(changes)
        return UserSettings.model_validate(data)


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(data)
    if "limitAI" in normalized:
        normalized["limitAi"] = normalized.pop("limitAI")
    return normalized
