# 📄 File: gardenview/modules/garden_management/domain/models/log_entry.py
# 🧭 Purpose (Layman Explanation):
# A log entry is one diary moment: a title, a note, a date, maybe a photo and the weather.
# It belongs either to one plant or to the garden as a whole, never both.
# 🧪 Purpose (Technical Summary):
# LogEntry entity with a fixed PLANT/GARDEN discriminator, optional image reference
# and optional weather snapshot. Plant logs require a plant_id; garden logs forbid it.
# 🔗 Dependencies:
# pydantic, datetime, typing, enum
# 🔄 Connected Modules / Calls From:
# plant.py, store.py, log handlers, Supabase row mappers

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, root_validator

from .weather import WeatherSnapshot

DEFAULT_LOG_TITLE = "Snapshot"


class LogType(str, Enum):
    """Which owner a log belongs to"""
    PLANT = "PLANT"
    GARDEN = "GARDEN"


class LogEntry(BaseModel):
    """
    A dated journal entry for a plant or for the garden.

    The ``type`` discriminator is fixed at creation: plant logs carry their
    ``plant_id``; garden logs never do.
    """
    id: str
    owner_id: Optional[str] = None
    plant_id: Optional[str] = None
    type: LogType = LogType.PLANT
    title: str = DEFAULT_LOG_TITLE
    description: str = ""
    log_date: date
    image_ref: Optional[str] = None
    image_url: Optional[str] = None
    weather: Optional[WeatherSnapshot] = None

    class Config:
        frozen = True

    @root_validator(skip_on_failure=True)
    def check_owner_matches_type(cls, values):
        log_type = values.get("type")
        if log_type == LogType.PLANT and not values.get("plant_id"):
            raise ValueError("Plant logs need a plant_id")
        if log_type == LogType.GARDEN and values.get("plant_id"):
            raise ValueError("Garden logs cannot belong to a plant")
        return values
