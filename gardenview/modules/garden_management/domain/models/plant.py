# 📄 File: gardenview/modules/garden_management/domain/models/plant.py
# 🧭 Purpose (Layman Explanation):
# Describes a plant in your collection: its name, photo, care notes, where it is pinned
# in the garden, and its diary of log entries.
# 🧪 Purpose (Technical Summary):
# Plant aggregate (immutable pydantic model) holding location pins and plant-scoped logs.
# Enforces the per-area pin cap and the same-name sequence numbering used for display.
# 🔗 Dependencies:
# pydantic, datetime, typing, gardenview.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# store.py, plant handlers, log handlers, Supabase row mappers

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from gardenview.shared.core.exceptions import BusinessRuleViolationError
from gardenview.shared.utils.helpers import normalize_name
from .garden_area import LocationPin
from .log_entry import LogEntry, LogType

DEFAULT_PLANT_NAME = "Unnamed Plant"
MAX_PINS_PER_AREA = 3


class Plant(BaseModel):
    """
    Plant domain entity.

    Instances are immutable; every change produces a new Plant via the
    ``with_*`` / ``without_*`` helpers or ``model_copy(update=...)``.

    Invariants:
    - at most ``MAX_PINS_PER_AREA`` pins per garden area
    - ``logs`` holds only PLANT logs, newest first
    """

    id: str
    owner_id: Optional[str] = None
    name: str = DEFAULT_PLANT_NAME
    scientific_name: Optional[str] = None
    description: str = ""
    care_instructions: str = ""
    image_ref: Optional[str] = None
    image_url: Optional[str] = None
    date_planted: Optional[date] = None
    date_added: Optional[datetime] = None
    is_indoor: bool = False
    is_active: bool = True
    sequence_number: int = Field(1, ge=1)
    location: List[LocationPin] = Field(default_factory=list)
    logs: List[LogEntry] = Field(default_factory=list)

    class Config:
        frozen = True

    @validator('name')
    def validate_name(cls, v):
        """Blank names fall back to the default display name"""
        name = (v or "").strip()
        return name or DEFAULT_PLANT_NAME

    @validator('logs')
    def sort_logs(cls, v):
        """Keep only plant logs, newest first"""
        plant_logs = [log for log in v if log.type == LogType.PLANT]
        return sorted(plant_logs, key=lambda log: log.log_date, reverse=True)

    # Business Logic Methods

    @property
    def name_key(self) -> str:
        return normalize_name(self.name)

    @property
    def is_archived(self) -> bool:
        return not self.is_active

    def display_name(self) -> str:
        """Name with a #n suffix when several plants share it."""
        if self.sequence_number > 1:
            return f"{self.name} #{self.sequence_number}"
        return self.name

    def pins_in_area(self, garden_id: str) -> List[LocationPin]:
        return [pin for pin in self.location if pin.garden_id == garden_id]

    def with_pin(self, garden_id: str, x: float, y: float,
                 max_pins: int = MAX_PINS_PER_AREA) -> "Plant":
        """
        Return a copy with one more pin in ``garden_id``.

        Raises:
            BusinessRuleViolationError: If the area already holds ``max_pins`` pins
        """
        if len(self.pins_in_area(garden_id)) >= max_pins:
            raise BusinessRuleViolationError(
                f"Maximum {max_pins} placements per plant!",
                rule="max_pins_per_area",
                details={"plant_id": self.id, "garden_id": garden_id},
            )
        pin = LocationPin(garden_id=garden_id, x=x, y=y)
        return self.model_copy(update={"location": [*self.location, pin]})

    def without_area_pins(self, garden_id: str) -> "Plant":
        """Return a copy with every pin in ``garden_id`` removed."""
        remaining = [pin for pin in self.location if pin.garden_id != garden_id]
        return self.model_copy(update={"location": remaining})

    def log_by_id(self, log_id: str) -> Optional[LogEntry]:
        for log in self.logs:
            if log.id == log_id:
                return log
        return None

    def image_refs(self) -> List[str]:
        """Main image plus every log image, in that order."""
        refs = [self.image_ref] if self.image_ref else []
        refs.extend(log.image_ref for log in self.logs if log.image_ref)
        return refs


def next_sequence_number(existing: List[Plant], name: str) -> int:
    """Count of plants sharing the case-insensitive trimmed name, plus one."""
    key = normalize_name(name or DEFAULT_PLANT_NAME)
    return sum(1 for plant in existing if plant.name_key == key) + 1
