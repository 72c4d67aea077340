# 📄 File: gardenview/modules/garden_management/application/commands.py
# 🧭 Purpose (Layman Explanation):
# The "forms" the screens fill in before asking the app to save something: a new
# plant, a log entry, a notebook note, or which photo to replace.
#
# 🧪 Purpose (Technical Summary):
# Pydantic command payloads for the controller intents. Field validation runs on
# construction and raises the package ValidationError, so bad input fails before
# any network call.
#
# 🔗 Dependencies:
# - pydantic for command validation
# - Domain enums (NotebookEntryType, Recurrence)
#
# 🔄 Connected Modules / Calls From:
# - Plant, log and notebook handlers
# - View layer (builds drafts from form state)

"""
Controller Commands

- PlantDraft: create / edit plant form
- LogDraft: plant or garden log form, with its side-effect options
- NotebookDraft: note or task, optionally recurring
- PhotoTarget: which entity's photo an optimized image replaces
- SeriesScope: edit or delete one task or the rest of its series
"""

import datetime as dt
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, validator

from gardenview.shared.utils.helpers import today
from gardenview.shared.utils.validators import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    validate_plant_name,
    validation_error_from,
)
from ..domain.models import NotebookEntryType, Recurrence


class _Command(BaseModel):
    """Command payload; invalid input raises the package ValidationError."""

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise validation_error_from(e) from e


class PlantDraft(_Command):
    """
    Plant form contents.

    ``image`` is either a data URL still to be uploaded or an existing stored
    reference / display URL.
    """

    name: str = Field(default="", description="Common name; blank becomes 'Unnamed Plant'")
    scientific_name: Optional[str] = Field(default=None, max_length=200)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    care_instructions: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    image: Optional[str] = Field(default=None, description="Data URL or stored image reference")
    date_planted: Optional[dt.date] = Field(default_factory=today)
    is_indoor: bool = False

    @validator('name')
    def validate_name(cls, v):
        result = validate_plant_name(v)
        if not result.is_valid:
            raise ValueError(result.first_error)
        return (v or "").strip()


class LogDraft(_Command):
    """Log form contents, shared by plant and garden logs."""

    title: str = Field(default="", max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    log_date: dt.date = Field(default_factory=today)
    image: Optional[str] = None

    attach_weather: bool = Field(default=False, description="Store the weather of log_date with the log")
    set_as_main_photo: bool = Field(default=False, description="Plant logs: use the image as the plant photo")
    share_to_social: bool = False
    add_to_notebook: bool = False


class NotebookDraft(_Command):
    type: NotebookEntryType = NotebookEntryType.NOTE
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    date: dt.date = Field(default_factory=today)
    image: Optional[str] = None
    is_done: bool = False
    recurrence: Recurrence = Recurrence.NONE

    @validator('title')
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("title is required")
        return v

    @validator('recurrence')
    def notes_do_not_repeat(cls, v, values):
        if values.get("type") == NotebookEntryType.NOTE and v != Recurrence.NONE:
            raise ValueError("Only tasks can repeat")
        return v


class PhotoTargetKind(str, Enum):
    PLANT = "PLANT"
    PLANT_LOG = "PLANT_LOG"
    GARDEN_LOG = "GARDEN_LOG"


class PhotoTarget(_Command):
    """The entity whose photo is being replaced."""
    kind: PhotoTargetKind
    entity_id: str = Field(..., min_length=1)

    class Config:
        frozen = True


class SeriesScope(str, Enum):
    SINGLE = "SINGLE"
    FUTURE = "FUTURE"


__all__ = [
    "LogDraft",
    "NotebookDraft",
    "PhotoTarget",
    "PhotoTargetKind",
    "PlantDraft",
    "SeriesScope",
]
