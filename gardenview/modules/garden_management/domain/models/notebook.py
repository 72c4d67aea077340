# 📄 File: gardenview/modules/garden_management/domain/models/notebook.py
# 🧭 Purpose (Layman Explanation):
# The garden notebook holds notes and to-do tasks; a task can repeat every week,
# month or year, and each repeat is its own entry linked to the first one.
# 🧪 Purpose (Technical Summary):
# NotebookEntry entity with NOTE/TASK type, completion flag, recurrence tag and
# optional parent id for generated recurrence instances.
# 🔗 Dependencies:
# pydantic, datetime, typing, enum
# 🔄 Connected Modules / Calls From:
# recurrence.py, store.py, notebook handlers, log handlers (add-to-notebook)

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class NotebookEntryType(str, Enum):
    NOTE = "NOTE"
    TASK = "TASK"


class Recurrence(str, Enum):
    """Repeat interval of a task series"""
    NONE = "none"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    FOURWEEKLY = "fourweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class NotebookEntry(BaseModel):
    """A note or task on the notebook timeline."""
    id: str
    owner_id: Optional[str] = None
    type: NotebookEntryType = NotebookEntryType.NOTE
    title: str
    description: str = ""
    date: dt.date
    image_ref: Optional[str] = None
    image_url: Optional[str] = None
    is_done: bool = False
    recurrence: Recurrence = Recurrence.NONE
    original_parent_id: Optional[str] = None

    class Config:
        frozen = True

    @property
    def series_id(self) -> str:
        """Id of the first entry of the series this entry belongs to."""
        return self.original_parent_id or self.id

    @property
    def is_recurring(self) -> bool:
        return self.type == NotebookEntryType.TASK and self.recurrence != Recurrence.NONE
