# 📄 File: gardenview/shared/utils/helpers.py

# 🧭 Purpose (Layman Explanation):
# Small helpful tools used all over the app, like making unique IDs, getting today's
# date, comparing plant names the same way everywhere, and adding months to a date.

# 🧪 Purpose (Technical Summary):
# General purpose utility functions: UUIDs, time helpers, name normalization, safe
# nested access, ISO date parsing and calendar-month arithmetic.

# 🔗 Dependencies:
# - uuid: Unique identifier generation
# - datetime / calendar: Date arithmetic
# - typing: Type hints

# 🔄 Connected Modules / Calls From:
# Used by: media store (object names), notebook recurrence, plant sequence numbers,
# Supabase row mappers, media pipeline

import calendar
import time
from datetime import date, datetime
from typing import Any, Dict, List, Union
from uuid import uuid4


def generate_uuid() -> str:
    """Generate a random UUID string."""
    return str(uuid4())


def today() -> date:
    return date.today()


def epoch_millis() -> int:
    """Milliseconds since the epoch, used for time-ordered object names."""
    return int(time.time() * 1000)


def normalize_name(name: str) -> str:
    """Case-insensitive, whitespace-trimmed comparison key for names."""
    return (name or "").strip().lower()


def safe_get(data: Union[Dict, List], keys: List[Union[str, int]], default: Any = None) -> Any:
    """
    Safely walk nested dictionaries/lists.

    Args:
        data: Dictionary or list to read from
        keys: Path of keys / indexes
        default: Value returned when any step is missing

    Returns:
        Value at the path or default
    """
    current = data
    for key in keys:
        if isinstance(current, dict):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, list):
            if not isinstance(key, int) or not -len(current) <= key < len(current):
                return default
            current = current[key]
        else:
            return default
    return default if current is None else current


def add_months(value: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's length.

    31 Jan + 1 month is 28/29 Feb.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def parse_date(value: Any) -> Union[date, None]:
    """Parse an ISO date or datetime string (or pass through date objects)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_datetime(value: Any) -> Union[datetime, None]:
    """Parse an ISO-8601 timestamp as returned by PostgREST."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
