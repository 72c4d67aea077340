# 📄 File: gardenview/modules/garden_management/infrastructure/database/mappers.py
# 🧭 Purpose (Layman Explanation):
# Translates between the way garden data is stored in the database tables and the
# way the app works with it (plants, logs, garden areas, notes, posts, profiles).
#
# 🧪 Purpose (Technical Summary):
# Row <-> domain mapping for the Supabase tables plants, logs, gardens,
# notebook_entries, social_posts, social_comments and profiles. Stored image
# references travel in the image_url column; display URLs are resolved later.
#
# 🔗 Dependencies:
# - gardenview domain models
# - gardenview.shared.utils.helpers (date parsing)
#
# 🔄 Connected Modules / Calls From:
# - SupabaseGardenGateway (reads and writes)
# - Controller handlers (building insert/update rows)

from typing import Any, Dict, List, Optional

from gardenview.shared.utils.helpers import parse_date, parse_datetime, today
from ...domain.models import (
    GardenArea,
    LocationPin,
    LogEntry,
    LogType,
    NotebookEntry,
    NotebookEntryType,
    Plant,
    ProfileStatus,
    Recurrence,
    SocialComment,
    SocialPost,
    UserProfile,
    WeatherSnapshot,
)

UNKNOWN_AUTHOR = "Unknown"
UNKNOWN_COMMENTER = "User"
DEFAULT_POST_PLANT_NAME = "Plant"


def _display_name(row: Dict[str, Any], fallback: str) -> str:
    profile = row.get("profiles") or {}
    if isinstance(profile, list):
        profile = profile[0] if profile else {}
    return profile.get("display_name") or fallback


# ===== PINS =====

def _row_to_pin(data: Dict[str, Any]) -> LocationPin:
    return LocationPin(
        garden_id=data.get("gardenAreaId") or data.get("garden_id"),
        x=data.get("x", 0),
        y=data.get("y", 0),
    )


def pins_to_row(pins: List[LocationPin]) -> List[Dict[str, Any]]:
    """Pins as stored in the plants.location JSON column."""
    return [{"gardenAreaId": pin.garden_id, "x": pin.x, "y": pin.y} for pin in pins]


# ===== LOGS =====

def _row_to_log(row: Dict[str, Any]) -> LogEntry:
    log_type = LogType(row.get("type") or LogType.PLANT.value)
    return LogEntry(
        id=str(row["id"]),
        owner_id=row.get("owner_id"),
        plant_id=row.get("plant_id") if log_type == LogType.PLANT else None,
        type=log_type,
        title=row.get("title") or "",
        description=row.get("description") or "",
        log_date=parse_date(row.get("log_date")) or today(),
        image_ref=row.get("image_url"),
        weather=WeatherSnapshot.from_row(row.get("weather")),
    )


def log_to_row(
    owner_id: str,
    log_type: LogType,
    title: str,
    description: str,
    log_date,
    image_ref: Optional[str],
    weather: Optional[WeatherSnapshot],
    plant_id: Optional[str] = None
) -> Dict[str, Any]:
    return {
        "owner_id": owner_id,
        "plant_id": plant_id if log_type == LogType.PLANT else None,
        "type": log_type.value,
        "title": title,
        "description": description,
        "image_url": image_ref,
        "log_date": log_date.isoformat(),
        "weather": weather.to_row() if weather else None,
    }


# ===== PLANTS =====

def _row_to_plant(row: Dict[str, Any]) -> Plant:
    plant_id = str(row["id"])
    logs = []
    for log_row in row.get("logs") or []:
        if (log_row.get("type") or LogType.PLANT.value) != LogType.PLANT.value:
            continue
        logs.append(_row_to_log({**log_row, "plant_id": log_row.get("plant_id") or plant_id}))

    return Plant(
        id=plant_id,
        owner_id=row.get("owner_id"),
        name=row.get("name") or "",
        scientific_name=row.get("scientific_name"),
        description=row.get("description") or "",
        care_instructions=row.get("care_instructions") or "",
        image_ref=row.get("image_url"),
        date_planted=parse_date(row.get("date_planted")),
        date_added=parse_datetime(row.get("date_added") or row.get("created_at")),
        is_indoor=bool(row.get("is_indoor")),
        is_active=row.get("is_active") is not False,
        sequence_number=row.get("sequence_number") or 1,
        location=[_row_to_pin(pin) for pin in row.get("location") or []],
        logs=logs,
    )


def plant_to_row(plant: Plant) -> Dict[str, Any]:
    """Editable plant columns (insert and full update)."""
    return {
        "owner_id": plant.owner_id,
        "name": plant.name,
        "scientific_name": plant.scientific_name,
        "description": plant.description,
        "care_instructions": plant.care_instructions,
        "image_url": plant.image_ref,
        "date_planted": plant.date_planted.isoformat() if plant.date_planted else None,
        "is_indoor": plant.is_indoor,
        "is_active": plant.is_active,
        "sequence_number": plant.sequence_number,
        "location": pins_to_row(plant.location),
    }


# ===== GARDEN AREAS =====

def _row_to_garden(row: Dict[str, Any]) -> GardenArea:
    return GardenArea(
        id=str(row["id"]),
        owner_id=row.get("owner_id"),
        name=row.get("name") or "",
        image_ref=row.get("image_url"),
    )


# ===== NOTEBOOK =====

def _row_to_notebook_entry(row: Dict[str, Any]) -> NotebookEntry:
    return NotebookEntry(
        id=str(row["id"]),
        owner_id=row.get("owner_id"),
        type=NotebookEntryType(row.get("type") or NotebookEntryType.NOTE.value),
        title=row.get("title") or "",
        description=row.get("description") or "",
        date=parse_date(row.get("date")) or today(),
        image_ref=row.get("image_url"),
        is_done=bool(row.get("is_done")),
        recurrence=Recurrence(row.get("recurrence") or Recurrence.NONE.value),
        original_parent_id=row.get("original_parent_id"),
    )


def notebook_entry_to_row(entry: NotebookEntry) -> Dict[str, Any]:
    return {
        "owner_id": entry.owner_id,
        "type": entry.type.value,
        "title": entry.title,
        "description": entry.description,
        "date": entry.date.isoformat(),
        "image_url": entry.image_ref,
        "is_done": entry.is_done,
        "recurrence": entry.recurrence.value,
        "original_parent_id": entry.original_parent_id,
    }


# ===== SOCIAL =====

def _row_to_comment(row: Dict[str, Any], post_id: Optional[str] = None) -> SocialComment:
    return SocialComment(
        id=str(row["id"]),
        post_id=str(row.get("post_id") or post_id),
        user_id=str(row.get("user_id") or ""),
        author_name=_display_name(row, UNKNOWN_COMMENTER),
        text=row.get("text") or "",
        created_at=parse_datetime(row.get("created_at")),
    )


def _row_to_post(row: Dict[str, Any], viewer_id: Optional[str]) -> SocialPost:
    post_id = str(row["id"])
    likes = row.get("social_likes") or []
    comments = sorted(
        (_row_to_comment(comment, post_id) for comment in row.get("social_comments") or []),
        key=lambda comment: comment.created_at.timestamp() if comment.created_at else 0,
    )
    created_at = parse_datetime(row.get("created_at"))
    return SocialPost(
        id=post_id,
        user_id=str(row.get("user_id") or ""),
        author_name=_display_name(row, UNKNOWN_AUTHOR),
        plant_name=row.get("plant_name") or DEFAULT_POST_PLANT_NAME,
        title=row.get("title") or "",
        description=row.get("description") or "",
        image_ref=row.get("image_url"),
        event_date=parse_date(row.get("event_date")) or (created_at.date() if created_at else None),
        created_at=created_at,
        weather=WeatherSnapshot.from_row(row.get("weather")),
        country_code=row.get("country_code"),
        likes=len(likes),
        is_liked=any(like.get("user_id") == viewer_id for like in likes),
        comments=comments,
    )


# ===== PROFILES =====

def _row_to_profile(row: Dict[str, Any]) -> UserProfile:
    status = row.get("status") or ProfileStatus.PENDING.value
    return UserProfile(
        id=str(row["id"]),
        email=row.get("email"),
        display_name=row.get("display_name"),
        status=ProfileStatus(status) if status in ProfileStatus._value2member_map_ else ProfileStatus.PENDING,
        settings=row.get("settings") or {},
    )
