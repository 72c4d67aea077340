# 📄 File: gardenview/modules/garden_management/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# Collects every kind of garden "thing" the app knows about in one place.
# 🧪 Purpose (Technical Summary):
# Domain model exports for plants, logs, garden areas, notebook, social feed,
# settings, profiles, AI usage, weather and AI payloads.
# 🔗 Dependencies:
# pydantic domain models in this package
# 🔄 Connected Modules / Calls From:
# Repositories, store, handlers, row mappers, tests

from .weather import WeatherSnapshot
from .garden_area import GardenArea, LocationPin
from .log_entry import DEFAULT_LOG_TITLE, LogEntry, LogType
from .plant import DEFAULT_PLANT_NAME, Plant, next_sequence_number
from .notebook import NotebookEntry, NotebookEntryType, Recurrence
from .social import SocialComment, SocialPost
from .settings import FloraState, HomeLocation, ModuleToggles, Tier, UserSettings
from .profile import ProfileStatus, SessionUser, UserProfile
from .usage import TIER_DAILY_LIMITS, AIUsage
from .ai import (
    AdviceCriteria,
    AISuggestion,
    AnalysisResult,
    AnalysisType,
    GeneratedDescription,
    IdentificationResult,
    ImageValidation,
    PlantRecommendation,
)

__all__ = [
    "WeatherSnapshot",
    "GardenArea",
    "LocationPin",
    "DEFAULT_LOG_TITLE",
    "LogEntry",
    "LogType",
    "DEFAULT_PLANT_NAME",
    "Plant",
    "next_sequence_number",
    "NotebookEntry",
    "NotebookEntryType",
    "Recurrence",
    "SocialComment",
    "SocialPost",
    "FloraState",
    "HomeLocation",
    "ModuleToggles",
    "Tier",
    "UserSettings",
    "ProfileStatus",
    "SessionUser",
    "UserProfile",
    "TIER_DAILY_LIMITS",
    "AIUsage",
    "AdviceCriteria",
    "AISuggestion",
    "AnalysisResult",
    "AnalysisType",
    "GeneratedDescription",
    "IdentificationResult",
    "ImageValidation",
    "PlantRecommendation",
]
