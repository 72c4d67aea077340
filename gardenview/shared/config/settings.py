# 📄 File: gardenview/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The configuration center that reads every setting from environment variables
# and hands them to the rest of the garden app in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for backend, storage, media, weather, AI and
# synchronization parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - gardenview.shared.config.supabase (client creation)
# - Media store, media pipeline, weather and AI clients
# - GardenController and its handlers

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="GardenView", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SUPABASE CONFIGURATION
    # =========================================================================

    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(..., description="Supabase anonymous key")
    SUPABASE_SCHEMA: str = Field(default="public", description="Postgres schema")
    SUPABASE_STORAGE_BUCKET: str = Field(
        default="garden-media",
        description="Storage bucket holding plant, log and garden images"
    )
    SUPABASE_POSTGREST_TIMEOUT: int = Field(default=10, description="PostgREST timeout in seconds")
    SUPABASE_STORAGE_TIMEOUT: int = Field(default=30, description="Storage timeout in seconds")

    # =========================================================================
    # STORAGE CONFIGURATION
    # =========================================================================

    SIGNED_URL_EXPIRES_IN: int = Field(default=3600, description="Signed URL lifetime in seconds")
    STORAGE_CACHE_CONTROL: str = Field(default="3600", description="Cache-Control max-age for uploads")
    MAX_UPLOAD_SIZE_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Largest encoded image accepted for upload"
    )

    # =========================================================================
    # MEDIA PIPELINE CONFIGURATION
    # =========================================================================

    MAX_INPUT_IMAGE_BYTES: int = Field(
        default=25 * 1024 * 1024,
        description="Largest raw photo accepted by compression"
    )
    MAX_COMPRESSED_IMAGE_BYTES: int = Field(
        default=1024 * 1024,
        description="Hard ceiling for compressed output"
    )
    ALLOWED_IMAGE_TYPES: List[str] = Field(
        default=["image/jpeg", "image/png", "image/webp", "image/heic", "image/heif"],
        description="Accepted raw photo content types"
    )
    STANDARD_MAX_DIMENSION: int = Field(default=512, description="Standard profile max edge")
    STANDARD_QUALITY: int = Field(default=60, description="Standard profile JPEG quality")
    HIGH_MAX_DIMENSION: int = Field(default=1024, description="High profile max edge")
    HIGH_QUALITY: int = Field(default=85, description="High profile JPEG quality")
    EXPORT_QUALITY: int = Field(default=90, description="JPEG quality for filter and collage exports")
    COLLAGE_CANVAS_SIZE: int = Field(default=1200, description="Collage canvas edge in pixels")

    # =========================================================================
    # WEATHER CONFIGURATION
    # =========================================================================

    WEATHER_FORECAST_URL: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        description="Open-Meteo forecast endpoint"
    )
    WEATHER_ARCHIVE_URL: str = Field(
        default="https://archive-api.open-meteo.com/v1/archive",
        description="Open-Meteo historical archive endpoint"
    )
    WEATHER_TIMEOUT: int = Field(default=10, description="Weather request timeout in seconds")

    # =========================================================================
    # AI FUNCTION CONFIGURATION
    # =========================================================================

    AI_FUNCTION_URL: str = Field(
        default="http://localhost:8888/.netlify/functions/gemini",
        description="Serverless function brokering the generative AI backend"
    )
    AI_TIMEOUT: int = Field(default=60, description="AI request timeout in seconds")

    # =========================================================================
    # SYNCHRONIZATION CONFIGURATION
    # =========================================================================

    SETTINGS_SYNC_DEBOUNCE_SECONDS: float = Field(
        default=2.0,
        description="Quiet period before settings are written to the profile"
    )
    SOCIAL_PAGE_SIZE: int = Field(default=5, description="Posts per social feed page")
    MAX_PINS_PER_AREA: int = Field(default=3, description="Placements per plant per garden area")
    TOAST_DURATION_SECONDS: float = Field(default=3.0, description="Toast auto-hide delay")
    LIKE_ROLLBACK_ON_FAILURE: bool = Field(
        default=True,
        description="Revert an optimistic like when the backend write fails"
    )
    RECURRENCE_HORIZON_DAYS: int = Field(
        default=365,
        description="How far ahead recurring notebook tasks are generated"
    )
    RECURRENCE_EXTEND_MARGIN_DAYS: int = Field(
        default=30,
        description="Series ending closer than this to the horizon get extended"
    )
    NAVIGATION_HISTORY_LIMIT: int = Field(default=50, description="Back-stack depth")

    # =========================================================================
    # LOCAL STORAGE CONFIGURATION
    # =========================================================================

    LOCAL_STORAGE_PATH: str = Field(
        default="~/.gardenview/local_storage.json",
        description="File backing the local key-value store"
    )
    SETTINGS_STORAGE_KEY: str = Field(default="gardenview_settings_v1", description="Settings key")
    CHAT_DOCKED_KEY: str = Field(default="gardenview_chat_docked", description="Chat dock key")
    CHAT_WIDTH_KEY: str = Field(default="gardenview_chat_width", description="Chat width key")
    AI_USAGE_STORAGE_KEY: str = Field(default="gardenview_ai_usage_v1", description="AI usage key")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {valid_levels}")
        return v.upper()

    @field_validator("SUPABASE_STORAGE_BUCKET")
    @classmethod
    def validate_bucket(cls, v):
        """Bucket names are used as URL path markers and must be plain."""
        if not v or "/" in v:
            raise ValueError("SUPABASE_STORAGE_BUCKET must be a non-empty name without '/'")
        return v

    @field_validator(
        "SETTINGS_SYNC_DEBOUNCE_SECONDS",
        "TOAST_DURATION_SECONDS",
        "SOCIAL_PAGE_SIZE",
        "MAX_PINS_PER_AREA",
    )
    @classmethod
    def validate_positive(cls, v):
        """Timing and sizing knobs must be positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def storage_path_marker(self) -> str:
        """Path fragment that identifies objects in the media bucket."""
        return f"/{self.SUPABASE_STORAGE_BUCKET}/"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
