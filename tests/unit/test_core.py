# =============================================================================
# tests/unit/test_core.py
# Result, DeferredTask, user settings model, AI usage, app settings, local storage and logging
# =============================================================================

import asyncio
import json
import logging
from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from gardenview.modules.garden_management.domain.models import AIUsage, HomeLocation, Tier, UserSettings
from gardenview.shared.config.settings import Settings
from gardenview.shared.core.exceptions import NotFoundError, StorageError
from gardenview.shared.core.result import Result
from gardenview.shared.core.scheduler import DeferredTask
from gardenview.shared.infrastructure.storage.local_settings import LocalSettingsStore
from gardenview.shared.utils import logging as log_setup
from gardenview.shared.utils.logging import get_logger, log_context, setup_logging


# =============================================================================
# RESULT
# =============================================================================

class TestResult:

    def test_success(self):
        result = Result.success(3)

        assert result.ok
        assert result.unwrap() == 3
        assert result.map(lambda v: v * 2).value == 6

    def test_failure(self):
        error = NotFoundError("gone")
        result = Result.failure(error)

        assert not result.ok
        assert result.value_or("fallback") == "fallback"
        assert result.map(lambda v: v * 2).error is error
        with pytest.raises(NotFoundError):
            result.unwrap()

    def test_failure_needs_error(self):
        with pytest.raises(ValueError):
            Result.failure(None)


# =============================================================================
# DEFERRED TASK
# =============================================================================

class TestDeferredTask:
    """Single-slot debounce"""

    async def test_rescheduling_supersedes(self):
        runs = []
        task = DeferredTask(delay=0.02)

        async def record(value):
            runs.append(value)

        task.schedule(lambda: record("first"))
        task.schedule(lambda: record("second"))
        await task.wait()

        assert runs == ["second"]
        assert task.pending is False

    async def test_flush_runs_now(self):
        runs = []
        task = DeferredTask(delay=60)

        async def record():
            runs.append("run")

        task.schedule(record)
        await task.flush()

        assert runs == ["run"]
        assert task.pending is False

    async def test_cancel(self):
        runs = []
        task = DeferredTask(delay=0.01)

        async def record():
            runs.append("run")

        task.schedule(record)
        assert task.cancel() is True
        await asyncio.sleep(0.03)

        assert runs == []
        assert task.cancel() is False

    async def test_failure_is_logged_not_raised(self):
        task = DeferredTask(delay=0)

        async def boom():
            raise RuntimeError("backend down")

        task.schedule(boom)
        await task.wait()

        assert task.pending is False


# =============================================================================
# USER SETTINGS
# =============================================================================

class TestUserSettings:
    """Persisted camelCase shape and overlay merging"""

    def test_defaults(self):
        settings = UserSettings()

        assert settings.modules.social is False
        assert settings.modules.notebook is True
        assert settings.weather_enabled is False

    def test_storage_shape(self):
        data = UserSettings(limit_ai=True, dark_mode=True).to_storage()

        assert data["limitAI"] is True
        assert "limitAi" not in data
        assert data["darkMode"] is True
        assert data["modules"]["gardenLogs"] is True

    def test_round_trip_through_storage(self):
        settings = UserSettings(lang="es", home_location=HomeLocation(latitude=40.4, longitude=-3.7, name="Madrid"))

        assert UserSettings.from_storage(settings.to_storage()) == settings

    def test_partial_overlay_merges_nested_objects(self):
        base = UserSettings(lang="de")

        merged = base.merged_with({"modules": {"social": True}, "limitAI": True})

        assert merged.lang == "de"
        assert merged.limit_ai is True
        assert merged.modules.social is True
        assert merged.modules.garden_logs is True

    def test_empty_overlay_is_identity(self):
        base = UserSettings()
        assert base.merged_with(None) is base

    @pytest.mark.parametrize("field, value", [
        ("temp_unit", "K"),
        ("length_unit", "cm"),
        ("wind_unit", "knots"),
        ("first_day_of_week", "tue"),
        ("time_format", "ampm"),
    ])
    def test_invalid_units_rejected(self, field, value):
        with pytest.raises(PydanticValidationError):
            UserSettings().updated(**{field: value})

    def test_weather_enabled_needs_toggle_and_home(self):
        home = HomeLocation(latitude=0, longitude=0)

        assert UserSettings(home_location=home).weather_enabled is True
        assert UserSettings(home_location=home, use_weather=False).weather_enabled is False


# =============================================================================
# AI USAGE
# =============================================================================

class TestAIUsage:

    def test_recorded_weights_output_and_images(self):
        """Input counts the action plus 258 per image; output counts five times"""
        day = date(2024, 5, 1)
        usage = AIUsage(user_id="u", day=day).recorded("identify", "Rose", images=1, today=day)

        assert usage.input_tokens == 2 + 258
        assert usage.output_tokens == 1
        assert usage.daily_score == 265
        assert usage.total_score == 265
        assert usage.requests == 1
        assert usage.images_scanned == 1

    def test_new_day_resets_daily_score_only(self):
        usage = AIUsage(day=date(2024, 5, 1), daily_score=900, total_score=900, requests=3)

        fresh = usage.for_day(date(2024, 5, 2))

        assert fresh.daily_score == 0
        assert fresh.total_score == 900
        assert fresh.requests == 3
        assert usage.for_day(date(2024, 5, 1)) is usage

    @pytest.mark.parametrize("tier, allowed", [
        (Tier.FREE, False),
        (Tier.SILVER, True),
        (Tier.DIAMOND, True),
    ])
    def test_allows_depends_on_tier(self, tier, allowed):
        day = date(2024, 5, 1)
        usage = AIUsage(day=day, daily_score=49_950)

        assert usage.allows(tier, 100, today=day) is allowed

    def test_yesterdays_score_does_not_count(self):
        usage = AIUsage(day=date(2024, 5, 1), daily_score=50_000)

        assert usage.remaining(Tier.FREE, today=date(2024, 5, 1)) == 0
        assert usage.remaining(Tier.FREE, today=date(2024, 5, 2)) == 50_000


# =============================================================================
# APP SETTINGS & LOCAL STORAGE
# =============================================================================

class TestAppSettings:

    def test_defaults(self, config):
        assert config.SOCIAL_PAGE_SIZE == 5
        assert config.MAX_PINS_PER_AREA == 3
        assert config.SETTINGS_STORAGE_KEY == "gardenview_settings_v1"
        assert config.storage_path_marker == "/garden-media/"

    def test_bucket_name_must_be_plain(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="k",
                     SUPABASE_STORAGE_BUCKET="a/b")

    def test_page_size_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="k",
                     SOCIAL_PAGE_SIZE=0)


class TestLocalSettingsStore:

    def test_set_get_remove(self, tmp_path):
        store = LocalSettingsStore(tmp_path / "nested" / "settings.json")

        store.set("theme", {"dark": True})
        assert store.get("theme") == {"dark": True}

        store.remove("theme")
        assert store.get("theme", "unset") == "unset"

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")

        assert LocalSettingsStore(path).get("anything") is None

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")

        with pytest.raises(StorageError):
            LocalSettingsStore(blocker / "settings.json").set("k", 1)


# =============================================================================
# LOGGING
# =============================================================================

class TestLogging:
    """JSON output with command context"""

    @pytest.fixture
    def fresh_logging(self, monkeypatch):
        root = logging.getLogger()
        level = root.level
        monkeypatch.setattr(log_setup, "_logging_configured", False)
        yield
        for handler in root.handlers[:]:
            if isinstance(handler.formatter, (log_setup.JSONFormatter, log_setup.ContextualFormatter)):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    def test_json_lines_carry_context_and_fields(self, fresh_logging, tmp_path):
        log_file = tmp_path / "logs" / "gardenview.log"
        setup_logging(log_level="DEBUG", log_format="json", log_file=str(log_file), enable_console=False)

        with log_context(user_id="user-1", correlation_id="cmd-7"):
            get_logger("gardenview.test").info("Plant saved", plant_id="p1")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["message"] == "Plant saved"
        assert record["level"] == "INFO"
        assert record["user_id"] == "user-1"
        assert record["correlation_id"] == "cmd-7"
        assert record["extra"] == {"plant_id": "p1"}

    def test_configured_once(self, fresh_logging):
        setup_logging(log_level="INFO", log_format="text", enable_console=False)
        handlers = logging.getLogger().handlers[:]

        setup_logging(log_level="DEBUG", log_format="json", enable_console=False)

        assert logging.getLogger().handlers == handlers
        assert logging.getLogger().level == logging.INFO
