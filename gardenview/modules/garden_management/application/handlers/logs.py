# 📄 File: gardenview/modules/garden_management/application/handlers/logs.py
# 🧭 Purpose (Layman Explanation):
# Writing diary entries for a plant or for the whole garden, with an optional photo and
# the weather of that day, and optionally sharing them or copying them to the notebook.
#
# 🧪 Purpose (Technical Summary):
# Log handler group. Adding a log joins the image upload and the weather lookup with
# asyncio.gather, inserts the row, then runs the optional side effects (main photo,
# social post, notebook note) before re-fetching. Analysis, professor answers and
# season images are saved through the same insert path.
#
# 🔗 Dependencies:
# - asyncio (gather)
# - WeatherClient, MediaStore, GardenGateway via HandlerContext
# - Row mappers (log_to_row, notebook_entry_to_row)
#
# 🔄 Connected Modules / Calls From:
# - GardenController.logs
# - Log form, log details, plant analysis, professor and collage screens

import asyncio
from datetime import date
from typing import Any, Dict, Optional

from gardenview.shared.core.exceptions import NotFoundError, StorageError
from gardenview.shared.utils.helpers import today
from gardenview.shared.utils.logging import get_logger
from ...domain.models import (
    AnalysisResult,
    DEFAULT_LOG_TITLE,
    LogEntry,
    LogType,
    NotebookEntry,
    NotebookEntryType,
    Plant,
    WeatherSnapshot,
)
from ...infrastructure.database.mappers import log_to_row, notebook_entry_to_row
from ..commands import LogDraft
from ..navigation import Intent
from ..state.store import DashboardTab, EntityKind
from .base import HandlerBase

logger = get_logger(__name__)

LOG_SAVED_TOAST = "Log saved"
LOG_DELETED_TOAST = "Log deleted"
ADD_LOG_FAILED_TOAST = "Failed to add log."
UPDATE_FAILED_TOAST = "Update failed."
DELETE_FAILED_TOAST = "Failed to delete log."
SEASON_UPLOAD_FAILED_TOAST = "Image upload failed. Log not saved."
SEASON_SAVE_FAILED_TOAST = "Failed to save log."

GARDEN_POST_NAME = "Garden"


class LogHandlers(HandlerBase):
    """Plant and garden journal entries."""

    # ===== HELPERS =====

    def _plant(self, plant_id: str) -> Plant:
        plant = self.store.get(EntityKind.PLANTS, plant_id)
        if plant is None:
            raise NotFoundError("Plant not found", resource_type="plant", resource_id=plant_id)
        return plant

    def _plant_log(self, log_id: str):
        plant, log = self.store.find_plant_log(log_id)
        if log is None:
            raise NotFoundError("Log not found", resource_type="log", resource_id=log_id)
        return plant, log

    def _garden_log(self, log_id: str) -> LogEntry:
        log = self.store.get(EntityKind.GARDEN_LOGS, log_id)
        if log is None:
            raise NotFoundError("Garden log not found", resource_type="log", resource_id=log_id)
        return log

    async def _weather_for(self, attach: bool, day: date) -> Optional[WeatherSnapshot]:
        settings = self.store.settings
        if not attach or not settings.weather_enabled:
            return None
        home = settings.home_location
        return await self.ctx.weather.for_date(home.latitude, home.longitude, day)

    async def _set_main_photo(self, plant: Plant, image_ref: Optional[str]) -> None:
        if not image_ref or image_ref == plant.image_ref:
            return
        await self._delete_superseded(plant.image_ref, image_ref)
        result = await self.gateway.update_plant(plant.id, {"image_url": image_ref})
        if not result.ok:
            logger.warning(f"Could not set main photo: {result.error.message}", plant_id=plant.id)

    async def _share(self, user_id: str, plant: Optional[Plant], title: str, description: str,
                     log_date: date, image: Optional[str], weather: Optional[WeatherSnapshot]) -> None:
        home = self.store.settings.home_location
        row: Dict[str, Any] = {
            "user_id": user_id,
            "plant_name": plant.name if plant else GARDEN_POST_NAME,
            "title": title,
            "description": description,
            "image_url": image,
            "event_date": log_date.isoformat(),
            "weather": weather.to_row() if weather else None,
            "country_code": home.country_code if home else None,
        }
        result = await self.gateway.insert_social_post(row)
        if not result.ok:
            logger.warning(f"Sharing log failed: {result.error.message}")
            return
        await self.loader.fetch_social_page(0, reset=True)

    async def _copy_to_notebook(self, user_id: str, plant: Optional[Plant], title: str,
                                description: str, log_date: date, image: Optional[str]) -> None:
        entry = NotebookEntry(
            id="",
            owner_id=user_id,
            type=NotebookEntryType.NOTE,
            title=f"{plant.name}: {title}" if plant else title,
            description=description,
            date=log_date,
            image_ref=image,
        )
        result = await self.gateway.insert_notebook_entries([notebook_entry_to_row(entry)])
        if not result.ok:
            logger.warning(f"Copying log to notebook failed: {result.error.message}")

    # ===== ADD =====

    async def _add_log(self, log_type: LogType, draft: LogDraft, plant: Optional[Plant] = None) -> Optional[LogEntry]:
        user = self._require_user()
        modules = self.store.settings.modules
        async with self._command("add_log"):
            upload, weather = await asyncio.gather(
                self._upload_if_needed(draft.image),
                self._weather_for(draft.attach_weather, draft.log_date),
            )
            if not upload.ok:
                return self._fail("add_log", upload.error, ADD_LOG_FAILED_TOAST)
            image_ref = upload.value

            title = draft.title.strip() or DEFAULT_LOG_TITLE
            row = log_to_row(user.id, log_type, title, draft.description, draft.log_date, image_ref, weather,
                             plant_id=plant.id if plant else None)
            result = await self.gateway.insert_log(row)
            if not result.ok:
                return self._fail("add_log", result.error, ADD_LOG_FAILED_TOAST)
            log = result.value

            if plant is not None and draft.set_as_main_photo:
                await self._set_main_photo(plant, image_ref)
            if draft.share_to_social and modules.social:
                await self._share(user.id, plant, title, draft.description, draft.log_date, image_ref, weather)
            if draft.add_to_notebook and modules.notebook:
                await self._copy_to_notebook(user.id, plant, title, draft.description, draft.log_date, image_ref)

            await self.loader.reload()
            if plant is not None:
                self.store.selected_plant_id = plant.id
                self._navigate(Intent.LOG_SAVED)
            else:
                self.ctx.navigator.select_tab(DashboardTab.GARDEN_LOGS)
                self._navigate(Intent.GARDEN_LOG_SAVED)
            self._toast(LOG_SAVED_TOAST)
            return log

    async def add_plant_log(self, plant_id: str, draft: LogDraft) -> Optional[LogEntry]:
        return await self._add_log(LogType.PLANT, draft, self._plant(plant_id))

    async def add_garden_log(self, draft: LogDraft) -> Optional[LogEntry]:
        return await self._add_log(LogType.GARDEN, draft)

    # ===== UPDATE =====

    async def _update_log(self, log: LogEntry, draft: LogDraft, plant: Optional[Plant] = None) -> bool:
        self._require_user()
        async with self._command("update_log"):
            reuse_weather = draft.attach_weather and log.weather is not None and draft.log_date == log.log_date
            upload, fetched = await asyncio.gather(
                self._upload_if_needed(self._stored_ref(draft.image, log.image_ref, log.image_url)),
                self._weather_for(draft.attach_weather and not reuse_weather, draft.log_date),
            )
            if not upload.ok:
                self._fail("update_log", upload.error, UPDATE_FAILED_TOAST)
                return False
            image_ref = upload.value
            weather = log.weather if reuse_weather else fetched

            result = await self.gateway.update_log(log.id, {
                "title": draft.title.strip() or DEFAULT_LOG_TITLE,
                "description": draft.description,
                "log_date": draft.log_date.isoformat(),
                "image_url": image_ref,
                "weather": weather.to_row() if weather else None,
            })
            if not result.ok:
                self._fail("update_log", result.error, UPDATE_FAILED_TOAST)
                return False

            if plant is not None and draft.set_as_main_photo:
                await self._set_main_photo(plant, image_ref)
            await self._delete_superseded(log.image_ref, image_ref)

            await self.loader.reload()
            if plant is not None:
                self.store.selected_plant_id = plant.id
                self._navigate(Intent.LOG_SAVED)
            else:
                self._navigate(Intent.GARDEN_LOG_SAVED)
            self._toast(LOG_SAVED_TOAST)
            return True

    async def update_plant_log(self, log_id: str, draft: LogDraft) -> bool:
        plant, log = self._plant_log(log_id)
        return await self._update_log(log, draft, plant)

    async def update_garden_log(self, log_id: str, draft: LogDraft) -> bool:
        return await self._update_log(self._garden_log(log_id), draft)

    # ===== DELETE =====

    async def _delete_log(self, log: LogEntry) -> bool:
        self._require_user()
        if not await self._confirm("Delete log", f"Delete '{log.title}'?"):
            return False
        async with self._command("delete_log"):
            await self._release_images([log.image_ref])
            result = await self.gateway.delete_log(log.id)
            if not result.ok:
                self._fail("delete_log", result.error, DELETE_FAILED_TOAST)
                return False
            await self.loader.reload()
            self._toast(LOG_DELETED_TOAST)
            return True

    async def delete_plant_log(self, log_id: str) -> bool:
        plant, log = self._plant_log(log_id)
        deleted = await self._delete_log(log)
        if deleted:
            self.store.selected_plant_id = plant.id
            self.store.selected_log_id = None
            self._navigate(Intent.LOG_REMOVED)
        return deleted

    async def delete_garden_log(self, log_id: str) -> bool:
        deleted = await self._delete_log(self._garden_log(log_id))
        if deleted:
            self.store.selected_garden_log_id = None
            self._navigate(Intent.GARDEN_LOG_REMOVED)
        return deleted

    # ===== GENERATED LOGS =====

    async def _save_generated_log(self, plant: Plant, title: str, description: str,
                                  image: Optional[str]) -> Optional[LogEntry]:
        user = self._require_user()
        async with self._command("save_generated_log"):
            upload = await self._upload_if_needed(image)
            if not upload.ok:
                return self._fail("save_generated_log", upload.error, ADD_LOG_FAILED_TOAST)
            row = log_to_row(user.id, LogType.PLANT, title, description, today(), upload.value, None,
                             plant_id=plant.id)
            result = await self.gateway.insert_log(row)
            if not result.ok:
                return self._fail("save_generated_log", result.error, ADD_LOG_FAILED_TOAST)
            await self.loader.reload()
            self.store.selected_plant_id = plant.id
            self._navigate(Intent.LOG_SAVED)
            self._toast(LOG_SAVED_TOAST)
            return result.value

    async def save_analysis(self, plant_id: str, result: AnalysisResult, image: Optional[str] = None):
        """Store a health analysis as a plant log."""
        return await self._save_generated_log(self._plant(plant_id), result.log_title(), result.as_log_text(), image)

    async def save_professor_answer(self, plant_id: str, title: str, description: str,
                                    image: Optional[str] = None):
        return await self._save_generated_log(self._plant(plant_id), title.strip() or DEFAULT_LOG_TITLE,
                                              description, image)

    async def save_season_image(self, image: str, label: str) -> LogEntry:
        """
        Save a season collage as a garden log titled "Season: {label}".

        Raises:
            StorageError: The image could not be uploaded
            BackendError: The log row could not be inserted
        """
        user = self._require_user()
        async with self._command("save_season_image"):
            upload = await self._upload_if_needed(image)
            if not upload.ok or not upload.value:
                self._fail("save_season_image", upload.error, SEASON_UPLOAD_FAILED_TOAST)
                raise upload.error or StorageError("No image to upload", operation="upload")

            row = log_to_row(user.id, LogType.GARDEN, f"Season: {label}", "", today(), upload.value, None)
            result = await self.gateway.insert_log(row)
            if not result.ok:
                self._fail("save_season_image", result.error, SEASON_SAVE_FAILED_TOAST)
                raise result.error

            await self.loader.reload()
            self.ctx.navigator.select_tab(DashboardTab.GARDEN_LOGS)
            self._navigate(Intent.GARDEN_LOG_SAVED)
            self._toast(LOG_SAVED_TOAST)
            return result.value


__all__ = ["LogHandlers"]
