# 📄 File: gardenview/modules/garden_management/application/handlers/plants.py
# 🧭 Purpose (Layman Explanation):
# Adding, editing, archiving and deleting plants, checking and shrinking photos before
# they are used, asking the AI what a plant is, and pinning plants on garden photos.
#
# 🧪 Purpose (Technical Summary):
# Plant handler group. Image preparation runs Pillow compression in a worker thread
# and gates on AI content validation. Writes follow upload -> row write -> re-fetch ->
# navigate -> toast; pins are the one optimistic path here and roll back from the
# previous Plant when the row update fails.
#
# 🔗 Dependencies:
# - gardenview.shared.infrastructure.media.compression (Pillow)
# - AIClient via HandlerContext
# - Row mappers (plant_to_row, pins_to_row)
#
# 🔄 Connected Modules / Calls From:
# - GardenController.plants
# - Add-plant wizard, plant details, garden view screens

import asyncio
from typing import List, Optional, Union

from gardenview.shared.core.exceptions import (
    BusinessRuleViolationError,
    FileTooLargeError,
    InvalidFileTypeError,
    NotFoundError,
    ValidationError,
)
from gardenview.shared.infrastructure.media.compression import (
    CompressionMode,
    compress_data_url,
    compress_image,
)
from gardenview.shared.utils.logging import get_logger
from ...domain.models import AISuggestion, DEFAULT_PLANT_NAME, IdentificationResult, Plant, next_sequence_number
from ...infrastructure.database.mappers import pins_to_row, plant_to_row
from ..commands import PhotoTarget, PhotoTargetKind, PlantDraft
from ..navigation import Intent
from ..state.store import EntityKind
from .base import HandlerBase

logger = get_logger(__name__)

IMAGE_PROCESSING_TOAST = "Error processing image."
IMAGE_REJECTED_TOAST = "Image rejected"
IDENTIFY_FAILED_TOAST = "Failed to identify plant. Please enter details manually."
DESCRIBE_FAILED_TOAST = "Could not generate a description."
UPLOAD_SKIPPED_TOAST = "Image upload failed, saving without image."
PLANT_ADDED_TOAST = "Plant added successfully!"
PLANT_SAVE_FAILED_TOAST = "Failed to save plant."
PLANT_UPDATED_TOAST = "Plant updated!"
UPDATE_FAILED_TOAST = "Update failed."
DELETE_FAILED_TOAST = "Error deleting plant"
MAX_PINS_TOAST = "Maximum 3 placements per plant!"
PIN_SAVE_FAILED_TOAST = "Failed to save placement."
PIN_REMOVED_TOAST = "Pin removed"
PHOTO_UPLOAD_FAILED_TOAST = "Upload failed"
PHOTO_UPDATED_TOAST = "Photo updated"


class PlantHandlers(HandlerBase):
    """Plant lifecycle, photos, identification and placement."""

    # ===== IMAGE PREPARATION =====

    async def prepare_image(
        self,
        image: Union[bytes, str],
        content_type: Optional[str] = None,
        mode: CompressionMode = CompressionMode.STANDARD
    ) -> Optional[str]:
        """
        Compress a photo and ask the AI whether it is garden related.

        Args:
            image: Raw bytes or a data URL
            content_type: Declared type of raw bytes
            mode: 'standard' for plant photos, 'high' for collages and seasons

        Returns:
            The compressed JPEG data URL, or None when the image is unusable
        """
        self.store.is_validating_image = True
        try:
            if isinstance(image, (bytes, bytearray)):
                compressed = await asyncio.to_thread(compress_image, bytes(image), content_type, mode, self.config)
            else:
                compressed = await asyncio.to_thread(compress_data_url, image, mode, self.config)

            if not compressed.ok:
                error = compressed.error
                toast = error.message if isinstance(error, (FileTooLargeError, InvalidFileTypeError)) \
                    else IMAGE_PROCESSING_TOAST
                return self._fail("prepare_image", error, toast)

            data_url = compressed.value.data_url
            validation = await self.ctx.ai.validate_image(data_url)
            await self._track_ai("validateImageContent", validation, images=1)
            if not validation.allowed:
                logger.info("Image rejected by content check", reason=validation.reason)
                reason = f" ({validation.reason})" if validation.reason else ""
                self._toast(f"{IMAGE_REJECTED_TOAST}{reason}")
                return None
            return data_url
        finally:
            self.store.is_validating_image = False

    # ===== IDENTIFICATION =====

    async def identify(self, image: str) -> Optional[AISuggestion]:
        """
        Identify the plant in a prepared photo and move the wizard on.

        Without a result the wizard continues to the manual details form.
        """
        if not self._ai_allowed("identify", images=1):
            return None
        self._navigate(Intent.START_IDENTIFY)
        async with self._command("identify"):
            suggestion = await self.ctx.ai.identify(image, self.store.settings.lang)
            await self._track_ai("identify", suggestion, images=1)
        if suggestion is None:
            self._fail("identify", None, IDENTIFY_FAILED_TOAST)
            self._navigate(Intent.IDENTIFY_FAILED)
            return None
        self._navigate(Intent.IDENTIFY_FOUND)
        return suggestion

    async def identify_multiple(self, images: List[str]) -> List[IdentificationResult]:
        if not self._ai_allowed("identify_multiple", images=len(images)):
            return []
        self._navigate(Intent.START_IDENTIFY)
        async with self._command("identify_multiple"):
            results = await self.ctx.ai.identify_multiple(images, self.store.settings.lang)
            await self._track_ai("identifyMulti", results or None, images=len(images))
        if not results:
            self._fail("identify_multiple", None, IDENTIFY_FAILED_TOAST)
            self._navigate(Intent.IDENTIFY_FAILED)
            return []
        self._navigate(Intent.IDENTIFY_FOUND)
        return results

    async def auto_fill_description(self, draft: PlantDraft) -> PlantDraft:
        """Fill description and care details for the name typed in the form."""
        if not self._ai_allowed("generate_description"):
            return draft
        async with self._command("generate_description", loading=False):
            generated = await self.ctx.ai.generate_description(draft.name or DEFAULT_PLANT_NAME,
                                                               self.store.settings.lang)
            await self._track_ai("generateDescription", generated)
        if generated is None:
            self._fail("generate_description", None, DESCRIBE_FAILED_TOAST)
            return draft
        return draft.model_copy(update={
            "description": generated.description or draft.description,
            "care_instructions": generated.care_instructions or draft.care_instructions,
            "scientific_name": draft.scientific_name or generated.scientific_name or None,
            "is_indoor": generated.is_indoor,
        })

    # ===== CREATE / UPDATE =====

    async def create(self, draft: PlantDraft) -> Optional[Plant]:
        user = self._require_user()
        async with self._command("create_plant"):
            upload = await self._upload_if_needed(draft.image)
            image_ref = upload.value if upload.ok else None
            if not upload.ok:
                logger.warning(f"Plant image upload failed: {upload.error.message}")
                self._toast(UPLOAD_SKIPPED_TOAST)

            name = draft.name or DEFAULT_PLANT_NAME
            plant = Plant(
                id="",
                owner_id=user.id,
                name=name,
                scientific_name=draft.scientific_name,
                description=draft.description,
                care_instructions=draft.care_instructions,
                image_ref=image_ref,
                date_planted=draft.date_planted,
                is_indoor=draft.is_indoor,
                is_active=True,
                sequence_number=next_sequence_number(self.store.plants, name),
                location=[],
            )
            result = await self.gateway.insert_plant(plant_to_row(plant))
            if not result.ok:
                return self._fail("create_plant", result.error, PLANT_SAVE_FAILED_TOAST)

            created = result.value
            await self.loader.reload()
            self._navigate(Intent.PLANT_CREATED)
            self._toast(PLANT_ADDED_TOAST)
            logger.log_business_event("plant_created", f"Plant '{name}' added", entity_id=created.id,
                                      entity_type="plant")
            return self.store.get(EntityKind.PLANTS, created.id) or created

    async def update(self, plant_id: str, draft: PlantDraft) -> Optional[Plant]:
        self._require_user()
        current = self._plant(plant_id)
        async with self._command("update_plant"):
            upload = await self._upload_if_needed(self._stored_ref(draft.image, current.image_ref, current.image_url))
            if not upload.ok:
                return self._fail("update_plant", upload.error, UPDATE_FAILED_TOAST)
            image_ref = upload.value

            await self._delete_superseded(current.image_ref, image_ref)

            updated = current.model_copy(update={
                "name": draft.name or DEFAULT_PLANT_NAME,
                "scientific_name": draft.scientific_name,
                "description": draft.description,
                "care_instructions": draft.care_instructions,
                "image_ref": image_ref,
                "date_planted": draft.date_planted,
                "is_indoor": draft.is_indoor,
            })
            result = await self.gateway.update_plant(plant_id, plant_to_row(updated))
            if not result.ok:
                return self._fail("update_plant", result.error, UPDATE_FAILED_TOAST)

            await self.loader.reload()
            self.store.selected_plant_id = plant_id
            self._navigate(Intent.PLANT_UPDATED)
            self._toast(PLANT_UPDATED_TOAST)
            return self.store.get(EntityKind.PLANTS, plant_id)

    # ===== DELETE / ARCHIVE =====

    async def delete(self, plant_id: str) -> bool:
        """Delete a plant with its photos and logs after confirmation."""
        user = self._require_user()
        plant = self._plant(plant_id)
        if not await self._confirm("Delete plant", f"Delete {plant.display_name()} and all its logs?"):
            return False

        async with self._command("delete_plant"):
            await self._release_images(plant.image_refs())
            result = await self.gateway.delete_plant(plant_id)
            if not result.ok:
                self._fail("delete_plant", result.error, DELETE_FAILED_TOAST)
                return False

            if self.store.selected_plant_id == plant_id:
                self.store.selected_plant_id = None
            await self.loader.reload()
            self._navigate(Intent.PLANT_REMOVED)
            logger.log_user_action("delete_plant", user.id, resource=plant_id)
            return True

    async def set_archived(self, plant_id: str, archived: bool) -> bool:
        self._require_user()
        plant = self._plant(plant_id)
        title, message = ("Archive plant", f"Move {plant.display_name()} to the archive?") if archived \
            else ("Restore plant", f"Bring {plant.display_name()} back to your garden?")
        if not await self._confirm(title, message):
            return False

        async with self._command("archive_plant"):
            result = await self.gateway.update_plant(plant_id, {"is_active": not archived})
            if not result.ok:
                self._fail("archive_plant", result.error, UPDATE_FAILED_TOAST)
                return False
            await self.loader.reload()
            if archived:
                self._navigate(Intent.PLANT_ARCHIVED)
            return True

    # ===== GARDEN PLACEMENT =====

    def _area_id(self, area_id: Optional[str]) -> str:
        area_id = area_id or self.store.selected_area_id
        if not area_id:
            raise ValidationError("Select a garden area first", field="area_id")
        return area_id

    async def place_pin(self, plant_id: str, x: float, y: float, area_id: Optional[str] = None) -> bool:
        """
        Pin a plant on a garden area photo (x/y in percent).

        The store changes first; a failed row update restores the previous plant.
        """
        self._require_user()
        area_id = self._area_id(area_id)
        try:
            previous, updated = self.store.place_pin(plant_id, area_id, x, y)
        except BusinessRuleViolationError as e:
            logger.info(e.message, **e.details)
            self._toast(MAX_PINS_TOAST)
            return False

        result = await self.gateway.update_plant(plant_id, {"location": pins_to_row(updated.location)})
        if not result.ok:
            self.store.upsert(EntityKind.PLANTS, previous)
            self._fail("place_pin", result.error, PIN_SAVE_FAILED_TOAST)
            return False
        return True

    async def remove_pins(self, plant_id: str, area_id: Optional[str] = None) -> bool:
        """Remove every pin of the plant in the (selected) area."""
        self._require_user()
        area_id = self._area_id(area_id)
        previous, updated = self.store.remove_area_pins(plant_id, area_id)

        result = await self.gateway.update_plant(plant_id, {"location": pins_to_row(updated.location)})
        if not result.ok:
            self.store.upsert(EntityKind.PLANTS, previous)
            self._fail("remove_pins", result.error, PIN_SAVE_FAILED_TOAST)
            return False
        self._toast(PIN_REMOVED_TOAST)
        return True

    # ===== PHOTOS =====

    async def replace_photo(self, target: PhotoTarget, image: str) -> bool:
        """
        Swap the photo of a plant, plant log or garden log for an optimized image.

        Raises:
            NotFoundError: The target entity is not in the store
        """
        self._require_user()
        old_ref = self._current_photo(target)

        async with self._command("replace_photo"):
            upload = await self._upload_if_needed(image)
            if not upload.ok:
                self._fail("replace_photo", upload.error, PHOTO_UPLOAD_FAILED_TOAST)
                return False
            new_ref = upload.value

            if target.kind == PhotoTargetKind.PLANT:
                result = await self.gateway.update_plant(target.entity_id, {"image_url": new_ref})
            else:
                result = await self.gateway.update_log(target.entity_id, {"image_url": new_ref})
            if not result.ok:
                self._fail("replace_photo", result.error, UPDATE_FAILED_TOAST)
                return False

            await self._delete_superseded(old_ref, new_ref)
            await self.loader.reload()
            self._toast(PHOTO_UPDATED_TOAST)
            return True

    def _current_photo(self, target: PhotoTarget) -> Optional[str]:
        if target.kind == PhotoTargetKind.PLANT:
            return self._plant(target.entity_id).image_ref
        if target.kind == PhotoTargetKind.PLANT_LOG:
            _, log = self.store.find_plant_log(target.entity_id)
        else:
            log = self.store.get(EntityKind.GARDEN_LOGS, target.entity_id)
        if log is None:
            raise NotFoundError("Log not found", resource_type="log", resource_id=target.entity_id)
        return log.image_ref

    # ===== SELECTION =====

    def set_show_archived(self, show: bool) -> List[Plant]:
        """Include archived plants in the dashboard listing (or hide them again)."""
        self.store.show_archived = bool(show)
        return self.store.dashboard_plants()

    def _plant(self, plant_id: str) -> Plant:
        plant = self.store.get(EntityKind.PLANTS, plant_id)
        if plant is None:
            raise NotFoundError("Plant not found", resource_type="plant", resource_id=plant_id)
        return plant

    def open(self, plant_id: str):
        """Select a plant and show its details."""
        self._plant(plant_id)
        self.store.selected_plant_id = plant_id
        self.store.selected_log_id = None
        return self.ctx.navigator.dispatch(Intent.OPEN_PLANT_DETAILS)

    def select_next(self) -> Optional[str]:
        self.store.selected_plant_id = self.store.next_plant_id()
        self.store.selected_log_id = None
        return self.store.selected_plant_id

    def select_previous(self) -> Optional[str]:
        self.store.selected_plant_id = self.store.previous_plant_id()
        self.store.selected_log_id = None
        return self.store.selected_plant_id


__all__ = ["PlantHandlers"]
