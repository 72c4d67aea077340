# 📄 File: gardenview/modules/garden_management/application/handlers/gardens.py
# 🧭 Purpose (Layman Explanation):
# Managing the photos of your garden areas that plants get pinned on.
#
# 🧪 Purpose (Technical Summary):
# Garden area handler group: add (upload + insert + select), delete (confirmation,
# image release, removal of pins left on the area) and selection.
#
# 🔗 Dependencies:
# - GardenGateway, MediaStore via HandlerContext
# - Row mapper pins_to_row
#
# 🔄 Connected Modules / Calls From:
# - GardenController.gardens
# - Garden view tab

from typing import Optional

from gardenview.shared.core.exceptions import NotFoundError, ValidationError
from gardenview.shared.utils.logging import get_logger
from ...domain.models import GardenArea
from ...infrastructure.database.mappers import pins_to_row
from ..state.store import EntityKind
from .base import HandlerBase

logger = get_logger(__name__)

ADD_AREA_FAILED_TOAST = "Failed to add area."
DELETE_AREA_FAILED_TOAST = "Failed to delete area."
AREA_DELETED_TOAST = "Area deleted"


class GardenHandlers(HandlerBase):

    async def add_area(self, name: str, image: Optional[str]) -> Optional[GardenArea]:
        user = self._require_user()
        name = (name or "").strip()
        if not name:
            raise ValidationError("Area name is required", field="name")

        async with self._command("add_area"):
            upload = await self._upload_if_needed(image)
            if not upload.ok:
                return self._fail("add_area", upload.error, ADD_AREA_FAILED_TOAST)

            result = await self.gateway.insert_garden({"owner_id": user.id, "name": name, "image_url": upload.value})
            if not result.ok:
                return self._fail("add_area", result.error, ADD_AREA_FAILED_TOAST)

            area = result.value
            await self.loader.reload()
            self.store.selected_area_id = area.id
            return self.store.get(EntityKind.GARDEN_AREAS, area.id) or area

    async def delete_area(self, area_id: str) -> bool:
        """Delete an area and its photo; pins pointing at it are dropped from the plants."""
        self._require_user()
        area = self.store.get(EntityKind.GARDEN_AREAS, area_id)
        if area is None:
            raise NotFoundError("Garden area not found", resource_type="garden", resource_id=area_id)
        if not await self._confirm("Delete area", f"Delete '{area.name}' and all placements on it?"):
            return False

        async with self._command("delete_area"):
            await self._release_images([area.image_ref])
            result = await self.gateway.delete_garden(area_id)
            if not result.ok:
                self._fail("delete_area", result.error, DELETE_AREA_FAILED_TOAST)
                return False

            for plant in self.store.plants_in_area(area_id):
                cleared = await self.gateway.update_plant(
                    plant.id, {"location": pins_to_row(plant.without_area_pins(area_id).location)})
                if not cleared.ok:
                    logger.warning(f"Could not clear pins: {cleared.error.message}", plant_id=plant.id)

            if self.store.selected_area_id == area_id:
                self.store.selected_area_id = None
            await self.loader.reload()
            self._toast(AREA_DELETED_TOAST)
            return True

    def select_area(self, area_id: str) -> GardenArea:
        area = self.store.get(EntityKind.GARDEN_AREAS, area_id)
        if area is None:
            raise NotFoundError("Garden area not found", resource_type="garden", resource_id=area_id)
        self.store.selected_area_id = area_id
        return area


__all__ = ["GardenHandlers"]
