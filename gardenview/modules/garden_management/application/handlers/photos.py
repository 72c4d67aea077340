# 📄 File: gardenview/modules/garden_management/application/handlers/photos.py
# 🧭 Purpose (Layman Explanation):
# The photo editing screens: brightening or toning one picture before saving it back,
# and combining several pictures into a single collage.
#
# 🧪 Purpose (Technical Summary):
# Photo edit handler group. Payloads (data URLs, bare base64 or raw bytes) are decoded
# here and the Pillow work runs in a worker thread. Both commands return a JPEG data
# URL; saving it onto a plant or log goes through PlantHandlers.replace_photo.
#
# 🔗 Dependencies:
# - gardenview.shared.infrastructure.media.filters / collage (Pillow)
#
# 🔄 Connected Modules / Calls From:
# - GardenController.photos
# - Photo optimize and photo collage screens

import asyncio
from typing import List, Optional, Sequence, Union

from gardenview.shared.core.exceptions import GardenViewException, ValidationError
from gardenview.shared.infrastructure.media.collage import CollageOptions, render_collage
from gardenview.shared.infrastructure.media.filters import FilterSettings, apply_adjustments
from gardenview.shared.infrastructure.storage.supabase_storage import decode_image_payload
from gardenview.shared.utils.logging import get_logger
from ..commands import PhotoTarget
from .base import HandlerBase, HandlerContext
from .plants import PlantHandlers

logger = get_logger(__name__)

EDIT_FAILED_TOAST = "Photo could not be edited."
COLLAGE_FAILED_TOAST = "Collage could not be created."

ImagePayload = Union[bytes, str]


def _raw(image: ImagePayload) -> bytes:
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)
    _, data = decode_image_payload(image)
    return data


class PhotoHandlers(HandlerBase):
    """Filter adjustments and collages."""

    def __init__(self, ctx: HandlerContext, plants: PlantHandlers):
        super().__init__(ctx)
        self.plants = plants

    async def edit(self, image: ImagePayload, filters: FilterSettings) -> Optional[str]:
        """
        Apply brightness, contrast, grayscale and sepia to one photo.

        Returns:
            The adjusted JPEG data URL, or None after a toast
        """
        async with self._command("edit_photo"):
            try:
                data = _raw(image)
            except GardenViewException as e:
                return self._fail("edit_photo", e, EDIT_FAILED_TOAST)
            result = await asyncio.to_thread(apply_adjustments, data, filters, self.config)
        if not result.ok:
            return self._fail("edit_photo", result.error, EDIT_FAILED_TOAST)
        return result.value.data_url

    async def save_edit(self, target: PhotoTarget, image: ImagePayload, filters: FilterSettings) -> bool:
        """Edit a photo and store it on the target plant or log."""
        self._require_user()
        edited = await self.edit(image, filters)
        if edited is None:
            return False
        return await self.plants.replace_photo(target, edited)

    async def collage(self, images: Sequence[ImagePayload],
                      options: Optional[CollageOptions] = None) -> Optional[str]:
        """
        Render 2 to 10 photos into one square collage.

        Raises:
            ValidationError: Too few or too many photos
        """
        options = options or CollageOptions()
        async with self._command("create_collage"):
            try:
                sources: List[bytes] = [_raw(image) for image in images]
            except GardenViewException as e:
                return self._fail("create_collage", e, COLLAGE_FAILED_TOAST)
            result = await asyncio.to_thread(render_collage, sources, options, self.config)
        if not result.ok:
            if isinstance(result.error, ValidationError):
                raise result.error
            return self._fail("create_collage", result.error, COLLAGE_FAILED_TOAST)
        logger.info("Collage created", layout=options.layout.value, images=len(sources))
        return result.value.data_url


__all__ = ["PhotoHandlers"]
