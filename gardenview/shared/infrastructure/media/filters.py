# 📄 File: gardenview/shared/infrastructure/media/filters.py

# 🧭 Purpose (Layman Explanation):
# The "optimize photo" sliders: make a picture brighter, punchier, black-and-white
# or old-fashioned brown before saving it back to a plant or log.

# 🧪 Purpose (Technical Summary):
# Brightness/contrast (0..200 %, 100 = unchanged) via ImageEnhance, then partial
# grayscale and sepia (0..100 %) blended over the result, in the same order as a CSS
# filter chain. Exported as JPEG at EXPORT_QUALITY.

# 🔗 Dependencies:
# - Pillow: ImageEnhance, ImageOps
# - pydantic: FilterSettings range validation

# 🔄 Connected Modules / Calls From:
# Called by: plant handlers (replace_photo after optimize), tests

from typing import Optional

from PIL import Image, ImageEnhance, ImageOps
from pydantic import BaseModel, Field

from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.core.exceptions import ImageProcessingError
from gardenview.shared.core.result import Result
from gardenview.shared.utils.logging import get_logger
from .compression import CompressedImage, encode_jpeg, open_image, to_rgb

logger = get_logger(__name__)

SEPIA_DARK = "#3b2a1a"
SEPIA_LIGHT = "#f2e3c6"


class FilterSettings(BaseModel):
    """Slider values for photo adjustments."""
    brightness: int = Field(100, ge=0, le=200, description="Percent, 100 = unchanged")
    contrast: int = Field(100, ge=0, le=200, description="Percent, 100 = unchanged")
    grayscale: int = Field(0, ge=0, le=100, description="Percent of full grayscale")
    sepia: int = Field(0, ge=0, le=100, description="Percent of full sepia tone")

    class Config:
        frozen = True

    @property
    def is_identity(self) -> bool:
        return (self.brightness, self.contrast, self.grayscale, self.sepia) == (100, 100, 0, 0)


def adjust(image: Image.Image, settings: FilterSettings) -> Image.Image:
    """Apply the filter chain to an RGB image."""
    if settings.brightness != 100:
        image = ImageEnhance.Brightness(image).enhance(settings.brightness / 100)
    if settings.contrast != 100:
        image = ImageEnhance.Contrast(image).enhance(settings.contrast / 100)
    if settings.grayscale:
        gray = ImageOps.grayscale(image).convert("RGB")
        image = Image.blend(image, gray, settings.grayscale / 100)
    if settings.sepia:
        toned = ImageOps.colorize(ImageOps.grayscale(image), SEPIA_DARK, SEPIA_LIGHT)
        image = Image.blend(image, toned, settings.sepia / 100)
    return image


def apply_adjustments(
    data: bytes,
    filters: FilterSettings,
    settings: Optional[Settings] = None
) -> Result[CompressedImage]:
    """
    Apply filter settings to an encoded image and export it as JPEG.

    Returns:
        Result with the exported image, or ImageProcessingError for unreadable input
    """
    settings = settings or get_settings()
    try:
        image = adjust(to_rgb(open_image(data)), filters)
        encoded = encode_jpeg(image, settings.EXPORT_QUALITY)
    except ImageProcessingError as e:
        logger.warning(f"Photo adjustment failed: {e.message}")
        return Result.failure(e)

    return Result.success(CompressedImage(data=encoded, width=image.width, height=image.height))
