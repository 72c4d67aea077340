# 📄 File: gardenview/shared/infrastructure/media/compression.py

# 🧭 Purpose (Layman Explanation):
# Shrinks camera photos before they are sent anywhere, so uploads are quick and the
# AI helper gets a small, correctly rotated picture.

# 🧪 Purpose (Technical Summary):
# Pillow-based compression into RGB JPEG under two profiles (standard 512px/q60,
# high 1024px/q85). Applies EXIF orientation, keeps aspect ratio, flattens alpha onto
# white, and enforces an output byte ceiling by lowering quality and then downscaling.
# Returns Result values; nothing raises for bad input.

# 🔗 Dependencies:
# - Pillow: decoding, resizing, JPEG encoding
# - gardenview.shared.core.result

# 🔄 Connected Modules / Calls From:
# Called by: plant handlers (prepare_image), log handlers via to_thread
# Related: filters.py, collage.py (share decode/encode helpers)

import base64
import io
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.core.exceptions import (
    FileTooLargeError,
    GardenViewException,
    ImageProcessingError,
    InvalidFileTypeError,
)
from gardenview.shared.core.result import Result
from gardenview.shared.infrastructure.storage.supabase_storage import decode_image_payload
from gardenview.shared.utils.logging import get_logger

logger = get_logger(__name__)

JPEG_CONTENT_TYPE = "image/jpeg"
MIN_QUALITY = 30
QUALITY_STEP = 10
DOWNSCALE_FACTOR = 0.8
MIN_DIMENSION = 16

# Pillow format name -> content type, for payloads without a declared type
_FORMAT_CONTENT_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "HEIF": "image/heif",
    "HEIC": "image/heic",
}

_CONTENT_TYPE_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}


class CompressionMode(str, Enum):
    STANDARD = "standard"
    HIGH = "high"


@dataclass(frozen=True)
class CompressedImage:
    """Encoded JPEG ready for upload or AI calls."""
    data: bytes
    width: int
    height: int
    content_type: str = JPEG_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


def profile_for(mode: CompressionMode, settings: Settings) -> Tuple[int, int]:
    """(max edge, JPEG quality) for a compression mode."""
    if mode == CompressionMode.HIGH:
        return settings.HIGH_MAX_DIMENSION, settings.HIGH_QUALITY
    return settings.STANDARD_MAX_DIMENSION, settings.STANDARD_QUALITY


def normalize_content_type(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    value = content_type.split(";", 1)[0].strip().lower()
    return _CONTENT_TYPE_ALIASES.get(value, value)


def open_image(data: bytes, stage: str = "decode") -> Image.Image:
    """
    Decode bytes into a fully loaded, upright Pillow image.

    Raises:
        ImageProcessingError: If Pillow cannot read the data
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageProcessingError(f"Could not read image: {e}", stage=stage)
    return ImageOps.exif_transpose(image)


def to_rgb(image: Image.Image, background: str = "#ffffff") -> Image.Image:
    """Flatten any mode into RGB, compositing transparency onto ``background``."""
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, background)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas
    return image.convert("RGB")


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True, progressive=True)
    return output.getvalue()


def encode_within(image: Image.Image, quality: int, max_bytes: int) -> Tuple[bytes, Image.Image]:
    """
    Encode ``image`` as JPEG no larger than ``max_bytes``.

    Quality is lowered in steps down to MIN_QUALITY first; after that the image
    is downscaled until it fits.

    Raises:
        ImageProcessingError: If even a tiny rendition does not fit
    """
    data = encode_jpeg(image, quality)
    while len(data) > max_bytes:
        if quality > MIN_QUALITY:
            quality = max(MIN_QUALITY, quality - QUALITY_STEP)
        else:
            width, height = image.size
            if min(width, height) <= MIN_DIMENSION:
                raise ImageProcessingError(
                    f"Cannot encode image below {max_bytes} bytes", stage="encode"
                )
            new_size = (
                max(MIN_DIMENSION, int(width * DOWNSCALE_FACTOR)),
                max(MIN_DIMENSION, int(height * DOWNSCALE_FACTOR)),
            )
            image = image.resize(new_size, Image.Resampling.LANCZOS)
        data = encode_jpeg(image, quality)
    return data, image


def _detect_content_type(data: bytes) -> Optional[str]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            return _FORMAT_CONTENT_TYPES.get(image.format or "")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        return None


def compress_image(
    data: bytes,
    content_type: Optional[str] = None,
    mode: Union[CompressionMode, str] = CompressionMode.STANDARD,
    settings: Optional[Settings] = None
) -> Result[CompressedImage]:
    """
    Compress a raw photo into a JPEG under the requested profile.

    Args:
        data: Raw image bytes
        content_type: Declared content type; detected from the bytes when omitted
        mode: 'standard' (512px, q60) or 'high' (1024px, q85)
        settings: Media limits (defaults to application settings)

    Returns:
        Result with a CompressedImage, or a typed failure:
        FileTooLargeError, InvalidFileTypeError or ImageProcessingError
    """
    settings = settings or get_settings()
    mode = CompressionMode(mode)

    if len(data) > settings.MAX_INPUT_IMAGE_BYTES:
        return Result.failure(FileTooLargeError(
            f"File too large. Max {settings.MAX_INPUT_IMAGE_BYTES // (1024 * 1024)}MB allowed.",
            file_size=len(data),
            max_size=settings.MAX_INPUT_IMAGE_BYTES,
        ))

    resolved_type = normalize_content_type(content_type) or _detect_content_type(data)
    if resolved_type not in settings.ALLOWED_IMAGE_TYPES:
        return Result.failure(InvalidFileTypeError(
            "Invalid file type. Please upload an image (JPEG, PNG, WEBP).",
            file_type=resolved_type,
            allowed_types=list(settings.ALLOWED_IMAGE_TYPES),
        ))

    max_dimension, quality = profile_for(mode, settings)
    try:
        image = to_rgb(open_image(data))
        image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        encoded, image = encode_within(image, quality, settings.MAX_COMPRESSED_IMAGE_BYTES)
    except ImageProcessingError as e:
        logger.warning(f"Image compression failed: {e.message}", content_type=resolved_type)
        return Result.failure(e)

    logger.debug(
        "Image compressed",
        mode=mode.value,
        original_bytes=len(data),
        compressed_bytes=len(encoded),
        width=image.width,
        height=image.height,
    )
    return Result.success(CompressedImage(data=encoded, width=image.width, height=image.height))


def compress_data_url(
    image: str,
    mode: Union[CompressionMode, str] = CompressionMode.STANDARD,
    settings: Optional[Settings] = None
) -> Result[CompressedImage]:
    """compress_image() for a data URL or bare base64 payload."""
    try:
        content_type, data = decode_image_payload(image)
    except GardenViewException as e:
        return Result.failure(e)
    return compress_image(data, content_type, mode, settings)
