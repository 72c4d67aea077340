# =============================================================================
# tests/unit/test_media_pipeline.py
# Photo compression, adjustment filters and collage rendering
# =============================================================================

import base64
import io

import pytest
from PIL import Image
from pydantic import ValidationError as PydanticValidationError

from gardenview.shared.core.exceptions import (
    FileTooLargeError,
    ImageProcessingError,
    InvalidFileTypeError,
    ValidationError,
)
from gardenview.shared.infrastructure.media.collage import (
    MAX_IMAGES,
    CollageLayout,
    CollageOptions,
    grid_shape,
    render_collage,
)
from gardenview.shared.infrastructure.media.compression import (
    CompressionMode,
    compress_data_url,
    compress_image,
    normalize_content_type,
    to_rgb,
)
from gardenview.shared.infrastructure.media.filters import FilterSettings, apply_adjustments

from tests.fakes import make_image_bytes


def decode(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data))


# =============================================================================
# COMPRESSION
# =============================================================================

class TestCompression:
    """Standard and high profiles"""

    def test_standard_profile_bounds_long_edge(self, config):
        result = compress_image(make_image_bytes((1600, 900)), "image/png", settings=config)

        assert result.ok
        image = result.value
        assert (image.width, image.height) == (512, 288)
        assert decode(image.data).format == "JPEG"
        assert image.content_type == "image/jpeg"

    def test_high_profile(self, config):
        result = compress_image(make_image_bytes((900, 1800)), "image/png", CompressionMode.HIGH, config)

        assert (result.value.width, result.value.height) == (512, 1024)

    def test_small_images_are_not_upscaled(self, config):
        result = compress_image(make_image_bytes((120, 80)), settings=config)

        assert (result.value.width, result.value.height) == (120, 80)

    def test_content_type_detected_when_missing(self, config):
        assert compress_image(make_image_bytes(fmt="WEBP"), None, settings=config).ok

    def test_oversized_input(self, config):
        config.MAX_INPUT_IMAGE_BYTES = 100

        result = compress_image(make_image_bytes(), "image/png", settings=config)

        assert isinstance(result.error, FileTooLargeError)

    def test_unsupported_type(self, config):
        result = compress_image(b"GIF89a....", "image/gif", settings=config)

        assert isinstance(result.error, InvalidFileTypeError)
        assert result.error.message == "Invalid file type. Please upload an image (JPEG, PNG, WEBP)."

    def test_declared_image_that_is_not_one(self, config):
        result = compress_image(b"definitely not pixels", "image/jpeg", settings=config)

        assert isinstance(result.error, ImageProcessingError)

    def test_output_ceiling_forces_smaller_file(self, config):
        noisy = Image.effect_noise((512, 512), 120).convert("RGB")
        buffer = io.BytesIO()
        noisy.save(buffer, format="PNG")
        config.MAX_COMPRESSED_IMAGE_BYTES = 15_000

        result = compress_image(buffer.getvalue(), "image/png", settings=config)

        assert result.ok
        assert result.value.size <= 15_000

    def test_data_url_payload(self, config):
        payload = "data:image/png;base64," + base64.b64encode(make_image_bytes((64, 64))).decode()

        result = compress_data_url(payload, "standard", config)

        assert result.value.data_url.startswith("data:image/jpeg;base64,")

    def test_transparency_flattened_onto_white(self):
        rgba = Image.new("RGBA", (4, 4), (255, 0, 0, 0))

        flattened = to_rgb(rgba)

        assert flattened.mode == "RGB"
        assert flattened.getpixel((0, 0)) == (255, 255, 255)

    @pytest.mark.parametrize("raw, expected", [
        ("image/JPG", "image/jpeg"),
        ("image/png; charset=binary", "image/png"),
        ("", None),
    ])
    def test_normalize_content_type(self, raw, expected):
        assert normalize_content_type(raw) == expected


# =============================================================================
# FILTERS
# =============================================================================

class TestFilters:

    def test_grayscale_removes_colour(self, config):
        result = apply_adjustments(make_image_bytes((32, 32), (200, 40, 40)), FilterSettings(grayscale=100), config)

        r, g, b = decode(result.value.data).convert("RGB").getpixel((16, 16))
        assert max(r, g, b) - min(r, g, b) <= 3

    def test_brightness_zero_is_black(self, config):
        result = apply_adjustments(make_image_bytes((16, 16)), FilterSettings(brightness=0), config)

        assert max(decode(result.value.data).convert("RGB").getpixel((8, 8))) <= 3

    def test_identity(self):
        assert FilterSettings().is_identity
        assert not FilterSettings(sepia=10).is_identity

    def test_out_of_range_slider(self):
        with pytest.raises(PydanticValidationError):
            FilterSettings(contrast=250)

    def test_unreadable_input(self, config):
        assert isinstance(apply_adjustments(b"nope", FilterSettings(), config).error, ImageProcessingError)


# =============================================================================
# COLLAGE
# =============================================================================

class TestCollage:
    """Square collage output for every layout"""

    @pytest.mark.parametrize("count, shape", [(2, (2, 1)), (3, (3, 1)), (4, (2, 2)), (5, (3, 2)), (10, (4, 3))])
    def test_grid_shape(self, count, shape):
        assert grid_shape(count) == shape

    @pytest.mark.parametrize("layout", list(CollageLayout))
    def test_every_layout_renders(self, config, layout):
        images = [make_image_bytes((90, 60), (20 * n, 100, 50)) for n in range(5)]
        options = CollageOptions(layout=layout, canvas_size=300, spacing=10, border=2, seed=7)

        result = render_collage(images, options, config)

        assert result.ok
        assert decode(result.value.data).size == (300, 300)

    def test_default_canvas_size(self, config):
        result = render_collage([make_image_bytes((40, 40))] * 2, settings=config)

        assert (result.value.width, result.value.height) == (config.COLLAGE_CANVAS_SIZE,) * 2

    @pytest.mark.parametrize("count", [1, MAX_IMAGES + 1])
    def test_image_count_limits(self, config, count):
        result = render_collage([make_image_bytes((20, 20))] * count, settings=config)

        assert isinstance(result.error, ValidationError)
        assert result.error.details["field"] == "images"

    def test_bad_source_image(self, config):
        result = render_collage([make_image_bytes((20, 20)), b"broken"], settings=config)

        assert isinstance(result.error, ImageProcessingError)

    def test_unknown_colour_rejected(self):
        with pytest.raises(PydanticValidationError):
            CollageOptions(background_color="not-a-colour")
