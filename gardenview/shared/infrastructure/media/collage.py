# 📄 File: gardenview/shared/infrastructure/media/collage.py

# 🧭 Purpose (Layman Explanation):
# Combines two to ten garden photos into one square picture, laid out as a grid,
# film strip, polaroids, circles, a heart and a few other styles.

# 🧪 Purpose (Technical Summary):
# Pillow collage renderer. Each layout computes slots on a square canvas; every
# source is centre-cropped to cover its slot and optionally masked (ellipse, hexagon,
# heart polygon). Output is JPEG at EXPORT_QUALITY wrapped in a Result.

# 🔗 Dependencies:
# - Pillow: Image, ImageDraw, ImageOps, ImageColor
# - pydantic: CollageOptions validation

# 🔄 Connected Modules / Calls From:
# Called by: PHOTO_COLLAGE view flow through the controller, tests

import math
import random
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageOps
from pydantic import BaseModel, Field, validator

from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.core.exceptions import ImageProcessingError, ValidationError
from gardenview.shared.core.result import Result
from gardenview.shared.utils.logging import get_logger
from .compression import CompressedImage, encode_jpeg, open_image, to_rgb

logger = get_logger(__name__)

MIN_IMAGES = 2
MAX_IMAGES = 10

Box = Tuple[int, int, int, int]  # x, y, width, height


class CollageLayout(str, Enum):
    GRID = "grid"
    MASONRY = "masonry"
    FOCUS = "focus"
    STRIPS = "strips"
    FILM = "film"
    POLAROID = "polaroid"
    CIRCLE = "circle"
    HONEYCOMB = "honeycomb"
    HEART = "heart"


class CollageOptions(BaseModel):
    """Collage appearance."""
    layout: CollageLayout = CollageLayout.GRID
    canvas_size: Optional[int] = Field(None, ge=200, le=4000, description="Square edge; default from settings")
    background_color: str = "#ffffff"
    spacing: int = Field(20, ge=0, le=100)
    border: int = Field(0, ge=0, le=50, description="Outline width drawn around each tile")
    border_color: str = "#ffffff"
    seed: Optional[int] = Field(None, description="Fixes polaroid scatter for reproducible output")

    class Config:
        frozen = True

    @validator('background_color', 'border_color')
    def validate_color(cls, v):
        try:
            ImageColor.getrgb(v)
        except ValueError:
            raise ValueError(f'Unknown color: {v}')
        return v


# ===== GEOMETRY =====

def grid_shape(count: int) -> Tuple[int, int]:
    """(columns, rows); two and three photos sit side by side."""
    if count == 2:
        return 2, 1
    if count == 3:
        return 3, 1
    cols = math.ceil(math.sqrt(count))
    return cols, math.ceil(count / cols)


def grid_boxes(count: int, size: int, spacing: int, shape: Optional[Tuple[int, int]] = None) -> List[Box]:
    cols, rows = shape or grid_shape(count)
    cell_w = max(1, (size - (cols + 1) * spacing) // cols)
    cell_h = max(1, (size - (rows + 1) * spacing) // rows)
    return [
        (spacing + (i % cols) * (cell_w + spacing), spacing + (i // cols) * (cell_h + spacing), cell_w, cell_h)
        for i in range(count)
    ]


def column_boxes(count: int, x: int, width: int, size: int, spacing: int) -> List[Box]:
    """``count`` tiles stacked top to bottom in one column."""
    if count == 0:
        return []
    height = max(1, (size - (count + 1) * spacing) // count)
    return [(x, spacing + i * (height + spacing), width, height) for i in range(count)]


def _cubic(p0, p1, p2, p3, steps: int = 24) -> List[Tuple[float, float]]:
    points = []
    for i in range(steps + 1):
        t = i / steps
        u = 1 - t
        points.append((
            u ** 3 * p0[0] + 3 * u * u * t * p1[0] + 3 * u * t * t * p2[0] + t ** 3 * p3[0],
            u ** 3 * p0[1] + 3 * u * u * t * p1[1] + 3 * u * t * t * p2[1] + t ** 3 * p3[1],
        ))
    return points


def heart_polygon(size: int) -> List[Tuple[float, float]]:
    w = h = size
    segments = [
        ((w / 2, h * 0.9), (w * 0.9, h * 0.6), (w, h * 0.4), (w, h * 0.3)),
        ((w, h * 0.3), (w, h * 0.1), (w * 0.75, 0), (w * 0.5, h * 0.25)),
        ((w * 0.5, h * 0.25), (w * 0.25, 0), (0, h * 0.1), (0, h * 0.3)),
        ((0, h * 0.3), (0, h * 0.4), (w * 0.1, h * 0.6), (w / 2, h * 0.9)),
    ]
    points: List[Tuple[float, float]] = []
    for segment in segments:
        points.extend(_cubic(*segment))
    return points


def hexagon_polygon(cx: float, cy: float, radius: float) -> List[Tuple[float, float]]:
    return [
        (cx + radius * math.cos(math.pi / 3 * side), cy + radius * math.sin(math.pi / 3 * side))
        for side in range(6)
    ]


# ===== DRAWING =====

def cover(image: Image.Image, width: int, height: int) -> Image.Image:
    """Centre-crop ``image`` to fill width x height."""
    return ImageOps.fit(image, (max(1, width), max(1, height)), Image.Resampling.LANCZOS)


class _Canvas:
    def __init__(self, size: int, options: CollageOptions):
        self.size = size
        self.options = options
        self.image = Image.new("RGB", (size, size), options.background_color)
        self.draw = ImageDraw.Draw(self.image)

    def tile(self, source: Image.Image, box: Box, mask: Optional[Image.Image] = None):
        x, y, w, h = box
        self.image.paste(cover(source, w, h), (x, y), mask)
        if self.options.border and mask is None:
            self.draw.rectangle(
                [x, y, x + w - 1, y + h - 1],
                outline=self.options.border_color,
                width=self.options.border,
            )


def _render_grid(canvas: _Canvas, images: Sequence[Image.Image]):
    for image, box in zip(images, grid_boxes(len(images), canvas.size, canvas.options.spacing)):
        canvas.tile(image, box)


def _render_masonry(canvas: _Canvas, images: Sequence[Image.Image]):
    spacing, size = canvas.options.spacing, canvas.size
    half = math.ceil(len(images) / 2)
    width = max(1, (size - 3 * spacing) // 2)
    boxes = (
        column_boxes(half, spacing, width, size, spacing)
        + column_boxes(len(images) - half, 2 * spacing + width, width, size, spacing)
    )
    for image, box in zip(images, boxes):
        canvas.tile(image, box)


def _render_focus(canvas: _Canvas, images: Sequence[Image.Image]):
    spacing, size = canvas.options.spacing, canvas.size
    half = max(1, (size - 3 * spacing) // 2)
    canvas.tile(images[0], (spacing, spacing, half, size - 2 * spacing))
    for image, box in zip(images[1:], column_boxes(len(images) - 1, 2 * spacing + half, half, size, spacing)):
        canvas.tile(image, box)


def _render_strips(canvas: _Canvas, images: Sequence[Image.Image]):
    spacing, size = canvas.options.spacing, canvas.size
    boxes = column_boxes(len(images), spacing, size - 2 * spacing, size, spacing)
    for image, box in zip(images, boxes):
        canvas.tile(image, box)


def _render_film(canvas: _Canvas, images: Sequence[Image.Image]):
    spacing, size = canvas.options.spacing, canvas.size
    strip_w = size // 3
    hole = max(4, size // 60)
    x = (size - strip_w) // 2
    canvas.draw.rectangle([x, 0, x + strip_w, size], fill="#000000")
    for hy in range(hole // 2, size, hole * 2):
        canvas.draw.rectangle([x + hole // 2, hy, x + hole // 2 + hole, hy + hole], fill="#ffffff")
        canvas.draw.rectangle([x + strip_w - hole // 2 - hole, hy, x + strip_w - hole // 2, hy + hole], fill="#ffffff")
    margin = hole * 2 + hole // 2
    boxes = column_boxes(len(images), x + margin, strip_w - 2 * margin, size, spacing)
    for image, box in zip(images, boxes):
        canvas.tile(image, box)


def _render_polaroid(canvas: _Canvas, images: Sequence[Image.Image]):
    rng = random.Random(canvas.options.seed)
    size = canvas.size
    card_w = size // 4
    card_h = int(card_w * 7 / 6)
    frame = max(4, card_w // 15)
    for image, (gx, gy, gw, gh) in zip(images, grid_boxes(len(images), size, canvas.options.spacing)):
        card = Image.new("RGBA", (card_w, card_h), "#ffffff")
        photo_edge = card_w - 2 * frame
        card.paste(cover(image, photo_edge, photo_edge), (frame, frame))
        rotated = card.rotate(rng.uniform(-15, 15), resample=Image.Resampling.BICUBIC, expand=True)
        jitter_x = rng.randint(-gw // 8, gw // 8) if gw >= 8 else 0
        jitter_y = rng.randint(-gh // 8, gh // 8) if gh >= 8 else 0
        px = gx + (gw - rotated.width) // 2 + jitter_x
        py = gy + (gh - rotated.height) // 2 + jitter_y
        canvas.image.paste(rotated, (px, py), rotated)


def _render_circle(canvas: _Canvas, images: Sequence[Image.Image]):
    spacing = canvas.options.spacing
    for image, (x, y, w, h) in zip(images, grid_boxes(len(images), canvas.size, spacing)):
        edge = min(w, h)
        box = (x + (w - edge) // 2, y + (h - edge) // 2, edge, edge)
        mask = Image.new("L", (edge, edge), 0)
        ImageDraw.Draw(mask).ellipse([0, 0, edge - 1, edge - 1], fill=255)
        canvas.tile(image, box, mask)
        if spacing:
            canvas.draw.ellipse(
                [box[0], box[1], box[0] + edge - 1, box[1] + edge - 1],
                outline=canvas.options.border_color,
                width=max(1, spacing // 2),
            )


def _render_honeycomb(canvas: _Canvas, images: Sequence[Image.Image]):
    spacing, size = canvas.options.spacing, canvas.size
    radius = size / 8
    horizontal = radius * 1.5
    vertical = math.sqrt(3) * radius
    edge = int(radius * 2)
    for index, image in enumerate(images):
        col, row = index % 3, index // 3
        cx = spacing + radius + col * horizontal
        cy = spacing + radius + row * vertical + (vertical / 2 if col % 2 else 0)
        left, top = int(cx - radius), int(cy - radius)
        mask = Image.new("L", (edge, edge), 0)
        ImageDraw.Draw(mask).polygon(hexagon_polygon(cx - left, cy - top, radius), fill=255)
        canvas.tile(image, (left, top, edge, edge), mask)
        if spacing:
            canvas.draw.polygon(
                hexagon_polygon(cx, cy, radius),
                outline=canvas.options.border_color,
                width=max(1, spacing // 2),
            )


def _render_heart(canvas: _Canvas, images: Sequence[Image.Image]):
    size, spacing = canvas.size, canvas.options.spacing
    cols = math.ceil(math.sqrt(len(images)))
    shape = (cols, math.ceil(len(images) / cols))
    layer = Image.new("RGB", (size, size), canvas.options.background_color)
    for image, (x, y, w, h) in zip(images, grid_boxes(len(images), size, spacing, shape)):
        layer.paste(cover(image, w, h), (x, y))
    outline = heart_polygon(size)
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).polygon(outline, fill=255)
    canvas.image.paste(layer, (0, 0), mask)
    if spacing:
        canvas.draw.line(outline + [outline[0]], fill=canvas.options.border_color, width=spacing, joint="curve")


_RENDERERS: Dict[CollageLayout, Callable[[_Canvas, Sequence[Image.Image]], None]] = {
    CollageLayout.GRID: _render_grid,
    CollageLayout.MASONRY: _render_masonry,
    CollageLayout.FOCUS: _render_focus,
    CollageLayout.STRIPS: _render_strips,
    CollageLayout.FILM: _render_film,
    CollageLayout.POLAROID: _render_polaroid,
    CollageLayout.CIRCLE: _render_circle,
    CollageLayout.HONEYCOMB: _render_honeycomb,
    CollageLayout.HEART: _render_heart,
}


def render_collage(
    images: Sequence[bytes],
    options: Optional[CollageOptions] = None,
    settings: Optional[Settings] = None
) -> Result[CompressedImage]:
    """
    Render 2 to 10 encoded images into one square JPEG.

    Returns:
        Result with the collage, ValidationError for a wrong image count,
        or ImageProcessingError when a source cannot be decoded
    """
    settings = settings or get_settings()
    options = options or CollageOptions()

    if not MIN_IMAGES <= len(images) <= MAX_IMAGES:
        return Result.failure(ValidationError(
            f"A collage needs between {MIN_IMAGES} and {MAX_IMAGES} photos",
            field="images",
            value=len(images),
            constraint=f"{MIN_IMAGES}..{MAX_IMAGES}",
        ))

    size = options.canvas_size or settings.COLLAGE_CANVAS_SIZE
    try:
        sources = [to_rgb(open_image(data, stage="collage")) for data in images]
        canvas = _Canvas(size, options)
        _RENDERERS[options.layout](canvas, sources)
        encoded = encode_jpeg(canvas.image, settings.EXPORT_QUALITY)
    except ImageProcessingError as e:
        logger.warning(f"Collage rendering failed: {e.message}", layout=options.layout.value)
        return Result.failure(e)

    logger.debug("Collage rendered", layout=options.layout.value, images=len(images), bytes=len(encoded))
    return Result.success(CompressedImage(data=encoded, width=size, height=size))
