# 📄 File: tests/integration/test_photo_flows.py
# 🧭 Purpose (Layman Explanation):
# Checks editing a photo's look and combining photos into a collage from the app.
# 🧪 Purpose (Technical Summary):
# PhotoHandlers against the fakes: data URL in, JPEG data URL out, toasts on bad
# input, count validation and saving an edited photo back onto a plant.
# 🔗 Dependencies:
# pytest, pytest-asyncio, Pillow, tests.conftest fakes
# 🔄 Connected Modules / Calls From:
# pytest

import base64
import io

import pytest
from PIL import Image

from gardenview.modules.garden_management.application.commands import PhotoTarget, PhotoTargetKind
from gardenview.shared.core.exceptions import ValidationError
from gardenview.shared.infrastructure.media.collage import CollageLayout, CollageOptions
from gardenview.shared.infrastructure.media.filters import FilterSettings

from tests.fakes import USER_ID, make_image_bytes


def as_data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode()}"


def decode_data_url(data_url: str) -> Image.Image:
    header, encoded = data_url.split(",", 1)
    assert header == "data:image/jpeg;base64"
    return Image.open(io.BytesIO(base64.b64decode(encoded)))


class TestEditPhoto:
    """Filter adjustments from the optimize screen"""

    async def test_returns_jpeg_data_url(self, signed_in):
        edited = await signed_in.photos.edit(as_data_url(make_image_bytes((64, 48))), FilterSettings(sepia=60))

        assert decode_data_url(edited).size == (64, 48)
        assert signed_in.store.is_loading is False

    async def test_raw_bytes_accepted(self, signed_in):
        edited = await signed_in.photos.edit(make_image_bytes((20, 20)), FilterSettings(grayscale=100))

        assert edited.startswith("data:image/jpeg;base64,")

    async def test_unreadable_photo_toasts(self, signed_in):
        assert await signed_in.photos.edit(as_data_url(b"not an image"), FilterSettings()) is None
        assert signed_in.notifier.shown == ["Photo could not be edited."]

    async def test_save_edit_replaces_plant_photo(self, signed_in, gateway, media):
        plant_id = gateway.seed("plants", {"owner_id": USER_ID, "name": "Fern", "is_active": True,
                                           "sequence_number": 1, "location": [],
                                           "image_url": f"{USER_ID}/old.jpg"})
        await signed_in.session.load_all()

        saved = await signed_in.photos.save_edit(PhotoTarget(kind=PhotoTargetKind.PLANT, entity_id=plant_id),
                                                 as_data_url(make_image_bytes((40, 40))),
                                                 FilterSettings(brightness=120))

        assert saved is True
        assert gateway.tables["plants"][plant_id]["image_url"] == media.uploaded[-1]
        assert media.deleted == [f"{USER_ID}/old.jpg"]

    async def test_save_edit_skips_upload_when_edit_fails(self, signed_in, media):
        saved = await signed_in.photos.save_edit(PhotoTarget(kind=PhotoTargetKind.PLANT, entity_id="p1"),
                                                 b"broken", FilterSettings())

        assert saved is False
        assert media.uploaded == []


class TestCollage:

    async def test_collage_is_square(self, signed_in, config):
        images = [as_data_url(make_image_bytes((60, 40), (30 * n, 90, 90))) for n in range(4)]

        collage = await signed_in.photos.collage(images, CollageOptions(layout=CollageLayout.POLAROID,
                                                                         canvas_size=240, seed=3))

        assert decode_data_url(collage).size == (240, 240)

    async def test_default_options(self, signed_in, config):
        collage = await signed_in.photos.collage([make_image_bytes((30, 30))] * 2)

        assert decode_data_url(collage).size == (config.COLLAGE_CANVAS_SIZE,) * 2

    async def test_single_photo_rejected(self, signed_in):
        with pytest.raises(ValidationError):
            await signed_in.photos.collage([make_image_bytes((30, 30))])

        assert signed_in.store.is_loading is False

    async def test_broken_source_toasts(self, signed_in):
        assert await signed_in.photos.collage([make_image_bytes((30, 30)), b"broken"]) is None
        assert signed_in.notifier.last == "Collage could not be created."
