# 📄 File: gardenview/shared/infrastructure/media/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The photo workshop: shrinking camera pictures, adjusting their look and combining
# several into a collage.
#
# 🧪 Purpose (Technical Summary):
# Media preparation pipeline built on Pillow. All entry points return Result values.
#
# 🔗 Dependencies:
# - Pillow
#
# 🔄 Connected Modules / Calls From:
# - Plant and log handlers (compression before validation and upload)
# - Photo optimize and collage flows

from .collage import CollageLayout, CollageOptions, render_collage
from .compression import CompressedImage, CompressionMode, compress_data_url, compress_image
from .filters import FilterSettings, apply_adjustments

__all__ = [
    "CollageLayout",
    "CollageOptions",
    "render_collage",
    "CompressedImage",
    "CompressionMode",
    "compress_data_url",
    "compress_image",
    "FilterSettings",
    "apply_adjustments",
]
