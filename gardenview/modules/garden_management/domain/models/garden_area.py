# 📄 File: gardenview/modules/garden_management/domain/models/garden_area.py
# 🧭 Purpose (Layman Explanation):
# A garden area is a named photo of part of your garden (front bed, balcony) that
# plants can be pinned onto.
# 🧪 Purpose (Technical Summary):
# GardenArea entity and the LocationPin value object that plants use to place
# themselves on an area at relative (percentage) coordinates.
# 🔗 Dependencies:
# pydantic, typing
# 🔄 Connected Modules / Calls From:
# plant.py (pins), store.py, garden handlers, Supabase row mappers

from typing import Optional

from pydantic import BaseModel, Field


class LocationPin(BaseModel):
    """Placement of a plant on a garden area; x/y are percentages of the area image."""
    garden_id: str
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)

    class Config:
        frozen = True


class GardenArea(BaseModel):
    """A named garden area photo."""
    id: str
    owner_id: Optional[str] = None
    name: str
    image_ref: Optional[str] = None  # stored object path or external URL
    image_url: Optional[str] = None  # resolved display URL

    class Config:
        frozen = True
