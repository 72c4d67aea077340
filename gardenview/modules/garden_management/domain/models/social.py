# 📄 File: gardenview/modules/garden_management/domain/models/social.py
# 🧭 Purpose (Layman Explanation):
# Posts in the shared "World" feed: who posted which plant moment, how many people
# liked it, whether you liked it, and the comments underneath.
# 🧪 Purpose (Technical Summary):
# SocialPost and SocialComment models with denormalized like count and
# viewer-relative liked flag; helpers produce optimistic like-toggled copies.
# 🔗 Dependencies:
# pydantic, datetime, typing
# 🔄 Connected Modules / Calls From:
# store.py, social handlers, Supabase row mappers

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .weather import WeatherSnapshot


class SocialComment(BaseModel):
    id: str
    post_id: str
    user_id: str
    author_name: str = "Gardener"
    text: str
    created_at: Optional[datetime] = None

    class Config:
        frozen = True


class SocialPost(BaseModel):
    """A shared plant moment in the social feed."""
    id: str
    user_id: str
    author_name: str = "Gardener"
    plant_name: str = ""
    title: str = ""
    description: str = ""
    image_ref: Optional[str] = None
    image_url: Optional[str] = None
    event_date: Optional[date] = None
    created_at: Optional[datetime] = None
    weather: Optional[WeatherSnapshot] = None
    country_code: Optional[str] = None
    likes: int = Field(0, ge=0)
    is_liked: bool = False
    comments: List[SocialComment] = Field(default_factory=list)

    class Config:
        frozen = True

    def toggled_like(self) -> "SocialPost":
        """Copy with the viewer's like flipped and the count adjusted (never below zero)."""
        if self.is_liked:
            return self.model_copy(update={"is_liked": False, "likes": max(0, self.likes - 1)})
        return self.model_copy(update={"is_liked": True, "likes": self.likes + 1})

    def with_comment(self, comment: SocialComment) -> "SocialPost":
        return self.model_copy(update={"comments": [*self.comments, comment]})
