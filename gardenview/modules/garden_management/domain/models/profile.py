# 📄 File: gardenview/modules/garden_management/domain/models/profile.py
# 🧭 Purpose (Layman Explanation):
# Who is signed in, and whether their account is approved yet or still on the waitlist.
# 🧪 Purpose (Technical Summary):
# SessionUser (auth identity handed in by the view layer) and UserProfile
# (profiles row: approval status plus the remote settings object).
# 🔗 Dependencies:
# pydantic, typing, enum
# 🔄 Connected Modules / Calls From:
# session handlers, navigation (auth routing), Supabase row mappers

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ProfileStatus(str, Enum):
    """Account approval state"""
    PENDING = "pending"
    APPROVED = "approved"


class SessionUser(BaseModel):
    """Authenticated identity from the auth provider."""
    id: str
    email: Optional[str] = None

    class Config:
        frozen = True


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    status: ProfileStatus = ProfileStatus.PENDING
    settings: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
