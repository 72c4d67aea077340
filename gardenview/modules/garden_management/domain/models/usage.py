# 📄 File: gardenview/modules/garden_management/domain/models/usage.py
# 🧭 Purpose (Layman Explanation):
# Keeps score of how much the AI helper was used today, so each plan (Free, Silver,
# Gold, Diamond) gets its fair daily share.
# 🧪 Purpose (Technical Summary):
# AIUsage value object: token estimate per AI call (1 token ~ 4 characters, a fixed
# cost per image, output weighted x5), a daily score that resets on a new day, and
# the per-tier daily capacity check.
# 🔗 Dependencies:
# pydantic, math, datetime
# 🔄 Connected Modules / Calls From:
# application/usage.py (UsageTracker), supabase_gateway.upsert_ai_usage

import math
from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .settings import Tier

# Daily score allowance per subscription tier
TIER_DAILY_LIMITS: Dict[Tier, int] = {
    Tier.FREE: 50_000,
    Tier.SILVER: 250_000,
    Tier.GOLD: 500_000,
    Tier.DIAMOND: 999_999_999,
}

IMAGE_TOKEN_COST = 258
OUTPUT_WEIGHT = 5
DEFAULT_ESTIMATED_COST = 100


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text or "") / 4)


class AIUsage(BaseModel):
    """One user's AI consumption; ``daily_score`` counts for ``day`` only."""
    user_id: Optional[str] = None
    day: date = Field(default_factory=date.today)
    daily_score: int = Field(0, ge=0)
    total_score: int = Field(0, ge=0)
    requests: int = Field(0, ge=0)
    images_scanned: int = Field(0, ge=0)
    input_tokens: int = Field(0, ge=0)
    output_tokens: int = Field(0, ge=0)

    class Config:
        frozen = True

    def for_day(self, today: date) -> "AIUsage":
        """The same record with the daily score reset when ``today`` is a new day."""
        if self.day == today:
            return self
        return self.model_copy(update={"day": today, "daily_score": 0})

    def recorded(self, action: str, output: str, images: int = 0, today: Optional[date] = None) -> "AIUsage":
        """
        Add one AI call.

        Score = input tokens + output tokens x5, where input counts the action name
        plus a fixed cost for every image sent.
        """
        current = self.for_day(today or date.today())
        input_tokens = estimate_tokens(action) + images * IMAGE_TOKEN_COST
        output_tokens = estimate_tokens(output)
        score = input_tokens + output_tokens * OUTPUT_WEIGHT
        return current.model_copy(update={
            "daily_score": current.daily_score + score,
            "total_score": current.total_score + score,
            "requests": current.requests + 1,
            "images_scanned": current.images_scanned + images,
            "input_tokens": current.input_tokens + input_tokens,
            "output_tokens": current.output_tokens + output_tokens,
        })

    def remaining(self, tier: Tier, today: Optional[date] = None) -> int:
        current = self.for_day(today or date.today())
        return max(0, TIER_DAILY_LIMITS[Tier(tier)] - current.daily_score)

    def allows(self, tier: Tier, estimated_cost: int = DEFAULT_ESTIMATED_COST,
               today: Optional[date] = None) -> bool:
        return estimated_cost <= self.remaining(tier, today)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
