# 📄 File: gardenview/modules/garden_management/application/usage.py
# 🧭 Purpose (Layman Explanation):
# Counts the AI questions you ask each day and says "enough for today" once your
# plan's daily allowance is used up.
#
# 🧪 Purpose (Technical Summary):
# UsageTracker keeps the signed-in user's AIUsage, mirrors it to the local settings
# store on every call and upserts the day's row through the gateway. A missing
# user_usage table only skips the remote copy.
#
# 🔗 Dependencies:
# - domain.models.usage (AIUsage, tier limits)
# - gardenview.shared.infrastructure.storage (LocalSettingsStore)
# - GardenGateway.upsert_ai_usage
#
# 🔄 Connected Modules / Calls From:
# - HandlerBase._ai_allowed / _track_ai (plants, assistant handlers)
# - SessionHandlers.handle_auth_change (load)

from datetime import date
from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from gardenview.shared.config.settings import Settings
from gardenview.shared.core.exceptions import BackendError
from gardenview.shared.infrastructure.storage.local_settings import LocalSettingsStore
from gardenview.shared.utils.logging import get_logger
from ..domain.models import AIUsage
from ..domain.models.usage import DEFAULT_ESTIMATED_COST, IMAGE_TOKEN_COST
from ..domain.repositories.garden_gateway import GardenGateway
from .state.store import GardenStore

logger = get_logger(__name__)


class UsageTracker:
    """Daily AI allowance of the signed-in user."""

    def __init__(
        self,
        store: GardenStore,
        gateway: GardenGateway,
        local_store: LocalSettingsStore,
        config: Settings,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.gateway = gateway
        self.local_store = local_store
        self.config = config
        self.today = today
        self.usage = AIUsage(day=today())

    def load(self, user_id: str) -> AIUsage:
        """Usage saved on this device for ``user_id``; a fresh record for anyone else."""
        raw = self.local_store.get(self.config.AI_USAGE_STORAGE_KEY)
        usage = None
        if isinstance(raw, dict):
            try:
                usage = AIUsage.model_validate(raw)
            except PydanticValidationError as e:
                logger.warning(f"Ignoring invalid AI usage record: {e.error_count()} errors")
        if usage is None or usage.user_id != user_id:
            usage = AIUsage(user_id=user_id, day=self.today())
        self.usage = usage.for_day(self.today())
        return self.usage

    def remaining(self) -> int:
        return self.usage.remaining(self.store.settings.tier, self.today())

    def allows(self, images: int = 0) -> bool:
        estimated = DEFAULT_ESTIMATED_COST + images * IMAGE_TOKEN_COST
        return self.usage.allows(self.store.settings.tier, estimated, self.today())

    async def record(self, action: str, output: str, images: int = 0) -> AIUsage:
        """Count one AI call locally, then upsert the day's row."""
        self.usage = self.usage.recorded(action, output, images, self.today())
        self.local_store.set(self.config.AI_USAGE_STORAGE_KEY, self.usage.to_row())

        user = self.store.session_user
        if user is None:
            return self.usage
        result = await self.gateway.upsert_ai_usage(user.id, self.usage.to_row())
        if not result.ok:
            if isinstance(result.error, BackendError) and result.error.is_missing_schema:
                logger.debug("AI usage table not provisioned; kept locally")
            else:
                logger.warning(f"Failed to store AI usage: {result.error.message}", user_id=user.id)
        return self.usage


__all__ = ["UsageTracker"]
