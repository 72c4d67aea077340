# 📄 File: gardenview/modules/garden_management/application/settings_sync.py
# 🧭 Purpose (Layman Explanation):
# Remembers your preferences on this device straight away and copies them to your
# account a couple of seconds after you stop changing them.
#
# 🧪 Purpose (Technical Summary):
# Local-first settings persistence. Every change is written synchronously to the
# LocalSettingsStore, then a debounced DeferredTask upserts the final settings to
# the profile. Pending writes are flushed on sign-out.
#
# 🔗 Dependencies:
# - gardenview.shared.core.scheduler (DeferredTask)
# - gardenview.shared.infrastructure.storage (LocalSettingsStore)
# - GardenGateway.upsert_profile_settings
#
# 🔄 Connected Modules / Calls From:
# - SessionHandlers (update_settings, set_home_location, set_chat_dock, sign_out)

from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from gardenview.shared.config.settings import Settings
from gardenview.shared.core.scheduler import DeferredTask
from gardenview.shared.infrastructure.storage.local_settings import LocalSettingsStore
from gardenview.shared.utils.logging import get_logger
from ..domain.models import UserSettings
from ..domain.repositories.garden_gateway import GardenGateway
from .state.store import GardenStore

logger = get_logger(__name__)


def _key(name: Any) -> str:
    """Compare persisted, alias and field spellings alike (limitAI, limitAi, limit_ai)."""
    return str(name).replace("_", "").lower()


class SettingsSync:
    """
    Writes settings locally at once and remotely after a quiet period.
    """

    def __init__(
        self,
        store: GardenStore,
        gateway: GardenGateway,
        local_store: LocalSettingsStore,
        config: Settings,
    ):
        self.store = store
        self.gateway = gateway
        self.local_store = local_store
        self.config = config
        self._debounce = DeferredTask(config.SETTINGS_SYNC_DEBOUNCE_SECONDS, name="settings-sync")

    @property
    def pending(self) -> bool:
        return self._debounce.pending

    # ===== LOCAL =====

    def load_local(self) -> UserSettings:
        """Settings saved on this device, or defaults when there are none or they are unreadable."""
        raw = self.local_store.get(self.config.SETTINGS_STORAGE_KEY)
        if not isinstance(raw, dict):
            return UserSettings()
        try:
            return UserSettings.from_storage(raw)
        except PydanticValidationError as e:
            logger.warning(f"Ignoring invalid local settings: {e.error_count()} errors")
            return UserSettings()

    def load_chat_preferences(self) -> None:
        self.store.chat_docked = bool(self.local_store.get(self.config.CHAT_DOCKED_KEY, False))
        width = self.local_store.get(self.config.CHAT_WIDTH_KEY)
        self.store.chat_width = int(width) if isinstance(width, (int, float)) else None

    def save_chat_preferences(self, docked: bool, width: Optional[int] = None) -> None:
        self.store.chat_docked = docked
        self.local_store.set(self.config.CHAT_DOCKED_KEY, docked)
        if width is not None:
            self.store.chat_width = width
            self.local_store.set(self.config.CHAT_WIDTH_KEY, width)

    # ===== SYNC =====

    def apply(self, settings: UserSettings, remote: bool = True) -> UserSettings:
        """
        Make ``settings`` current: store, local storage, then (debounced) profile.

        Args:
            settings: New settings
            remote: Schedule the profile upsert (skipped while merging remote settings)
        """
        self.store.settings = settings
        self.local_store.set(self.config.SETTINGS_STORAGE_KEY, settings.to_storage())
        if remote and self.store.session_user is not None:
            self._debounce.schedule(self._push)
        return settings

    def update(self, **changes: Any) -> UserSettings:
        return self.apply(self.store.settings.updated(**changes))

    def merge_remote(self, remote: Optional[Dict[str, Any]]) -> UserSettings:
        """
        Overlay profile settings on the current (local) ones and persist the merge locally.

        Remote keys that fail validation are dropped; the local value is kept for them.
        """
        overlay = dict(remote or {})
        try:
            merged = self.store.settings.merged_with(overlay)
        except PydanticValidationError as e:
            rejected = {_key(err["loc"][0]) for err in e.errors() if err.get("loc")}
            logger.warning(
                f"Ignoring invalid profile settings: {', '.join(sorted(rejected))}",
                error_count=e.error_count(),
            )
            overlay = {key: value for key, value in overlay.items() if _key(key) not in rejected}
            merged = self.store.settings.merged_with(overlay)
        return self.apply(merged, remote=False)

    async def _push(self) -> None:
        user = self.store.session_user
        if user is None:
            return
        result = await self.gateway.upsert_profile_settings(user.id, self.store.settings.to_storage())
        if not result.ok:
            logger.error(f"Failed to sync settings to profile: {result.error.message}", user_id=user.id)
            return
        logger.debug("Settings synced to profile", user_id=user.id)

    async def flush(self) -> None:
        """Write a pending change now (sign-out)."""
        await self._debounce.flush()

    async def wait(self) -> None:
        await self._debounce.wait()

    def cancel(self) -> None:
        self._debounce.cancel()


__all__ = ["SettingsSync"]
