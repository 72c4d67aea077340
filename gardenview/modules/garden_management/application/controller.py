# 📄 File: gardenview/modules/garden_management/application/controller.py
# 🧭 Purpose (Layman Explanation):
# The one object a screen talks to. It holds the app's memory of your garden, knows
# which screen is showing, and offers every action (add a plant, like a post, ...)
# grouped by topic.
#
# 🧪 Purpose (Technical Summary):
# Composition root for the garden client: builds GardenStore, Notifier,
# ViewStateMachine, SettingsSync, UsageTracker and the handler groups around one
# HandlerContext.
# Collaborators default to the Supabase gateway/media store, the AI and weather
# clients and the JSON local settings store; tests inject fakes.
#
# 🔗 Dependencies:
# - application.handlers, navigation, notifications, settings_sync, state
# - Infrastructure factories (Supabase gateway, media store, HTTP clients)
#
# 🔄 Connected Modules / Calls From:
# - View layers embedding the controller
# - Auth provider callback -> controller.session.handle_auth_change

from typing import Optional

from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.config.supabase import SupabaseManager
from gardenview.shared.infrastructure.external_apis.ai_client import AIClient
from gardenview.shared.infrastructure.external_apis.weather_client import WeatherClient
from gardenview.shared.infrastructure.storage.local_settings import LocalSettingsStore
from gardenview.shared.infrastructure.storage.media_store import MediaStore
from gardenview.shared.infrastructure.storage.supabase_storage import SupabaseMediaStore
from gardenview.shared.utils.logging import get_logger
from ..domain.repositories.garden_gateway import GardenGateway
from ..infrastructure.database.supabase_gateway import SupabaseGardenGateway
from .handlers import (
    AssistantHandlers,
    Confirmer,
    DataLoader,
    GardenHandlers,
    HandlerContext,
    LogHandlers,
    NotebookHandlers,
    PhotoHandlers,
    PlantHandlers,
    SessionHandlers,
    SocialHandlers,
    auto_confirm,
)
from .navigation import Intent, View, ViewStateMachine
from .notifications import Notifier
from .settings_sync import SettingsSync
from .state.store import GardenStore
from .usage import UsageTracker

logger = get_logger(__name__)


class GardenController:
    """
    Client controller for one signed-in (or signed-out) user.

    Handler groups:
        session, plants, logs, gardens, notebook, social, assistant, photos
    """

    def __init__(
        self,
        gateway: Optional[GardenGateway] = None,
        media: Optional[MediaStore] = None,
        ai: Optional[AIClient] = None,
        weather: Optional[WeatherClient] = None,
        local_store: Optional[LocalSettingsStore] = None,
        confirm: Confirmer = auto_confirm,
        config: Optional[Settings] = None,
    ):
        self.config = config or get_settings()
        self._store = GardenStore(max_pins_per_area=self.config.MAX_PINS_PER_AREA)

        if gateway is None or media is None:
            manager = SupabaseManager(self.config)
            gateway = gateway or SupabaseGardenGateway(manager)
            media = media or SupabaseMediaStore(manager, self.config)

        self.notifier = Notifier(self._store, duration=self.config.TOAST_DURATION_SECONDS)
        self.navigator = ViewStateMachine(self._store, history_limit=self.config.NAVIGATION_HISTORY_LIMIT)
        self.sync = SettingsSync(
            self._store,
            gateway,
            local_store or LocalSettingsStore(settings=self.config),
            self.config,
        )

        self.ctx = HandlerContext(
            store=self._store,
            gateway=gateway,
            media=media,
            ai=ai or AIClient(self.config),
            weather=weather or WeatherClient(self.config),
            notifier=self.notifier,
            navigator=self.navigator,
            sync=self.sync,
            config=self.config,
            confirm=confirm,
        )
        self.ctx.loader = DataLoader(self.ctx)
        self.usage = UsageTracker(self._store, gateway, self.sync.local_store, self.config)
        self.ctx.usage = self.usage

        self.session = SessionHandlers(self.ctx)
        self.plants = PlantHandlers(self.ctx)
        self.logs = LogHandlers(self.ctx)
        self.gardens = GardenHandlers(self.ctx)
        self.notebook = NotebookHandlers(self.ctx)
        self.social = SocialHandlers(self.ctx)
        self.assistant = AssistantHandlers(self.ctx)
        self.photos = PhotoHandlers(self.ctx, self.plants)

    @property
    def store(self) -> GardenStore:
        """Read-only for views; handlers are the only writers."""
        return self._store

    @property
    def view(self) -> View:
        return self.navigator.current

    def navigate(self, intent: Intent) -> View:
        """Apply a user navigation intent (raises InvalidTransitionError when not allowed)."""
        return self.navigator.dispatch(intent)

    def back(self) -> View:
        return self.navigator.back()

    async def close(self) -> None:
        """Write pending settings and release HTTP sessions."""
        await self.sync.flush()
        self.notifier.close()
        await self.ctx.ai.close()
        await self.ctx.weather.close()
        logger.debug("Garden controller closed")


__all__ = ["GardenController"]
