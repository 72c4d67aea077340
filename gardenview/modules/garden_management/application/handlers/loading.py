# 📄 File: gardenview/modules/garden_management/application/handlers/loading.py
# 🧭 Purpose (Layman Explanation):
# Fetches everything you own from the cloud (plants, logs, garden areas, notes, the
# community feed and today's weather) and turns stored photo paths into viewable links.
#
# 🧪 Purpose (Technical Summary):
# Re-fetch logic shared by all handlers. Collections load concurrently with
# asyncio.gather; optional modules only when toggled on; missing-schema failures
# become empty collections silently; any other failure gives one toast. Display URLs
# are resolved concurrently before the store is replaced.
#
# 🔗 Dependencies:
# - asyncio (gather)
# - GardenGateway, MediaStore, WeatherClient through HandlerContext
#
# 🔄 Connected Modules / Calls From:
# - SessionHandlers.load_all / refresh_weather
# - SocialHandlers.fetch_page / load_more / refresh
# - Every write handler (re-fetch after success)

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from gardenview.shared.core.exceptions import BackendError
from gardenview.shared.core.result import Result
from gardenview.shared.utils.logging import get_logger
from ...domain.models import Plant, SocialPost
from ..state.store import EntityKind
from .base import HandlerBase

logger = get_logger(__name__)

LOAD_ERROR_TOAST = "Error loading data"
FEED_ERROR_TOAST = "Failed to load posts"


class DataLoader(HandlerBase):
    """Reads collections from the gateway into the store."""

    # ===== DISPLAY URLS =====

    async def _resolve(self, ref: Optional[str]) -> Optional[str]:
        return await self.media.resolve_display_url(ref) if ref else None

    async def _with_display_url(self, item):
        return item.model_copy(update={"image_url": await self._resolve(item.image_ref)})

    async def _plant_with_display_urls(self, plant: Plant) -> Plant:
        image_url, logs = await asyncio.gather(
            self._resolve(plant.image_ref),
            asyncio.gather(*(self._with_display_url(log) for log in plant.logs)),
        )
        return plant.model_copy(update={"image_url": image_url, "logs": list(logs)})

    async def resolve_display_urls(self, kind: EntityKind, items: List) -> List:
        if kind == EntityKind.PLANTS:
            return list(await asyncio.gather(*(self._plant_with_display_urls(item) for item in items)))
        return list(await asyncio.gather(*(self._with_display_url(item) for item in items)))

    # ===== COLLECTIONS =====

    def _sources(self, owner_id: str) -> Dict[EntityKind, Callable[[], Awaitable[Result[List]]]]:
        modules = self.store.settings.modules
        sources = {EntityKind.PLANTS: lambda: self.gateway.list_plants(owner_id)}
        if modules.garden_logs:
            sources[EntityKind.GARDEN_LOGS] = lambda: self.gateway.list_garden_logs(owner_id)
        if modules.garden_view:
            sources[EntityKind.GARDEN_AREAS] = lambda: self.gateway.list_gardens(owner_id)
        if modules.notebook:
            sources[EntityKind.NOTEBOOK] = lambda: self.gateway.list_notebook_entries(owner_id)
        return sources

    async def _load_kind(self, kind: EntityKind, fetch) -> Tuple[EntityKind, Result[List]]:
        result = await fetch()
        if not result.ok:
            return kind, result
        return kind, Result.success(await self.resolve_display_urls(kind, result.value or []))

    async def load_all(self) -> bool:
        """
        Re-fetch every enabled collection.

        Returns:
            False when a collection failed for a reason other than a missing table
        """
        user = self._require_user()
        sources = self._sources(user.id)
        loaded = await asyncio.gather(*(self._load_kind(kind, fetch) for kind, fetch in sources.items()))

        failed: Optional[BackendError] = None
        for kind, result in loaded:
            if result.ok:
                self.store.replace_all(kind, result.value)
            elif isinstance(result.error, BackendError) and result.error.is_missing_schema:
                logger.warning(f"Skipping {kind.value}: table not provisioned", code=result.error.code)
                self.store.replace_all(kind, [])
            else:
                logger.error(f"Error fetching {kind.value}: {result.error.message}")
                failed = failed or result.error

        areas = self.store.garden_areas
        if areas and self.store.selected_area() is None:
            self.store.selected_area_id = areas[0].id

        if failed is not None:
            self._fail("load_all", failed, LOAD_ERROR_TOAST)
            return False
        return True

    async def reload(self) -> bool:
        """Re-fetch after a successful write."""
        return await self.load_all()

    # ===== SOCIAL FEED =====

    async def fetch_social_page(self, page: int = 0, reset: bool = False) -> bool:
        """
        Read feed page ``page`` (page size SOCIAL_PAGE_SIZE).

        Page 0 with ``reset`` replaces the feed; other pages append.
        """
        user = self.store.session_user
        if user is None or not self.store.settings.modules.social:
            return False

        page_size = self.config.SOCIAL_PAGE_SIZE
        result = await self.gateway.list_social_posts(page * page_size, page_size, user.id)
        if not result.ok:
            if isinstance(result.error, BackendError) and result.error.is_missing_schema:
                logger.warning("Social feed not provisioned", code=result.error.code)
                if reset:
                    self.store.replace_all(EntityKind.SOCIAL_POSTS, [])
                self.store.social_has_more = False
                return False
            self._fail("fetch_social_page", result.error, FEED_ERROR_TOAST)
            return False

        posts: List[SocialPost] = await self.resolve_display_urls(EntityKind.SOCIAL_POSTS, result.value or [])
        self.store.append_social_page(posts, page, reset, page_size)
        return True

    # ===== WEATHER =====

    async def refresh_weather(self) -> bool:
        """Current weather at home, when a home location is set and weather is on."""
        settings = self.store.settings
        if not settings.weather_enabled:
            self.store.weather = None
            return False
        home = settings.home_location
        snapshot = await self.ctx.weather.current(home.latitude, home.longitude)
        if snapshot is None:
            return False
        self.store.weather = snapshot
        return True


__all__ = ["DataLoader", "FEED_ERROR_TOAST", "LOAD_ERROR_TOAST"]
