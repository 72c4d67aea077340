# 📄 File: gardenview/modules/garden_management/application/handlers/session.py
# 🧭 Purpose (Layman Explanation):
# Everything around signing in and out: loading your preferences and account status,
# sending you to the right first screen, and keeping settings and weather current.
#
# 🧪 Purpose (Technical Summary):
# Session handler group. Auth changes load local settings, fetch (or self-heal) the
# profile, overlay remote settings, route on approval status and load all
# collections. Settings changes go through SettingsSync (local now, debounced
# profile upsert); sign-out flushes the pending write and clears the store.
#
# 🔗 Dependencies:
# - SettingsSync, DataLoader, ViewStateMachine via HandlerContext
# - pydantic ValidationError (settings validation)
#
# 🔄 Connected Modules / Calls From:
# - GardenController.session
# - Auth provider callback (handle_auth_change)

import asyncio
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from gardenview.shared.core.exceptions import BackendError, NotFoundError
from gardenview.shared.utils.logging import get_logger
from gardenview.shared.utils.validators import validation_error_from
from ...domain.models import FloraState, HomeLocation, ProfileStatus, SessionUser, UserSettings, WeatherSnapshot
from ..navigation import Intent, View
from .base import HandlerBase

logger = get_logger(__name__)

PROFILE_ERROR_TOAST = "Could not load your profile."
WEATHER_UPDATED_TOAST = "Weather updated"


class SessionHandlers(HandlerBase):
    """Sign-in, settings and weather."""

    # ===== AUTH =====

    async def handle_auth_change(self, user: Optional[SessionUser]) -> View:
        """
        React to the auth provider's session.

        Returns:
            The view the user lands on
        """
        if user is None:
            await self.sign_out()
            return self.ctx.navigator.current

        self.store.session_user = user
        async with self._command("session_start"):
            self.store.settings = self.ctx.sync.load_local()
            self.ctx.sync.load_chat_preferences()
            if self.ctx.usage is not None:
                self.ctx.usage.load(user.id)

            profile_result = await self.gateway.get_profile(user.id)
            if not profile_result.ok and isinstance(profile_result.error, NotFoundError):
                logger.info("Creating missing profile", user_id=user.id)
                profile_result = await self.gateway.create_profile(user)

            if profile_result.ok:
                profile = profile_result.value
                self.store.profile = profile
                self.store.profile_status = profile.status
                self.ctx.sync.merge_remote(profile.settings)
            elif isinstance(profile_result.error, BackendError) and profile_result.error.is_missing_schema:
                logger.warning("Profiles table missing; database setup required", code=profile_result.error.code)
                self.store.setup_required = True
                self.store.profile_status = ProfileStatus.PENDING
            else:
                self._fail("get_profile", profile_result.error, PROFILE_ERROR_TOAST)
                self.store.profile_status = ProfileStatus.PENDING

            approved = self.store.profile_status == ProfileStatus.APPROVED
            view = self.ctx.navigator.dispatch(Intent.PROFILE_APPROVED if approved else Intent.PROFILE_PENDING)
            logger.log_user_action("sign_in", user.id, result=self.store.profile_status.value)

            if approved:
                await self._load_session_data()
        return view

    async def _load_session_data(self) -> None:
        tasks = [self.loader.load_all(), self.loader.fetch_social_page(0, reset=True)]
        if self.store.settings.weather_enabled:
            tasks.append(self.loader.refresh_weather())
        await asyncio.gather(*tasks)

    async def load_all(self) -> bool:
        self._require_user()
        async with self._command("load_all"):
            return await self.loader.load_all()

    async def sign_out(self) -> None:
        """Flush a pending settings write, forget the session and return to the welcome screen."""
        user = self.store.session_user
        await self.ctx.sync.flush()
        self.ctx.notifier.dismiss()
        self.store.clear()
        self.ctx.navigator.dispatch(Intent.SIGNED_OUT)
        if user is not None:
            logger.log_user_action("sign_out", user.id)

    # ===== WEATHER =====

    async def refresh_weather(self, force: bool = False) -> Optional[WeatherSnapshot]:
        """Current weather at home; cached unless ``force``."""
        if not self.store.settings.weather_enabled:
            self.store.weather = None
            return None
        if self.store.weather is not None and not force:
            return self.store.weather
        async with self._command("refresh_weather", loading=False):
            updated = await self.loader.refresh_weather()
        if updated and force:
            self._toast(WEATHER_UPDATED_TOAST)
        return self.store.weather

    async def set_home_location(self, location: Optional[HomeLocation]) -> UserSettings:
        """
        Set or clear the home location.

        Clearing drops the cached weather; no weather lookups happen until a new
        location is set.
        """
        settings = self.ctx.sync.update(home_location=location)
        self.store.weather = None
        if location is not None and settings.use_weather:
            await self.refresh_weather()
        return settings

    # ===== SETTINGS =====

    async def update_settings(self, **changes: Any) -> UserSettings:
        """
        Apply settings changes (snake_case field names).

        Raises:
            ValidationError: A value is out of its allowed set; nothing is saved
        """
        previous = self.store.settings
        try:
            updated = previous.updated(**changes)
        except PydanticValidationError as e:
            raise validation_error_from(e) from e

        self.ctx.sync.apply(updated)
        self.store.dashboard_tab = self.store.effective_dashboard_tab()

        if self.store.session_user is None:
            return updated

        if not updated.weather_enabled:
            self.store.weather = None
        elif not previous.weather_enabled:
            await self.refresh_weather()

        if updated.modules != previous.modules:
            async with self._command("reload_modules"):
                await self.loader.load_all()
            if updated.modules.social and not previous.modules.social:
                await self.loader.fetch_social_page(0, reset=True)
        return updated

    async def set_chat_dock(self, docked: bool, width: Optional[int] = None, is_open: Optional[bool] = None) -> None:
        """Remember the assistant panel layout locally and in the synced settings."""
        self.ctx.sync.save_chat_preferences(docked, width)
        flora = self.store.settings.flora
        self.ctx.sync.update(flora=FloraState(
            is_docked=docked,
            is_open=flora.is_open if is_open is None else is_open,
        ))


__all__ = ["SessionHandlers"]
