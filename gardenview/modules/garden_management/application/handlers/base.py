# 📄 File: gardenview/modules/garden_management/application/handlers/base.py
# 🧭 Purpose (Layman Explanation):
# The shared toolbox every group of actions uses: who is signed in, how to show an
# error message once, how to upload a photo and how to clean up old photos safely.
#
# 🧪 Purpose (Technical Summary):
# HandlerContext bundles the controller collaborators; HandlerBase implements the
# uniform failure policy (log, one toast, store untouched), confirmation gating,
# command scoping (log_context + is_loading), upload-if-needed and reference-aware
# deletion of superseded managed images.
#
# 🔗 Dependencies:
# - gardenview.shared.utils.logging (StructuredLogger, log_context)
# - gardenview.shared.infrastructure.storage (MediaStore)
# - GardenGateway, GardenStore, Notifier, ViewStateMachine, SettingsSync
#
# 🔄 Connected Modules / Calls From:
# - Every handler group under application/handlers

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Optional

from pydantic import BaseModel

from gardenview.shared.config.settings import Settings
from gardenview.shared.core.exceptions import AuthenticationError, GardenViewException, InvalidTransitionError
from gardenview.shared.core.result import Result
from gardenview.shared.infrastructure.external_apis.ai_client import AIClient
from gardenview.shared.infrastructure.external_apis.weather_client import WeatherClient
from gardenview.shared.infrastructure.storage.media_store import MediaStore
from gardenview.shared.utils.logging import get_logger, log_context
from ...domain.models import SessionUser
from ...domain.repositories.garden_gateway import GardenGateway
from ..navigation import Intent, ViewStateMachine
from ..notifications import Notifier
from ..settings_sync import SettingsSync
from ..state.store import GardenStore
from ..usage import UsageTracker

if TYPE_CHECKING:
    from .loading import DataLoader

logger = get_logger(__name__)

Confirmer = Callable[[str, str], Awaitable[bool]]

AI_DISABLED_TOAST = "AI features are turned off in your settings."
AI_LIMIT_TOAST = "Daily AI limit reached. Try again tomorrow or upgrade your plan."


async def auto_confirm(title: str, message: str) -> bool:
    """Confirmer for headless use: every destructive action is approved."""
    return True


@dataclass
class HandlerContext:
    """Collaborators shared by all handler groups."""
    store: GardenStore
    gateway: GardenGateway
    media: MediaStore
    ai: AIClient
    weather: WeatherClient
    notifier: Notifier
    navigator: ViewStateMachine
    sync: SettingsSync
    config: Settings
    confirm: Confirmer = auto_confirm
    loader: Optional["DataLoader"] = None
    usage: Optional[UsageTracker] = None


class HandlerBase:
    """
    Common plumbing for controller handlers.

    Failure policy: log the technical error, show exactly one toast, leave the
    store untouched. ValidationError and AuthenticationError are not covered by
    it; they propagate to the caller.
    """

    def __init__(self, ctx: HandlerContext):
        self.ctx = ctx

    @property
    def store(self) -> GardenStore:
        return self.ctx.store

    @property
    def gateway(self) -> GardenGateway:
        return self.ctx.gateway

    @property
    def media(self) -> MediaStore:
        return self.ctx.media

    @property
    def config(self) -> Settings:
        return self.ctx.config

    @property
    def loader(self) -> "DataLoader":
        return self.ctx.loader

    # ===== SESSION =====

    def _require_user(self) -> SessionUser:
        user = self.store.session_user
        if user is None:
            raise AuthenticationError("Sign in first")
        return user

    @asynccontextmanager
    async def _command(self, operation: str, loading: bool = True):
        """Scope one command: correlation id in logs, busy flag while it runs."""
        user = self.store.session_user
        with log_context(user_id=user.id if user else None):
            logger.debug(f"Command started: {operation}")
            if loading:
                self.store.is_loading = True
            try:
                yield
            finally:
                if loading:
                    self.store.is_loading = False

    # ===== FAILURE POLICY =====

    def _fail(self, operation: str, error: Optional[GardenViewException], toast: Optional[str]) -> None:
        """Log and toast one failure. Returns None so handlers can ``return self._fail(...)``."""
        if error is not None:
            logger.error(
                f"{operation} failed: {error.message}",
                operation=operation,
                error_code=error.error_code,
                details=error.details,
            )
        else:
            logger.error(f"{operation} failed", operation=operation)
        if toast:
            self.ctx.notifier.show(toast)
        return None

    def _toast(self, message: str) -> None:
        self.ctx.notifier.show(message)

    async def _confirm(self, title: str, message: str) -> bool:
        confirmed = await self.ctx.confirm(title, message)
        if not confirmed:
            logger.debug(f"Cancelled by user: {title}")
        return confirmed

    def _navigate(self, intent: Intent) -> bool:
        """Follow-up navigation after a command; skipped when the current view does not allow it."""
        try:
            self.ctx.navigator.dispatch(intent)
        except InvalidTransitionError as e:
            logger.info(f"Follow-up navigation skipped: {e.message}")
            return False
        return True

    # ===== AI ALLOWANCE =====

    def _ai_allowed(self, operation: str, images: int = 0) -> bool:
        """
        Gate a user-requested AI call on the limit-AI setting and the tier's daily allowance.

        A refusal is logged and toasted once.
        """
        if self.store.settings.limit_ai:
            logger.info(f"{operation} skipped: AI features disabled", operation=operation)
            self._toast(AI_DISABLED_TOAST)
            return False
        usage = self.ctx.usage
        if usage is not None and not usage.allows(images):
            logger.info(f"{operation} skipped: daily AI limit reached", operation=operation,
                        tier=self.store.settings.tier.value, remaining=usage.remaining())
            self._toast(AI_LIMIT_TOAST)
            return False
        return True

    async def _track_ai(self, action: str, output: Any, images: int = 0) -> None:
        """Count a completed AI call; ``output`` is the model or text the AI returned."""
        if self.ctx.usage is None or output is None:
            return
        if isinstance(output, BaseModel):
            text = output.model_dump_json()
        elif isinstance(output, list):
            text = "[" + ",".join(item.model_dump_json() if isinstance(item, BaseModel) else str(item)
                                  for item in output) + "]"
        else:
            text = str(output)
        await self.ctx.usage.record(action, text, images)

    # ===== IMAGES =====

    async def _upload_if_needed(self, image: Optional[str]) -> Result[Optional[str]]:
        """
        Stored reference for ``image``.

        Raw data URLs are uploaded; existing references pass through unchanged.
        """
        if not image:
            return Result.success(None)
        if not MediaStore.is_pending_upload(image):
            return Result.success(image)
        user = self._require_user()
        return await self.media.upload(image, user.id)

    @staticmethod
    def _stored_ref(image: Optional[str], current_ref: Optional[str], current_url: Optional[str]) -> Optional[str]:
        """Map a display URL handed back by the view to the stored reference it came from."""
        if image and current_url and image == current_url:
            return current_ref
        return image

    async def _delete_if_unreferenced(self, ref: Optional[str], held: int = 1) -> bool:
        """
        Delete a managed image unless an entity other than the ``held`` references still uses it.

        Returns True when a delete was issued and succeeded.
        """
        if not ref or not self.media.is_managed(ref):
            return False
        if self.store.image_reference_count(ref) > held:
            logger.info("Keeping shared image", ref=ref)
            return False
        result = await self.media.delete(ref)
        if not result.ok:
            logger.warning(f"Could not delete image: {result.error.message}", ref=ref)
            return False
        return True

    async def _delete_superseded(self, old_ref: Optional[str], new_ref: Optional[str]) -> bool:
        if not old_ref or old_ref == new_ref:
            return False
        return await self._delete_if_unreferenced(old_ref, held=1)

    async def _release_images(self, refs: Iterable[Optional[str]]) -> None:
        """Delete the images of entities about to be removed, in order, each once."""
        refs = [ref for ref in refs if ref]
        for ref in dict.fromkeys(refs):
            await self._delete_if_unreferenced(ref, held=refs.count(ref))


__all__ = ["Confirmer", "HandlerBase", "HandlerContext", "auto_confirm"]
