# 📄 File: gardenview/modules/garden_management/application/notifications.py
# 🧭 Purpose (Layman Explanation):
# Shows the short message bubble ("Plant added successfully!") at the bottom of the
# screen and hides it again after a few seconds.
#
# 🧪 Purpose (Technical Summary):
# Toast notifier writing GardenStore.toast, with auto-hide through a DeferredTask.
# A new toast replaces the visible one and restarts the timer.
#
# 🔗 Dependencies:
# - gardenview.shared.core.scheduler (DeferredTask)
#
# 🔄 Connected Modules / Calls From:
# - HandlerBase._fail and success paths of every handler

import asyncio
from typing import List

from gardenview.shared.core.scheduler import DeferredTask
from gardenview.shared.utils.logging import get_logger
from .state.store import GardenStore

logger = get_logger(__name__)

HISTORY_LIMIT = 20


class Notifier:
    """One visible toast at a time."""

    def __init__(self, store: GardenStore, duration: float = 3.0, history_limit: int = HISTORY_LIMIT):
        self.store = store
        self.history_limit = history_limit
        # Most recent toasts, oldest first
        self.shown: List[str] = []
        self._auto_hide = DeferredTask(duration, name="toast-auto-hide")

    def show(self, message: str) -> None:
        self.store.toast = message
        self.shown.append(message)
        del self.shown[:-self.history_limit]
        logger.debug(f"Toast: {message}")
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop (synchronous caller): the toast stays until dismissed.
            return
        self._auto_hide.schedule(self._hide)

    async def _hide(self) -> None:
        self.store.toast = None

    def dismiss(self) -> None:
        self._auto_hide.cancel()
        self.store.toast = None

    @property
    def last(self):
        return self.shown[-1] if self.shown else None

    def close(self) -> None:
        self._auto_hide.cancel()


__all__ = ["Notifier"]
