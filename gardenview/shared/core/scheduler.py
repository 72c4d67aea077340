# 📄 File: gardenview/shared/core/scheduler.py
# 🧭 Purpose (Layman Explanation):
# A kitchen timer for background work: start it, and if something new happens
# before it rings, throw the old timer away and start a fresh one.
# 🧪 Purpose (Technical Summary):
# Cancellable deferred asyncio task used for the settings-sync debounce and
# toast auto-hide. schedule() cancels any pending run and reschedules.
# 🔗 Dependencies:
# asyncio, typing, gardenview.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# SettingsSync (profile write debounce), Notifier (toast auto-hide)

import asyncio
from typing import Any, Awaitable, Callable, Optional

from gardenview.shared.utils.logging import get_logger

logger = get_logger(__name__)

TaskFactory = Callable[[], Awaitable[Any]]


class DeferredTask:
    """
    A single-slot delayed coroutine.

    Only one run is ever pending; scheduling again supersedes it. Must be used
    from inside a running event loop.
    """

    def __init__(self, delay: float, name: str = "deferred-task"):
        self.delay = delay
        self.name = name
        self._task: Optional[asyncio.Task] = None
        self._inflight: Optional[asyncio.Task] = None
        self._factory: Optional[TaskFactory] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, factory: TaskFactory) -> None:
        """Cancel any pending run and start the delay again with ``factory``."""
        self.cancel()
        self._factory = factory
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(factory), name=self.name)

    def cancel(self) -> bool:
        """Cancel the pending run, if any. Returns True when something was cancelled."""
        if self.pending:
            self._task.cancel()
            self._task = None
            self._factory = None
            return True
        return False

    async def flush(self) -> None:
        """Run the pending work immediately instead of waiting out the delay."""
        if not self.pending:
            return
        factory = self._factory
        self.cancel()
        await self._invoke(factory)

    async def wait(self) -> None:
        """Wait for the pending and in-flight runs to finish (used by shutdown and tests)."""
        for task in (self._task, self._inflight):
            if task is None:
                continue
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self, factory: TaskFactory) -> None:
        await asyncio.sleep(self.delay)
        # Once fired, the run is no longer cancellable by a new schedule().
        self._inflight, self._task = self._task, None
        self._factory = None
        await self._invoke(factory)

    async def _invoke(self, factory: TaskFactory) -> None:
        try:
            await factory()
        except Exception as e:
            # Nobody awaits a background run; its failure is only observable here.
            logger.error(f"Deferred task '{self.name}' failed: {e}", exc_info=True)


__all__ = ["DeferredTask"]
