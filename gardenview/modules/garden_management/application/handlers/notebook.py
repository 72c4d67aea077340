# 📄 File: gardenview/modules/garden_management/application/handlers/notebook.py
# 🧭 Purpose (Layman Explanation):
# The garden notebook: notes and to-do tasks, including tasks that repeat every week,
# month or year, which get scheduled a year ahead and topped up as time passes.
#
# 🧪 Purpose (Technical Summary):
# Notebook handler group. Recurring tasks are expanded into dated instances sharing a
# series token (original_parent_id) up to RECURRENCE_HORIZON_DAYS; edits and deletes
# apply to one instance or to "this and future"; extend_recurring_series tops up
# series whose last instance is within RECURRENCE_EXTEND_MARGIN_DAYS of the horizon.
#
# 🔗 Dependencies:
# - domain.services.recurrence
# - Row mapper notebook_entry_to_row
#
# 🔄 Connected Modules / Calls From:
# - GardenController.notebook
# - Notebook tab, log form (add to notebook)

from typing import Any, Dict, List, Optional, Union

from gardenview.shared.core.exceptions import NotFoundError
from gardenview.shared.core.result import Result
from gardenview.shared.utils.helpers import generate_uuid, today
from gardenview.shared.utils.logging import get_logger
from ...domain.models import NotebookEntry, Recurrence
from ...domain.services.recurrence import (
    dates_after,
    horizon_end,
    occurrence_dates,
    series_needing_extension,
    this_and_future,
)
from ...infrastructure.database.mappers import notebook_entry_to_row
from ..commands import NotebookDraft, SeriesScope
from ..state.store import EntityKind
from .base import HandlerBase

logger = get_logger(__name__)

SAVED_TOAST = "Saved to notebook"
SAVE_FAILED_TOAST = "Failed to save to notebook."
UPDATED_TOAST = "Entry updated"
UPDATE_FAILED_TOAST = "Failed to update entry."
DELETED_TOAST = "Entry deleted"
DELETE_FAILED_TOAST = "Failed to delete entry."
EXTEND_FAILED_TOAST = "Failed to extend tasks."
UP_TO_DATE_TOAST = "Tasks are up to date"


class NotebookHandlers(HandlerBase):
    """Notes, tasks and repeating task series."""

    def _entry(self, entry_id: str) -> NotebookEntry:
        entry = self.store.get(EntityKind.NOTEBOOK, entry_id)
        if entry is None:
            raise NotFoundError("Notebook entry not found", resource_type="notebook", resource_id=entry_id)
        return entry

    def _rows(self, owner_id: str, draft: NotebookDraft, image_ref: Optional[str],
              series_token: Optional[str] = None) -> List[Dict[str, Any]]:
        """Rows for a draft: one, or the whole series up to the horizon for a repeating task."""
        first = NotebookEntry(
            id="",
            owner_id=owner_id,
            type=draft.type,
            title=draft.title,
            description=draft.description,
            date=draft.date,
            image_ref=image_ref,
            is_done=draft.is_done,
            recurrence=draft.recurrence,
        )
        if not first.is_recurring:
            return [notebook_entry_to_row(first)]

        token = series_token or generate_uuid()
        first = first.model_copy(update={"original_parent_id": token})
        horizon = horizon_end(draft.date, self.config.RECURRENCE_HORIZON_DAYS)
        instances = [first] + [
            first.model_copy(update={"date": day, "is_done": False})
            for day in occurrence_dates(draft.date, draft.recurrence, horizon)
        ]
        return [notebook_entry_to_row(instance) for instance in instances]

    # ===== ADD =====

    async def add_entries(self, drafts: Union[NotebookDraft, List[NotebookDraft]]) -> int:
        """
        Save notes and tasks.

        Returns:
            Number of rows inserted (0 on failure)
        """
        user = self._require_user()
        drafts = [drafts] if isinstance(drafts, NotebookDraft) else list(drafts)
        if not drafts:
            return 0

        async with self._command("add_notebook_entries"):
            rows: List[Dict[str, Any]] = []
            expanded = False
            for draft in drafts:
                upload = await self._upload_if_needed(draft.image)
                if not upload.ok:
                    self._fail("add_notebook_entries", upload.error, SAVE_FAILED_TOAST)
                    return 0
                draft_rows = self._rows(user.id, draft, upload.value)
                expanded = expanded or len(draft_rows) > 1
                rows.extend(draft_rows)

            result = await self.gateway.insert_notebook_entries(rows)
            if not result.ok:
                self._fail("add_notebook_entries", result.error, SAVE_FAILED_TOAST)
                return 0

            await self.loader.reload()
            self._toast(f"{len(rows)} tasks scheduled" if expanded else SAVED_TOAST)
            return len(rows)

    # ===== UPDATE =====

    async def update_entry(self, entry_id: str, draft: NotebookDraft,
                           scope: SeriesScope = SeriesScope.SINGLE) -> bool:
        """
        Edit one entry, or regenerate a series from this entry on.

        With ``FUTURE`` the entry and every later instance are replaced by a fresh
        series starting at the draft's date, under the same series token.
        """
        user = self._require_user()
        entry = self._entry(entry_id)
        in_series = bool(entry.original_parent_id)
        regenerate = (scope == SeriesScope.FUTURE and in_series) or \
            (not in_series and draft.recurrence != Recurrence.NONE)

        async with self._command("update_notebook_entry"):
            upload = await self._upload_if_needed(self._stored_ref(draft.image, entry.image_ref, entry.image_url))
            if not upload.ok:
                self._fail("update_notebook_entry", upload.error, UPDATE_FAILED_TOAST)
                return False
            image_ref = upload.value

            if regenerate:
                replaced = this_and_future(entry, self.store.notebook_entries)
                result = await self._replace_series(
                    replaced, self._rows(user.id, draft, image_ref, series_token=entry.original_parent_id))
            else:
                replaced = [entry]
                result = await self.gateway.update_notebook_entry(entry_id, {
                    "type": draft.type.value,
                    "title": draft.title,
                    "description": draft.description,
                    "date": draft.date.isoformat(),
                    "image_url": image_ref,
                    "is_done": draft.is_done,
                    "recurrence": entry.recurrence.value if in_series else draft.recurrence.value,
                })
            if not result.ok:
                self._fail("update_notebook_entry", result.error, UPDATE_FAILED_TOAST)
                return False

            if entry.image_ref and entry.image_ref != image_ref:
                held = sum(1 for item in replaced if item.image_ref == entry.image_ref)
                await self._delete_if_unreferenced(entry.image_ref, held=held)

            await self.loader.reload()
            self._toast(UPDATED_TOAST)
            return True

    async def _replace_series(self, replaced: List[NotebookEntry], rows: List[dict]) -> Result[None]:
        """
        Insert the regenerated instances, then delete the ones they replace.

        A failed delete removes the new instances again so the series is never
        half replaced.
        """
        inserted = await self.gateway.insert_notebook_entries(rows)
        if not inserted.ok:
            return Result.failure(inserted.error)

        deleted = await self.gateway.delete_notebook_entries([item.id for item in replaced])
        if deleted.ok:
            return Result.success()

        undo = await self.gateway.delete_notebook_entries([item.id for item in inserted.value])
        if not undo.ok:
            logger.error(f"Series left with duplicate instances: {undo.error.message}",
                         series=replaced[0].original_parent_id if replaced else None)
            await self.loader.reload()
        return Result.failure(deleted.error)

    async def toggle_done(self, entry_id: str) -> bool:
        self._require_user()
        entry = self._entry(entry_id)
        async with self._command("toggle_notebook_entry", loading=False):
            result = await self.gateway.update_notebook_entry(entry_id, {"is_done": not entry.is_done})
            if not result.ok:
                self._fail("toggle_notebook_entry", result.error, UPDATE_FAILED_TOAST)
                return False
            await self.loader.reload()
            return True

    # ===== DELETE =====

    async def delete_entries(self, entry_id: str, scope: SeriesScope = SeriesScope.SINGLE) -> int:
        """Delete one entry, or this and every later instance of its series."""
        self._require_user()
        entry = self._entry(entry_id)
        targets = this_and_future(entry, self.store.notebook_entries) if scope == SeriesScope.FUTURE else [entry]
        message = f"Delete '{entry.title}'?" if len(targets) == 1 \
            else f"Delete '{entry.title}' and {len(targets) - 1} later repeats?"
        if not await self._confirm("Delete entry", message):
            return 0

        async with self._command("delete_notebook_entries"):
            await self._release_images(item.image_ref for item in targets)
            result = await self.gateway.delete_notebook_entries([item.id for item in targets])
            if not result.ok:
                self._fail("delete_notebook_entries", result.error, DELETE_FAILED_TOAST)
                return 0
            await self.loader.reload()
            self._toast(DELETED_TOAST)
            return len(targets)

    # ===== SERIES MAINTENANCE =====

    async def extend_recurring_series(self) -> int:
        """
        Add instances to series that are running out.

        Returns:
            Number of instances added
        """
        user = self._require_user()
        now = today()
        horizon_days = self.config.RECURRENCE_HORIZON_DAYS
        horizon = horizon_end(now, horizon_days)
        extensions = series_needing_extension(
            self.store.notebook_entries, now, horizon_days, self.config.RECURRENCE_EXTEND_MARGIN_DAYS)

        rows = []
        for template, last_date in extensions:
            for day in dates_after(template.date, template.recurrence, last_date, horizon):
                instance = template.model_copy(update={
                    "date": day,
                    "is_done": False,
                    "owner_id": template.owner_id or user.id,
                    "original_parent_id": template.series_id,
                })
                rows.append(notebook_entry_to_row(instance))

        if not rows:
            self._toast(UP_TO_DATE_TOAST)
            return 0

        async with self._command("extend_recurring_series"):
            result = await self.gateway.insert_notebook_entries(rows)
            if not result.ok:
                self._fail("extend_recurring_series", result.error, EXTEND_FAILED_TOAST)
                return 0
            await self.loader.reload()
            logger.info(f"Extended {len(extensions)} task series", added=len(rows))
            self._toast(f"{len(rows)} tasks extended")
            return len(rows)


__all__ = ["NotebookHandlers"]
