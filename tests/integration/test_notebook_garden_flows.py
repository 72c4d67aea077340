# =============================================================================
# tests/integration/test_notebook_garden_flows.py
# Notebook notes and repeating tasks, garden areas
# =============================================================================

from datetime import date, timedelta

import pytest

from gardenview.modules.garden_management.application.commands import NotebookDraft, SeriesScope
from gardenview.modules.garden_management.application.state.store import EntityKind
from gardenview.modules.garden_management.domain.models import NotebookEntryType, Recurrence
from gardenview.shared.core.exceptions import ValidationError
from gardenview.shared.utils.helpers import today

from tests.fakes import DATA_URL, USER_ID


def seed_series(gateway, dates, token="series-1", title="Water", image_url=None):
    return [
        gateway.seed("notebook_entries", {
            "owner_id": USER_ID, "type": "TASK", "title": title, "date": day.isoformat(),
            "recurrence": "weekly", "original_parent_id": token, "image_url": image_url,
        })
        for day in dates
    ]


JANUARY = [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]


class TestAddEntries:
    """Notes and task series"""

    async def test_single_note(self, signed_in, gateway):
        count = await signed_in.notebook.add_entries(NotebookDraft(title="Buy compost"))

        assert count == 1
        assert signed_in.notifier.last == "Saved to notebook"
        assert [entry.title for entry in signed_in.store.notebook_timeline()] == ["Buy compost"]

    async def test_monthly_series_stays_at_month_end(self, signed_in, gateway):
        """A series started on the 31st clamps to shorter months without drifting"""
        draft = NotebookDraft(type=NotebookEntryType.TASK, title="Feed roses", date=date(2024, 1, 31),
                              recurrence=Recurrence.MONTHLY)

        count = await signed_in.notebook.add_entries(draft)

        rows = gateway.called("insert_notebook_entries")[0][0]
        assert count == len(rows) == 12
        assert [row["date"] for row in rows[:4]] == ["2024-01-31", "2024-02-29", "2024-03-31", "2024-04-30"]
        assert len({row["original_parent_id"] for row in rows}) == 1
        assert rows[0]["original_parent_id"] is not None
        assert signed_in.notifier.last == "12 tasks scheduled"

    def test_notes_cannot_repeat(self):
        with pytest.raises(ValidationError):
            NotebookDraft(type=NotebookEntryType.NOTE, title="Idea", recurrence=Recurrence.WEEKLY)

    async def test_image_is_uploaded_once_per_draft(self, signed_in, gateway, media):
        await signed_in.notebook.add_entries(NotebookDraft(title="Bloom", image=DATA_URL))

        assert media.uploaded == [f"{USER_ID}/1.jpg"]
        assert gateway.called("insert_notebook_entries")[0][0][0]["image_url"] == f"{USER_ID}/1.jpg"

    async def test_insert_failure(self, signed_in, gateway):
        gateway.fail("insert_notebook_entries")

        assert await signed_in.notebook.add_entries(NotebookDraft(title="Lost")) == 0
        assert signed_in.notifier.shown == ["Failed to save to notebook."]


class TestEditSeries:
    """Single-entry edits versus this-and-future regeneration"""

    async def test_single_edit_patches_one_entry(self, signed_in, gateway):
        ids = seed_series(gateway, JANUARY)
        await signed_in.session.load_all()

        draft = NotebookDraft(type=NotebookEntryType.TASK, title="Water deeply", date=date(2024, 1, 15),
                              recurrence=Recurrence.WEEKLY)
        assert await signed_in.notebook.update_entry(ids[2], draft) is True

        patch = gateway.called("update_notebook_entry")[0]
        assert patch[0] == ids[2]
        assert patch[1]["title"] == "Water deeply"
        assert patch[1]["recurrence"] == "weekly"
        assert gateway.called("delete_notebook_entries") == []
        assert signed_in.notifier.last == "Entry updated"

    async def test_future_edit_regenerates_with_same_token(self, signed_in, gateway):
        ids = seed_series(gateway, JANUARY)
        await signed_in.session.load_all()

        draft = NotebookDraft(type=NotebookEntryType.TASK, title="Water (new)", date=date(2024, 1, 16),
                              recurrence=Recurrence.WEEKLY)
        assert await signed_in.notebook.update_entry(ids[2], draft, SeriesScope.FUTURE) is True

        assert sorted(gateway.called("delete_notebook_entries")[0][0]) == sorted(ids[2:])
        rows = gateway.called("insert_notebook_entries")[0][0]
        assert rows[0]["date"] == "2024-01-16"
        assert {row["original_parent_id"] for row in rows} == {"series-1"}

        titles = {entry.title for entry in signed_in.store.notebook_entries if entry.date < date(2024, 1, 15)}
        assert titles == {"Water"}

    async def test_failed_regeneration_keeps_old_instances(self, signed_in, gateway):
        """Nothing is deleted when the new instances cannot be inserted"""
        ids = seed_series(gateway, JANUARY)
        await signed_in.session.load_all()
        gateway.fail("insert_notebook_entries")

        draft = NotebookDraft(type=NotebookEntryType.TASK, title="Water (new)", date=date(2024, 1, 16),
                              recurrence=Recurrence.WEEKLY)
        assert await signed_in.notebook.update_entry(ids[2], draft, SeriesScope.FUTURE) is False

        assert gateway.called("delete_notebook_entries") == []
        assert sorted(gateway.tables["notebook_entries"]) == sorted(ids)
        assert sorted(entry.id for entry in signed_in.store.notebook_entries) == sorted(ids)
        assert signed_in.notifier.shown[-1] == "Failed to update entry."

    async def test_failed_delete_removes_new_instances(self, signed_in, gateway):
        ids = seed_series(gateway, JANUARY)
        await signed_in.session.load_all()
        gateway.fail("delete_notebook_entries", once=True)

        draft = NotebookDraft(type=NotebookEntryType.TASK, title="Water (new)", date=date(2024, 1, 16),
                              recurrence=Recurrence.WEEKLY)
        assert await signed_in.notebook.update_entry(ids[2], draft, SeriesScope.FUTURE) is False

        inserted = gateway.called("insert_notebook_entries")[0][0]
        undo = gateway.called("delete_notebook_entries")[1][0]
        assert len(undo) == len(inserted)
        assert sorted(gateway.tables["notebook_entries"]) == sorted(ids)
        assert signed_in.notifier.shown[-1] == "Failed to update entry."

    async def test_note_turned_into_series(self, signed_in, gateway):
        entry_id = gateway.seed("notebook_entries", {"owner_id": USER_ID, "type": "TASK", "title": "Mow",
                                                     "date": "2024-05-01", "recurrence": "none"})
        await signed_in.session.load_all()

        draft = NotebookDraft(type=NotebookEntryType.TASK, title="Mow", date=date(2024, 5, 1),
                              recurrence=Recurrence.BIWEEKLY)
        await signed_in.notebook.update_entry(entry_id, draft)

        assert gateway.called("delete_notebook_entries") == [([entry_id],)]
        rows = gateway.called("insert_notebook_entries")[0][0]
        assert len(rows) > 1
        assert all(row["recurrence"] == "biweekly" for row in rows)

    async def test_toggle_done(self, signed_in, gateway):
        ids = seed_series(gateway, JANUARY[:1])
        await signed_in.session.load_all()

        assert await signed_in.notebook.toggle_done(ids[0]) is True
        assert signed_in.store.get(EntityKind.NOTEBOOK, ids[0]).is_done is True


class TestDeleteSeries:

    async def test_delete_this_and_future(self, signed_in, gateway, confirmer):
        ids = seed_series(gateway, JANUARY)
        await signed_in.session.load_all()

        deleted = await signed_in.notebook.delete_entries(ids[1], SeriesScope.FUTURE)

        assert deleted == 3
        assert confirmer.prompts[-1] == ("Delete entry", "Delete 'Water' and 2 later repeats?")
        assert [entry.date for entry in signed_in.store.notebook_entries] == [date(2024, 1, 1)]

    async def test_shared_image_kept_while_series_remains(self, signed_in, gateway, media):
        ids = seed_series(gateway, JANUARY, image_url=f"{USER_ID}/can.jpg")
        await signed_in.session.load_all()

        await signed_in.notebook.delete_entries(ids[1], SeriesScope.FUTURE)
        assert media.deleted == []

        await signed_in.notebook.delete_entries(ids[0])
        assert media.deleted == [f"{USER_ID}/can.jpg"]


class TestExtendSeries:
    """Topping up series that run out before the horizon"""

    async def test_extends_from_last_instance(self, signed_in, gateway):
        now = today()
        seed_series(gateway, [now - timedelta(days=14), now - timedelta(days=7), now])
        await signed_in.session.load_all()

        added = await signed_in.notebook.extend_recurring_series()

        rows = gateway.called("insert_notebook_entries")[0][0]
        days = [date.fromisoformat(row["date"]) for row in rows]
        assert added == len(rows) == 52
        assert min(days) == now + timedelta(days=7)
        assert max(days) <= now + timedelta(days=365)
        assert all((day - now).days % 7 == 0 for day in days)
        assert {row["original_parent_id"] for row in rows} == {"series-1"}
        assert signed_in.notifier.last == "52 tasks extended"

    async def test_nothing_to_extend(self, signed_in, gateway):
        assert await signed_in.notebook.extend_recurring_series() == 0
        assert gateway.called("insert_notebook_entries") == []
        assert signed_in.notifier.last == "Tasks are up to date"


class TestGardenAreas:
    """Garden area photos and their pins"""

    async def test_add_area_selects_it(self, signed_in, gateway, media):
        area = await signed_in.gardens.add_area("  Balcony ", DATA_URL)

        assert area.name == "Balcony"
        assert gateway.called("insert_garden")[0][0] == {
            "owner_id": USER_ID, "name": "Balcony", "image_url": f"{USER_ID}/1.jpg"}
        assert signed_in.store.selected_area_id == area.id
        assert area.image_url == f"https://cdn.test/{USER_ID}/1.jpg"

    async def test_blank_area_name(self, signed_in, gateway):
        with pytest.raises(ValidationError):
            await signed_in.gardens.add_area("  ", None)
        assert gateway.called("insert_garden") == []

    async def test_delete_area_drops_pins(self, signed_in, gateway, media):
        area_id = gateway.seed("gardens", {"owner_id": USER_ID, "name": "Front", "image_url": f"{USER_ID}/f.jpg"})
        other_id = gateway.seed("gardens", {"owner_id": USER_ID, "name": "Back"})
        plant_id = gateway.seed("plants", {"owner_id": USER_ID, "name": "Rose", "location": [
            {"gardenAreaId": area_id, "x": 10, "y": 10},
            {"gardenAreaId": other_id, "x": 20, "y": 20},
        ]})
        await signed_in.session.load_all()
        signed_in.gardens.select_area(area_id)

        assert await signed_in.gardens.delete_area(area_id) is True

        assert media.deleted == [f"{USER_ID}/f.jpg"]
        assert gateway.called("update_plant") == [(plant_id, {"location": [{"gardenAreaId": other_id, "x": 20, "y": 20}]})]
        assert [area.id for area in signed_in.store.garden_areas] == [other_id]
        assert signed_in.store.selected_area_id == other_id
        assert signed_in.notifier.last == "Area deleted"
