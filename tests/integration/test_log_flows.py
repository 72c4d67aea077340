# =============================================================================
# tests/integration/test_log_flows.py
# Plant and garden log flows: weather, side effects, photos, generated logs
# =============================================================================

from datetime import date

import pytest

from gardenview.modules.garden_management.application.commands import LogDraft
from gardenview.modules.garden_management.application.navigation import View
from gardenview.modules.garden_management.application.state.store import DashboardTab, EntityKind
from gardenview.modules.garden_management.domain.models import DEFAULT_LOG_TITLE, HomeLocation
from gardenview.shared.core.exceptions import StorageError

from tests.fakes import DATA_URL, USER_ID

HOME = HomeLocation(latitude=52.52, longitude=13.40, name="Berlin", country_code="DE")


def set_home(ctrl):
    ctrl.store.settings = ctrl.store.settings.updated(home_location=HOME)


def enable_modules(ctrl, **modules):
    toggles = ctrl.store.settings.modules.model_copy(update=modules)
    ctrl.store.settings = ctrl.store.settings.updated(modules=toggles)


async def seed_plant(ctrl, gateway, **fields):
    row = {"owner_id": USER_ID, "name": "Tomato", "is_active": True, "location": []}
    row.update(fields)
    plant_id = gateway.seed("plants", row)
    await ctrl.session.load_all()
    return plant_id


class TestAddPlantLog:
    """Plant log creation"""

    async def test_log_with_image_and_weather(self, signed_in, gateway, media, weather):
        """Upload and weather lookup feed one inserted row"""
        set_home(signed_in)
        plant_id = await seed_plant(signed_in, gateway)

        log = await signed_in.logs.add_plant_log(plant_id, LogDraft(
            title="First flower", log_date=date(2024, 5, 2), image=DATA_URL, attach_weather=True))

        assert log is not None
        row = gateway.called("insert_log")[0][0]
        assert row["type"] == "PLANT"
        assert row["plant_id"] == plant_id
        assert row["image_url"] == f"{USER_ID}/1.jpg"
        assert row["weather"] == {"temperature": 18.5, "weatherCode": 2, "isDay": 1}
        assert weather.calls == [("for_date", (52.52, 13.40, date(2024, 5, 2)))]

        plant = signed_in.store.get(EntityKind.PLANTS, plant_id)
        assert [entry.title for entry in plant.logs] == ["First flower"]
        assert signed_in.store.selected_plant_id == plant_id
        assert signed_in.view == View.PLANT_DETAILS
        assert signed_in.notifier.last == "Log saved"

    async def test_blank_title_gets_default(self, signed_in, gateway):
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.add_plant_log(plant_id, LogDraft(title="  "))

        assert gateway.called("insert_log")[0][0]["title"] == DEFAULT_LOG_TITLE

    async def test_weather_skipped_without_home(self, signed_in, gateway, weather):
        """Without a home location no lookup happens and no weather is stored"""
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.add_plant_log(plant_id, LogDraft(title="Watered", attach_weather=True))

        assert weather.calls == []
        assert gateway.called("insert_log")[0][0]["weather"] is None

    async def test_main_photo_replaces_plant_image(self, signed_in, gateway, media):
        plant_id = await seed_plant(signed_in, gateway, image_url=f"{USER_ID}/old.jpg")

        await signed_in.logs.add_plant_log(plant_id, LogDraft(title="New leaf", image=DATA_URL,
                                                              set_as_main_photo=True))

        assert gateway.called("update_plant") == [(plant_id, {"image_url": f"{USER_ID}/1.jpg"})]
        assert media.deleted == [f"{USER_ID}/old.jpg"]

    async def test_share_needs_social_module(self, signed_in, gateway):
        """Sharing is skipped while the community module is off"""
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.add_plant_log(plant_id, LogDraft(title="Harvest", share_to_social=True))

        assert gateway.called("insert_social_post") == []

    async def test_share_posts_to_feed(self, signed_in, gateway):
        set_home(signed_in)
        enable_modules(signed_in, social=True)
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.add_plant_log(plant_id, LogDraft(title="Harvest", description="2kg",
                                                              log_date=date(2024, 8, 1), share_to_social=True))

        post = gateway.called("insert_social_post")[0][0]
        assert post["user_id"] == USER_ID
        assert post["plant_name"] == "Tomato"
        assert post["title"] == "Harvest"
        assert post["event_date"] == "2024-08-01"
        assert post["country_code"] == "DE"
        assert [p.title for p in signed_in.store.social_posts] == ["Harvest"]

    async def test_copy_to_notebook_prefixes_plant_name(self, signed_in, gateway):
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.add_plant_log(plant_id, LogDraft(title="Sprouted", add_to_notebook=True))

        rows = gateway.called("insert_notebook_entries")[0][0]
        assert rows[0]["title"] == "Tomato: Sprouted"
        assert rows[0]["type"] == "NOTE"
        assert [entry.title for entry in signed_in.store.notebook_entries] == ["Tomato: Sprouted"]

    async def test_insert_failure_toasts_once(self, signed_in, gateway):
        plant_id = await seed_plant(signed_in, gateway)
        gateway.fail("insert_log")

        assert await signed_in.logs.add_plant_log(plant_id, LogDraft(title="Oops")) is None

        assert signed_in.notifier.shown == ["Failed to add log."]
        assert signed_in.store.get(EntityKind.PLANTS, plant_id).logs == []


class TestGardenLogs:
    """Garden-wide journal"""

    async def test_garden_log_opens_garden_tab(self, signed_in, gateway):
        log = await signed_in.logs.add_garden_log(LogDraft(title="Mulched beds"))

        assert log.plant_id is None
        assert gateway.called("insert_log")[0][0]["plant_id"] is None
        assert [entry.title for entry in signed_in.store.sorted_garden_logs()] == ["Mulched beds"]
        assert signed_in.store.dashboard_tab == DashboardTab.GARDEN_LOGS
        assert signed_in.view == View.DASHBOARD

    async def test_share_garden_log_uses_garden_name(self, signed_in, gateway):
        enable_modules(signed_in, social=True)

        await signed_in.logs.add_garden_log(LogDraft(title="Frost", share_to_social=True))

        assert gateway.called("insert_social_post")[0][0]["plant_name"] == "Garden"

    async def test_delete_garden_log_clears_selection(self, signed_in, gateway, media):
        log_id = gateway.seed("logs", {"owner_id": USER_ID, "type": "GARDEN", "title": "Rain",
                                       "log_date": "2024-04-01", "image_url": f"{USER_ID}/rain.jpg"})
        await signed_in.session.load_all()
        signed_in.store.selected_garden_log_id = log_id

        assert await signed_in.logs.delete_garden_log(log_id) is True

        assert signed_in.store.selected_garden_log_id is None
        assert signed_in.store.garden_logs == []
        assert media.deleted == [f"{USER_ID}/rain.jpg"]
        assert signed_in.notifier.last == "Log deleted"

    async def test_update_garden_log_swaps_image(self, signed_in, gateway, media):
        log_id = gateway.seed("logs", {"owner_id": USER_ID, "type": "GARDEN", "title": "Rain",
                                       "log_date": "2024-04-01", "image_url": f"{USER_ID}/rain.jpg"})
        await signed_in.session.load_all()

        saved = await signed_in.logs.update_garden_log(log_id, LogDraft(
            title="  Heavy rain ", log_date=date(2024, 4, 1), image=DATA_URL))

        assert saved is True
        row = gateway.tables["logs"][log_id]
        assert row["title"] == "Heavy rain"
        assert row["image_url"] == f"{USER_ID}/1.jpg"
        assert media.deleted == [f"{USER_ID}/rain.jpg"]
        assert signed_in.notifier.last == "Log saved"


class TestUpdateAndDeletePlantLog:

    async def test_same_date_reuses_stored_weather(self, signed_in, gateway, weather):
        """An edit that keeps the date does not look the weather up again"""
        set_home(signed_in)
        plant_id = gateway.seed("plants", {"owner_id": USER_ID, "name": "Fig", "location": []})
        log_id = gateway.seed("logs", {
            "owner_id": USER_ID, "plant_id": plant_id, "type": "PLANT", "title": "Pruned",
            "log_date": "2024-03-10", "weather": {"temperature": 7.0, "weatherCode": 61, "isDay": 1},
        })
        await signed_in.session.load_all()

        updated = await signed_in.logs.update_plant_log(log_id, LogDraft(
            title="Pruned hard", log_date=date(2024, 3, 10), attach_weather=True))

        assert updated is True
        assert weather.calls == []
        patch = gateway.called("update_log")[0][1]
        assert patch["title"] == "Pruned hard"
        assert patch["weather"] == {"temperature": 7.0, "weatherCode": 61, "isDay": 1}

    async def test_delete_plant_log_returns_to_plant(self, signed_in, gateway, media):
        plant_id = gateway.seed("plants", {"owner_id": USER_ID, "name": "Fig", "location": []})
        log_id = gateway.seed("logs", {"owner_id": USER_ID, "plant_id": plant_id, "type": "PLANT",
                                       "title": "Pruned", "log_date": "2024-03-10",
                                       "image_url": f"{USER_ID}/prune.jpg"})
        await signed_in.session.load_all()

        assert await signed_in.logs.delete_plant_log(log_id) is True

        assert gateway.called("delete_log") == [(log_id,)]
        assert media.deleted == [f"{USER_ID}/prune.jpg"]
        assert signed_in.view == View.PLANT_DETAILS
        assert signed_in.store.selected_log_id is None

    async def test_cancelled_delete_keeps_log(self, signed_in, gateway, confirmer):
        plant_id = gateway.seed("plants", {"owner_id": USER_ID, "name": "Fig", "location": []})
        log_id = gateway.seed("logs", {"owner_id": USER_ID, "plant_id": plant_id, "type": "PLANT",
                                       "title": "Pruned", "log_date": "2024-03-10"})
        await signed_in.session.load_all()
        confirmer.answer = False

        assert await signed_in.logs.delete_plant_log(log_id) is False
        assert gateway.called("delete_log") == []


class TestGeneratedLogs:
    """Analysis, professor answers and season images saved as logs"""

    async def test_save_analysis(self, signed_in, gateway, ai):
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.save_analysis(plant_id, ai.analysis)

        row = gateway.called("insert_log")[0][0]
        assert row["title"] == "Analysis: Aphids"
        assert row["description"].startswith("Status: Issue detected")
        assert "Advice: Neem oil" in row["description"]

    async def test_save_professor_answer(self, signed_in, gateway):
        plant_id = await seed_plant(signed_in, gateway)

        await signed_in.logs.save_professor_answer(plant_id, "When to prune?", "Prune in spring.")

        row = gateway.called("insert_log")[0][0]
        assert (row["title"], row["description"]) == ("When to prune?", "Prune in spring.")

    async def test_season_image_becomes_garden_log(self, signed_in, gateway):
        log = await signed_in.logs.save_season_image(DATA_URL, "Spring 2024")

        assert log.title == "Season: Spring 2024"
        assert gateway.called("insert_log")[0][0]["type"] == "GARDEN"
        assert signed_in.store.dashboard_tab == DashboardTab.GARDEN_LOGS

    async def test_season_upload_failure_raises(self, signed_in, gateway, media):
        media.fail_upload = True

        with pytest.raises(StorageError):
            await signed_in.logs.save_season_image(DATA_URL, "Autumn")

        assert gateway.called("insert_log") == []
        assert signed_in.notifier.last == "Image upload failed. Log not saved."
