# 📄 File: tests/conftest.py
# 🧭 Purpose (Layman Explanation):
# Shared test setup: a test configuration, the pretend services and a ready-made app
# controller, with or without a signed-in gardener.
#
# 🧪 Purpose (Technical Summary):
# Pytest fixtures wiring the fakes from tests/fakes.py into GardenController.
# Async fixtures run under pytest-asyncio (asyncio_mode = auto).
#
# 🔗 Dependencies:
# - pytest, pytest-asyncio
# - tests.fakes
#
# 🔄 Connected Modules / Calls From:
# - Every test module under tests/unit and tests/integration

import pytest

from gardenview.modules.garden_management.application.controller import GardenController
from gardenview.modules.garden_management.domain.models import SessionUser
from gardenview.shared.config.settings import Settings
from gardenview.shared.infrastructure.storage.local_settings import LocalSettingsStore

from tests.fakes import (
    USER_ID,
    FakeAIClient,
    FakeGateway,
    FakeMediaStore,
    FakeWeatherClient,
    RecordingConfirmer,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def config():
    return Settings(
        _env_file=None,
        SUPABASE_URL="https://test.supabase.co",
        SUPABASE_ANON_KEY="anon-key",
        SETTINGS_SYNC_DEBOUNCE_SECONDS=0.05,
        TOAST_DURATION_SECONDS=30,
    )


@pytest.fixture
def local_store(tmp_path):
    return LocalSettingsStore(path=tmp_path / "local_storage.json")


@pytest.fixture
def gateway():
    gw = FakeGateway()
    gw.seed_profile()
    return gw


@pytest.fixture
def media():
    return FakeMediaStore()


@pytest.fixture
def ai():
    return FakeAIClient()


@pytest.fixture
def weather():
    return FakeWeatherClient()


@pytest.fixture
def confirmer():
    return RecordingConfirmer()


@pytest.fixture
def user():
    return SessionUser(id=USER_ID, email="rosa@example.com")


@pytest.fixture
async def controller(gateway, media, ai, weather, local_store, confirmer, config):
    ctrl = GardenController(
        gateway=gateway,
        media=media,
        ai=ai,
        weather=weather,
        local_store=local_store,
        confirm=confirmer,
        config=config,
    )
    yield ctrl
    ctrl.sync.cancel()
    ctrl.notifier.close()


@pytest.fixture
async def signed_in(controller, user):
    """Controller with an approved user signed in and all collections loaded."""
    await controller.session.handle_auth_change(user)
    return controller
