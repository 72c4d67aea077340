# =============================================================================
# tests/unit/test_remote_clients.py
# Supabase media store, AI function client and weather client with stubbed transports
# =============================================================================

import base64
from datetime import date

import pytest

from gardenview.modules.garden_management.domain.models import AdviceCriteria, AnalysisType
from gardenview.shared.core.exceptions import ExternalServiceError, FileTooLargeError, InvalidFileTypeError
from gardenview.shared.infrastructure.external_apis.ai_client import (
    VALIDATION_EMPTY_REASON,
    VALIDATION_FAILED_REASON,
    AIClient,
    build_request_body,
)
from gardenview.shared.infrastructure.external_apis.weather_client import WeatherClient
from gardenview.shared.infrastructure.storage.supabase_storage import SupabaseMediaStore, decode_image_payload

JPEG_DATA_URL = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8\xff fake jpeg").decode()


# =============================================================================
# STUBS
# =============================================================================

class StubBucket:
    def __init__(self):
        self.uploads = []
        self.removed = []
        self.fail = False

    async def upload(self, path, file, file_options=None):
        if self.fail:
            raise RuntimeError("bucket offline")
        self.uploads.append((path, file, file_options))
        return {"Key": path}

    async def remove(self, paths):
        if self.fail:
            raise RuntimeError("bucket offline")
        self.removed.extend(paths)
        return []

    async def create_signed_url(self, path, expires_in):
        if self.fail:
            raise RuntimeError("bucket offline")
        return {"signedURL": f"https://proj.supabase.co/storage/v1/object/sign/garden-media/{path}?token=t"}


class StubManager:
    def __init__(self):
        self.bucket = StubBucket()
        self.requested = []

    async def get_storage_bucket(self, bucket_name=None):
        self.requested.append(bucket_name)
        return self.bucket


class StubAPI:
    """Records request bodies and answers from a script."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.bodies = []
        self.params = []

    async def post(self, endpoint="", data=None, params=None, timeout=None):
        self.bodies.append(data)
        if self.error:
            raise self.error
        return self.reply

    async def get(self, endpoint="", params=None, timeout=None):
        self.params.append(params)
        if self.error:
            raise self.error
        return self.reply

    async def close(self):
        pass


@pytest.fixture
def manager():
    return StubManager()


@pytest.fixture
def media_store(manager, config):
    return SupabaseMediaStore(manager, config)


# =============================================================================
# MEDIA STORE
# =============================================================================

class TestDecodePayload:

    def test_data_url(self):
        content_type, data = decode_image_payload("data:image/png;base64," + base64.b64encode(b"png").decode())
        assert (content_type, data) == ("image/png", b"png")

    def test_bare_base64_is_jpeg(self):
        assert decode_image_payload(base64.b64encode(b"raw").decode()) == ("image/jpeg", b"raw")


class TestSupabaseMediaStore:
    """Upload paths, managed-reference rules and signed display URLs"""

    async def test_upload_into_owner_folder(self, media_store, manager):
        result = await media_store.upload(JPEG_DATA_URL, "user-9")

        assert result.ok
        assert result.value.startswith("user-9/") and result.value.endswith(".jpg")
        path, data, options = manager.bucket.uploads[0]
        assert path == result.value
        assert data == b"\xff\xd8\xff fake jpeg"
        assert options["content-type"] == "image/jpeg"
        assert manager.requested == ["garden-media"]

    async def test_non_image_payload_rejected(self, media_store, manager):
        result = await media_store.upload("data:text/plain;base64,aGVsbG8=", "user-9")

        assert isinstance(result.error, InvalidFileTypeError)
        assert manager.bucket.uploads == []

    async def test_oversized_payload_rejected(self, media_store, manager):
        media_store.max_upload_size = 4

        result = await media_store.upload(JPEG_DATA_URL, "user-9")

        assert isinstance(result.error, FileTooLargeError)

    async def test_bucket_failure_is_storage_error(self, media_store, manager):
        manager.bucket.fail = True

        result = await media_store.upload(JPEG_DATA_URL, "user-9")

        assert not result.ok
        assert result.error.error_code == "STORAGE_ERROR"

    @pytest.mark.parametrize("ref, expected", [
        ("user-1/123.jpg", "user-1/123.jpg"),
        ("https://proj.supabase.co/storage/v1/object/public/garden-media/user-1/a.jpg", "user-1/a.jpg"),
        ("https://proj.supabase.co/storage/v1/object/sign/garden-media/user-1/b%20c.jpg?token=x", "user-1/b c.jpg"),
        ("https://images.example.com/rose.jpg", None),
        ("data:image/jpeg;base64,AAAA", None),
        ("", None),
    ])
    def test_object_path(self, media_store, ref, expected):
        assert media_store.object_path(ref) == expected

    async def test_delete_skips_foreign_urls(self, media_store, manager):
        result = await media_store.delete("https://images.example.com/rose.jpg")

        assert result.ok
        assert manager.bucket.removed == []

    async def test_delete_managed_path(self, media_store, manager):
        assert (await media_store.delete("user-1/123.jpg")).ok
        assert manager.bucket.removed == ["user-1/123.jpg"]

    async def test_bare_path_resolves_to_signed_url(self, media_store):
        url = await media_store.resolve_display_url("user-1/123.jpg")

        assert "/object/sign/garden-media/user-1/123.jpg" in url

    async def test_foreign_url_passes_through(self, media_store, manager):
        ref = "https://images.example.com/rose.jpg"
        assert await media_store.resolve_display_url(ref) == ref

    async def test_stale_signed_url_falls_back_when_signing_fails(self, media_store, manager):
        manager.bucket.fail = True
        ref = "https://proj.supabase.co/storage/v1/object/sign/garden-media/user-1/a.jpg?token=old"

        assert await media_store.resolve_display_url(ref) == ref
        assert await media_store.resolve_display_url("user-1/a.jpg") is None


# =============================================================================
# AI CLIENT
# =============================================================================

class TestAIClient:
    """Flat action bodies and tolerant payload parsing"""

    def test_request_body_omits_unset_fields(self):
        body = build_request_body("askPlantProfessor", base64Image=None, question="Why?", lang="en")
        assert body == {"action": "askPlantProfessor", "question": "Why?", "lang": "en"}

    async def test_identify(self, config):
        api = StubAPI(reply={"name": "Basil", "scientificName": "Ocimum basilicum", "isIndoor": True})
        client = AIClient(config, api=api)

        suggestion = await client.identify("data:image/jpeg;base64,AAAA", lang="de")

        assert (suggestion.name, suggestion.scientific_name, suggestion.is_indoor) == \
            ("Basil", "Ocimum basilicum", True)
        assert api.bodies == [{"action": "identify", "base64Image": "data:image/jpeg;base64,AAAA", "lang": "de"}]

    async def test_payload_missing_keys_is_no_result(self, config):
        client = AIClient(config, api=StubAPI(reply={"scientificName": "?"}))

        assert await client.identify("img") is None

    async def test_service_error_is_no_result(self, config):
        client = AIClient(config, api=StubAPI(error=ExternalServiceError("down", service="ai-function")))

        assert await client.generate_description("Rose") is None
        assert await client.get_recommendations(AdviceCriteria()) == []

    async def test_unreachable_validator_rejects(self, config):
        client = AIClient(config, api=StubAPI(error=ExternalServiceError("down")))

        validation = await client.validate_image("img")

        assert validation.allowed is False
        assert validation.reason == VALIDATION_FAILED_REASON

    async def test_empty_validation_rejects(self, config):
        client = AIClient(config, api=StubAPI(reply={}))

        assert (await client.validate_image("img")).reason == VALIDATION_EMPTY_REASON

    async def test_multi_identification_skips_bad_items(self, config):
        api = StubAPI(reply=[{"name": "Rose", "confidence": 91}, {"confidence": 10}, "junk"])
        client = AIClient(config, api=api)

        results = await client.identify_multiple(["a", "b"])

        assert [item.name for item in results] == ["Rose"]
        assert api.bodies[0]["base64Images"] == ["a", "b"]

    async def test_analysis_sends_type(self, config):
        api = StubAPI(reply={"healthy": True, "diagnosis": "Fine"})
        client = AIClient(config, api=api)

        result = await client.analyze_health("img", AnalysisType.NUTRITION)

        assert result.healthy is True
        assert api.bodies[0]["type"] == "nutrition"

    async def test_professor_answer_text(self, config):
        client = AIClient(config, api=StubAPI(reply={"text": "Prune after flowering."}))

        assert await client.ask_professor(None, "When to prune lilac?") == "Prune after flowering."


# =============================================================================
# WEATHER CLIENT
# =============================================================================

class TestWeatherClient:

    async def test_current_conditions(self, config):
        client = WeatherClient(config)
        client.forecast = StubAPI(reply={"current": {"temperature_2m": 21.4, "weather_code": 3, "is_day": 0}})

        snapshot = await client.current(40.4, -3.7)

        assert (snapshot.temperature, snapshot.weather_code, snapshot.is_day) == (21.4, 3, False)
        assert client.forecast.params[0]["current"] == "temperature_2m,weather_code,is_day"

    async def test_past_day_uses_archive_maximum(self, config):
        client = WeatherClient(config)
        client.archive = StubAPI(reply={"daily": {"temperature_2m_max": [12.0], "weather_code": [61]}})

        snapshot = await client.for_date(40.4, -3.7, date(2023, 4, 2))

        assert (snapshot.temperature, snapshot.weather_code) == (12.0, 61)
        assert client.archive.params[0]["start_date"] == "2023-04-02"

    async def test_failures_give_none(self, config):
        client = WeatherClient(config)
        client.forecast = StubAPI(error=ExternalServiceError("timeout"))
        client.archive = StubAPI(reply={"daily": {"temperature_2m_max": [None]}})

        assert await client.current(0, 0) is None
        assert await client.for_date(0, 0, date(2023, 4, 2)) is None
