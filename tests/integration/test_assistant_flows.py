# =============================================================================
# tests/integration/test_assistant_flows.py
# Health analysis, plant recommendations and professor questions
# =============================================================================

import pytest

from gardenview.modules.garden_management.domain.models import AdviceCriteria, AnalysisType, PlantRecommendation, Tier
from gardenview.shared.core.exceptions import AuthenticationError, ValidationError

from tests.fakes import DATA_URL


class TestAnalyzeHealth:
    """Photo health checks"""

    async def test_returns_analysis_in_user_language(self, signed_in, ai):
        await signed_in.session.update_settings(lang="de")

        result = await signed_in.assistant.analyze_health(DATA_URL, AnalysisType.DISEASE)

        assert result.diagnosis == "Aphids"
        assert ai.calls[-1] == ("analyze_health", (DATA_URL, AnalysisType.DISEASE, "de"))
        assert signed_in.store.is_loading is False

    async def test_no_result_toasts(self, signed_in, ai):
        ai.analysis = None

        assert await signed_in.assistant.analyze_health(DATA_URL) is None
        assert signed_in.notifier.shown == ["Analysis failed. Please try again."]

    async def test_requires_sign_in(self, controller):
        with pytest.raises(AuthenticationError):
            await controller.assistant.analyze_health(DATA_URL)


class TestRecommendPlants:

    async def test_best_match_first(self, signed_in, ai):
        ai.recommendations = [
            PlantRecommendation(name="Lavender", match_percentage=72),
            PlantRecommendation(name="Rosemary", match_percentage=95),
            PlantRecommendation(name="Thyme", match_percentage=80),
        ]

        results = await signed_in.assistant.recommend_plants(AdviceCriteria(sunlight="full"))

        assert [item.name for item in results] == ["Rosemary", "Thyme", "Lavender"]

    async def test_empty_toasts(self, signed_in, ai):
        assert await signed_in.assistant.recommend_plants(AdviceCriteria()) == []
        assert signed_in.notifier.last == "No recommendations found."


class TestAskProfessor:
    """Free-form questions"""

    async def test_question_is_trimmed(self, signed_in, ai):
        answer = await signed_in.assistant.ask_professor("  When to prune?  ", DATA_URL)

        assert answer == "Prune in spring."
        assert ai.calls[-1] == ("ask_professor", (DATA_URL, "When to prune?", "en"))

    async def test_blank_question_rejected(self, signed_in, ai):
        with pytest.raises(ValidationError) as exc_info:
            await signed_in.assistant.ask_professor("   ")

        assert exc_info.value.details.get("field") == "question"
        assert not any(name == "ask_professor" for name, _ in ai.calls)

    async def test_no_answer_toasts(self, signed_in, ai):
        ai.answer = None

        assert await signed_in.assistant.ask_professor("Why yellow leaves?") is None
        assert signed_in.notifier.last == "The professor could not answer. Please try again."


class TestAIAllowance:
    """Limit-AI setting and the per-tier daily allowance"""

    async def test_limit_ai_skips_assistant_calls(self, signed_in, ai, gateway):
        await signed_in.session.update_settings(limit_ai=True)

        assert await signed_in.assistant.analyze_health(DATA_URL) is None
        assert await signed_in.assistant.recommend_plants(AdviceCriteria()) == []
        assert await signed_in.assistant.ask_professor("Why yellow leaves?") is None

        assert ai.calls == []
        assert gateway.called("upsert_ai_usage") == []
        assert signed_in.notifier.shown == ["AI features are turned off in your settings."] * 3

    async def test_usage_accumulates_per_call(self, signed_in, gateway, local_store, config):
        await signed_in.assistant.ask_professor("When to prune?")
        await signed_in.assistant.analyze_health(DATA_URL)

        usage = signed_in.usage.usage
        assert (usage.requests, usage.images_scanned) == (2, 1)
        assert len(gateway.called("upsert_ai_usage")) == 2
        assert local_store.get(config.AI_USAGE_STORAGE_KEY)["requests"] == 2

    async def test_higher_tier_has_more_room(self, signed_in):
        signed_in.usage.usage = signed_in.usage.usage.model_copy(update={"daily_score": 60_000})
        assert signed_in.usage.allows() is False

        await signed_in.session.update_settings(tier=Tier.SILVER)

        assert signed_in.usage.allows() is True
        assert signed_in.usage.remaining() == 190_000

    async def test_missing_usage_table_keeps_local_count(self, signed_in, gateway, local_store, config):
        gateway.missing_table("upsert_ai_usage", code="PGRST205")

        assert await signed_in.assistant.ask_professor("When to prune?") == "Prune in spring."

        assert local_store.get(config.AI_USAGE_STORAGE_KEY)["requests"] == 1
        assert signed_in.notifier.shown == []
