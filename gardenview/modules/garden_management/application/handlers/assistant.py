# 📄 File: gardenview/modules/garden_management/application/handlers/assistant.py
# 🧭 Purpose (Layman Explanation):
# The AI helper screens: checking a plant's health from a photo, suggesting plants
# that suit your garden, and answering free questions about a plant.
#
# 🧪 Purpose (Technical Summary):
# Read-only AI handler group. Calls are gated on the limit-AI setting and the daily
# allowance and are counted by the usage tracker. An empty AI answer gives None / []
# with one toast. Saving the answers is LogHandlers' job.
#
# 🔗 Dependencies:
# - AIClient via HandlerContext
#
# 🔄 Connected Modules / Calls From:
# - GardenController.assistant
# - Plant analysis, plant advice and professor screens

from typing import List, Optional

from gardenview.shared.core.exceptions import ValidationError
from ...domain.models import AdviceCriteria, AnalysisResult, AnalysisType, PlantRecommendation
from .base import HandlerBase

ANALYSIS_FAILED_TOAST = "Analysis failed. Please try again."
ADVICE_FAILED_TOAST = "No recommendations found."
PROFESSOR_FAILED_TOAST = "The professor could not answer. Please try again."


class AssistantHandlers(HandlerBase):

    async def analyze_health(self, image: str,
                             analysis_type: AnalysisType = AnalysisType.GENERAL) -> Optional[AnalysisResult]:
        self._require_user()
        if not self._ai_allowed("analyze_health", images=1):
            return None
        async with self._command("analyze_health"):
            result = await self.ctx.ai.analyze_health(image, AnalysisType(analysis_type), self.store.settings.lang)
            await self._track_ai("analyzePlantHealth", result, images=1)
        if result is None:
            return self._fail("analyze_health", None, ANALYSIS_FAILED_TOAST)
        return result

    async def recommend_plants(self, criteria: AdviceCriteria) -> List[PlantRecommendation]:
        self._require_user()
        if not self._ai_allowed("recommend_plants"):
            return []
        async with self._command("recommend_plants"):
            recommendations = await self.ctx.ai.get_recommendations(criteria, self.store.settings.lang)
            await self._track_ai("getPlantAdvice", recommendations or None)
        if not recommendations:
            self._fail("recommend_plants", None, ADVICE_FAILED_TOAST)
            return []
        return sorted(recommendations, key=lambda item: item.match_percentage, reverse=True)

    async def ask_professor(self, question: str, image: Optional[str] = None) -> Optional[str]:
        """
        Ask a free-form question, optionally about a photo.

        Raises:
            ValidationError: Blank question
        """
        self._require_user()
        question = (question or "").strip()
        if not question:
            raise ValidationError("Please enter a question", field="question")
        images = 1 if image else 0
        if not self._ai_allowed("ask_professor", images=images):
            return None
        async with self._command("ask_professor"):
            answer = await self.ctx.ai.ask_professor(image, question, self.store.settings.lang)
            await self._track_ai("askPlantProfessor", answer or None, images=images)
        if not answer:
            return self._fail("ask_professor", None, PROFESSOR_FAILED_TOAST)
        return answer


__all__ = ["AssistantHandlers"]
