# 📄 File: gardenview/shared/infrastructure/external_apis/ai_client.py

# 🧭 Purpose (Layman Explanation):
# Talks to the AI helper that recognizes plants in photos, writes care descriptions,
# checks plant health, recommends plants and answers questions.

# 🧪 Purpose (Technical Summary):
# Client for the serverless AI function. Each operation POSTs a flat JSON body
# ({"action": ..., <fields>, "lang": ...}) and parses the reply into a typed payload.
# Transport errors and malformed replies are logged and reported as "no result";
# validate_image reports them as a rejection.

# 🔗 Dependencies:
# - aiohttp (via APIClient)
# - pydantic: reply parsing into domain AI models

# 🔄 Connected Modules / Calls From:
# Called by: plant handlers (prepare/identify/describe), assistant handlers

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PayloadValidationError

from gardenview.modules.garden_management.domain.models.ai import (
    AdviceCriteria,
    AISuggestion,
    AnalysisResult,
    AnalysisType,
    GeneratedDescription,
    IdentificationResult,
    ImageValidation,
    PlantRecommendation,
)
from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.core.exceptions import GardenViewException
from gardenview.shared.utils.logging import get_logger
from .api_client import APIClient

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

VALIDATION_FAILED_REASON = "Error: Validation failed"
VALIDATION_EMPTY_REASON = "Error: Validation returned empty result"


class AIClient:
    """
    Generative AI operations used by the garden controller.

    Every method returns a typed payload, an empty list, or None. Nothing is raised
    for backend trouble; the caller shows the toast.
    """

    def __init__(self, settings: Optional[Settings] = None, api: Optional[APIClient] = None):
        self.settings = settings or get_settings()
        self.api = api or APIClient(
            base_url=self.settings.AI_FUNCTION_URL,
            api_name="ai-function",
            timeout=self.settings.AI_TIMEOUT,
            user_agent=f"{self.settings.APP_NAME}/{self.settings.APP_VERSION}",
        )

    async def _call(self, action: str, **fields: Any) -> Optional[Any]:
        body = build_request_body(action, **fields)
        try:
            return await self.api.post(data=body)
        except GardenViewException as e:
            logger.error(f"AI action '{action}' failed: {e.message}", extra=e.details)
            return None

    @staticmethod
    def _parse(model: Type[M], data: Any, action: str) -> Optional[M]:
        if not isinstance(data, dict) or not data:
            return None
        try:
            return model.model_validate(data)
        except PayloadValidationError as e:
            logger.warning(f"AI action '{action}' returned an unexpected payload: {e.error_count()} errors")
            return None

    @classmethod
    def _parse_list(cls, model: Type[M], data: Any, action: str) -> List[M]:
        if not isinstance(data, list):
            return []
        parsed = (cls._parse(model, item, action) for item in data)
        return [item for item in parsed if item is not None]

    # ===== IDENTIFICATION =====

    async def identify(self, image: str, lang: str = "en") -> Optional[AISuggestion]:
        """Best single identification of the plant in ``image``."""
        data = await self._call("identify", base64Image=image, lang=lang)
        return self._parse(AISuggestion, data, "identify")

    async def identify_multiple(self, images: List[str], lang: str = "en") -> List[IdentificationResult]:
        """Ranked candidates from one or more photos of the same plant."""
        data = await self._call("identifyMulti", base64Images=list(images), lang=lang)
        results = self._parse_list(IdentificationResult, data, "identifyMulti")
        if not results:
            logger.warning("AI returned empty result for multi-photo identification")
        return results

    async def generate_description(self, name: str, lang: str = "en") -> Optional[GeneratedDescription]:
        data = await self._call("generateDescription", name=name, lang=lang)
        return self._parse(GeneratedDescription, data, "generateDescription")

    # ===== CONTENT CHECK =====

    async def validate_image(self, image: str) -> ImageValidation:
        """
        Ask whether ``image`` is garden related.

        An unreachable validator or an empty reply is a rejection.
        """
        data = await self._call("validateImageContent", base64Image=image)
        if data is None:
            return ImageValidation(allowed=False, reason=VALIDATION_FAILED_REASON)
        validation = self._parse(ImageValidation, data, "validateImageContent")
        return validation or ImageValidation(allowed=False, reason=VALIDATION_EMPTY_REASON)

    # ===== ASSISTANT =====

    async def analyze_health(
        self,
        image: str,
        analysis_type: AnalysisType = AnalysisType.GENERAL,
        lang: str = "en"
    ) -> Optional[AnalysisResult]:
        data = await self._call("analyzePlantHealth", base64Image=image, type=analysis_type.value, lang=lang)
        return self._parse(AnalysisResult, data, "analyzePlantHealth")

    async def get_recommendations(self, criteria: AdviceCriteria, lang: str = "en") -> List[PlantRecommendation]:
        data = await self._call(
            "getPlantAdvice",
            criteria=criteria.model_dump(by_alias=True, exclude_none=True),
            lang=lang,
        )
        return self._parse_list(PlantRecommendation, data, "getPlantAdvice")

    async def ask_professor(self, image: Optional[str], question: str, lang: str = "en") -> Optional[str]:
        """Free-form question about a plant photo; returns the answer text."""
        data = await self._call("askPlantProfessor", base64Image=image, question=question, lang=lang)
        if isinstance(data, dict) and data.get("text"):
            return str(data["text"])
        return None

    async def close(self):
        await self.api.close()


def build_request_body(action: str, **fields: Any) -> Dict[str, Any]:
    """Wire body for an AI action, omitting unset fields."""
    return {"action": action, **{k: v for k, v in fields.items() if v is not None}}
