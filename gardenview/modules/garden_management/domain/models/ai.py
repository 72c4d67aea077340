# 📄 File: gardenview/modules/garden_management/domain/models/ai.py
# 🧭 Purpose (Layman Explanation):
# The shapes of answers we get back from the AI helper: a plant identification,
# look-alike candidates, a health check, a "is this photo about plants?" verdict,
# and plant recommendations.
# 🧪 Purpose (Technical Summary):
# Typed AI contract payloads (camelCase on the wire). Parsing ignores extra keys;
# a payload missing required keys counts as "no result" in ai_client.py.
# 🔗 Dependencies:
# pydantic, typing, enum
# 🔄 Connected Modules / Calls From:
# ai_client.py, plant handlers, assistant handlers, log handlers (save analysis)

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _AIPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AnalysisType(str, Enum):
    """Health analysis focus"""
    GENERAL = "general"
    DISEASE = "disease"
    NUTRITION = "nutrition"
    STRESS = "stress"
    GROWTH = "growth"
    HARVEST = "harvest"
    PRUNING = "pruning"


class AISuggestion(_AIPayload):
    """Single best identification with auto-filled care details."""
    name: str
    scientific_name: str = ""
    description: str = ""
    care_instructions: str = ""
    is_indoor: bool = False


class GeneratedDescription(_AIPayload):
    """Care details generated for a plant the user named themselves."""
    description: str = ""
    care_instructions: str = ""
    scientific_name: str = ""
    is_indoor: bool = False


class IdentificationResult(_AIPayload):
    """One candidate from a multi-photo identification."""
    name: str
    scientific_name: str = ""
    confidence: float = Field(0.0, ge=0, le=100)
    description: str = ""
    soil: str = ""
    climate: str = ""
    size: str = ""
    pruning: str = ""


class AnalysisResult(_AIPayload):
    healthy: bool
    diagnosis: str = ""
    confidence: float = Field(0.0, ge=0, le=100)
    symptoms: List[str] = Field(default_factory=list)
    treatment: str = ""

    def as_log_text(self) -> str:
        """Plain text block used when an analysis is saved to a plant log."""
        status = "Healthy" if self.healthy else "Issue detected"
        return "\n\n".join([
            f"Status: {status}",
            "Symptoms: " + ", ".join(self.symptoms),
            f"Advice: {self.treatment}",
        ])

    def log_title(self, prefix: str = "Analysis") -> str:
        return f"{prefix}: {self.diagnosis}"


class ImageValidation(_AIPayload):
    allowed: bool = False
    reason: Optional[str] = None


class PlantRecommendation(_AIPayload):
    name: str
    scientific_name: str = ""
    reason: str = ""
    match_percentage: float = Field(0.0, ge=0, le=100)


class AdviceCriteria(_AIPayload):
    """Answers from the plant advice questionnaire"""
    location: str = "outdoor"
    outdoor_type: Optional[str] = None
    climate: str = "temperate"
    min_temperature: float = -5
    sunlight: str = "partial"
    soil: str = "unknown"
    moisture: str = "average"
    space: str = "medium"
    min_height: float = 0
    max_height: float = 100
    plant_types: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)


__all__ = [
    "AnalysisType",
    "AISuggestion",
    "GeneratedDescription",
    "IdentificationResult",
    "AnalysisResult",
    "ImageValidation",
    "PlantRecommendation",
    "AdviceCriteria",
]
