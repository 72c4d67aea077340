# 📄 File: gardenview/shared/infrastructure/external_apis/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Collects the helpers that talk to outside services: the AI plant expert and the
# weather service.
#
# 🧪 Purpose (Technical Summary):
# External API package: the generic aiohttp APIClient plus the AI function and
# Open-Meteo adapters built on it.
#
# 🔗 Dependencies:
# - aiohttp
#
# 🔄 Connected Modules / Calls From:
# - GardenController composition
# - Session, log, plant and assistant handlers

from .ai_client import AIClient
from .api_client import APIClient
from .weather_client import WeatherClient

__all__ = [
    "AIClient",
    "APIClient",
    "WeatherClient",
]
