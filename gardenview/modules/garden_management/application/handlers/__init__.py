# 📄 File: gardenview/modules/garden_management/application/handlers/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups all the "do something" actions of the app by topic.
# 🧪 Purpose (Technical Summary):
# Handler group exports composed by GardenController.
# 🔗 Dependencies:
# HandlerBase and the per-topic handler modules
# 🔄 Connected Modules / Calls From:
# application.controller, tests

from .base import Confirmer, HandlerBase, HandlerContext, auto_confirm
from .loading import DataLoader
from .session import SessionHandlers
from .plants import PlantHandlers
from .logs import LogHandlers
from .gardens import GardenHandlers
from .notebook import NotebookHandlers
from .social import SocialHandlers
from .assistant import AssistantHandlers
from .photos import PhotoHandlers

__all__ = [
    "Confirmer",
    "HandlerBase",
    "HandlerContext",
    "auto_confirm",
    "DataLoader",
    "SessionHandlers",
    "PlantHandlers",
    "LogHandlers",
    "GardenHandlers",
    "NotebookHandlers",
    "SocialHandlers",
    "AssistantHandlers",
    "PhotoHandlers",
]
