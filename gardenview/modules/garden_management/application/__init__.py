# 📄 File: gardenview/modules/garden_management/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# The "brain" of the garden app: what happens when you tap a button, which screen comes
# next, and what the app currently remembers about your garden.
#
# 🧪 Purpose (Technical Summary):
# Application layer: GardenController (composition root), handler groups, command
# payloads, the GardenStore, the view-state machine, toast notifier and settings sync.
#
# 🔗 Dependencies:
# - gardenview.modules.garden_management.domain
# - gardenview.modules.garden_management.infrastructure
#
# 🔄 Connected Modules / Calls From:
# - View layers, tests

"""
Garden Management Application Layer

- GardenController: composes store, navigation, sync and handlers
- Handlers: session, plants, logs, gardens, notebook, social, assistant
- Commands: PlantDraft, LogDraft, NotebookDraft, PhotoTarget, SeriesScope
- State: GardenStore with derived views
- Navigation: View / Intent transition table and ViewStateMachine
"""

from .commands import LogDraft, NotebookDraft, PhotoTarget, PhotoTargetKind, PlantDraft, SeriesScope
from .controller import GardenController
from .navigation import Intent, View, ViewStateMachine
from .state import DashboardTab, EntityKind, GardenStore

__all__ = [
    "GardenController",
    "LogDraft",
    "NotebookDraft",
    "PhotoTarget",
    "PhotoTargetKind",
    "PlantDraft",
    "SeriesScope",
    "Intent",
    "View",
    "ViewStateMachine",
    "DashboardTab",
    "EntityKind",
    "GardenStore",
]
