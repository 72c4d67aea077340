# 📄 File: gardenview/modules/garden_management/application/state/__init__.py
# 🧭 Purpose (Layman Explanation):
# The app's short-term memory of what is loaded and selected.
# 🧪 Purpose (Technical Summary):
# Exports the GardenStore state container and its enums.
# 🔗 Dependencies:
# store.py
# 🔄 Connected Modules / Calls From:
# GardenController, handlers, ViewStateMachine

from .store import DashboardTab, EntityKind, GardenStore, TAB_MODULES

__all__ = ["DashboardTab", "EntityKind", "GardenStore", "TAB_MODULES"]
