# 📄 File: gardenview/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds the settings that tell the app how to reach Supabase, the weather
# service and the AI helper, and how it should behave.
#
# 🧪 Purpose (Technical Summary):
# Configuration package exports for settings management and the Supabase
# client manager.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - supabase.py (Supabase async client manager)
#
# 🔄 Connected Modules / Calls From:
# - Controller construction
# - Infrastructure components

from .settings import get_settings, Settings
from .supabase import SupabaseManager, get_supabase_manager

__all__ = [
    "get_settings",
    "Settings",
    "SupabaseManager",
    "get_supabase_manager",
]
