# 📄 File: gardenview/modules/garden_management/infrastructure/database/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the pieces that read and write garden data in the cloud database.
#
# 🧪 Purpose (Technical Summary):
# Database layer for garden management: the Supabase gateway implementation and the
# row mappers it shares with the controller handlers.
#
# 🔗 Dependencies:
# - supabase (PostgREST client)
# - gardenview.modules.garden_management.domain.repositories (GardenGateway contract)
#
# 🔄 Connected Modules / Calls From:
# - GardenController composition
# - Controller handlers (row builders)

"""
Garden Management Database Layer

Database Components:
- SupabaseGardenGateway: GardenGateway over Supabase PostgREST
- mappers: row <-> domain conversion and insert/update row builders
"""

from .supabase_gateway import SupabaseGardenGateway

__all__ = ["SupabaseGardenGateway"]
