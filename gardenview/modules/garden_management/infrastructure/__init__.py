# 📄 File: gardenview/modules/garden_management/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# The part of the garden module that actually talks to the cloud database.
#
# 🧪 Purpose (Technical Summary):
# Infrastructure layer for garden management: concrete gateway implementations of
# the domain repository interfaces.
#
# 🔗 Dependencies:
# - gardenview.modules.garden_management.domain.repositories
# - supabase
#
# 🔄 Connected Modules / Calls From:
# - gardenview.modules.garden_management.application (controller composition)
