# 📄 File: gardenview/modules/garden_management/domain/repositories/__init__.py
# 🧭 Purpose (Layman Explanation):
# The "contracts" for talking to the cloud database and photo storage.
# 🧪 Purpose (Technical Summary):
# Repository interface exports.
# 🔗 Dependencies:
# garden_gateway.py, gardenview.shared.infrastructure.storage.media_store
# 🔄 Connected Modules / Calls From:
# Infrastructure implementations, controller, tests

from .garden_gateway import GardenGateway
from gardenview.shared.infrastructure.storage.media_store import MediaStore

__all__ = ["GardenGateway", "MediaStore"]
