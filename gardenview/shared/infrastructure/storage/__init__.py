# 📄 File: gardenview/shared/infrastructure/storage/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Groups everything that keeps data outside memory: photos in cloud storage and
# preferences on the device.
#
# 🧪 Purpose (Technical Summary):
# Storage infrastructure package: the MediaStore contract, its Supabase Storage
# implementation and the local JSON settings store.
#
# 🔗 Dependencies:
# - gardenview/shared/infrastructure/storage/media_store.py
# - gardenview/shared/infrastructure/storage/supabase_storage.py
# - gardenview/shared/infrastructure/storage/local_settings.py
# - supabase (storage client)
#
# 🔄 Connected Modules / Calls From:
# - GardenController composition
# - Plant, log, garden and notebook handlers (uploads and deletes)
# - SettingsSync (local settings)

"""
Storage Infrastructure Package

Storage Organization:
- {user_id}/{epoch_ms}.jpg - every uploaded image, one folder per user

Usage Examples:
    from gardenview.shared.infrastructure.storage import SupabaseMediaStore

    media_store = SupabaseMediaStore()
    result = await media_store.upload(data_url, owner_id="123")
    if result.ok:
        display_url = await media_store.resolve_display_url(result.value)
"""

from .local_settings import LocalSettingsStore
from .media_store import MediaStore
from .supabase_storage import SupabaseMediaStore, decode_image_payload

__all__ = [
    "LocalSettingsStore",
    "MediaStore",
    "SupabaseMediaStore",
    "decode_image_payload",
]
