# 📄 File: gardenview/shared/infrastructure/storage/media_store.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for keeping photos in cloud storage: put one in, take one out,
# and turn a stored photo into a link the screen can show.
# 🧪 Purpose (Technical Summary):
# Media store interface: upload encoded images, delete managed objects (no-op for
# foreign URLs), recognize managed references and resolve display URLs.
# 🔗 Dependencies:
# gardenview.shared.core.result, typing, abc
# 🔄 Connected Modules / Calls From:
# SupabaseMediaStore (implementation), controller handlers, test fakes

from abc import ABC, abstractmethod
from typing import Optional

from gardenview.shared.core.result import Result


class MediaStore(ABC):
    """Object storage for user images."""

    @abstractmethod
    async def upload(self, image: str, owner_id: str) -> Result[str]:
        """
        Upload a base64 image (raw or data URL).

        Args:
            image: Base64 payload, optionally prefixed with ``data:image/...;base64,``
            owner_id: Owner user ID, used as the top-level folder

        Returns:
            Result with the stored object path
        """
        pass

    @abstractmethod
    async def delete(self, ref: Optional[str]) -> Result[None]:
        """
        Delete a stored object.

        Empty refs and refs that are not managed objects succeed without a request.
        """
        pass

    @abstractmethod
    def is_managed(self, ref: Optional[str]) -> bool:
        """True when ``ref`` points at an object this store uploaded."""
        pass

    @abstractmethod
    async def resolve_display_url(self, ref: Optional[str]) -> Optional[str]:
        """
        Turn a stored reference into a URL the view can show.

        Empty refs give None; already-public URLs are returned unchanged.
        """
        pass

    @staticmethod
    def is_pending_upload(image: Optional[str]) -> bool:
        """True for raw image payloads that still need uploading."""
        return bool(image) and image.startswith("data:")
