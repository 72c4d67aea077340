# 📄 File: gardenview/shared/infrastructure/storage/supabase_storage.py

# 🧭 Purpose (Layman Explanation):
# Handles putting plant, log and garden photos into cloud storage, removing old ones,
# and creating temporary links so the app can show them.

# 🧪 Purpose (Technical Summary):
# Supabase Storage implementation of the MediaStore contract: base64 uploads into
# per-user folders, managed-object recognition by bucket path, deletes that ignore
# foreign URLs, and signed display URLs (re-signing expired signed links).

# 🔗 Dependencies:
# - supabase: async storage client (via SupabaseManager)
# - base64 / binascii: payload decoding
# - urllib.parse: URL path handling
# - typing: Type annotations

# 🔄 Connected Modules / Calls From:
# Called by: plant, log, garden and notebook handlers (upload/delete), load handlers (resolve)
# Connects to: Supabase cloud storage bucket SUPABASE_STORAGE_BUCKET

import base64
import binascii
import re
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse

from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.config.supabase import SupabaseManager, get_supabase_manager
from gardenview.shared.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    StorageError,
)
from gardenview.shared.core.result import Result
from gardenview.shared.utils.helpers import epoch_millis
from gardenview.shared.utils.logging import get_logger
from .media_store import MediaStore

logger = get_logger(__name__)

DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>[^;,]*)(;[^,]*)?;base64,(?P<data>.*)$', re.DOTALL)
SIGNED_PATH_MARKER = "/object/sign/"


def decode_image_payload(image: str) -> Tuple[str, bytes]:
    """
    Decode a data URL or bare base64 string.

    Returns:
        (content_type, raw bytes); bare base64 is assumed to be JPEG

    Raises:
        InvalidFileTypeError: If the payload is not valid base64
    """
    match = DATA_URL_PATTERN.match(image.strip())
    if match:
        content_type = match.group('mime') or 'image/jpeg'
        encoded = match.group('data')
    else:
        content_type = 'image/jpeg'
        encoded = image.strip()

    try:
        return content_type, base64.b64decode(encoded, validate=False)
    except (binascii.Error, ValueError) as e:
        raise InvalidFileTypeError(f"Image payload is not valid base64: {e}", file_type=content_type)


class SupabaseMediaStore(MediaStore):
    """
    Supabase Storage client for user images.

    Handles:
    - Image uploads into ``{owner_id}/{epoch_ms}.jpg``
    - Managed-object recognition by bucket path
    - Deletes that skip foreign and placeholder URLs
    - Signed display URLs
    """

    def __init__(self, manager: Optional[SupabaseManager] = None, settings: Optional[Settings] = None):
        """Initialize the media store with configuration."""
        self.settings = settings or get_settings()
        self.manager = manager or get_supabase_manager()
        self.bucket_name = self.settings.SUPABASE_STORAGE_BUCKET
        self.max_upload_size = self.settings.MAX_UPLOAD_SIZE_BYTES
        self.signed_url_expires_in = self.settings.SIGNED_URL_EXPIRES_IN

    async def _bucket(self):
        return await self.manager.get_storage_bucket(self.bucket_name)

    # ===== PATH HANDLING =====

    def object_path(self, ref: Optional[str]) -> Optional[str]:
        """
        Storage path for a managed reference, or None when the ref is not ours.

        Bare paths are managed as-is; http(s) URLs are managed only when their
        path contains ``/{bucket}/``.
        """
        if not ref:
            return None
        if ref.startswith("data:"):
            return None
        if not ref.startswith(("http://", "https://")):
            return ref

        parts = urlparse(ref).path.split(f"/{self.bucket_name}/", 1)
        if len(parts) < 2 or not parts[1]:
            return None
        return unquote(parts[1])

    def is_managed(self, ref: Optional[str]) -> bool:
        return self.object_path(ref) is not None

    # ===== OPERATIONS =====

    async def upload(self, image: str, owner_id: str) -> Result[str]:
        """
        Upload a base64 image into the owner's folder.

        Args:
            image: Data URL or bare base64 payload
            owner_id: Owner user ID

        Returns:
            Result with the stored path, or a typed failure
        """
        try:
            content_type, data = decode_image_payload(image)
        except InvalidFileTypeError as e:
            return Result.failure(e)

        if not content_type.startswith("image/"):
            return Result.failure(InvalidFileTypeError(
                "Only images can be uploaded", file_type=content_type
            ))
        if len(data) > self.max_upload_size:
            return Result.failure(FileTooLargeError(
                f"Image exceeds {self.max_upload_size} bytes",
                file_size=len(data),
                max_size=self.max_upload_size,
            ))

        path = f"{owner_id}/{epoch_millis()}.jpg"
        try:
            bucket = await self._bucket()
            await bucket.upload(
                path=path,
                file=data,
                file_options={
                    "content-type": "image/jpeg",
                    "cache-control": self.settings.STORAGE_CACHE_CONTROL,
                    "upsert": "true",
                },
            )
        except Exception as e:
            logger.error(f"Failed to upload image to {path}: {e}")
            return Result.failure(StorageError(f"Upload failed: {e}", operation="upload", path=path))

        logger.info(f"Image uploaded: {path}", size=len(data))
        return Result.success(path)

    async def delete(self, ref: Optional[str]) -> Result[None]:
        """
        Delete a managed object; unmanaged and empty refs are a successful no-op.
        """
        path = self.object_path(ref)
        if path is None:
            if ref:
                logger.debug(f"Skipping delete of unmanaged image reference: {ref[:80]}")
            return Result.success()

        try:
            bucket = await self._bucket()
            await bucket.remove([path])
        except Exception as e:
            logger.error(f"Failed to delete image {path}: {e}")
            return Result.failure(StorageError(f"Delete failed: {e}", operation="delete", path=path))

        logger.info(f"Image deleted: {path}")
        return Result.success()

    async def create_signed_url(self, path: str, expires_in: Optional[int] = None) -> Result[str]:
        """Create a time-limited URL for a stored object."""
        try:
            bucket = await self._bucket()
            response = await bucket.create_signed_url(path, expires_in or self.signed_url_expires_in)
        except Exception as e:
            logger.warning(f"Failed to sign image URL for {path}: {e}")
            return Result.failure(StorageError(f"Signing failed: {e}", operation="sign", path=path))

        signed = None
        if isinstance(response, dict):
            signed = response.get("signedURL") or response.get("signedUrl")
        if not signed:
            return Result.failure(StorageError("Signing returned no URL", operation="sign", path=path))
        return Result.success(signed)

    async def resolve_display_url(self, ref: Optional[str]) -> Optional[str]:
        """
        Resolve a stored reference for display.

        - empty ref -> None
        - signed bucket URL -> freshly signed URL (original URL if re-signing fails)
        - any other http(s)/data URL -> unchanged
        - bare storage path -> signed URL (None if signing fails)
        """
        if not ref:
            return None

        if ref.startswith("data:"):
            return ref

        if ref.startswith(("http://", "https://")):
            if SIGNED_PATH_MARKER not in urlparse(ref).path:
                return ref
            path = self.object_path(ref)
            if path is None:
                return ref
            refreshed = await self.create_signed_url(path)
            return refreshed.value if refreshed.ok else ref

        signed = await self.create_signed_url(ref)
        return signed.value if signed.ok else None

