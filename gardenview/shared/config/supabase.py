"""
Supabase client configuration for database, auth and storage services.
Handles async client initialization with proper error handling.
"""

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from gardenview.shared.core.exceptions import ConfigurationError
from .settings import Settings, get_settings


logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with lazy async initialization.
    Provides the shared client for the data gateway and the media store.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._client: Optional[AsyncClient] = None
        self.settings = settings or get_settings()

    async def get_client(self) -> AsyncClient:
        """Get or create the Supabase client with lazy initialization."""
        if self._client is None:
            self._client = await self._create_client()
        return self._client

    async def _create_client(self) -> AsyncClient:
        """Create Supabase client with proper configuration."""
        try:
            client_options = AsyncClientOptions(
                schema=self.settings.SUPABASE_SCHEMA,
                headers={
                    "User-Agent": f"GardenView/{self.settings.APP_VERSION}",
                },
                auto_refresh_token=True,
                persist_session=True,
                postgrest_client_timeout=self.settings.SUPABASE_POSTGREST_TIMEOUT,
                storage_client_timeout=self.settings.SUPABASE_STORAGE_TIMEOUT,
            )

            client = await acreate_client(
                supabase_url=self.settings.SUPABASE_URL,
                supabase_key=self.settings.SUPABASE_ANON_KEY,
                options=client_options
            )

            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConfigurationError(f"Supabase initialization failed: {e}")

    async def get_storage_bucket(self, bucket_name: Optional[str] = None):
        """
        Get the storage file API for a bucket.

        Args:
            bucket_name: Storage bucket name (default: SUPABASE_STORAGE_BUCKET)
        """
        client = await self.get_client()
        return client.storage.from_(bucket_name or self.settings.SUPABASE_STORAGE_BUCKET)


_supabase_manager: Optional[SupabaseManager] = None


def get_supabase_manager() -> SupabaseManager:
    """Get the global Supabase manager instance."""
    global _supabase_manager
    if _supabase_manager is None:
        _supabase_manager = SupabaseManager()
    return _supabase_manager
