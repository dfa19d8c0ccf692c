# 📄 File: freeexperience/shared/config/supabase.py
#
# 🧭 Purpose (Layman Explanation):
# Connects to the cloud database, login and file storage service, and says clearly when
# it has not been set up so the app can use the local notebook instead.
#
# 🧪 Purpose (Technical Summary):
# Lazy async Supabase client initialization. A missing URL or key surfaces as
# NotConfiguredError so callers can fall back to the local store.
#
# 🔗 Dependencies:
# supabase (acreate_client, AsyncClient), Settings, shared exceptions
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore factory, AppContext, SupabaseGateway

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from freeexperience.shared.core.exceptions import NotConfiguredError
from .settings import Settings, get_settings


logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with lazy connection handling.
    Provides the async client used by the remote gateway.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._client: Optional[AsyncClient] = None
        self.settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        """Whether credentials for the remote backend are present."""
        return self.settings.supabase_configured

    def ensure_configured(self) -> None:
        """
        Verify remote credentials without opening a connection.

        Raises:
            NotConfiguredError: If URL or anonymous key is missing
        """
        if not self.is_configured:
            missing = [
                name for name, value in (
                    ("SUPABASE_URL", self.settings.SUPABASE_URL),
                    ("SUPABASE_ANON_KEY", self.settings.SUPABASE_ANON_KEY),
                ) if not value
            ]
            raise NotConfiguredError(
                "Supabase credentials are not configured",
                missing_settings=missing
            )

    async def get_client(self) -> AsyncClient:
        """Get or create the async Supabase client."""
        if self._client is None:
            self._client = await self._create_client()
        return self._client

    async def _create_client(self) -> AsyncClient:
        """Create Supabase client from settings."""
        self.ensure_configured()
        try:
            client = await acreate_client(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_ANON_KEY,
            )
            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise NotConfiguredError(
                f"Supabase initialization failed: {e}",
                missing_settings=[]
            ) from e

    @property
    def bucket(self) -> str:
        """Storage bucket for public assets."""
        return self.settings.SUPABASE_STORAGE_BUCKET

    async def close(self) -> None:
        """Drop the cached client."""
        if self._client:
            # The client keeps no sockets that require explicit closing
            self._client = None
            logger.info("Supabase client connections closed")
