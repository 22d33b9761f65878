"""
Supabase client configuration for authentication, database and storage services.

Every signed-in session gets its own async client so that row-level security
sees that user's token; nothing here is shared between users except settings.
"""

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client factory with connection error handling.
    Provides per-session clients for authentication, database, and storage.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._clients_created = 0

    async def create_client(self) -> AsyncClient:
        """Create a fresh async Supabase client for one user session."""
        try:
            client_options = AsyncClientOptions(
                schema="public",
                headers={
                    "User-Agent": f"ADOPTD/{self.settings.APP_VERSION}",
                },
                # scopes are keyed by access token; an expired session signs in again
                auto_refresh_token=False,
                persist_session=False,
            )

            client = await acreate_client(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_ANON_KEY,
                options=client_options,
            )
            self._clients_created += 1

            logger.debug("Supabase client created")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConnectionError(f"Supabase initialization failed: {e}")

    async def health_check(self) -> dict:
        """
        Perform a lightweight health check against the Supabase REST endpoint.

        Returns:
            dict: Health status of Supabase services
        """
        health_status = {
            "supabase_connection": False,
            "clients_created": self._clients_created,
            "error": None,
        }

        try:
            client = await self.create_client()
            await client.table("titles").select("id").limit(1).execute()
            health_status["supabase_connection"] = True
        except Exception as e:
            error_msg = f"Supabase health check failed: {e}"
            logger.error(error_msg)
            health_status["error"] = error_msg

        return health_status


_supabase_manager: Optional[SupabaseManager] = None


def get_supabase_manager() -> SupabaseManager:
    """
    Get the process-wide Supabase manager instance.

    Returns:
        SupabaseManager: Singleton Supabase manager
    """
    global _supabase_manager
    if _supabase_manager is None:
        _supabase_manager = SupabaseManager()
    return _supabase_manager


async def cleanup_supabase():
    """Drop the manager on application shutdown."""
    global _supabase_manager
    if _supabase_manager:
        _supabase_manager = None
        logger.info("Supabase cleanup completed")
