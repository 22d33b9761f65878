"""
Base class for repositories backed by the session's Supabase client.

Every table query and RPC goes through ``_execute`` so PostgREST and
transport failures surface as a single GatewayError type.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from postgrest import APIError
from supabase import AsyncClient

from adoptd.shared.core.exceptions import GatewayError

logger = logging.getLogger(__name__)


class SupabaseRepository:
    """Shared plumbing for ``*RepositoryImpl`` classes."""

    def __init__(self, client: AsyncClient):
        self.client = client

    def table(self, name: str):
        return self.client.table(name)

    async def _execute(self, operation: str, query) -> Any:
        """
        Await a PostgREST request builder and return its ``data``.

        Raises:
            GatewayError: on API or transport failure
        """
        try:
            response = await query.execute()
        except APIError as e:
            logger.error(f"Supabase {operation} failed: {e.message} (code={e.code})")
            raise GatewayError(operation, e.message) from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {operation} transport error: {e}")
            raise GatewayError(operation, e) from e
        return response.data

    async def _rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._execute(f"rpc:{name}", self.client.rpc(name, params or {}))

    async def _first(self, operation: str, query) -> Optional[Dict[str, Any]]:
        """First row or None; an empty result is not an error."""
        rows = await self._execute(operation, query.limit(1))
        return rows[0] if rows else None
