"""
Common FastAPI dependencies for the plant doctor API.
Resolves the bearer token of a request to the caller's user scope.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from adoptd.container import ScopeRegistry, UserScope
from adoptd.shared.utils.logging import bind_user

logger = logging.getLogger(__name__)

# auto_error off so a missing header becomes an AuthenticationError with a redirect
security = HTTPBearer(auto_error=False)


def get_registry(request: Request) -> ScopeRegistry:
    return request.app.state.registry


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_scope(
    access_token: Optional[str] = Depends(get_access_token),
    registry: ScopeRegistry = Depends(get_registry),
) -> UserScope:
    """
    Current user's scope.

    Raises:
        AuthenticationError: no token, unknown token or expired session
    """
    scope = await registry.get(access_token)
    bind_user(scope.session.user_id)
    return scope
