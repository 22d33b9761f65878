# 📄 File: adoptd/modules/session/presentation/api/v1/auth.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for signing in, creating an account, signing out and checking
# who is currently signed in.
#
# 🧪 Purpose (Technical Summary):
# FastAPI authentication endpoints over the ScopeRegistry: sign-in/sign-up create and
# start a UserScope keyed by the returned access token; sign-out tears it down and
# succeeds even without a live session.
#
# 🔗 Dependencies:
# - FastAPI router, status codes
# - adoptd.container.ScopeRegistry, adoptd.shared.core.dependencies
# - auth schemas
#
# 🔄 Connected Modules / Calls From:
# - adoptd.api.v1.router (router inclusion)
# - Login, registration and logout screens

from typing import Optional

from fastapi import APIRouter, Depends, status

from adoptd.container import ScopeRegistry, UserScope
from adoptd.modules.session.presentation.api.schemas.auth_schemas import (
    SessionResponse,
    SignInRequest,
    SignOutResponse,
    SignUpRequest,
    SignUpResponse,
)
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.dependencies import get_access_token, get_registry, get_scope
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)

auth_router = APIRouter()


@auth_router.post(
    "/sign-in",
    response_model=SessionResponse,
    summary="Sign in with email and password",
    responses={
        200: {"description": "Session established"},
        401: {"description": "Invalid credentials"},
    },
)
async def sign_in(
    request: SignInRequest,
    registry: ScopeRegistry = Depends(get_registry),
) -> SessionResponse:
    scope = await registry.sign_in(request.email, request.password)
    return SessionResponse.from_domain(scope.session.require_user())


@auth_router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        201: {"description": "Account created; confirmation may be pending"},
        401: {"description": "Registration rejected"},
    },
)
async def sign_up(
    request: SignUpRequest,
    registry: ScopeRegistry = Depends(get_registry),
) -> SignUpResponse:
    """
    Register an account.

    When email confirmation is enabled the response carries no session and
    the client signs in after confirming.
    """
    scope = await registry.sign_up(request.email, request.password)
    if scope is None:
        return SignUpResponse(confirmation_required=True)
    return SignUpResponse(
        confirmation_required=False,
        session=SessionResponse.from_domain(scope.session.require_user()),
    )


@auth_router.post(
    "/sign-out",
    response_model=SignOutResponse,
    summary="Sign out",
)
async def sign_out(
    access_token: Optional[str] = Depends(get_access_token),
    registry: ScopeRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> SignOutResponse:
    await registry.sign_out(access_token)
    return SignOutResponse(redirect_to=settings.AUTH_REDIRECT_PATH)


@auth_router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session",
    responses={401: {"description": "Session missing or expired"}},
)
async def current_session(scope: UserScope = Depends(get_scope)) -> SessionResponse:
    return SessionResponse.from_domain(scope.session.require_user())
