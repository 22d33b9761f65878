"""
Profiles API Endpoints

- GET /me: current user's profile
- PUT /me: update name and occupation
- POST /me/avatar: upload a new avatar image
"""

from fastapi import APIRouter, Depends, File, UploadFile

from adoptd.container import UserScope
from adoptd.modules.session.domain.models.profile import ProfileUpdate
from adoptd.modules.session.presentation.api.schemas.auth_schemas import (
    ProfileResponse,
    ProfileUpdateRequest,
)
from adoptd.shared.core.dependencies import get_scope

profiles_router = APIRouter()


@profiles_router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
)
async def get_my_profile(scope: UserScope = Depends(get_scope)) -> ProfileResponse:
    profile = scope.profile.snapshot or await scope.profile.refresh()
    return ProfileResponse.from_domain(profile)


@profiles_router.put(
    "/me",
    response_model=ProfileResponse,
    summary="Update name and occupation",
)
async def update_my_profile(
    request: ProfileUpdateRequest,
    scope: UserScope = Depends(get_scope),
) -> ProfileResponse:
    profile = await scope.profile.update(ProfileUpdate(**request.model_dump()))
    return ProfileResponse.from_domain(profile)


@profiles_router.post(
    "/me/avatar",
    response_model=ProfileResponse,
    summary="Upload avatar",
    responses={
        400: {"description": "Unsupported image type"},
        413: {"description": "Image too large"},
    },
)
async def upload_avatar(
    file: UploadFile = File(...),
    scope: UserScope = Depends(get_scope),
) -> ProfileResponse:
    data = await file.read()
    profile = await scope.profile.upload_avatar(data, file.filename or "avatar", file.content_type)
    return ProfileResponse.from_domain(profile)
