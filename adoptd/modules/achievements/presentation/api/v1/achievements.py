"""
Achievements API Endpoints

- GET /achievements: the caller's unlocks and equipped title
- GET /achievements/catalog: every achievement and title with its requirement
- POST /titles/{title_id}/equip, DELETE /titles/equipped
- GET /users/{user_id}/badges: another user's unlocks
"""

from fastapi import APIRouter, Depends

from adoptd.container import UserScope
from adoptd.modules.achievements.domain.models.achievement import RequirementCatalog
from adoptd.modules.achievements.presentation.api.schemas.achievement_schemas import (
    AchievementsResponse,
    UserBadgesResponse,
)
from adoptd.shared.core.dependencies import get_scope

achievements_router = APIRouter()


@achievements_router.get(
    "/achievements",
    response_model=AchievementsResponse,
    summary="Current user's achievements and titles",
)
async def get_my_achievements(scope: UserScope = Depends(get_scope)) -> AchievementsResponse:
    return AchievementsResponse.from_snapshot(scope.achievements.snapshot)


@achievements_router.get(
    "/achievements/catalog",
    response_model=RequirementCatalog,
    summary="Achievement and title catalog with requirements",
)
async def get_catalog(scope: UserScope = Depends(get_scope)) -> RequirementCatalog:
    return await scope.achievements.catalog_requirements()


@achievements_router.post(
    "/titles/{title_id}/equip",
    response_model=AchievementsResponse,
    summary="Equip an unlocked title",
    responses={404: {"description": "Title not unlocked"}},
)
async def equip_title(title_id: str, scope: UserScope = Depends(get_scope)) -> AchievementsResponse:
    await scope.achievements.equip_title(title_id)
    return AchievementsResponse.from_snapshot(scope.achievements.snapshot)


@achievements_router.delete(
    "/titles/equipped",
    response_model=AchievementsResponse,
    summary="Unequip the current title",
)
async def unequip_title(scope: UserScope = Depends(get_scope)) -> AchievementsResponse:
    await scope.achievements.unequip_title()
    return AchievementsResponse.from_snapshot(scope.achievements.snapshot)


@achievements_router.get(
    "/users/{user_id}/badges",
    response_model=UserBadgesResponse,
    summary="Another user's achievements and titles",
)
async def get_user_badges(user_id: str, scope: UserScope = Depends(get_scope)) -> UserBadgesResponse:
    achievements = await scope.achievements.get_user_achievements(user_id)
    titles = await scope.achievements.get_user_titles(user_id)
    return UserBadgesResponse(
        user_id=user_id,
        achievements=achievements,
        titles=titles,
        equipped_title=next((t for t in titles if t.equipped), None),
    )
