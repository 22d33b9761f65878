# 📄 File: adoptd/modules/entitlement/presentation/api/v1/usage.py
# 🧭 Purpose (Layman Explanation):
# Shows how many scans and chat messages the user has left today, and lists the
# free and premium plans for the pricing page.
#
# 🧪 Purpose (Technical Summary):
# Read-only entitlement endpoints over EntitlementState. The pricing surface only
# reports tiers; no payment processing happens here.
#
# 🔗 Dependencies:
# - FastAPI router
# - EntitlementState via UserScope
#
# 🔄 Connected Modules / Calls From:
# - adoptd.api.v1.router (router inclusion)
# - Dashboard usage badges, pricing page

from fastapi import APIRouter, Depends

from adoptd.container import UserScope
from adoptd.modules.entitlement.domain.models.entitlement import Tier, UsageAction
from adoptd.modules.entitlement.domain.services.entitlement_service import EntitlementState
from adoptd.modules.entitlement.presentation.api.schemas.entitlement_schemas import (
    PlansResponse,
    UsageCounter,
    UsageResponse,
)
from adoptd.shared.core.dependencies import get_scope

usage_router = APIRouter()


def _counter(entitlement: EntitlementState, action: UsageAction) -> UsageCounter:
    used = entitlement.snapshot.count(action)
    limit = entitlement.quota(action)
    return UsageCounter(
        used=used,
        limit=limit,
        remaining=None if limit is None else max(0, limit - used),
    )


@usage_router.get(
    "/usage",
    response_model=UsageResponse,
    summary="Today's usage and limits",
)
async def get_usage(scope: UserScope = Depends(get_scope)) -> UsageResponse:
    entitlement = scope.entitlement
    snapshot = entitlement.snapshot
    return UsageResponse(
        tier=snapshot.tier.value,
        is_premium=snapshot.is_premium,
        date=snapshot.date,
        scans=_counter(entitlement, UsageAction.SCAN),
        chat_messages=_counter(entitlement, UsageAction.CHAT),
    )


@usage_router.post(
    "/usage/refresh",
    response_model=UsageResponse,
    summary="Re-read tier and usage from the server",
)
async def refresh_usage(scope: UserScope = Depends(get_scope)) -> UsageResponse:
    await scope.entitlement.refresh()
    return await get_usage(scope)


@usage_router.get(
    "/plans",
    response_model=PlansResponse,
    summary="Subscription plans",
)
async def get_plans(scope: UserScope = Depends(get_scope)) -> PlansResponse:
    tier = scope.entitlement.snapshot.tier
    return PlansResponse(
        current_tier=tier.value,
        plans=scope.entitlement.plans(),
        upgrade_available=tier is Tier.FREE,
    )
