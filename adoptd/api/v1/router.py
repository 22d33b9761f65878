# 📄 File: adoptd/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 of the API: sends sign-in requests to the sign-in
# code, forum requests to the forum code, and so on.
# 🧪 Purpose (Technical Summary):
# Aggregates every module router under its v1 prefix and tag, plus the health router.
# 🔗 Dependencies:
# FastAPI, adoptd.api.v1.health, adoptd.modules.*.presentation.api.v1.*
# 🔄 Connected Modules / Calls From:
# adoptd.main

import logging

from fastapi import APIRouter

from adoptd.api.v1 import ROUTE_PREFIXES, __api_version__
from adoptd.api.v1.health import health_router
from adoptd.modules.achievements.presentation.api.v1.achievements import achievements_router
from adoptd.modules.care_advice.presentation.api.v1.care_advice import care_advice_router
from adoptd.modules.entitlement.presentation.api.v1.usage import usage_router
from adoptd.modules.forum.presentation.api.v1.forum import forum_router
from adoptd.modules.notifications.presentation.api.v1.notifications import notifications_router
from adoptd.modules.plant_ai.presentation.api.v1.plant_ai import plant_ai_router
from adoptd.modules.reminders.presentation.api.v1.reminders import reminders_router
from adoptd.modules.session.presentation.api.v1.auth import auth_router
from adoptd.modules.session.presentation.api.v1.profiles import profiles_router

logger = logging.getLogger(__name__)

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["Health Check"])

for name, router, tag in [
    ("auth", auth_router, "Authentication"),
    ("profiles", profiles_router, "Profiles"),
    ("entitlement", usage_router, "Usage"),
    ("achievements", achievements_router, "Achievements"),
    ("forum", forum_router, "Forum"),
    ("reminders", reminders_router, "Reminders"),
    ("notifications", notifications_router, "Notifications"),
    ("care_advice", care_advice_router, "Care Advice"),
    ("plant_ai", plant_ai_router, "Plant AI"),
]:
    api_v1_router.include_router(router, prefix=ROUTE_PREFIXES[name], tags=[tag])
    logger.debug(f"Registered {name} router at '{ROUTE_PREFIXES[name] or '/'}'")


@api_v1_router.get("/", summary="API v1 Information", tags=["API Info"])
async def api_v1_info() -> dict:
    return {
        "api_version": __api_version__,
        "modules": sorted(ROUTE_PREFIXES),
        "health_check": "/health",
    }
