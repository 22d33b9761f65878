# 📄 File: adoptd/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# A quick checkup endpoint that tells monitoring tools whether the app and the
# database it relies on are up.
# 🧪 Purpose (Technical Summary):
# Liveness (/health) and dependency (/health/detailed) checks. The detailed check
# probes Supabase and reports whether the AI and weather integrations are configured,
# together with the number of live user scopes.
# 🔗 Dependencies:
# FastAPI, adoptd.shared.config.supabase, adoptd.shared.config.settings
# 🔄 Connected Modules / Calls From:
# adoptd.api.v1.router, load balancers, monitoring

import logging
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from adoptd.shared.config.settings import get_settings
from adoptd.shared.config.supabase import get_supabase_manager

logger = logging.getLogger(__name__)

health_router = APIRouter()

_app_start_time = datetime.now()


@health_router.get("/health", summary="Basic Health Check")
async def health_check() -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "service": "adoptd-api",
            "version": get_settings().APP_VERSION,
        },
    )


@health_router.get("/health/detailed", summary="Detailed Health Check")
async def detailed_health_check(request: Request) -> JSONResponse:
    """
    Supabase connectivity plus integration configuration.

    Returns 503 when Supabase is unreachable.
    """
    settings = get_settings()
    supabase = await get_supabase_manager().health_check()
    registry = getattr(request.app.state, "registry", None)

    overall_status = "healthy" if supabase["supabase_connection"] else "unhealthy"
    if overall_status == "healthy" and not settings.WEATHER_API_KEY:
        overall_status = "degraded"

    return JSONResponse(
        status_code=200 if overall_status != "unhealthy" else 503,
        content={
            "status": overall_status,
            "timestamp": datetime.now().isoformat(),
            "uptime_seconds": int((datetime.now() - _app_start_time).total_seconds()),
            "environment": settings.ENVIRONMENT,
            "components": {
                "supabase": supabase,
                "gemini": {"configured": bool(settings.GEMINI_API_KEY)},
                "weather": {"configured": bool(settings.WEATHER_API_KEY)},
            },
            "active_sessions": len(registry) if registry is not None else 0,
        },
    )
