# 📄 File: adoptd/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts the plant doctor app, connects the AI, weather
# and database services, and makes sure every signed-in user gets their own workspace.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point. The lifespan builds the shared Gemini
# and WeatherAPI clients and the ScopeRegistry that owns one UserScope per session,
# and tears them down on shutdown. Registers middleware, the v1 router and the
# PlantCareException handler.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - adoptd.shared.config.settings, adoptd.shared.config.supabase
# - adoptd.container (ScopeRegistry, supabase_scope_factory)
# - adoptd.api.v1.router
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - `adoptd` console script

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from adoptd.api.middleware.logging import RequestLoggingMiddleware
from adoptd.api.v1 import API_TAGS
from adoptd.api.v1.router import api_v1_router
from adoptd.container import ScopeRegistry, supabase_scope_factory
from adoptd.modules.care_advice.infrastructure.external.weather_client import WeatherAPIClient
from adoptd.modules.plant_ai.infrastructure.external.gemini_client import GeminiClient
from adoptd.shared.config.settings import get_settings
from adoptd.shared.config.supabase import cleanup_supabase
from adoptd.shared.core.exceptions import AuthenticationError, PlantCareException
from adoptd.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

settings = get_settings()

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build shared clients and the session registry; close them on shutdown.

    A registry placed on ``app.state`` before startup is kept as is.
    """
    log_startup_event(settings.APP_NAME, settings.APP_VERSION, extra={"environment": settings.ENVIRONMENT})

    weather_client = None
    if getattr(app.state, "registry", None) is None:
        model = GeminiClient(settings)
        logger.info("✅ Gemini client initialized", model=settings.GEMINI_MODEL)

        if settings.WEATHER_API_KEY:
            weather_client = WeatherAPIClient(settings)
            logger.info("✅ Weather client initialized")
        else:
            logger.warning("WEATHER_API_KEY not set; weather advice disabled")

        app.state.registry = ScopeRegistry(
            supabase_scope_factory(model, weather_client, settings), settings
        )

    try:
        yield
    finally:
        logger.info("🔄 Shutting down...")
        await app.state.registry.close_all()
        if weather_client is not None:
            await weather_client.close()
        await cleanup_supabase()
        log_shutdown_event(settings.APP_NAME)


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        openapi_tags=API_TAGS,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(PlantCareException)
    async def plant_care_exception_handler(request: Request, exc: PlantCareException) -> JSONResponse:
        """Handle custom application exceptions."""
        body = exc.to_dict()
        body["error"]["timestamp"] = datetime.utcnow().isoformat()
        body["error"]["request_id"] = getattr(request.state, "request_id", None)
        if isinstance(exc, AuthenticationError):
            body["error"]["redirect_to"] = exc.redirect_to
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {exc.message}", path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=body)

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_application()


def run():
    """Run the development server."""
    uvicorn.run(
        "adoptd.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
