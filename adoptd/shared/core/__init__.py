# 📄 File: adoptd/shared/core/__init__.py
# 🧭 Purpose (Layman Explanation):
# The core building blocks every feature leans on: the list of things that can go wrong
# and the machinery that lets screens follow live data.
# 🧪 Purpose (Technical Summary):
# Exception hierarchy and observable state primitives (Readiness, BackgroundTasks,
# FreshnessToken, StateService). FastAPI dependencies live in .dependencies and are
# imported directly to avoid a cycle with adoptd.container.
# 🔗 Dependencies:
# fastapi (status codes), asyncio
# 🔄 Connected Modules / Calls From:
# All modules

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalAPIError,
    GatewayError,
    NotFoundError,
    PlantCareException,
    QuotaExceededError,
    ValidationError,
)
from .observable import BackgroundTasks, FreshnessToken, Readiness, StateService

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BackgroundTasks",
    "ExternalAPIError",
    "FreshnessToken",
    "GatewayError",
    "NotFoundError",
    "PlantCareException",
    "QuotaExceededError",
    "Readiness",
    "StateService",
    "ValidationError",
]
