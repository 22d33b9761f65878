# 📄 File: adoptd/modules/notifications/presentation/api/v1/notifications.py
# 🧭 Purpose (Layman Explanation):
# Lets the app ask "may we notify you?", remember the answer, and pick up the
# reminder pop-ups that are waiting to be shown.
# 🧪 Purpose (Technical Summary):
# Exposes NotificationBridge: permission state, the user's permission decision and
# an outbox drain. Clients poll /notifications/pending and display what they get.
# 🔗 Dependencies:
# FastAPI router, NotificationBridge via UserScope
# 🔄 Connected Modules / Calls From:
# adoptd.api.v1.router (router inclusion), client notification shim

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from adoptd.container import UserScope
from adoptd.modules.notifications.domain.models.notification import (
    Notification,
    NotificationPermission,
    NotificationSnapshot,
)
from adoptd.shared.core.dependencies import get_scope

notifications_router = APIRouter()


class PermissionRequest(BaseModel):
    decision: NotificationPermission


@notifications_router.get(
    "/notifications",
    response_model=NotificationSnapshot,
    summary="Notification support, permission and pending queue",
)
async def get_notifications(scope: UserScope = Depends(get_scope)) -> NotificationSnapshot:
    return scope.notifications.snapshot


@notifications_router.post(
    "/notifications/permission",
    response_model=NotificationSnapshot,
    summary="Record the user's permission decision",
)
async def set_permission(request: PermissionRequest, scope: UserScope = Depends(get_scope)) -> NotificationSnapshot:
    await scope.notifications.request_permission(request.decision)
    return scope.notifications.snapshot


@notifications_router.post(
    "/notifications/pending",
    response_model=List[Notification],
    summary="Take all pending notifications",
)
async def drain_pending(scope: UserScope = Depends(get_scope)) -> List[Notification]:
    return scope.notifications.drain()
