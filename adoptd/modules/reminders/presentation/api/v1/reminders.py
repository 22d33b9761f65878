"""
Reminders API Endpoints

- GET /reminders: the user's reminders, soonest first
- POST /reminders: schedule a care reminder N days from now
- POST /reminders/{reminder_id}/complete: mark done (idempotent)
- POST /reminders/check: run one due-reminder check immediately
"""

from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from adoptd.container import UserScope
from adoptd.modules.reminders.domain.models.reminder import Reminder, ReminderCreate
from adoptd.shared.core.dependencies import get_scope

reminders_router = APIRouter()


class ReminderCheckResponse(BaseModel):
    notified: int
    polling: bool


@reminders_router.get(
    "/reminders",
    response_model=List[Reminder],
    summary="List reminders",
)
async def list_reminders(refresh: bool = False, scope: UserScope = Depends(get_scope)) -> List[Reminder]:
    if refresh:
        await scope.reminders.refresh()
    return list(scope.reminders.snapshot)


@reminders_router.post(
    "/reminders",
    response_model=Reminder,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a reminder",
)
async def create_reminder(request: ReminderCreate, scope: UserScope = Depends(get_scope)) -> Reminder:
    return await scope.reminders.create_reminder(
        request.reminder_text, request.diagnosis_text, request.delay_days
    )


@reminders_router.post(
    "/reminders/{reminder_id}/complete",
    response_model=Reminder,
    summary="Mark a reminder as done",
    responses={404: {"description": "Reminder not found"}},
)
async def complete_reminder(reminder_id: str, scope: UserScope = Depends(get_scope)) -> Reminder:
    return await scope.reminders.mark_complete(reminder_id)


@reminders_router.post(
    "/reminders/check",
    response_model=ReminderCheckResponse,
    summary="Notify due reminders now",
)
async def check_reminders(scope: UserScope = Depends(get_scope)) -> ReminderCheckResponse:
    notified = await scope.reminders.check_due()
    return ReminderCheckResponse(notified=notified, polling=scope.reminders.is_polling)
