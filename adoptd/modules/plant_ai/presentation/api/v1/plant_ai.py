# 📄 File: adoptd/modules/plant_ai/presentation/api/v1/plant_ai.py
# 🧭 Purpose (Layman Explanation):
# The "doctor" part of the app: send a photo to learn what a plant is or what is
# wrong with it, or chat with the plant care assistant.
# 🧪 Purpose (Technical Summary):
# Multipart scan endpoint and JSON chat endpoints over PlantScanner and
# ChatConsultant. Quota, image validation and model errors surface as
# PlantCareException subclasses handled by the global exception handler.
# 🔗 Dependencies:
# FastAPI router, UploadFile, PlantScanner, ChatConsultant via UserScope
# 🔄 Connected Modules / Calls From:
# adoptd.api.v1.router (router inclusion), scan page, chat widget

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from pydantic import BaseModel, Field

from adoptd.container import UserScope
from adoptd.modules.plant_ai.domain.models.plant_ai import ChatMessage, ScanResult, ScanType
from adoptd.shared.core.dependencies import get_scope

plant_ai_router = APIRouter()


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    city: Optional[str] = Field(None, max_length=100)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)


@plant_ai_router.post(
    "/scan",
    response_model=ScanResult,
    summary="Identify or diagnose a plant from a photo",
    responses={
        400: {"description": "Unsupported image type"},
        413: {"description": "Image too large"},
        429: {"description": "Daily scan limit reached"},
        502: {"description": "AI service error"},
    },
)
async def scan_plant(
    file: UploadFile = File(..., description="Plant photo"),
    scan_type: ScanType = Form(ScanType.DIAGNOSE),
    plant_name: Optional[str] = Form(None, max_length=100),
    language: str = Form("ru", max_length=5),
    scope: UserScope = Depends(get_scope),
) -> ScanResult:
    data = await file.read()
    return await scope.scanner.scan(
        scan_type,
        data,
        file.filename or "upload",
        file.content_type,
        plant_name=plant_name,
        language=language,
    )


@plant_ai_router.post(
    "/chat",
    response_model=ChatMessage,
    summary="Ask the plant care assistant",
    responses={
        429: {"description": "Daily message limit reached"},
        502: {"description": "AI service error"},
    },
)
async def send_chat_message(request: ChatRequest, scope: UserScope = Depends(get_scope)) -> ChatMessage:
    return await scope.chat.send(request.message, city=request.city, lat=request.lat, lon=request.lon)


@plant_ai_router.get(
    "/chat/history",
    response_model=List[ChatMessage],
    summary="Conversation so far",
)
async def get_chat_history(scope: UserScope = Depends(get_scope)) -> List[ChatMessage]:
    return list(scope.chat.snapshot)


@plant_ai_router.delete(
    "/chat/history",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Start a new conversation",
)
async def clear_chat_history(scope: UserScope = Depends(get_scope)) -> Response:
    await scope.chat.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
