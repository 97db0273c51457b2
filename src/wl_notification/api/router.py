"""Notification REST API — the caller's own notifications only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.database import get_db_session
from src.wl_common.response import ApiResponse, respond
from src.wl_gateway.auth.dependencies import get_current_user
from src.wl_gateway.user.db_models import UserModel
from src.wl_notification.application.service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])
_service = NotificationService()


@router.get("")
async def list_notifications(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_notifications(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.mark_read(db, str(current_user.id), notification_id)
    return respond(request, data.model_dump())
