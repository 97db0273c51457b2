"""Auth and profile API: register, login, refresh, check-phone, me.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.wl_common.database import get_db_session
from src.wl_common.response import ApiResponse, respond
from src.wl_gateway.auth.dependencies import get_current_user
from src.wl_gateway.user.db_models import UserModel
from src.wl_gateway.user.schemas import (
    CheckPhoneRequest,
    CheckPhoneResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
)
from src.wl_gateway.user.service import UserService, to_user_info

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])
_service = UserService()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Register with phone number and PIN",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    async with db.begin():
        user = await _service.register(body.phone_number, body.pin, body.name, db)
    return respond(request, to_user_info(user).model_dump(), "User registered successfully")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Login with phone number and PIN",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    user, access_token, refresh_token = await _service.login(body.phone_number, body.pin, db)
    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=to_user_info(user),
    )
    return respond(request, data.model_dump(), "Login successful")


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)
    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    return respond(request, data.model_dump(), "Token refreshed")


@router.post(
    "/check-phone",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Whether a phone number is already registered",
)
async def check_phone(
    request: Request,
    body: CheckPhoneRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    exists = await _service.phone_exists(body.phone_number, db)
    return respond(request, CheckPhoneResponse(exists=exists).model_dump())


@users_router.get("/me", response_model=ApiResponse, summary="Current user profile")
async def me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    return respond(request, to_user_info(current_user).model_dump())
