"""Wallet REST API — balance, history, top-up, withdraw, send.

All endpoints require JWT authentication and act on the caller's own wallet.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.database import get_db_session
from src.wl_common.response import ApiResponse, respond
from src.wl_gateway.auth.dependencies import get_current_user
from src.wl_gateway.user.db_models import UserModel
from src.wl_ledger.application.schemas import SendRequest, TopUpRequest, WithdrawRequest
from src.wl_ledger.application.service import WalletService

router = APIRouter(prefix="/wallet", tags=["wallet"])

_service = WalletService()


@router.get("/balance")
async def get_balance(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.get("/transactions")
async def list_transactions(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_transactions(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.post("/topup")
async def top_up(
    body: TopUpRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.top_up(
        db,
        str(current_user.id),
        body.sender_name,
        body.bank_name,
        body.account_number,
        body.original_amount,
        body.proof_image_ref,
    )
    return respond(request, data.model_dump(), "Top-up submitted for review")


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.withdraw(
        db,
        str(current_user.id),
        body.recipient_name,
        body.bank_name,
        body.account_number,
        body.original_amount,
    )
    return respond(request, data.model_dump(), "Withdrawal submitted for review")


@router.post("/send")
async def send(
    body: SendRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.send(
        db, str(current_user.id), body.recipient_phone, body.original_amount, body.notes
    )
    return respond(request, data.model_dump(), "Transfer completed")
