"""Admin REST API — pending queue, approve/reject, stats, ledger check."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_admin.application.service import ApprovalService
from src.wl_common.database import get_db_session
from src.wl_common.response import ApiResponse, respond
from src.wl_gateway.auth.dependencies import require_admin
from src.wl_gateway.user.db_models import UserModel

router = APIRouter(prefix="/admin", tags=["admin"])
_service = ApprovalService()


@router.get("/transactions/pending")
async def list_pending(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_pending(db)
    return respond(request, data.model_dump())


@router.post("/transactions/{transaction_id}/approve")
async def approve_transaction(
    transaction_id: str,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.approve(db, transaction_id)
    return respond(request, data.model_dump(), "Transaction approved")


@router.post("/transactions/{transaction_id}/reject")
async def reject_transaction(
    transaction_id: str,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.reject(db, transaction_id)
    return respond(request, data.model_dump(), "Transaction rejected")


@router.get("/stats")
async def stats(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.stats(db)
    return respond(request, data.model_dump())


@router.get("/ledger/verify")
async def verify_ledger(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.verify_ledger(db)
    return respond(request, data.model_dump())
