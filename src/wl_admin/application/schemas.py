"""Pydantic schemas for the admin API."""

from pydantic import BaseModel

from src.wl_ledger.application.schemas import TransactionItem


class PendingOwner(BaseModel):
    name: str
    phone_number: str


class PendingTransactionItem(TransactionItem):
    user: PendingOwner | None


class PendingListResponse(BaseModel):
    items: list[PendingTransactionItem]


class DecisionResponse(BaseModel):
    transaction: TransactionItem
    owner_balance: int


class StatsResponse(BaseModel):
    pending_count: int
    total_users: int
    total_volume: int


class LedgerCheckResponse(BaseModel):
    ok: bool
    violations: list[str]
