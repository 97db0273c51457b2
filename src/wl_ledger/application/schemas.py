"""Pydantic schemas for wl_ledger (wallet) API.

Amount bounds are NOT checked here: the engine enforces them so the same
rules apply to every caller, and reports AmountOutOfRangeError (3001).
"""

from pydantic import BaseModel, Field

from src.wl_common.datetime_utils import isoformat_or_empty
from src.wl_common.rupiah import rupiah_to_display
from src.wl_ledger.domain.models import Transaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TopUpRequest(BaseModel):
    sender_name: str = Field(..., min_length=2, max_length=100)
    bank_name: str = Field(..., min_length=1, max_length=100)
    account_number: str = Field(..., min_length=1, max_length=64)
    original_amount: int = Field(..., description="Transferred amount in Rupiah, fee included")
    proof_image_ref: str | None = Field(
        None, description="Reference returned by the proof-image store"
    )


class WithdrawRequest(BaseModel):
    recipient_name: str = Field(..., min_length=2, max_length=100)
    bank_name: str = Field(..., min_length=1, max_length=100)
    account_number: str = Field(..., min_length=1, max_length=64)
    original_amount: int = Field(..., description="Amount to pay out in Rupiah, fee excluded")


class SendRequest(BaseModel):
    recipient_phone: str = Field(..., min_length=10, max_length=20)
    original_amount: int = Field(..., description="Amount the recipient receives in Rupiah")
    notes: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance: int
    balance_display: str

    @classmethod
    def from_amount(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(user_id=user_id, balance=balance, balance_display=rupiah_to_display(balance))


class TransactionItem(BaseModel):
    id: str
    user_id: str
    type: str
    amount: int
    amount_display: str
    original_amount: int
    admin_fee: int
    status: str
    recipient_phone: str | None
    recipient_name: str | None
    sender_name: str | None
    bank_name: str | None
    account_number: str | None
    proof_image_ref: str | None
    notes: str | None
    reference_id: str | None
    created_at: str  # ISO8601 string
    updated_at: str

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionItem":
        return cls(
            id=txn.id,
            user_id=txn.user_id,
            type=txn.type.value,
            amount=txn.amount,
            amount_display=rupiah_to_display(txn.amount),
            original_amount=txn.original_amount,
            admin_fee=txn.admin_fee,
            status=txn.status.value,
            recipient_phone=txn.recipient_phone,
            recipient_name=txn.recipient_name,
            sender_name=txn.sender_name,
            bank_name=txn.bank_name,
            account_number=txn.account_number,
            proof_image_ref=txn.proof_image_ref,
            notes=txn.notes,
            reference_id=txn.reference_id,
            created_at=isoformat_or_empty(txn.created_at),
            updated_at=isoformat_or_empty(txn.updated_at),
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]


class TransferResponse(BaseModel):
    sent: TransactionItem
    received: TransactionItem
