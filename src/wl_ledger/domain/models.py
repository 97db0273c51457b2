"""Domain models for wl_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.wl_common.enums import TransactionStatus, TransactionType


@dataclass
class WalletUser:
    id: str
    phone_number: str
    name: str
    balance: int             # Rupiah
    is_active: bool = True


@dataclass
class NewTransaction:
    """Fields supplied by the engine; the store assigns id and timestamps."""

    user_id: str
    type: TransactionType
    amount: int              # signed effect on owner's balance once settled
    original_amount: int     # user-entered, unsigned
    admin_fee: int
    status: TransactionStatus = TransactionStatus.PENDING
    recipient_phone: str | None = None
    recipient_name: str | None = None
    sender_name: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    proof_image_ref: str | None = None
    notes: str | None = None
    reference_id: str | None = None   # receive row -> its send row


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    type: TransactionType
    amount: int
    original_amount: int
    admin_fee: int
    status: TransactionStatus
    recipient_phone: str | None = None
    recipient_name: str | None = None
    sender_name: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    proof_image_ref: str | None = None
    notes: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is TransactionStatus.PENDING


def balance_effect(txn: Transaction) -> int:
    """Net change this transaction has applied to its owner's balance so far.

    - topup: credited only once approved
    - withdraw: held at request time, returned on rejection
    - send/receive: settled at creation
    """
    if txn.type is TransactionType.TOPUP:
        return txn.amount if txn.status is TransactionStatus.APPROVED else 0
    if txn.type is TransactionType.WITHDRAW:
        if txn.status is TransactionStatus.REJECTED:
            return 0
        return -(txn.original_amount + txn.admin_fee)
    if txn.type is TransactionType.SEND:
        return -(txn.original_amount + txn.admin_fee)
    return txn.amount
