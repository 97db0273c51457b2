"""Approval state machine over (transaction type x status).

Only pending topup/withdraw rows can move, and only once:

    pending --approve--> approved
    pending --reject---> rejected

Each transition yields the balance delta to apply to the owner:

    type      approve                 reject
    topup     +amount (net of fee)    0
    withdraw  0 (hold becomes final)  +(original_amount + admin_fee)

send/receive rows are settled at creation and are never pending, so they
have no entry in the tables below.
"""

from collections.abc import Callable
from dataclasses import dataclass

from src.wl_common.enums import TransactionStatus, TransactionType
from src.wl_common.errors import TransactionAlreadyResolvedError
from src.wl_ledger.domain.models import Transaction


@dataclass(frozen=True)
class Settlement:
    status: TransactionStatus
    balance_delta: int


_ON_APPROVE: dict[TransactionType, Callable[[Transaction], int]] = {
    TransactionType.TOPUP: lambda txn: txn.amount,
    TransactionType.WITHDRAW: lambda txn: 0,
}

_ON_REJECT: dict[TransactionType, Callable[[Transaction], int]] = {
    TransactionType.TOPUP: lambda txn: 0,
    TransactionType.WITHDRAW: lambda txn: txn.original_amount + txn.admin_fee,
}


def _settle(
    txn: Transaction,
    table: dict[TransactionType, Callable[[Transaction], int]],
    target: TransactionStatus,
) -> Settlement:
    if not txn.is_pending or txn.type not in table:
        raise TransactionAlreadyResolvedError(txn.id, txn.status.value)
    return Settlement(status=target, balance_delta=table[txn.type](txn))


def approve(txn: Transaction) -> Settlement:
    return _settle(txn, _ON_APPROVE, TransactionStatus.APPROVED)


def reject(txn: Transaction) -> Settlement:
    return _settle(txn, _ON_REJECT, TransactionStatus.REJECTED)
