"""ApprovalService — admin decisions on pending top-ups and withdrawals.

A decision re-reads the transaction under its owner's balance lock, asks the
state machine in wl_admin.domain.transitions for the settlement, then writes
the new status and the balance delta in one unit_of_work. A second decision
on the same transaction raises TransactionAlreadyResolvedError and changes
nothing.
"""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_admin.application.schemas import (
    DecisionResponse,
    LedgerCheckResponse,
    PendingListResponse,
    PendingOwner,
    PendingTransactionItem,
    StatsResponse,
)
from src.wl_admin.domain import transitions
from src.wl_admin.domain.transitions import Settlement
from src.wl_common.database import unit_of_work
from src.wl_common.enums import TransactionStatus, TransactionType
from src.wl_common.errors import TransactionNotFoundError, UserNotFoundError
from src.wl_common.rupiah import rupiah_to_display
from src.wl_ledger.application.schemas import TransactionItem
from src.wl_ledger.domain.models import Transaction, WalletUser
from src.wl_ledger.domain.repository import LedgerRepositoryProtocol
from src.wl_ledger.infrastructure.locks import BalanceLockProtocol, balance_locks
from src.wl_ledger.infrastructure.persistence import LedgerRepository
from src.wl_notification.application.emitter import NotificationEmitter

logger = logging.getLogger(__name__)

_TYPE_LABELS = {
    TransactionType.TOPUP: "Top-up",
    TransactionType.WITHDRAW: "Withdrawal",
}


class ApprovalService:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol | None = None,
        locks: BalanceLockProtocol | None = None,
        emitter: NotificationEmitter | None = None,
    ) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._locks: BalanceLockProtocol = locks or balance_locks
        self._emitter = emitter or NotificationEmitter()

    async def approve(self, db: AsyncSession, transaction_id: str) -> DecisionResponse:
        return await self._decide(db, transaction_id, transitions.approve)

    async def reject(self, db: AsyncSession, transaction_id: str) -> DecisionResponse:
        return await self._decide(db, transaction_id, transitions.reject)

    async def _decide(
        self,
        db: AsyncSession,
        transaction_id: str,
        transition: Callable[[Transaction], Settlement],
    ) -> DecisionResponse:
        txn = await self._repo.get_transaction(db, transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_id)

        async with self._locks.hold(txn.user_id):
            async with unit_of_work(db):
                current = await self._repo.get_transaction(db, transaction_id, for_update=True)
                if current is None:
                    raise TransactionNotFoundError(transaction_id)
                settlement = transition(current)

                owner = await self._repo.get_user(db, current.user_id, for_update=True)
                if owner is None:
                    raise UserNotFoundError(current.user_id)

                updated = await self._repo.update_transaction_status(
                    db, transaction_id, settlement.status
                )
                balance = owner.balance
                if settlement.balance_delta:
                    balance += settlement.balance_delta
                    await self._repo.set_balance(db, owner.id, balance)

        logger.info(
            "Transaction %s: txn=%s type=%s user=%s delta=%d",
            settlement.status.value, updated.id, updated.type.value,
            owner.id, settlement.balance_delta,
        )
        verb = "approved" if settlement.status is TransactionStatus.APPROVED else "rejected"
        await self._emitter.emit(
            db,
            owner.id,
            f"Transaction {verb}",
            f"{_TYPE_LABELS[updated.type]} of "
            f"{rupiah_to_display(updated.original_amount)} has been {verb}",
        )
        return DecisionResponse(
            transaction=TransactionItem.from_domain(updated), owner_balance=balance
        )

    async def list_pending(self, db: AsyncSession) -> PendingListResponse:
        txns = await self._repo.list_pending_transactions(db)
        owners: dict[str, WalletUser | None] = {}
        items = []
        for txn in txns:
            if txn.user_id not in owners:
                owners[txn.user_id] = await self._repo.get_user(db, txn.user_id)
            owner = owners[txn.user_id]
            items.append(
                PendingTransactionItem(
                    **TransactionItem.from_domain(txn).model_dump(),
                    user=(
                        PendingOwner(name=owner.name, phone_number=owner.phone_number)
                        if owner
                        else None
                    ),
                )
            )
        return PendingListResponse(items=items)

    async def stats(self, db: AsyncSession) -> StatsResponse:
        pending = await self._repo.list_pending_transactions(db)
        return StatsResponse(
            pending_count=len(pending),
            total_users=await self._repo.count_users(db),
            total_volume=await self._repo.total_approved_volume(db),
        )

    async def verify_ledger(self, db: AsyncSession) -> LedgerCheckResponse:
        """Every balance must equal the sum of its owner's transaction effects."""
        balances = await self._repo.list_balances(db)
        effects = await self._repo.sum_balance_effects(db)
        violations: list[str] = []
        for user_id in sorted(balances.keys() | effects.keys()):
            balance = balances.get(user_id, 0)
            expected = effects.get(user_id, 0)
            if balance != expected:
                msg = f"user {user_id}: balance {balance} != transaction effects {expected}"
                violations.append(msg)
                logger.error("Ledger mismatch: %s", msg)
        return LedgerCheckResponse(ok=not violations, violations=violations)
