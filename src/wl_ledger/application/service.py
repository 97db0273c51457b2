"""WalletService — the transaction engine for top-up, withdraw and send.

Every entry point validates amount bounds and required fields before it
touches the store. Balance mutations run under the owner's balance lock and
inside one unit_of_work, so a failure at any step leaves no partial effect.

Settlement per type:
  - topup:    pending, no balance change until an admin approves
  - withdraw: pending, original_amount + fee held (debited) immediately
  - send:     approved at once; sender debited amount + fee, recipient credited amount
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.database import unit_of_work
from src.wl_common.enums import TransactionStatus, TransactionType
from src.wl_common.errors import (
    InsufficientBalanceError,
    MissingFieldError,
    RecipientNotFoundError,
    SelfTransferError,
    UserNotFoundError,
)
from src.wl_common.rupiah import rupiah_to_display, total_debit
from src.wl_ledger.application.schemas import (
    BalanceResponse,
    TransactionItem,
    TransactionListResponse,
    TransferResponse,
)
from src.wl_ledger.domain.models import NewTransaction, WalletUser
from src.wl_ledger.domain.repository import LedgerRepositoryProtocol
from src.wl_ledger.domain.rules import rule_for
from src.wl_ledger.infrastructure.locks import BalanceLockProtocol, balance_locks, lock_order
from src.wl_ledger.infrastructure.persistence import LedgerRepository
from src.wl_notification.application.emitter import NotificationEmitter

logger = logging.getLogger(__name__)


class WalletService:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol | None = None,
        locks: BalanceLockProtocol | None = None,
        emitter: NotificationEmitter | None = None,
    ) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._locks: BalanceLockProtocol = locks or balance_locks
        self._emitter = emitter or NotificationEmitter()

    async def _require_user(
        self, db: AsyncSession, user_id: str, for_update: bool = False
    ) -> WalletUser:
        user = await self._repo.get_user(db, user_id, for_update=for_update)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        balance = await self._repo.get_balance(db, user_id)
        return BalanceResponse.from_amount(user_id, balance)

    async def list_transactions(
        self, db: AsyncSession, user_id: str
    ) -> TransactionListResponse:
        txns = await self._repo.list_transactions_by_user(db, user_id)
        return TransactionListResponse(items=[TransactionItem.from_domain(t) for t in txns])

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def top_up(
        self,
        db: AsyncSession,
        user_id: str,
        sender_name: str,
        bank_name: str,
        account_number: str,
        original_amount: int,
        proof_image_ref: str | None,
    ) -> TransactionItem:
        rule = rule_for(TransactionType.TOPUP)
        rule.check(TransactionType.TOPUP, original_amount)
        if not proof_image_ref or not proof_image_ref.strip():
            raise MissingFieldError("proof_image_ref")

        async with unit_of_work(db):
            await self._require_user(db, user_id)
            txn = await self._repo.create_transaction(
                db,
                NewTransaction(
                    user_id=user_id,
                    type=TransactionType.TOPUP,
                    amount=original_amount - rule.admin_fee,
                    original_amount=original_amount,
                    admin_fee=rule.admin_fee,
                    sender_name=sender_name,
                    bank_name=bank_name,
                    account_number=account_number,
                    proof_image_ref=proof_image_ref,
                ),
            )

        logger.info("Top-up requested: txn=%s user=%s amount=%d", txn.id, user_id, original_amount)
        return TransactionItem.from_domain(txn)

    async def withdraw(
        self,
        db: AsyncSession,
        user_id: str,
        recipient_name: str,
        bank_name: str,
        account_number: str,
        original_amount: int,
    ) -> TransactionItem:
        rule = rule_for(TransactionType.WITHDRAW)
        rule.check(TransactionType.WITHDRAW, original_amount)
        hold = total_debit(original_amount, rule.admin_fee)

        async with self._locks.hold(user_id):
            async with unit_of_work(db):
                user = await self._require_user(db, user_id, for_update=True)
                if user.balance < hold:
                    raise InsufficientBalanceError(hold, user.balance)

                await self._repo.set_balance(db, user_id, user.balance - hold)
                txn = await self._repo.create_transaction(
                    db,
                    NewTransaction(
                        user_id=user_id,
                        type=TransactionType.WITHDRAW,
                        amount=original_amount,
                        original_amount=original_amount,
                        admin_fee=rule.admin_fee,
                        recipient_name=recipient_name,
                        bank_name=bank_name,
                        account_number=account_number,
                    ),
                )

        logger.info("Withdrawal held: txn=%s user=%s hold=%d", txn.id, user_id, hold)
        return TransactionItem.from_domain(txn)

    async def send(
        self,
        db: AsyncSession,
        user_id: str,
        recipient_phone: str,
        original_amount: int,
        notes: str | None = None,
    ) -> TransferResponse:
        rule = rule_for(TransactionType.SEND)
        rule.check(TransactionType.SEND, original_amount)
        debit = total_debit(original_amount, rule.admin_fee)

        sender = await self._require_user(db, user_id)
        recipient = await self._repo.get_user_by_phone(db, recipient_phone)
        if recipient is None:
            raise RecipientNotFoundError(recipient_phone)
        if recipient.id == sender.id:
            raise SelfTransferError()

        async with self._locks.hold(sender.id, recipient.id):
            async with unit_of_work(db):
                # Re-read under the locks; row locks follow the same global order
                locked = {
                    uid: await self._require_user(db, uid, for_update=True)
                    for uid in lock_order((sender.id, recipient.id))
                }
                payer, payee = locked[sender.id], locked[recipient.id]
                if payer.balance < debit:
                    raise InsufficientBalanceError(debit, payer.balance)

                await self._repo.set_balance(db, payer.id, payer.balance - debit)
                await self._repo.set_balance(db, payee.id, payee.balance + original_amount)
                sent = await self._repo.create_transaction(
                    db,
                    NewTransaction(
                        user_id=payer.id,
                        type=TransactionType.SEND,
                        amount=-original_amount,
                        original_amount=original_amount,
                        admin_fee=rule.admin_fee,
                        status=TransactionStatus.APPROVED,
                        recipient_phone=recipient_phone,
                        recipient_name=payee.name,
                        notes=notes,
                    ),
                )
                received = await self._repo.create_transaction(
                    db,
                    NewTransaction(
                        user_id=payee.id,
                        type=TransactionType.RECEIVE,
                        amount=original_amount,
                        original_amount=original_amount,
                        admin_fee=0,
                        status=TransactionStatus.APPROVED,
                        sender_name=payer.name,
                        notes=notes,
                        reference_id=sent.id,
                    ),
                )

        logger.info(
            "Transfer settled: txn=%s from=%s to=%s amount=%d",
            sent.id, payer.id, payee.id, original_amount,
        )
        await self._emitter.emit(
            db,
            payee.id,
            "Balance received",
            f"You received {rupiah_to_display(original_amount)} from {payer.name}",
        )
        return TransferResponse(
            sent=TransactionItem.from_domain(sent),
            received=TransactionItem.from_domain(received),
        )
