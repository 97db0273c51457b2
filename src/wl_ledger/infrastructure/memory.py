"""InMemoryLedgerRepository — process-local LedgerRepositoryProtocol.

Used by unit tests and local demos. The ``db`` argument is accepted for
protocol compatibility and ignored; nothing here survives a restart.
"""

import uuid
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.datetime_utils import utc_now
from src.wl_common.enums import TransactionStatus, TransactionType
from src.wl_common.errors import InternalError, TransactionNotFoundError, UserNotFoundError
from src.wl_ledger.domain.models import (
    NewTransaction,
    Transaction,
    WalletUser,
    balance_effect,
)


class InMemoryLedgerRepository:
    def __init__(self) -> None:
        self._users: dict[str, WalletUser] = {}
        self._phone_index: dict[str, str] = {}
        self._transactions: dict[str, Transaction] = {}
        # insertion order breaks ties between equal timestamps
        self._sequence: dict[str, int] = {}

    def add_user(
        self,
        phone_number: str,
        name: str,
        balance: int = 0,
        user_id: str | None = None,
        is_active: bool = True,
    ) -> WalletUser:
        """Register a user directly in the store (identity store stand-in)."""
        user = WalletUser(
            id=user_id or str(uuid.uuid4()),
            phone_number=phone_number,
            name=name,
            balance=balance,
            is_active=is_active,
        )
        self._users[user.id] = user
        self._phone_index[phone_number] = user.id
        return user

    async def get_user(
        self, db: AsyncSession | None, user_id: str, for_update: bool = False
    ) -> WalletUser | None:
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def get_user_by_phone(
        self, db: AsyncSession | None, phone_number: str
    ) -> WalletUser | None:
        user_id = self._phone_index.get(phone_number)
        return await self.get_user(db, user_id) if user_id else None

    async def get_balance(self, db: AsyncSession | None, user_id: str) -> int:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.balance

    async def set_balance(
        self, db: AsyncSession | None, user_id: str, new_balance: int
    ) -> None:
        if new_balance < 0:
            raise InternalError(f"Refusing negative balance {new_balance} for user {user_id}")
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        user.balance = new_balance

    async def create_transaction(
        self, db: AsyncSession | None, fields: NewTransaction
    ) -> Transaction:
        now = utc_now()
        txn = Transaction(
            id=str(uuid.uuid4()),
            user_id=fields.user_id,
            type=fields.type,
            amount=fields.amount,
            original_amount=fields.original_amount,
            admin_fee=fields.admin_fee,
            status=fields.status,
            recipient_phone=fields.recipient_phone,
            recipient_name=fields.recipient_name,
            sender_name=fields.sender_name,
            bank_name=fields.bank_name,
            account_number=fields.account_number,
            proof_image_ref=fields.proof_image_ref,
            notes=fields.notes,
            reference_id=fields.reference_id,
            created_at=now,
            updated_at=now,
        )
        self._transactions[txn.id] = txn
        self._sequence[txn.id] = len(self._sequence)
        return txn

    async def get_transaction(
        self, db: AsyncSession | None, transaction_id: str, for_update: bool = False
    ) -> Transaction | None:
        return self._transactions.get(transaction_id)

    async def update_transaction_status(
        self, db: AsyncSession | None, transaction_id: str, status: TransactionStatus
    ) -> Transaction:
        txn = self._transactions.get(transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_id)
        updated = replace(txn, status=status, updated_at=utc_now())
        self._transactions[transaction_id] = updated
        return updated

    def _newest_first(self, txns: list[Transaction]) -> list[Transaction]:
        return sorted(txns, key=lambda t: self._sequence[t.id], reverse=True)

    async def list_transactions_by_user(
        self, db: AsyncSession | None, user_id: str
    ) -> list[Transaction]:
        return self._newest_first(
            [t for t in self._transactions.values() if t.user_id == user_id]
        )

    async def list_pending_transactions(
        self, db: AsyncSession | None
    ) -> list[Transaction]:
        return self._newest_first([t for t in self._transactions.values() if t.is_pending])

    async def count_users(self, db: AsyncSession | None) -> int:
        return len(self._users)

    async def total_approved_volume(self, db: AsyncSession | None) -> int:
        return sum(
            t.original_amount
            for t in self._transactions.values()
            if t.status is TransactionStatus.APPROVED and t.type is not TransactionType.RECEIVE
        )

    async def list_balances(self, db: AsyncSession | None) -> dict[str, int]:
        return {user_id: user.balance for user_id, user in self._users.items()}

    async def sum_balance_effects(self, db: AsyncSession | None) -> dict[str, int]:
        effects: dict[str, int] = {}
        for txn in self._transactions.values():
            effects[txn.user_id] = effects.get(txn.user_id, 0) + balance_effect(txn)
        return effects
