"""Repository Protocol — dependency inversion for testability.

Unit tests inject the in-memory store; production uses PostgreSQL.
Both conform to this Protocol. The CALLER owns the DB transaction.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.enums import TransactionStatus
from src.wl_ledger.domain.models import NewTransaction, Transaction, WalletUser


class LedgerRepositoryProtocol(Protocol):
    async def get_user(
        self, db: AsyncSession, user_id: str, for_update: bool = False
    ) -> WalletUser | None: ...

    async def get_user_by_phone(
        self, db: AsyncSession, phone_number: str
    ) -> WalletUser | None: ...

    async def get_balance(self, db: AsyncSession, user_id: str) -> int: ...

    async def set_balance(
        self, db: AsyncSession, user_id: str, new_balance: int
    ) -> None: ...

    async def create_transaction(
        self, db: AsyncSession, fields: NewTransaction
    ) -> Transaction: ...

    async def get_transaction(
        self, db: AsyncSession, transaction_id: str, for_update: bool = False
    ) -> Transaction | None: ...

    async def update_transaction_status(
        self, db: AsyncSession, transaction_id: str, status: TransactionStatus
    ) -> Transaction: ...

    async def list_transactions_by_user(
        self, db: AsyncSession, user_id: str
    ) -> list[Transaction]: ...

    async def list_pending_transactions(self, db: AsyncSession) -> list[Transaction]: ...

    async def count_users(self, db: AsyncSession) -> int: ...

    async def total_approved_volume(self, db: AsyncSession) -> int: ...

    async def list_balances(self, db: AsyncSession) -> dict[str, int]: ...

    async def sum_balance_effects(self, db: AsyncSession) -> dict[str, int]: ...
