"""LedgerRepository — PostgreSQL implementation of LedgerRepositoryProtocol.

Balances live on the users row; transactions are append-only except for
status/updated_at. Row locks (FOR UPDATE) are taken when the caller asks,
on top of the per-user balance locks held by the application service.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.enums import TransactionStatus, TransactionType
from src.wl_common.errors import InternalError, TransactionNotFoundError, UserNotFoundError
from src.wl_ledger.domain.models import NewTransaction, Transaction, WalletUser

_TXN_COLUMNS = """
    id, user_id, type, amount, original_amount, admin_fee, status,
    recipient_phone, recipient_name, sender_name, bank_name, account_number,
    proof_image_ref, notes, reference_id, created_at, updated_at
"""

# ---------------------------------------------------------------------------
# SQL: users
# ---------------------------------------------------------------------------

_GET_USER_SQL = text("""
    SELECT id, phone_number, name, balance, is_active
    FROM users
    WHERE id = :user_id
""")

_GET_USER_FOR_UPDATE_SQL = text("""
    SELECT id, phone_number, name, balance, is_active
    FROM users
    WHERE id = :user_id
    FOR UPDATE
""")

_GET_USER_BY_PHONE_SQL = text("""
    SELECT id, phone_number, name, balance, is_active
    FROM users
    WHERE phone_number = :phone_number
""")

_SET_BALANCE_SQL = text("""
    UPDATE users
    SET balance = :balance,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING id
""")

_COUNT_USERS_SQL = text("SELECT COUNT(*) FROM users")

_LIST_BALANCES_SQL = text("SELECT id, balance FROM users")

# ---------------------------------------------------------------------------
# SQL: transactions
# ---------------------------------------------------------------------------

_INSERT_TXN_SQL = text(f"""
    INSERT INTO transactions
        (user_id, type, amount, original_amount, admin_fee, status,
         recipient_phone, recipient_name, sender_name, bank_name, account_number,
         proof_image_ref, notes, reference_id)
    VALUES
        (:user_id, :type, :amount, :original_amount, :admin_fee, :status,
         :recipient_phone, :recipient_name, :sender_name, :bank_name, :account_number,
         :proof_image_ref, :notes, :reference_id)
    RETURNING {_TXN_COLUMNS}
""")

_GET_TXN_SQL = text(f"SELECT {_TXN_COLUMNS} FROM transactions WHERE id = :id")

_GET_TXN_FOR_UPDATE_SQL = text(
    f"SELECT {_TXN_COLUMNS} FROM transactions WHERE id = :id FOR UPDATE"
)

_UPDATE_TXN_STATUS_SQL = text(f"""
    UPDATE transactions
    SET status = :status,
        updated_at = NOW()
    WHERE id = :id
    RETURNING {_TXN_COLUMNS}
""")

_LIST_TXN_BY_USER_SQL = text(f"""
    SELECT {_TXN_COLUMNS}
    FROM transactions
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
""")

_LIST_PENDING_SQL = text(f"""
    SELECT {_TXN_COLUMNS}
    FROM transactions
    WHERE status = 'pending'
    ORDER BY created_at DESC, id DESC
""")

# receive rows mirror a send row; counting both would double the volume
_APPROVED_VOLUME_SQL = text("""
    SELECT COALESCE(SUM(original_amount), 0)
    FROM transactions
    WHERE status = 'approved' AND type <> 'receive'
""")

# Must stay in sync with wl_ledger.domain.models.balance_effect
_SUM_EFFECTS_SQL = text("""
    SELECT user_id,
           COALESCE(SUM(
               CASE
                   WHEN type = 'topup' AND status = 'approved' THEN amount
                   WHEN type = 'withdraw' AND status <> 'rejected'
                       THEN -(original_amount + admin_fee)
                   WHEN type = 'send' THEN -(original_amount + admin_fee)
                   WHEN type = 'receive' THEN amount
                   ELSE 0
               END
           ), 0) AS effect
    FROM transactions
    GROUP BY user_id
""")


def _row_to_user(row: object) -> WalletUser:
    return WalletUser(
        id=str(row.id),  # type: ignore[attr-defined]
        phone_number=row.phone_number,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        type=TransactionType(row.type),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        original_amount=row.original_amount,  # type: ignore[attr-defined]
        admin_fee=row.admin_fee,  # type: ignore[attr-defined]
        status=TransactionStatus(row.status),  # type: ignore[attr-defined]
        recipient_phone=row.recipient_phone,  # type: ignore[attr-defined]
        recipient_name=row.recipient_name,  # type: ignore[attr-defined]
        sender_name=row.sender_name,  # type: ignore[attr-defined]
        bank_name=row.bank_name,  # type: ignore[attr-defined]
        account_number=row.account_number,  # type: ignore[attr-defined]
        proof_image_ref=row.proof_image_ref,  # type: ignore[attr-defined]
        notes=row.notes,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete repository backed by PostgreSQL."""

    async def get_user(
        self, db: AsyncSession, user_id: str, for_update: bool = False
    ) -> WalletUser | None:
        sql = _GET_USER_FOR_UPDATE_SQL if for_update else _GET_USER_SQL
        row = (await db.execute(sql, {"user_id": user_id})).fetchone()
        return _row_to_user(row) if row else None

    async def get_user_by_phone(
        self, db: AsyncSession, phone_number: str
    ) -> WalletUser | None:
        result = await db.execute(_GET_USER_BY_PHONE_SQL, {"phone_number": phone_number})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def get_balance(self, db: AsyncSession, user_id: str) -> int:
        user = await self.get_user(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.balance

    async def set_balance(
        self, db: AsyncSession, user_id: str, new_balance: int
    ) -> None:
        if new_balance < 0:
            raise InternalError(f"Refusing negative balance {new_balance} for user {user_id}")
        result = await db.execute(
            _SET_BALANCE_SQL, {"user_id": user_id, "balance": new_balance}
        )
        if result.fetchone() is None:
            raise UserNotFoundError(user_id)

    async def create_transaction(
        self, db: AsyncSession, fields: NewTransaction
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TXN_SQL,
            {
                "user_id": fields.user_id,
                "type": fields.type.value,
                "amount": fields.amount,
                "original_amount": fields.original_amount,
                "admin_fee": fields.admin_fee,
                "status": fields.status.value,
                "recipient_phone": fields.recipient_phone,
                "recipient_name": fields.recipient_name,
                "sender_name": fields.sender_name,
                "bank_name": fields.bank_name,
                "account_number": fields.account_number,
                "proof_image_ref": fields.proof_image_ref,
                "notes": fields.notes,
                "reference_id": fields.reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows — this should never happen")
        return _row_to_transaction(row)

    async def get_transaction(
        self, db: AsyncSession, transaction_id: str, for_update: bool = False
    ) -> Transaction | None:
        sql = _GET_TXN_FOR_UPDATE_SQL if for_update else _GET_TXN_SQL
        row = (await db.execute(sql, {"id": transaction_id})).fetchone()
        return _row_to_transaction(row) if row else None

    async def update_transaction_status(
        self, db: AsyncSession, transaction_id: str, status: TransactionStatus
    ) -> Transaction:
        result = await db.execute(
            _UPDATE_TXN_STATUS_SQL, {"id": transaction_id, "status": status.value}
        )
        row = result.fetchone()
        if row is None:
            raise TransactionNotFoundError(transaction_id)
        return _row_to_transaction(row)

    async def list_transactions_by_user(
        self, db: AsyncSession, user_id: str
    ) -> list[Transaction]:
        rows = (await db.execute(_LIST_TXN_BY_USER_SQL, {"user_id": user_id})).fetchall()
        return [_row_to_transaction(row) for row in rows]

    async def list_pending_transactions(self, db: AsyncSession) -> list[Transaction]:
        rows = (await db.execute(_LIST_PENDING_SQL)).fetchall()
        return [_row_to_transaction(row) for row in rows]

    async def count_users(self, db: AsyncSession) -> int:
        return int((await db.execute(_COUNT_USERS_SQL)).scalar_one())

    async def total_approved_volume(self, db: AsyncSession) -> int:
        return int((await db.execute(_APPROVED_VOLUME_SQL)).scalar_one())

    async def list_balances(self, db: AsyncSession) -> dict[str, int]:
        rows = (await db.execute(_LIST_BALANCES_SQL)).fetchall()
        return {str(row.id): row.balance for row in rows}

    async def sum_balance_effects(self, db: AsyncSession) -> dict[str, int]:
        rows = (await db.execute(_SUM_EFFECTS_SQL)).fetchall()
        return {str(row.user_id): int(row.effect) for row in rows}
