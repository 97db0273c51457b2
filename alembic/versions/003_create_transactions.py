"""003: create transactions table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            type            VARCHAR(16)     NOT NULL,
            amount          BIGINT          NOT NULL,
            original_amount BIGINT          NOT NULL,
            admin_fee       BIGINT          NOT NULL DEFAULT 1200,
            status          VARCHAR(16)     NOT NULL DEFAULT 'pending',
            recipient_phone VARCHAR(20),
            recipient_name  VARCHAR(100),
            sender_name     VARCHAR(100),
            bank_name       VARCHAR(100),
            account_number  VARCHAR(64),
            proof_image_ref VARCHAR(500),
            notes           VARCHAR(500),
            reference_id    VARCHAR(64)     REFERENCES transactions (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_txn_type CHECK (type IN ('topup', 'withdraw', 'send', 'receive')),
            CONSTRAINT ck_txn_status CHECK (status IN ('pending', 'approved', 'rejected')),
            CONSTRAINT ck_txn_original_amount_gt_0 CHECK (original_amount > 0),
            CONSTRAINT ck_txn_admin_fee_gte_0 CHECK (admin_fee >= 0),
            -- send/receive settle at creation and never wait for an admin
            CONSTRAINT ck_txn_transfer_not_pending CHECK (
                type IN ('topup', 'withdraw') OR status = 'approved'
            )
        );
    """)
    op.execute("CREATE INDEX idx_txn_user_time ON transactions (user_id, created_at DESC);")
    op.execute("""
        CREATE INDEX idx_txn_pending
        ON transactions (created_at DESC)
        WHERE status = 'pending';
    """)
    op.execute("""
        CREATE TRIGGER trg_transactions_updated_at
            BEFORE UPDATE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE transactions IS "
        "'Wallet transactions — immutable except status/updated_at, amounts in Rupiah';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
