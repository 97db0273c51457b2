"""002: create users table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            phone_number    VARCHAR(20)     NOT NULL,
            pin_hash        VARCHAR(255)    NOT NULL,
            name            VARCHAR(100)    NOT NULL,
            balance         BIGINT          NOT NULL DEFAULT 0,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            is_admin        BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_phone_number UNIQUE (phone_number),
            CONSTRAINT ck_users_balance_gte_0 CHECK (balance >= 0),
            CONSTRAINT ck_users_name_len CHECK (LENGTH(name) >= 2)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE users IS 'Wallet users — phone + PIN login, balance in Rupiah';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
