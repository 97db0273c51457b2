"""005: seed demo data

Revision ID: 005
Revises: 004
Create Date: 2026-10-19

Demo accounts (local development only):
  - Demo User   phone 8123456789, PIN 123456, balance 125,000
  - Admin       phone 8000000000, PIN 900900
The demo balance is backed by an approved top-up so /admin/ledger/verify
reports no violations on a fresh database.
"""

from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO users (id, phone_number, pin_hash, name, balance, is_admin)
        VALUES
            ('demo-user-1', '8123456789', crypt('123456', gen_salt('bf')),
             'Demo User', 125000, FALSE),
            ('demo-admin-1', '8000000000', crypt('900900', gen_salt('bf')),
             'Wallet Admin', 0, TRUE);
    """)
    op.execute("""
        INSERT INTO transactions (
            id, user_id, type, amount, original_amount, admin_fee, status,
            bank_name, account_number, sender_name, proof_image_ref
        ) VALUES
            ('demo-txn-0', 'demo-user-1', 'topup', 125000, 126200, 1200, 'approved',
             'BCA', '1234567890', 'Demo User', 'uploads/demo-initial-topup.jpg'),
            ('demo-txn-1', 'demo-user-1', 'topup', 48800, 50000, 1200, 'pending',
             'BCA', '1234567890', 'Demo User', 'uploads/demo-pending-topup.jpg');
    """)


def downgrade() -> None:
    op.execute("DELETE FROM transactions WHERE id IN ('demo-txn-0', 'demo-txn-1');")
    op.execute("DELETE FROM users WHERE id IN ('demo-user-1', 'demo-admin-1');")
