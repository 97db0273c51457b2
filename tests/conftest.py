"""Shared test fixtures.

JWT_SECRET has no default in Settings, so it is provided here before any
application module is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from src.wl_admin.application.service import ApprovalService  # noqa: E402
from src.wl_ledger.application.service import WalletService  # noqa: E402
from src.wl_ledger.domain.models import WalletUser  # noqa: E402
from src.wl_ledger.infrastructure.locks import LocalBalanceLocks  # noqa: E402
from src.wl_ledger.infrastructure.memory import InMemoryLedgerRepository  # noqa: E402
from src.wl_notification.application.emitter import NotificationEmitter  # noqa: E402
from src.wl_notification.infrastructure.memory import (  # noqa: E402
    InMemoryNotificationRepository,
)

ALICE_PHONE = "081234567890"
BOB_PHONE = "089876543210"


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession; the in-memory stores ignore it."""
    return AsyncMock()


@pytest.fixture
def ledger_repo() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository()


@pytest.fixture
def notification_repo() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def locks() -> LocalBalanceLocks:
    return LocalBalanceLocks(timeout_seconds=1.0)


@pytest.fixture
def emitter(notification_repo: InMemoryNotificationRepository) -> NotificationEmitter:
    return NotificationEmitter(repo=notification_repo)


@pytest.fixture
def wallet(
    ledger_repo: InMemoryLedgerRepository,
    locks: LocalBalanceLocks,
    emitter: NotificationEmitter,
) -> WalletService:
    return WalletService(repo=ledger_repo, locks=locks, emitter=emitter)


@pytest.fixture
def approvals(
    ledger_repo: InMemoryLedgerRepository,
    locks: LocalBalanceLocks,
    emitter: NotificationEmitter,
) -> ApprovalService:
    return ApprovalService(repo=ledger_repo, locks=locks, emitter=emitter)


@pytest.fixture
def alice(ledger_repo: InMemoryLedgerRepository) -> WalletUser:
    return ledger_repo.add_user(ALICE_PHONE, "Alice", balance=125_000, user_id="user-alice")


@pytest.fixture
def bob(ledger_repo: InMemoryLedgerRepository) -> WalletUser:
    return ledger_repo.add_user(BOB_PHONE, "Bob", balance=50_000, user_id="user-bob")
