"""Unit tests for WalletService (top-up, withdraw, send) on the in-memory store."""

from unittest.mock import AsyncMock

import pytest

from src.wl_common.errors import (
    AmountOutOfRangeError,
    InsufficientBalanceError,
    MissingFieldError,
    RecipientNotFoundError,
    SelfTransferError,
    UserNotFoundError,
)
from src.wl_ledger.application.service import WalletService
from src.wl_ledger.domain.models import WalletUser
from src.wl_ledger.infrastructure.memory import InMemoryLedgerRepository
from src.wl_notification.infrastructure.memory import InMemoryNotificationRepository
from tests.conftest import ALICE_PHONE, BOB_PHONE


async def _top_up(wallet: WalletService, db: AsyncMock, user_id: str, amount: int, proof: str | None = "proof/1.jpg"):
    return await wallet.top_up(db, user_id, "Alice Sender", "BCA", "1234567890", amount, proof)


class TestTopUp:
    async def test_creates_pending_net_of_fee_without_touching_balance(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        item = await _top_up(wallet, db, alice.id, 50_000)

        assert item.type == "topup"
        assert item.status == "pending"
        assert item.amount == 48_800
        assert item.original_amount == 50_000
        assert item.admin_fee == 1_200
        assert item.proof_image_ref == "proof/1.jpg"
        assert await ledger_repo.get_balance(db, alice.id) == 125_000
        db.commit.assert_awaited_once()

    @pytest.mark.parametrize("amount", [11_999, 10_000_001, 0, -5])
    async def test_amount_out_of_range(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, amount: int,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        with pytest.raises(AmountOutOfRangeError):
            await _top_up(wallet, db, alice.id, amount)
        assert await ledger_repo.list_transactions_by_user(db, alice.id) == []

    @pytest.mark.parametrize("amount", [12_000, 10_000_000])
    async def test_amount_bounds_are_inclusive(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, amount: int
    ) -> None:
        item = await _top_up(wallet, db, alice.id, amount)
        assert item.original_amount == amount

    @pytest.mark.parametrize("proof", [None, "", "   "])
    async def test_missing_proof_rejected(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, proof: str | None,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        with pytest.raises(MissingFieldError):
            await _top_up(wallet, db, alice.id, 50_000, proof)
        assert await ledger_repo.list_transactions_by_user(db, alice.id) == []

    async def test_unknown_user(self, wallet: WalletService, db: AsyncMock) -> None:
        with pytest.raises(UserNotFoundError):
            await _top_up(wallet, db, "ghost", 50_000)
        db.rollback.assert_awaited_once()


class TestWithdraw:
    async def test_holds_amount_plus_fee(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        item = await wallet.withdraw(db, alice.id, "Alice", "BCA", "1234567890", 55_000)

        assert item.type == "withdraw"
        assert item.status == "pending"
        assert item.amount == 55_000
        assert item.admin_fee == 1_200
        assert await ledger_repo.get_balance(db, alice.id) == 68_800

    async def test_exact_balance_drains_to_zero(
        self, wallet: WalletService, db: AsyncMock, ledger_repo: InMemoryLedgerRepository
    ) -> None:
        user = ledger_repo.add_user("081111111111", "Exact", balance=56_200)
        await wallet.withdraw(db, user.id, "Exact", "BNI", "999", 55_000)
        assert await ledger_repo.get_balance(db, user.id) == 0

    async def test_insufficient_balance_changes_nothing(
        self, wallet: WalletService, db: AsyncMock, bob: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        with pytest.raises(InsufficientBalanceError) as exc_info:
            await wallet.withdraw(db, bob.id, "Bob", "BCA", "1", 55_000)

        assert "56200" in exc_info.value.message
        assert await ledger_repo.get_balance(db, bob.id) == 50_000
        assert await ledger_repo.list_transactions_by_user(db, bob.id) == []
        db.rollback.assert_awaited_once()

    async def test_below_minimum(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser
    ) -> None:
        with pytest.raises(AmountOutOfRangeError):
            await wallet.withdraw(db, alice.id, "Alice", "BCA", "1", 54_999)

    async def test_unknown_user(self, wallet: WalletService, db: AsyncMock) -> None:
        with pytest.raises(UserNotFoundError):
            await wallet.withdraw(db, "ghost", "Ghost", "BCA", "1", 55_000)


class TestSend:
    async def test_moves_money_and_writes_two_rows(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, bob: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        result = await wallet.send(db, alice.id, BOB_PHONE, 20_000, "lunch")

        assert await ledger_repo.get_balance(db, alice.id) == 125_000 - 21_200
        assert await ledger_repo.get_balance(db, bob.id) == 50_000 + 20_000

        assert result.sent.type == "send"
        assert result.sent.amount == -20_000
        assert result.sent.admin_fee == 1_200
        assert result.sent.status == "approved"
        assert result.sent.recipient_name == "Bob"
        assert result.received.type == "receive"
        assert result.received.amount == 20_000
        assert result.received.admin_fee == 0
        assert result.received.status == "approved"
        assert result.received.sender_name == "Alice"
        assert result.received.reference_id == result.sent.id

        assert len(await ledger_repo.list_transactions_by_user(db, alice.id)) == 1
        assert len(await ledger_repo.list_transactions_by_user(db, bob.id)) == 1
        assert await ledger_repo.list_pending_transactions(db) == []

    async def test_notifies_recipient_only(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, bob: WalletUser,
        notification_repo: InMemoryNotificationRepository,
    ) -> None:
        await wallet.send(db, alice.id, BOB_PHONE, 20_000)

        to_bob = await notification_repo.list_by_user(db, bob.id)
        assert len(to_bob) == 1
        assert to_bob[0].title == "Balance received"
        assert "Rp 20.000" in to_bob[0].message
        assert "Alice" in to_bob[0].message
        assert await notification_repo.list_by_user(db, alice.id) == []

    async def test_unknown_recipient(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        with pytest.raises(RecipientNotFoundError):
            await wallet.send(db, alice.id, "080000000001", 20_000)
        assert await ledger_repo.get_balance(db, alice.id) == 125_000

    async def test_self_transfer_denied(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
    ) -> None:
        with pytest.raises(SelfTransferError):
            await wallet.send(db, alice.id, ALICE_PHONE, 20_000)
        assert await ledger_repo.get_balance(db, alice.id) == 125_000
        assert await ledger_repo.list_transactions_by_user(db, alice.id) == []

    async def test_insufficient_balance_moves_nothing(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, bob: WalletUser,
        ledger_repo: InMemoryLedgerRepository,
        notification_repo: InMemoryNotificationRepository,
    ) -> None:
        # Bob has 50,000: sending 49,000 needs 50,200
        with pytest.raises(InsufficientBalanceError):
            await wallet.send(db, bob.id, ALICE_PHONE, 49_000)

        assert await ledger_repo.get_balance(db, alice.id) == 125_000
        assert await ledger_repo.get_balance(db, bob.id) == 50_000
        assert await ledger_repo.list_transactions_by_user(db, alice.id) == []
        assert await notification_repo.list_by_user(db, alice.id) == []

    @pytest.mark.parametrize("amount", [9_999, 10_000_001])
    async def test_amount_out_of_range(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, bob: WalletUser,
        amount: int,
    ) -> None:
        with pytest.raises(AmountOutOfRangeError):
            await wallet.send(db, alice.id, BOB_PHONE, amount)

    async def test_notification_failure_does_not_undo_transfer(
        self, db: AsyncMock, alice: WalletUser, bob: WalletUser,
        ledger_repo: InMemoryLedgerRepository, locks,
    ) -> None:
        from src.wl_notification.application.emitter import NotificationEmitter

        broken_repo = AsyncMock()
        broken_repo.create_notification.side_effect = RuntimeError("sink down")
        svc = WalletService(repo=ledger_repo, locks=locks, emitter=NotificationEmitter(broken_repo))

        result = await svc.send(db, alice.id, BOB_PHONE, 20_000)

        assert result.sent.status == "approved"
        assert await ledger_repo.get_balance(db, alice.id) == 103_800
        assert await ledger_repo.get_balance(db, bob.id) == 70_000


class TestQueries:
    async def test_get_balance(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser
    ) -> None:
        result = await wallet.get_balance(db, alice.id)
        assert result.balance == 125_000
        assert result.balance_display == "Rp 125.000"

    async def test_get_balance_unknown_user(self, wallet: WalletService, db: AsyncMock) -> None:
        with pytest.raises(UserNotFoundError):
            await wallet.get_balance(db, "ghost")

    async def test_list_transactions_newest_first(
        self, wallet: WalletService, db: AsyncMock, alice: WalletUser, bob: WalletUser
    ) -> None:
        await _top_up(wallet, db, alice.id, 50_000)
        await wallet.withdraw(db, alice.id, "Alice", "BCA", "1", 55_000)
        await wallet.send(db, alice.id, BOB_PHONE, 10_000)

        result = await wallet.list_transactions(db, alice.id)

        assert [i.type for i in result.items] == ["send", "withdraw", "topup"]
