"""HTTP-level tests: routing, auth dependencies and the ApiResponse envelope.

Services behind the routers are swapped for in-memory ones; no DB or Redis.
"""

from collections.abc import AsyncIterator, Callable, Iterator
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.wl_admin.application.service import ApprovalService
from src.wl_common.database import get_db_session
from src.wl_gateway.auth.dependencies import get_current_user
from src.wl_gateway.user.db_models import UserModel
from src.wl_ledger.application.service import WalletService
from src.wl_ledger.domain.models import WalletUser
from src.wl_ledger.infrastructure.memory import InMemoryLedgerRepository
from src.wl_notification.application.service import NotificationService
from src.wl_notification.infrastructure.memory import InMemoryNotificationRepository
from tests.conftest import BOB_PHONE


def _principal(user: WalletUser, is_admin: bool = False) -> UserModel:
    model = UserModel()
    model.id = user.id
    model.phone_number = user.phone_number
    model.name = user.name
    model.balance = user.balance
    model.is_active = True
    model.is_admin = is_admin
    return model


@pytest.fixture
def as_user() -> Iterator[Callable[..., None]]:
    async def _db() -> AsyncIterator[AsyncMock]:
        yield AsyncMock()

    def _login(user: WalletUser, is_admin: bool = False) -> None:
        app.dependency_overrides[get_current_user] = lambda: _principal(user, is_admin)

    app.dependency_overrides[get_db_session] = _db
    yield _login
    app.dependency_overrides.clear()


@pytest.fixture
def services(
    wallet: WalletService,
    approvals: ApprovalService,
    notification_repo: InMemoryNotificationRepository,
) -> Iterator[None]:
    with (
        patch("src.wl_ledger.api.router._service", wallet),
        patch("src.wl_admin.api.router._service", approvals),
        patch(
            "src.wl_notification.api.router._service",
            NotificationService(repo=notification_repo),
        ),
    ):
        yield


@pytest.fixture
async def client(services: None) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_wallet_requires_token(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/wallet/balance")
    assert resp.status_code == 401


async def test_balance_envelope(client: AsyncClient, as_user, alice: WalletUser) -> None:
    as_user(alice)

    resp = await client.get("/api/v1/wallet/balance")

    body = resp.json()
    assert resp.status_code == 200
    assert body["code"] == 0
    assert body["data"]["balance"] == 125000
    assert body["request_id"] == resp.headers["X-Request-ID"]


async def test_withdraw_below_minimum_is_3001(
    client: AsyncClient, as_user, alice: WalletUser
) -> None:
    as_user(alice)

    resp = await client.post(
        "/api/v1/wallet/withdraw",
        json={
            "recipient_name": "Alice",
            "bank_name": "BCA",
            "account_number": "1234567890",
            "original_amount": 54999,
        },
    )

    assert resp.status_code == 422
    assert resp.json()["code"] == 3001
    assert resp.json()["data"] is None


async def test_send_then_recipient_sees_notification(
    client: AsyncClient, as_user, alice: WalletUser, bob: WalletUser
) -> None:
    as_user(alice)
    resp = await client.post(
        "/api/v1/wallet/send", json={"recipient_phone": BOB_PHONE, "original_amount": 20000}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["sent"]["amount"] == -20000

    as_user(bob)
    notes = (await client.get("/api/v1/notifications")).json()["data"]
    assert notes["unread_count"] == 1

    note_id = notes["items"][0]["id"]
    read = await client.post(f"/api/v1/notifications/{note_id}/read")
    assert read.json()["data"]["is_read"] is True


async def test_admin_routes_reject_regular_users(
    client: AsyncClient, as_user, alice: WalletUser
) -> None:
    as_user(alice)

    resp = await client.get("/api/v1/admin/transactions/pending")

    assert resp.status_code == 403
    assert resp.json()["code"] == 1006


async def test_admin_approves_top_up(
    client: AsyncClient, as_user, alice: WalletUser, ledger_repo: InMemoryLedgerRepository,
    db: AsyncMock,
) -> None:
    as_user(alice)
    created = await client.post(
        "/api/v1/wallet/topup",
        json={
            "sender_name": "Alice",
            "bank_name": "BCA",
            "account_number": "1234567890",
            "original_amount": 50000,
            "proof_image_ref": "proofs/alice-1.jpg",
        },
    )
    txn_id = created.json()["data"]["id"]

    admin = ledger_repo.add_user("080000000000", "Admin", user_id="admin-1")
    as_user(admin, is_admin=True)
    pending = (await client.get("/api/v1/admin/transactions/pending")).json()["data"]
    assert [i["id"] for i in pending["items"]] == [txn_id]
    assert pending["items"][0]["user"]["name"] == "Alice"

    resp = await client.post(f"/api/v1/admin/transactions/{txn_id}/approve")
    assert resp.status_code == 200
    assert resp.json()["data"]["owner_balance"] == 173800

    again = await client.post(f"/api/v1/admin/transactions/{txn_id}/approve")
    assert again.status_code == 409
    assert again.json()["code"] == 3006
    assert await ledger_repo.get_balance(db, alice.id) == 173800


async def test_unknown_transaction_is_404(
    client: AsyncClient, as_user, alice: WalletUser
) -> None:
    as_user(alice, is_admin=True)

    resp = await client.post("/api/v1/admin/transactions/missing/reject")

    assert resp.status_code == 404
    assert resp.json()["code"] == 3004
