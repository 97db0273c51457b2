"""Unit tests for user service (mocked DB)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from src.wl_common.errors import (
    AccountDisabledError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    PhoneExistsError,
)
from src.wl_gateway.user.db_models import UserModel
from src.wl_gateway.user.schemas import RegisterRequest
from src.wl_gateway.user.service import UserService, to_user_info


def _make_user(is_active: bool = True, is_admin: bool = False) -> UserModel:
    user = UserModel()
    user.id = "user-alice"
    user.phone_number = "081234567890"
    user.name = "Alice"
    user.pin_hash = "$2b$12$fakehash"
    user.balance = 125000
    user.is_active = is_active
    user.is_admin = is_admin
    return user


def _result(value: UserModel | None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def mock_db() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def service() -> UserService:
    return UserService()


class TestRegister:
    async def test_duplicate_phone_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with pytest.raises(PhoneExistsError):
            await service.register("081234567890", "123456", "Alice", mock_db)
        mock_db.add.assert_not_called()

    async def test_new_user_starts_at_zero_with_hashed_pin(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))

        user = await service.register("081234567890", "123456", "Alice", mock_db)

        mock_db.add.assert_called_once_with(user)
        mock_db.flush.assert_awaited_once()
        assert user.balance == 0
        assert user.is_admin is False
        assert user.pin_hash != "123456"


class TestLogin:
    async def test_unknown_phone_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))

        with pytest.raises(InvalidCredentialsError):
            await service.login("080000000000", "123456", mock_db)

    async def test_wrong_pin_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with (
            patch("src.wl_gateway.user.service.verify_pin", return_value=False),
            pytest.raises(InvalidCredentialsError),
        ):
            await service.login("081234567890", "000000", mock_db)

    async def test_disabled_account_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user(is_active=False)))

        with (
            patch("src.wl_gateway.user.service.verify_pin", return_value=True),
            pytest.raises(AccountDisabledError),
        ):
            await service.login("081234567890", "123456", mock_db)

    async def test_success_returns_token_pair(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with patch("src.wl_gateway.user.service.verify_pin", return_value=True):
            user, access, refresh = await service.login("081234567890", "123456", mock_db)

        assert user.name == "Alice"
        assert access != refresh
        assert to_user_info(user).balance == 125000


class TestRefreshAndPhoneCheck:
    async def test_invalid_refresh_token_raises_error(self, service: UserService) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh("not.a.real.token")

    async def test_phone_exists(self, service: UserService, mock_db: AsyncMock) -> None:
        mock_db.execute = AsyncMock(side_effect=[_result(_make_user()), _result(None)])

        assert await service.phone_exists("081234567890", mock_db) is True
        assert await service.phone_exists("080000000000", mock_db) is False


class TestRegisterRequest:
    def test_valid(self) -> None:
        req = RegisterRequest(phone_number="+6281234567890", pin="123456", name="Alice")
        assert req.pin == "123456"

    @pytest.mark.parametrize("pin", ["12345", "1234567", "12a456"])
    def test_pin_must_be_six_digits(self, pin: str) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(phone_number="081234567890", pin=pin, name="Alice")

    def test_phone_must_be_digits(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(phone_number="0812-3456", pin="123456", name="Alice")
