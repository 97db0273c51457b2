"""User domain service: register, login, refresh, phone lookup.

All DB operations use the injected AsyncSession. Transactions for writes are
managed by the caller (router layer) via `async with db.begin()`.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.errors import (
    AccountDisabledError,
    InvalidCredentialsError,
    PhoneExistsError,
)
from src.wl_gateway.auth.jwt_handler import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.wl_gateway.auth.pin import hash_pin, verify_pin
from src.wl_gateway.user.db_models import UserModel
from src.wl_gateway.user.schemas import UserInfo


def to_user_info(user: UserModel) -> UserInfo:
    return UserInfo(
        user_id=str(user.id),
        phone_number=user.phone_number,
        name=user.name,
        balance=user.balance,
        is_admin=user.is_admin,
    )


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def _find_by_phone(self, phone_number: str, db: AsyncSession) -> UserModel | None:
        result = await db.execute(
            select(UserModel).where(UserModel.phone_number == phone_number)
        )
        return result.scalar_one_or_none()

    async def register(
        self,
        phone_number: str,
        pin: str,
        name: str,
        db: AsyncSession,
    ) -> UserModel:
        """Create a user with a zero balance.

        The caller must wrap this in `async with db.begin()`.
        """
        # DB UNIQUE constraint is the final guard
        if await self._find_by_phone(phone_number, db) is not None:
            raise PhoneExistsError()

        user = UserModel(
            phone_number=phone_number,
            pin_hash=hash_pin(pin),
            name=name,
            balance=0,
            is_active=True,
            is_admin=False,
        )
        db.add(user)
        await db.flush()  # Get user.id without committing
        await db.refresh(user)
        return user

    async def login(
        self,
        phone_number: str,
        pin: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown phone and wrong PIN both raise InvalidCredentialsError so the
        response does not reveal which phone numbers are registered.
        """
        user = await self._find_by_phone(phone_number, db)

        if user is None or not verify_pin(pin, user.pin_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type=REFRESH)
        return create_access_token(str(payload["sub"]))

    async def phone_exists(self, phone_number: str, db: AsyncSession) -> bool:
        return await self._find_by_phone(phone_number, db) is not None
