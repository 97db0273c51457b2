"""Repository Protocol for notifications — rows are never deleted."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_notification.domain.models import Notification


class NotificationRepositoryProtocol(Protocol):
    async def create_notification(
        self, db: AsyncSession, user_id: str, title: str, message: str
    ) -> Notification: ...

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Notification]: ...

    async def mark_read(
        self, db: AsyncSession, notification_id: str, user_id: str
    ) -> Notification | None: ...
