"""In-memory notification store for unit tests; ``db`` is ignored."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.datetime_utils import utc_now
from src.wl_notification.domain.models import Notification


class InMemoryNotificationRepository:
    def __init__(self) -> None:
        self._notifications: list[Notification] = []

    async def create_notification(
        self, db: AsyncSession | None, user_id: str, title: str, message: str
    ) -> Notification:
        notification = Notification(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            message=message,
            created_at=utc_now(),
        )
        self._notifications.append(notification)
        return notification

    async def list_by_user(
        self, db: AsyncSession | None, user_id: str
    ) -> list[Notification]:
        return [n for n in reversed(self._notifications) if n.user_id == user_id]

    async def mark_read(
        self, db: AsyncSession | None, notification_id: str, user_id: str
    ) -> Notification | None:
        for notification in self._notifications:
            if notification.id == notification_id and notification.user_id == user_id:
                notification.is_read = True
                return notification
        return None
