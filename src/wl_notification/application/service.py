"""NotificationService — read side of notifications plus the read flag."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.database import unit_of_work
from src.wl_common.errors import NotificationNotFoundError
from src.wl_notification.application.schemas import NotificationItem, NotificationListResponse
from src.wl_notification.domain.repository import NotificationRepositoryProtocol
from src.wl_notification.infrastructure.persistence import NotificationRepository


class NotificationService:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def list_notifications(
        self, db: AsyncSession, user_id: str
    ) -> NotificationListResponse:
        notifications = await self._repo.list_by_user(db, user_id)
        return NotificationListResponse(
            items=[NotificationItem.from_domain(n) for n in notifications],
            unread_count=sum(1 for n in notifications if not n.is_read),
        )

    async def mark_read(
        self, db: AsyncSession, user_id: str, notification_id: str
    ) -> NotificationItem:
        async with unit_of_work(db):
            notification = await self._repo.mark_read(db, notification_id, user_id)
            if notification is None:
                raise NotificationNotFoundError(notification_id)
        return NotificationItem.from_domain(notification)
