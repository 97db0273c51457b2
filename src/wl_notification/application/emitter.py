"""NotificationEmitter — fire-and-forget side effect of money movement.

Called only AFTER the balance mutation has been committed. A failure here is
logged and swallowed: it must never surface to the caller or undo the
committed transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_notification.domain.repository import NotificationRepositoryProtocol
from src.wl_notification.infrastructure.persistence import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationEmitter:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def emit(self, db: AsyncSession, user_id: str, title: str, message: str) -> None:
        try:
            await self._repo.create_notification(db, user_id, title, message)
            await db.commit()
        except Exception:
            logger.warning(
                "Notification dropped: user=%s title=%r", user_id, title, exc_info=True
            )
            try:
                await db.rollback()
            except Exception:
                logger.warning("Rollback after dropped notification failed", exc_info=True)
