"""NotificationRepository — PostgreSQL implementation."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.errors import InternalError
from src.wl_notification.domain.models import Notification

_INSERT_SQL = text("""
    INSERT INTO notifications (user_id, title, message)
    VALUES (:user_id, :title, :message)
    RETURNING id, user_id, title, message, is_read, created_at
""")

_LIST_BY_USER_SQL = text("""
    SELECT id, user_id, title, message, is_read, created_at
    FROM notifications
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
""")

# Scoped to the owner so one user cannot mark another's notifications
_MARK_READ_SQL = text("""
    UPDATE notifications
    SET is_read = TRUE
    WHERE id = :id AND user_id = :user_id
    RETURNING id, user_id, title, message, is_read, created_at
""")


def _row_to_notification(row: object) -> Notification:
    return Notification(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        message=row.message,  # type: ignore[attr-defined]
        is_read=row.is_read,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class NotificationRepository:
    async def create_notification(
        self, db: AsyncSession, user_id: str, title: str, message: str
    ) -> Notification:
        result = await db.execute(
            _INSERT_SQL, {"user_id": user_id, "title": title, "message": message}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Notification insert returned no rows — this should never happen")
        return _row_to_notification(row)

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Notification]:
        rows = (await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id})).fetchall()
        return [_row_to_notification(row) for row in rows]

    async def mark_read(
        self, db: AsyncSession, notification_id: str, user_id: str
    ) -> Notification | None:
        result = await db.execute(
            _MARK_READ_SQL, {"id": notification_id, "user_id": user_id}
        )
        row = result.fetchone()
        return _row_to_notification(row) if row else None
