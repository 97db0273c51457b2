"""Pydantic schemas for wl_notification API."""

from pydantic import BaseModel

from src.wl_common.datetime_utils import isoformat_or_empty
from src.wl_notification.domain.models import Notification


class NotificationItem(BaseModel):
    id: str
    title: str
    message: str
    is_read: bool
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationItem":
        return cls(
            id=notification.id,
            title=notification.title,
            message=notification.message,
            is_read=notification.is_read,
            created_at=isoformat_or_empty(notification.created_at),
        )


class NotificationListResponse(BaseModel):
    items: list[NotificationItem]
    unread_count: int
