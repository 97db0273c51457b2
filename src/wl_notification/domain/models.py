"""Domain models for wl_notification."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    id: str
    user_id: str
    title: str
    message: str
    is_read: bool = False
    created_at: datetime | None = None
