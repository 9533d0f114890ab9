"""Pydantic schemas for notifications."""
from datetime import datetime

from skillswap.models.notification import NotificationType
from skillswap.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: int
    type: NotificationType
    title: str
    content: str | None = None
    related_session_id: int | None = None
    related_profile_id: int | None = None
    related_rating_id: int | None = None
    created_at: datetime | None = None
    is_read: bool


class UnreadCountResponse(CamelModel):
    unread_count: int


class MarkReadResponse(CamelModel):
    success: bool
