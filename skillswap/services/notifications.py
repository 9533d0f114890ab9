"""Notification fan-out and the recipient-facing inbox operations."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import NotFoundError
from skillswap.models.notification import Notification, NotificationType
from skillswap.services.ws_updates import updates_hub

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


async def notify(
    db: AsyncSession,
    user_id: int,
    type: NotificationType,
    title: str,
    content: str | None = None,
    related_session_id: int | None = None,
    related_profile_id: int | None = None,
    related_rating_id: int | None = None,
) -> Notification:
    """Persist an unread notification for user_id; their open sockets are hinted after commit.

    Only services call this; clients never create notifications directly.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        content=content,
        related_session_id=related_session_id,
        related_profile_id=related_profile_id,
        related_rating_id=related_rating_id,
        is_read=False,
    )
    db.add(notification)
    await db.flush()
    logger.info("notification %s queued for user %s", type.value, user_id)
    # readers must be able to see the row by the time the hint arrives
    updates_hub.defer(db, user_id)
    return notification


async def list_notifications(
    db: AsyncSession, user_id: int, page_number: int = 1, page_size: int = DEFAULT_PAGE_SIZE
) -> list[Notification]:
    page_number = max(page_number, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page_number - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all())


async def unread_count(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(Notification.user_id == user_id, Notification.is_read.is_(False))
    )
    return result.scalar_one()


async def _get_owned(db: AsyncSession, notification_id: int, user_id: int) -> Notification:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


async def mark_read(db: AsyncSession, notification_id: int, user_id: int) -> Notification:
    notification = await _get_owned(db, notification_id, user_id)
    notification.is_read = True
    await db.flush()
    return notification


async def delete_notification(db: AsyncSession, notification_id: int, user_id: int) -> None:
    notification = await _get_owned(db, notification_id, user_id)
    await db.delete(notification)
    await db.flush()
