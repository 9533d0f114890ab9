"""Notification inbox of the current user (polled by the client)."""
from fastapi import APIRouter, Query, status

from skillswap.deps import CurrentUser, DbSession
from skillswap.schemas.notification import MarkReadResponse, NotificationResponse, UnreadCountResponse
from skillswap.services import notifications as notifications_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    db: DbSession,
    current_user: CurrentUser,
    page_size: int = Query(default=notifications_service.DEFAULT_PAGE_SIZE, alias="pageSize", ge=1),
    page_number: int = Query(default=1, alias="pageNumber", ge=1),
):
    """Newest first, one page at a time."""
    return await notifications_service.list_notifications(db, current_user.id, page_number, page_size)


@router.get("/unread", response_model=UnreadCountResponse)
async def unread(db: DbSession, current_user: CurrentUser):
    return UnreadCountResponse(unread_count=await notifications_service.unread_count(db, current_user.id))


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_read(notification_id: int, db: DbSession, current_user: CurrentUser):
    await notifications_service.mark_read(db, notification_id, current_user.id)
    return MarkReadResponse(success=True)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: int, db: DbSession, current_user: CurrentUser):
    await notifications_service.delete_notification(db, notification_id, current_user.id)
    return None
