"""Host-only session management: attendee list, attendance verification and kicking."""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import BadRequestError, NotFoundError
from skillswap.models.notification import NotificationType
from skillswap.models.session import RequestStatus, Session, SessionRequest
from skillswap.models.user import User
from skillswap.services.notifications import notify
from skillswap.services.sessions import get_session, require_host
from skillswap.services.state_machine import revoke_acceptance

logger = logging.getLogger(__name__)


async def list_attendees(db: AsyncSession, session_id: int, user: User) -> tuple[Session, list[SessionRequest]]:
    """Accepted requests of a session the caller hosts."""
    session = await get_session(db, session_id)
    await require_host(db, session, user)
    result = await db.execute(
        select(SessionRequest)
        .where(SessionRequest.session_id == session_id, SessionRequest.status == RequestStatus.ACCEPTED)
        .order_by(SessionRequest.created_at, SessionRequest.id)
    )
    return session, list(result.scalars().all())


async def _get_attendee(db: AsyncSession, session_id: int, request_id: int, user: User) -> tuple[Session, SessionRequest]:
    session = await get_session(db, session_id)
    await require_host(db, session, user)
    result = await db.execute(
        select(SessionRequest).where(SessionRequest.id == request_id, SessionRequest.session_id == session_id)
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Attendee not found in this session")
    return session, request


async def set_attendance(
    db: AsyncSession, session_id: int, request_id: int, user: User, attended: bool
) -> SessionRequest:
    """Verify (attended=True) or unverify an accepted attendee."""
    _, request = await _get_attendee(db, session_id, request_id, user)
    if request.status != RequestStatus.ACCEPTED:
        raise BadRequestError("Only accepted attendees can be verified")
    request.has_attended = attended
    request.verified_at = datetime.now(timezone.utc) if attended else None
    await db.flush()
    logger.info("request %s attendance %s", request.id, "verified" if attended else "cleared")
    return request


async def kick_attendee(db: AsyncSession, session_id: int, request_id: int, user: User) -> SessionRequest:
    """Revoke an accepted request (status -> Rejected, row kept) and tell the attendee."""
    session, request = await _get_attendee(db, session_id, request_id, user)
    request = await revoke_acceptance(db, request)
    host = session.host_profile
    await notify(
        db,
        request.requester_profile.user_id,
        NotificationType.KICKED_FROM_SESSION,
        "Removed from Session",
        f"{host.public_name} has removed you from the session '{session.title}'",
        related_session_id=session.id,
        related_profile_id=host.id,
    )
    return request
