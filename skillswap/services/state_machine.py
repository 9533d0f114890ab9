"""Join-request state machine and the coupled session open/closed flag."""
import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import BadRequestError
from skillswap.models.session import RequestStatus, Session, SessionRequest

logger = logging.getLogger(__name__)

# Allowed transitions: from_status -> {to_status, ...}
# Accepted -> Rejected is only reachable through kick_attendee.
ALLOWED: dict[RequestStatus, set[RequestStatus]] = {
    RequestStatus.PENDING: {RequestStatus.ACCEPTED, RequestStatus.REJECTED},
    RequestStatus.ACCEPTED: {RequestStatus.REJECTED},
    RequestStatus.REJECTED: set(),
}


def can_transition(current: RequestStatus, to_status: RequestStatus) -> bool:
    return to_status in ALLOWED.get(current, set())


async def _transition(
    db: AsyncSession,
    request: SessionRequest,
    expected: RequestStatus,
    to_status: RequestStatus,
    error: str,
) -> SessionRequest:
    """Move request from expected to to_status with a conditional UPDATE.

    The WHERE on the current status makes concurrent responders lose cleanly
    instead of both succeeding on a stale read.
    """
    if request.status != expected or not can_transition(expected, to_status):
        raise BadRequestError(error)
    result = await db.execute(
        update(SessionRequest)
        .where(SessionRequest.id == request.id, SessionRequest.status == expected)
        .values(status=to_status)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise BadRequestError(error)
    await db.refresh(request)
    logger.info("request %s: %s -> %s", request.id, expected.value, to_status.value)
    return request


async def accept_request(
    db: AsyncSession, session: Session, request: SessionRequest
) -> tuple[Session, SessionRequest]:
    """Accept a pending request and close its session to further requests, in one transaction."""
    request = await _transition(
        db, request, RequestStatus.PENDING, RequestStatus.ACCEPTED, "Request has already been responded to."
    )
    await db.execute(
        update(Session)
        .where(Session.id == session.id)
        .values(is_open=False)
        .execution_options(synchronize_session=False)
    )
    await db.refresh(session)
    return session, request


async def reject_request(db: AsyncSession, request: SessionRequest) -> SessionRequest:
    return await _transition(
        db, request, RequestStatus.PENDING, RequestStatus.REJECTED, "Request has already been responded to."
    )


async def revoke_acceptance(db: AsyncSession, request: SessionRequest) -> SessionRequest:
    """Accepted -> Rejected (kick). The row is kept as history."""
    return await _transition(
        db, request, RequestStatus.ACCEPTED, RequestStatus.REJECTED, "Only accepted attendees can be kicked"
    )
