"""Session and join-request engine: hosting, joining, responding, editing and deleting sessions."""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import BadRequestError, ForbiddenError, NotFoundError
from skillswap.models.notification import Notification, NotificationType
from skillswap.models.profile import Profile
from skillswap.models.rating import Rating
from skillswap.models.session import RequestStatus, Session, SessionRequest
from skillswap.models.skill import Skill
from skillswap.models.user import User
from skillswap.services.notifications import notify
from skillswap.services.profiles import find_profile_for_user
from skillswap.services.state_machine import accept_request, reject_request

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"title", "description", "skill_id", "scheduled_at", "duration_minutes", "is_open"}


async def require_profile(db: AsyncSession, user: User, detail: str) -> Profile:
    profile = await find_profile_for_user(db, user.id)
    if profile is None:
        raise BadRequestError(detail)
    return profile


async def require_host(db: AsyncSession, session: Session, user: User) -> Profile:
    """Host-only guard. Ownership is by profile; admins get no override here."""
    profile = await find_profile_for_user(db, user.id)
    if profile is None or session.host_profile_id != profile.id:
        raise ForbiddenError("You can only manage sessions you created")
    return profile


async def _get_skill(db: AsyncSession, skill_id: int) -> Skill:
    skill = (await db.execute(select(Skill).where(Skill.id == skill_id))).scalar_one_or_none()
    if skill is None:
        raise NotFoundError("Skill not found")
    return skill


async def get_session(db: AsyncSession, session_id: int) -> Session:
    result = await db.execute(select(Session).where(Session.id == session_id))
    session = result.scalar_one_or_none()
    if not session:
        raise NotFoundError("Session not found")
    return session


async def list_sessions(db: AsyncSession) -> list[Session]:
    result = await db.execute(select(Session).order_by(Session.scheduled_at, Session.id))
    return list(result.scalars().all())


async def list_requests_for_session(db: AsyncSession, session_id: int) -> list[SessionRequest]:
    result = await db.execute(
        select(SessionRequest)
        .where(SessionRequest.session_id == session_id)
        .order_by(SessionRequest.created_at, SessionRequest.id)
    )
    return list(result.scalars().all())


async def create_session(
    db: AsyncSession,
    user: User,
    title: str,
    description: str | None,
    skill_id: int | None,
    scheduled_at: datetime | None,
    duration_minutes: int,
) -> Session:
    """Host a new session. It always starts open; profiles wanting its skill are notified."""
    host = await require_profile(db, user, "User must create a profile before creating sessions.")
    skill = await _get_skill(db, skill_id) if skill_id is not None else None
    session = Session(
        host_profile_id=host.id,
        title=title,
        description=description,
        skill_id=skill.id if skill else None,
        scheduled_at=scheduled_at or datetime.now(timezone.utc),
        duration_minutes=duration_minutes,
        is_open=True,
    )
    db.add(session)
    await db.flush()
    await db.refresh(session)
    logger.info("profile %s created session %s", host.id, session.id)
    if skill is not None:
        await _notify_interested_profiles(db, session, host, skill)
    return session


async def _notify_interested_profiles(db: AsyncSession, session: Session, host: Profile, skill: Skill) -> None:
    result = await db.execute(
        select(Profile.user_id)
        .where(Profile.skills_wanted.any(Skill.id == skill.id))
        .where(Profile.id != host.id)
    )
    for user_id in result.scalars().all():
        await notify(
            db,
            user_id,
            NotificationType.SESSION_CREATED,
            "New Session Available",
            f"{host.public_name} is hosting '{session.title}' on {skill.name}, a skill you want to learn.",
            related_session_id=session.id,
            related_profile_id=host.id,
        )


async def request_join(db: AsyncSession, session_id: int, user: User, message: str | None) -> SessionRequest:
    session = await get_session(db, session_id)
    if not session.is_open:
        raise BadRequestError("Session is not open for requests.")
    requester = await require_profile(db, user, "User must have a profile to request a session.")
    if session.host_profile_id == requester.id:
        raise BadRequestError("You cannot request to join your own session.")
    existing = await db.execute(
        select(SessionRequest.id).where(
            SessionRequest.session_id == session.id,
            SessionRequest.requester_profile_id == requester.id,
            SessionRequest.status.in_([RequestStatus.PENDING, RequestStatus.ACCEPTED]),
        )
    )
    if existing.first() is not None:
        raise BadRequestError("You already have an active request for this session.")
    request = SessionRequest(
        session_id=session.id,
        requester_profile_id=requester.id,
        message=message,
        status=RequestStatus.PENDING,
    )
    db.add(request)
    await db.flush()
    await db.refresh(request)
    content = f"{requester.public_name} wants to join your session '{session.title}'."
    if message:
        content += f" Message: {message}"
    await notify(
        db,
        session.host_profile.user_id,
        NotificationType.JOIN_REQUEST,
        "New Join Request",
        content,
        related_session_id=session.id,
        related_profile_id=requester.id,
    )
    return request


async def get_request(db: AsyncSession, request_id: int) -> SessionRequest:
    result = await db.execute(select(SessionRequest).where(SessionRequest.id == request_id))
    request = result.scalar_one_or_none()
    if not request:
        raise NotFoundError("Request not found")
    return request


async def respond_to_request(
    db: AsyncSession, request_id: int, user: User, accept: bool, message: str | None = None
) -> SessionRequest:
    """Host accepts or rejects a pending request; accepting closes the session."""
    request = await get_request(db, request_id)
    session = request.session
    host = await require_host(db, session, user)
    if accept:
        session, request = await accept_request(db, session, request)
        notification_type = NotificationType.REQUEST_ACCEPTED
        title = "Request Accepted"
        content = f"Your request to join '{session.title}' has been accepted."
    else:
        request = await reject_request(db, request)
        notification_type = NotificationType.REQUEST_REJECTED
        title = "Request Rejected"
        content = f"Your request to join '{session.title}' has been declined."
    if message:
        content += f" Message: {message}"
    await notify(
        db,
        request.requester_profile.user_id,
        notification_type,
        title,
        content,
        related_session_id=session.id,
        related_profile_id=host.id,
    )
    return request


async def update_session(db: AsyncSession, session_id: int, user: User, changes: dict[str, Any]) -> Session:
    """Partial update: only keys present in changes are applied."""
    session = await get_session(db, session_id)
    await require_host(db, session, user)
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise BadRequestError(f"Unknown fields: {', '.join(sorted(unknown))}")
    if changes.get("skill_id") is not None:
        await _get_skill(db, changes["skill_id"])
    if "title" in changes and not (changes["title"] or "").strip():
        raise BadRequestError("Title is required.")
    if "scheduled_at" in changes and changes["scheduled_at"] is None:
        raise BadRequestError("Scheduled time is required.")
    if "duration_minutes" in changes and changes["duration_minutes"] is None:
        raise BadRequestError("Duration is required.")
    if "is_open" in changes and changes["is_open"] is None:
        raise BadRequestError("isOpen must be true or false.")
    for name, value in changes.items():
        setattr(session, name, value)
    await db.flush()
    await db.refresh(session)
    return session


async def delete_session(db: AsyncSession, session_id: int, user: User) -> None:
    """Delete a session and everything that references it.

    Runs inside the request transaction, so a failure at any step rolls back the whole cascade.
    """
    session = await get_session(db, session_id)
    await require_host(db, session, user)
    await db.execute(delete(Notification).where(Notification.related_session_id == session_id))
    await db.execute(delete(Rating).where(Rating.session_id == session_id))
    await db.execute(delete(SessionRequest).where(SessionRequest.session_id == session_id))
    await db.execute(delete(Session).where(Session.id == session_id))
    await db.flush()
    logger.info("deleted session %s and its requests, ratings and notifications", session_id)


async def get_active_sessions_for_profile(db: AsyncSession, profile_id: int) -> list[Session]:
    result = await db.execute(
        select(Session)
        .where(Session.host_profile_id == profile_id, Session.is_open.is_(True))
        .order_by(Session.scheduled_at, Session.id)
    )
    return list(result.scalars().all())


async def get_my_participations(db: AsyncSession, user: User) -> list[SessionRequest]:
    """The caller's pending and accepted requests; empty when the caller has no profile."""
    profile = await find_profile_for_user(db, user.id)
    if profile is None:
        return []
    result = await db.execute(
        select(SessionRequest)
        .where(
            SessionRequest.requester_profile_id == profile.id,
            SessionRequest.status.in_([RequestStatus.ACCEPTED, RequestStatus.PENDING]),
        )
        .order_by(SessionRequest.created_at.desc(), SessionRequest.id.desc())
    )
    return list(result.scalars().all())


async def get_requests_for_host(db: AsyncSession, user: User) -> list[SessionRequest]:
    """Every request on every session the caller hosts, newest first."""
    profile = await find_profile_for_user(db, user.id)
    if profile is None:
        return []
    hosted = select(Session.id).where(Session.host_profile_id == profile.id)
    result = await db.execute(
        select(SessionRequest)
        .where(SessionRequest.session_id.in_(hosted))
        .order_by(SessionRequest.created_at.desc(), SessionRequest.id.desc())
    )
    return list(result.scalars().all())
