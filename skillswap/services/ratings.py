"""Rating ledger: append-only scores between profiles, optionally scoped to a session."""
import logging

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import BadRequestError, ForbiddenError
from skillswap.models.notification import NotificationType
from skillswap.models.rating import Rating
from skillswap.models.session import RequestStatus, Session, SessionRequest
from skillswap.models.user import User
from skillswap.services.notifications import notify
from skillswap.services.profiles import get_profile
from skillswap.services.sessions import get_session, require_profile

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5


async def participated(db: AsyncSession, session: Session, profile_id: int) -> bool:
    """Host of the session, or holder of an accepted request on it."""
    if session.host_profile_id == profile_id:
        return True
    result = await db.execute(
        select(
            exists().where(
                SessionRequest.session_id == session.id,
                SessionRequest.requester_profile_id == profile_id,
                SessionRequest.status == RequestStatus.ACCEPTED,
            )
        )
    )
    return bool(result.scalar())


async def submit_rating(
    db: AsyncSession,
    user: User,
    target_profile_id: int,
    score: int,
    comment: str | None = None,
    session_id: int | None = None,
) -> Rating:
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise BadRequestError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}.")
    rater = await require_profile(db, user, "Current user must have a profile to submit ratings.")
    target = await get_profile(db, target_profile_id)
    session = None
    if session_id is not None:
        session = await get_session(db, session_id)
        if not await participated(db, session, rater.id):
            raise ForbiddenError("You did not participate in this session.")
        if not await participated(db, session, target.id):
            raise BadRequestError("Target profile did not participate in the session.")
    rating = Rating(
        rater_profile_id=rater.id,
        target_profile_id=target.id,
        session_id=session.id if session else None,
        score=score,
        comment=comment,
    )
    db.add(rating)
    await db.flush()
    await db.refresh(rating)
    logger.info("profile %s rated profile %s: %s", rater.id, target.id, score)

    content = f"{rater.public_name} rated you {score}/5"
    if session is not None:
        content += f" for '{session.title}'"
    content += "."
    if comment:
        content += f" Comment: {comment}"
    await notify(
        db,
        target.user_id,
        NotificationType.RATING,
        "New Rating",
        content,
        related_session_id=rating.session_id,
        related_profile_id=rater.id,
        related_rating_id=rating.id,
    )
    return rating


async def get_ratings_for_profile(db: AsyncSession, profile_id: int) -> list[Rating]:
    result = await db.execute(
        select(Rating)
        .where(Rating.target_profile_id == profile_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
    )
    return list(result.scalars().all())


async def get_average_rating(db: AsyncSession, profile_id: int) -> float:
    """Mean score received; 0.0 when the profile has no ratings."""
    result = await db.execute(select(func.avg(Rating.score)).where(Rating.target_profile_id == profile_id))
    avg = result.scalar()
    return float(avg) if avg is not None else 0.0
