"""Aggregate reporting for the admin panel."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.models.profile import Profile
from skillswap.models.rating import Rating
from skillswap.models.session import RequestStatus, Session, SessionRequest
from skillswap.models.skill import Skill
from skillswap.models.user import User


async def _count(db: AsyncSession, stmt) -> int:
    return (await db.execute(stmt)).scalar_one()


async def summary(db: AsyncSession) -> dict:
    by_status = {status: 0 for status in RequestStatus}
    rows = await db.execute(select(SessionRequest.status, func.count(SessionRequest.id)).group_by(SessionRequest.status))
    for status, count in rows.all():
        by_status[status] = count
    avg = (await db.execute(select(func.avg(Rating.score)))).scalar()
    return {
        "total_users": await _count(db, select(func.count(User.id))),
        "total_profiles": await _count(db, select(func.count(Profile.id))),
        "total_skills": await _count(db, select(func.count(Skill.id))),
        "total_sessions": await _count(db, select(func.count(Session.id))),
        "open_sessions": await _count(db, select(func.count(Session.id)).where(Session.is_open.is_(True))),
        "pending_requests": by_status[RequestStatus.PENDING],
        "accepted_requests": by_status[RequestStatus.ACCEPTED],
        "rejected_requests": by_status[RequestStatus.REJECTED],
        "total_ratings": await _count(db, select(func.count(Rating.id))),
        "average_rating": round(float(avg), 2) if avg is not None else 0.0,
    }
