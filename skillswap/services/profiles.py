"""Profile directory: one public profile per user, with offered/wanted skill sets."""
import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import ForbiddenError, NotFoundError
from skillswap.models.profile import Profile
from skillswap.models.skill import Skill
from skillswap.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class ProfileFields:
    display_name: str | None = None
    bio: str | None = None
    location: str | None = None
    availability: str | None = None
    contact: str | None = None
    skills_offered_ids: list[int] = field(default_factory=list)
    skills_wanted_ids: list[int] = field(default_factory=list)


async def _skills_by_ids(db: AsyncSession, ids: list[int]) -> list[Skill]:
    """Look up skills; ids that match nothing are dropped silently."""
    if not ids:
        return []
    result = await db.execute(select(Skill).where(Skill.id.in_(set(ids))).order_by(Skill.name))
    return list(result.scalars().all())


async def _apply(db: AsyncSession, profile: Profile, fields: ProfileFields) -> None:
    """Overwrite every field and replace (not merge) both skill sets."""
    profile.display_name = fields.display_name
    profile.bio = fields.bio
    profile.location = fields.location
    profile.availability = fields.availability
    profile.contact = fields.contact
    profile.skills_offered = await _skills_by_ids(db, fields.skills_offered_ids)
    profile.skills_wanted = await _skills_by_ids(db, fields.skills_wanted_ids)


async def find_profile_for_user(db: AsyncSession, user_id: int) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_profile(db: AsyncSession, profile_id: int) -> Profile:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


async def list_profiles(db: AsyncSession) -> list[Profile]:
    result = await db.execute(select(Profile).order_by(Profile.id))
    return list(result.scalars().all())


async def get_my_profile(db: AsyncSession, user: User) -> Profile:
    """NotFound means the caller has not created a profile yet."""
    profile = await find_profile_for_user(db, user.id)
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


async def upsert_my_profile(db: AsyncSession, user: User, fields: ProfileFields) -> Profile:
    """Create the caller's profile on first call; later calls update that same row."""
    profile = await find_profile_for_user(db, user.id)
    created = profile is None
    if created:
        profile = Profile(user_id=user.id)
        db.add(profile)
    await _apply(db, profile, fields)
    await db.flush()
    await db.refresh(profile)
    logger.info("%s profile %s for user %s", "created" if created else "updated", profile.id, user.id)
    return profile


def _ensure_can_edit(profile: Profile, user: User) -> None:
    if profile.user_id != user.id and not user.is_admin:
        raise ForbiddenError("You can only change your own profile")


async def update_profile(db: AsyncSession, profile_id: int, user: User, fields: ProfileFields) -> Profile:
    profile = await get_profile(db, profile_id)
    _ensure_can_edit(profile, user)
    await _apply(db, profile, fields)
    await db.flush()
    await db.refresh(profile)
    return profile


async def delete_profile(db: AsyncSession, profile_id: int, user: User) -> None:
    profile = await get_profile(db, profile_id)
    _ensure_can_edit(profile, user)
    await db.delete(profile)
    await db.flush()
    logger.info("deleted profile %s (by user %s)", profile_id, user.id)
