"""Startup seeding: the skill catalog and the admin account."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.config import settings
from skillswap.errors import ValidationFailedError
from skillswap.models.skill import Skill
from skillswap.models.user import User
from skillswap.services.users import create_user, set_admin

logger = logging.getLogger(__name__)


async def seed_skills(db: AsyncSession, names: list[str]) -> int:
    """Insert catalog entries that do not exist yet. Returns how many were added."""
    existing = set((await db.execute(select(Skill.name))).scalars().all())
    added = 0
    for name in names:
        if name not in existing:
            db.add(Skill(name=name))
            existing.add(name)
            added += 1
    await db.flush()
    return added


async def seed_admin(db: AsyncSession) -> User | None:
    """Ensure the configured admin account exists and holds the Admin role.

    Outside development an admin is only created when ADMIN_PASSWORD is set.
    """
    result = await db.execute(select(User).where(User.email == settings.ADMIN_EMAIL.lower()))
    admin = result.scalar_one_or_none()
    if admin is None:
        password = settings.ADMIN_PASSWORD
        if not password:
            if settings.ENVIRONMENT != "development":
                logger.warning("Admin user not created: ADMIN_PASSWORD not set in %s.", settings.ENVIRONMENT)
                return None
            password = settings.DEV_ADMIN_PASSWORD
        try:
            admin = await create_user(
                db, settings.ADMIN_USERNAME, settings.ADMIN_EMAIL, password, display_name="Administrator"
            )
        except ValidationFailedError as e:
            logger.warning("Failed to create admin user: %s", "; ".join(e.errors))
            return None
    if not admin.is_admin:
        await set_admin(db, admin, True)
    return admin


async def seed_all(db: AsyncSession) -> None:
    added = await seed_skills(db, settings.seed_skill_names)
    if added:
        logger.info("seeded %d skills", added)
    await seed_admin(db)
