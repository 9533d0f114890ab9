"""User accounts: registration, credential checks, role changes and token issuing."""
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.auth.jwt import create_user_token
from skillswap.auth.password import hash_password, password_policy_errors, verify_password
from skillswap.errors import NotFoundError, ValidationFailedError
from skillswap.models.profile import Profile
from skillswap.models.user import ADMIN_ROLE, User, UserRole

logger = logging.getLogger(__name__)


async def create_user(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
    display_name: str | None = None,
) -> User:
    """Create a user or raise ValidationFailedError listing every problem found."""
    username = username.strip()
    email = email.strip().lower()
    errors = []
    if not username:
        errors.append("Username is required.")
    existing = await db.execute(select(User).where(or_(User.username == username, User.email == email)))
    for other in existing.scalars().all():
        if other.username == username:
            errors.append(f"Username '{username}' is already taken.")
        if other.email == email:
            errors.append(f"Email '{email}' is already taken.")
    errors.extend(password_policy_errors(password))
    if errors:
        raise ValidationFailedError(errors)
    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        display_name=(display_name or "").strip() or None,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info("registered user %s (id=%s)", user.username, user.id)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username.strip()))
    user = result.scalar_one_or_none()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


async def issue_token(db: AsyncSession, user: User) -> str:
    profile_id = (await db.execute(select(Profile.id).where(Profile.user_id == user.id))).scalar_one_or_none()
    return create_user_token(user.id, user.username, user.role_names, profile_id)


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Hard delete; the database cascades the user's profile, sessions, requests, ratings and notifications."""
    user = await get_user(db, user_id)
    await db.delete(user)
    await db.flush()
    logger.info("deleted user %s (id=%s)", user.username, user_id)


async def set_admin(db: AsyncSession, user: User, is_admin: bool) -> User:
    """Grant or revoke the Admin role; a no-op when the user is already in the requested state."""
    if is_admin and not user.is_admin:
        user.roles.append(UserRole(role=ADMIN_ROLE))
    elif not is_admin and user.is_admin:
        user.roles = [r for r in user.roles if r.role != ADMIN_ROLE]
    await db.flush()
    return user
