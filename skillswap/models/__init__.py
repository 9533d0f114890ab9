from skillswap.models.base import Base
from skillswap.models.notification import Notification, NotificationType
from skillswap.models.profile import Profile
from skillswap.models.rating import Rating
from skillswap.models.session import RequestStatus, Session, SessionRequest
from skillswap.models.skill import Skill, profile_skills_offered, profile_skills_wanted
from skillswap.models.user import ADMIN_ROLE, User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
    "ADMIN_ROLE",
    "Profile",
    "Skill",
    "profile_skills_offered",
    "profile_skills_wanted",
    "Session",
    "SessionRequest",
    "RequestStatus",
    "Rating",
    "Notification",
    "NotificationType",
]
