"""Profile model: a user's public skill-exchange identity (at most one per user)."""
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillswap.models.base import Base
from skillswap.models.skill import Skill, profile_skills_offered, profile_skills_wanted
from skillswap.models.user import User


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    availability: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact: Mapped[str | None] = mapped_column(String(255), nullable=True)

    user: Mapped[User] = relationship(lazy="joined")
    skills_offered: Mapped[list[Skill]] = relationship(secondary=profile_skills_offered, lazy="selectin")
    skills_wanted: Mapped[list[Skill]] = relationship(secondary=profile_skills_wanted, lazy="selectin")

    @property
    def public_name(self) -> str | None:
        """Display name, falling back to the owner's username."""
        if self.display_name:
            return self.display_name
        return self.user.username if self.user else None
