"""Pydantic schemas for skills and profiles."""
from pydantic import Field

from skillswap.schemas.common import CamelModel


class SkillResponse(CamelModel):
    id: int
    name: str


class ProfileRequest(CamelModel):
    """Body for POST /profiles (upsert) and PUT /profiles/{id}. Skill id lists replace the current sets."""
    display_name: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    location: str | None = Field(default=None, max_length=255)
    availability: str | None = Field(default=None, max_length=255)
    contact: str | None = Field(default=None, max_length=255)
    skills_offered_ids: list[int] | None = None
    skills_wanted_ids: list[int] | None = None


class ProfileResponse(CamelModel):
    id: int
    user_id: int
    user_name: str | None = None
    display_name: str | None = None
    bio: str | None = None
    location: str | None = None
    availability: str | None = None
    contact: str | None = None
    skills_offered: list[SkillResponse] = []
    skills_wanted: list[SkillResponse] = []
