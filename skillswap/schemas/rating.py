"""Pydantic schemas for ratings."""
from datetime import datetime

from pydantic import Field

from skillswap.schemas.common import CamelModel


class RatingCreate(CamelModel):
    """Body for POST /ratings. Omit sessionId for a general user-to-user rating."""
    target_profile_id: int
    score: int = Field(..., ge=1, le=5)
    comment: str | None = None
    session_id: int | None = None


class RatingResponse(CamelModel):
    id: int
    session_id: int | None = None
    rater_profile_id: int
    rater_display_name: str | None = None
    target_profile_id: int
    score: int
    comment: str | None = None
    created_at: datetime | None = None


class AverageRatingResponse(CamelModel):
    average: float
