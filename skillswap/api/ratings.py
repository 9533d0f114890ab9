"""Rating routes: submit, list received, average."""
from fastapi import APIRouter

from skillswap.deps import CurrentUser, DbSession
from skillswap.models.rating import Rating
from skillswap.schemas.rating import AverageRatingResponse, RatingCreate, RatingResponse
from skillswap.services import ratings as ratings_service

router = APIRouter(prefix="/ratings", tags=["ratings"])


def _rating_to_response(rating: Rating) -> RatingResponse:
    return RatingResponse(
        id=rating.id,
        session_id=rating.session_id,
        rater_profile_id=rating.rater_profile_id,
        rater_display_name=rating.rater_profile.public_name if rating.rater_profile else None,
        target_profile_id=rating.target_profile_id,
        score=rating.score,
        comment=rating.comment,
        created_at=rating.created_at,
    )


@router.post("", response_model=RatingResponse)
async def submit_rating(body: RatingCreate, db: DbSession, current_user: CurrentUser):
    """Rate another profile (1-5). With sessionId both sides must have taken part in that session."""
    rating = await ratings_service.submit_rating(
        db,
        current_user,
        target_profile_id=body.target_profile_id,
        score=body.score,
        comment=body.comment,
        session_id=body.session_id,
    )
    return _rating_to_response(rating)


@router.get("/profile/{profile_id}", response_model=list[RatingResponse])
async def ratings_for_profile(profile_id: int, db: DbSession):
    return [_rating_to_response(r) for r in await ratings_service.get_ratings_for_profile(db, profile_id)]


@router.get("/profile/{profile_id}/average", response_model=AverageRatingResponse)
async def average_for_profile(profile_id: int, db: DbSession):
    return AverageRatingResponse(average=await ratings_service.get_average_rating(db, profile_id))
