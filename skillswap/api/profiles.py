"""Profile routes: public directory plus owner (or admin) edits."""
from fastapi import APIRouter, status

from skillswap.deps import CurrentUser, DbSession
from skillswap.models.profile import Profile
from skillswap.schemas.profile import ProfileRequest, ProfileResponse, SkillResponse
from skillswap.services import profiles as profiles_service
from skillswap.services.profiles import ProfileFields

router = APIRouter(prefix="/profiles", tags=["profiles"])


def profile_to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        user_name=profile.user.username if profile.user else None,
        display_name=profile.display_name,
        bio=profile.bio,
        location=profile.location,
        availability=profile.availability,
        contact=profile.contact,
        skills_offered=[SkillResponse(id=s.id, name=s.name) for s in profile.skills_offered],
        skills_wanted=[SkillResponse(id=s.id, name=s.name) for s in profile.skills_wanted],
    )


def _fields(body: ProfileRequest) -> ProfileFields:
    return ProfileFields(
        display_name=body.display_name,
        bio=body.bio,
        location=body.location,
        availability=body.availability,
        contact=body.contact,
        skills_offered_ids=body.skills_offered_ids or [],
        skills_wanted_ids=body.skills_wanted_ids or [],
    )


@router.get("", response_model=list[ProfileResponse])
async def list_profiles(db: DbSession):
    return [profile_to_response(p) for p in await profiles_service.list_profiles(db)]


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(db: DbSession, current_user: CurrentUser):
    """404 until the caller creates a profile (the client then shows the create form)."""
    return profile_to_response(await profiles_service.get_my_profile(db, current_user))


@router.post("", response_model=ProfileResponse)
async def upsert_my_profile(body: ProfileRequest, db: DbSession, current_user: CurrentUser):
    """Create the caller's profile, or update it if it already exists."""
    profile = await profiles_service.upsert_my_profile(db, current_user, _fields(body))
    return profile_to_response(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(profile_id: int, db: DbSession):
    return profile_to_response(await profiles_service.get_profile(db, profile_id))


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(profile_id: int, body: ProfileRequest, db: DbSession, current_user: CurrentUser):
    """Owner or admin only."""
    profile = await profiles_service.update_profile(db, profile_id, current_user, _fields(body))
    return profile_to_response(profile)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(profile_id: int, db: DbSession, current_user: CurrentUser):
    """Owner or admin only."""
    await profiles_service.delete_profile(db, profile_id, current_user)
    return None
