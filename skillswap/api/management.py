"""Host-only management of a session's attendees."""
from fastapi import APIRouter

from skillswap.api.sessions import _skill
from skillswap.deps import CurrentUser, DbSession
from skillswap.models.session import SessionRequest
from skillswap.schemas.session import AttendanceResponse, AttendeeResponse, KickResponse, SessionManagementResponse
from skillswap.services import management as management_service

router = APIRouter(prefix="/sessions/{session_id}/management", tags=["session-management"])


def _attendee(request: SessionRequest) -> AttendeeResponse:
    profile = request.requester_profile
    return AttendeeResponse(
        id=request.id,
        requester_profile_id=request.requester_profile_id,
        attendee_display_name=(profile.public_name if profile else None) or "Unknown",
        attendee_email=profile.user.email if profile and profile.user else None,
        attendee_user_id=profile.user_id if profile else None,
        has_attended=request.has_attended,
        verified_at=request.verified_at,
        created_at=request.created_at,
    )


@router.get("", response_model=SessionManagementResponse)
async def get_management(session_id: int, db: DbSession, current_user: CurrentUser):
    session, accepted = await management_service.list_attendees(db, session_id, current_user)
    return SessionManagementResponse(
        id=session.id,
        title=session.title,
        description=session.description,
        skill=_skill(session),
        scheduled_at=session.scheduled_at,
        duration_minutes=session.duration_minutes,
        is_open=session.is_open,
        attendees=[_attendee(r) for r in accepted],
        total_attendees=len(accepted),
        verified_attendees=sum(1 for r in accepted if r.has_attended),
    )


@router.get("/attendees", response_model=list[AttendeeResponse])
async def list_attendees(session_id: int, db: DbSession, current_user: CurrentUser):
    _, accepted = await management_service.list_attendees(db, session_id, current_user)
    return [_attendee(r) for r in accepted]


@router.put("/attendees/{request_id}/verify", response_model=AttendanceResponse)
async def verify_attendance(session_id: int, request_id: int, db: DbSession, current_user: CurrentUser):
    request = await management_service.set_attendance(db, session_id, request_id, current_user, True)
    return AttendanceResponse(id=request.id, has_attended=request.has_attended, verified_at=request.verified_at)


@router.put("/attendees/{request_id}/unverify", response_model=AttendanceResponse)
async def unverify_attendance(session_id: int, request_id: int, db: DbSession, current_user: CurrentUser):
    request = await management_service.set_attendance(db, session_id, request_id, current_user, False)
    return AttendanceResponse(id=request.id, has_attended=request.has_attended, verified_at=request.verified_at)


@router.delete("/attendees/{request_id}", response_model=KickResponse)
async def kick_attendee(session_id: int, request_id: int, db: DbSession, current_user: CurrentUser):
    """Remove an accepted attendee. The request is kept with status Rejected."""
    request = await management_service.kick_attendee(db, session_id, request_id, current_user)
    return KickResponse(message="Attendee removed from session", id=request.id, status=request.status)
