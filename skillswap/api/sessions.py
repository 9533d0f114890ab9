"""Session routes: list, create, join requests, respond, participations, edit, delete."""
from fastapi import APIRouter, status

from skillswap.deps import CurrentUser, DbSession
from skillswap.models.session import Session, SessionRequest
from skillswap.schemas.profile import SkillResponse
from skillswap.schemas.session import (
    HostRequestResponse,
    JoinRequestCreate,
    ParticipationResponse,
    RespondRequest,
    SessionCreate,
    SessionDetailResponse,
    SessionRequestResponse,
    SessionRequestSummary,
    SessionResponse,
    SessionUpdate,
)
from skillswap.services import sessions as sessions_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _skill(session: Session) -> SkillResponse | None:
    return SkillResponse(id=session.skill.id, name=session.skill.name) if session.skill else None


def session_to_response(session: Session) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        title=session.title,
        description=session.description,
        skill_id=session.skill_id,
        skill=_skill(session),
        host_profile_id=session.host_profile_id,
        host_display_name=session.host_profile.public_name if session.host_profile else None,
        scheduled_at=session.scheduled_at,
        duration_minutes=session.duration_minutes,
        is_open=session.is_open,
    )


def request_to_response(request: SessionRequest) -> SessionRequestResponse:
    return SessionRequestResponse(
        id=request.id,
        session_id=request.session_id,
        requester_profile_id=request.requester_profile_id,
        message=request.message,
        status=request.status,
        has_attended=request.has_attended,
        verified_at=request.verified_at,
        created_at=request.created_at,
    )


@router.get("", response_model=list[SessionResponse])
async def list_sessions(db: DbSession):
    return [session_to_response(s) for s in await sessions_service.list_sessions(db)]


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(body: SessionCreate, db: DbSession, current_user: CurrentUser):
    """Host a session (caller needs a profile). Always created open."""
    session = await sessions_service.create_session(
        db,
        current_user,
        title=body.title,
        description=body.description,
        skill_id=body.skill_id,
        scheduled_at=body.scheduled_at,
        duration_minutes=body.duration_minutes,
    )
    return session_to_response(session)


@router.get("/my-participations", response_model=list[ParticipationResponse])
async def my_participations(db: DbSession, current_user: CurrentUser):
    """Sessions the caller asked to join that are still pending or were accepted."""
    requests = await sessions_service.get_my_participations(db, current_user)
    return [
        ParticipationResponse(
            request_id=r.id,
            session_id=r.session_id,
            session_title=r.session.title,
            session_description=r.session.description,
            host_profile_id=r.session.host_profile_id,
            host_display_name=r.session.host_profile.public_name,
            skill=_skill(r.session),
            scheduled_at=r.session.scheduled_at,
            duration_minutes=r.session.duration_minutes,
            status=r.status,
            has_attended=r.has_attended,
        )
        for r in requests
    ]


@router.get("/requests/pending", response_model=list[HostRequestResponse])
async def requests_for_host(db: DbSession, current_user: CurrentUser):
    """All requests on sessions the caller hosts, newest first."""
    requests = await sessions_service.get_requests_for_host(db, current_user)
    return [
        HostRequestResponse(
            id=r.id,
            session_id=r.session_id,
            session_title=r.session.title,
            requester_profile_id=r.requester_profile_id,
            requester_display_name=r.requester_profile.public_name,
            message=r.message,
            status=r.status,
            created_at=r.created_at,
        )
        for r in requests
    ]


@router.post("/requests/{request_id}/respond", response_model=SessionRequestResponse)
async def respond_to_request(request_id: int, body: RespondRequest, db: DbSession, current_user: CurrentUser):
    """Host accepts or rejects a pending request. Accepting closes the session to new requests."""
    request = await sessions_service.respond_to_request(db, request_id, current_user, body.accept, body.message)
    return request_to_response(request)


@router.get("/profile/{profile_id}/active", response_model=list[SessionResponse])
async def active_sessions_for_profile(profile_id: int, db: DbSession):
    """Open sessions hosted by the given profile."""
    return [session_to_response(s) for s in await sessions_service.get_active_sessions_for_profile(db, profile_id)]


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(session_id: int, db: DbSession):
    session = await sessions_service.get_session(db, session_id)
    requests = await sessions_service.list_requests_for_session(db, session_id)
    base = session_to_response(session)
    return SessionDetailResponse(
        **base.model_dump(),
        requests=[
            SessionRequestSummary(
                id=r.id,
                requester_profile_id=r.requester_profile_id,
                requester_display_name=r.requester_profile.public_name,
                message=r.message,
                status=r.status,
                created_at=r.created_at,
            )
            for r in requests
        ],
    )


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(session_id: int, body: SessionUpdate, db: DbSession, current_user: CurrentUser):
    """Host only. Fields missing from the body are left untouched."""
    changes = body.model_dump(exclude_unset=True)
    session = await sessions_service.update_session(db, session_id, current_user, changes)
    return session_to_response(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, db: DbSession, current_user: CurrentUser):
    """Host only. Removes the session with its requests, ratings and notifications."""
    await sessions_service.delete_session(db, session_id, current_user)
    return None


@router.post("/{session_id}/requests", response_model=SessionRequestResponse)
async def request_join(
    session_id: int, db: DbSession, current_user: CurrentUser, body: JoinRequestCreate | None = None
):
    """Ask to join an open session. The host is notified."""
    message = body.message if body else None
    request = await sessions_service.request_join(db, session_id, current_user, message)
    return request_to_response(request)
