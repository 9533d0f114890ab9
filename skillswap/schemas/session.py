"""Pydantic schemas for sessions, join requests and host-side management."""
from datetime import datetime

from pydantic import Field

from skillswap.models.session import RequestStatus
from skillswap.schemas.common import CamelModel
from skillswap.schemas.profile import SkillResponse


class SessionCreate(CamelModel):
    """Body for POST /sessions. scheduledAt defaults to now when omitted."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    skill_id: int | None = None
    scheduled_at: datetime | None = None
    duration_minutes: int = Field(..., ge=1, le=600)


class SessionUpdate(CamelModel):
    """Body for PUT /sessions/{id}. Only the fields present in the body are changed."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    skill_id: int | None = None
    scheduled_at: datetime | None = None
    duration_minutes: int | None = Field(default=None, ge=1, le=600)
    is_open: bool | None = None


class SessionResponse(CamelModel):
    id: int
    title: str
    description: str | None = None
    skill_id: int | None = None
    skill: SkillResponse | None = None
    host_profile_id: int
    host_display_name: str | None = None
    scheduled_at: datetime
    duration_minutes: int
    is_open: bool


class SessionRequestSummary(CamelModel):
    id: int
    requester_profile_id: int
    requester_display_name: str | None = None
    message: str | None = None
    status: RequestStatus
    created_at: datetime | None = None


class SessionDetailResponse(SessionResponse):
    requests: list[SessionRequestSummary] = []


class JoinRequestCreate(CamelModel):
    message: str | None = None


class RespondRequest(CamelModel):
    accept: bool
    message: str | None = None


class SessionRequestResponse(CamelModel):
    id: int
    session_id: int
    requester_profile_id: int
    message: str | None = None
    status: RequestStatus
    has_attended: bool = False
    verified_at: datetime | None = None
    created_at: datetime | None = None


class HostRequestResponse(CamelModel):
    """A request on one of the caller's hosted sessions (GET /sessions/requests/pending)."""
    id: int
    session_id: int
    session_title: str
    requester_profile_id: int
    requester_display_name: str | None = None
    message: str | None = None
    status: RequestStatus
    created_at: datetime | None = None


class ParticipationResponse(CamelModel):
    request_id: int
    session_id: int
    session_title: str
    session_description: str | None = None
    host_profile_id: int
    host_display_name: str | None = None
    skill: SkillResponse | None = None
    scheduled_at: datetime
    duration_minutes: int
    status: RequestStatus
    has_attended: bool = False


class AttendeeResponse(CamelModel):
    id: int
    requester_profile_id: int
    attendee_display_name: str
    attendee_email: str | None = None
    attendee_user_id: int | None = None
    has_attended: bool
    verified_at: datetime | None = None
    created_at: datetime | None = None


class SessionManagementResponse(CamelModel):
    id: int
    title: str
    description: str | None = None
    skill: SkillResponse | None = None
    scheduled_at: datetime
    duration_minutes: int
    is_open: bool
    attendees: list[AttendeeResponse]
    total_attendees: int
    verified_attendees: int


class AttendanceResponse(CamelModel):
    id: int
    has_attended: bool
    verified_at: datetime | None = None


class KickResponse(CamelModel):
    message: str
    id: int
    status: RequestStatus
