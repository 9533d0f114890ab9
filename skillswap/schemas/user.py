"""Pydantic schemas for auth and admin user management."""
from pydantic import EmailStr, Field

from skillswap.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Request body for POST /auth/register and POST /admin/users. Password rules are checked by the service."""
    user_name: str = Field(..., min_length=1, max_length=256)
    email: EmailStr
    password: str
    display_name: str | None = Field(default=None, max_length=255)


class RegisterResponse(CamelModel):
    user_name: str
    email: str


class LoginRequest(CamelModel):
    user_name: str
    password: str


class LoginResponse(CamelModel):
    token: str
    roles: list[str]
    user_name: str


class UserResponse(CamelModel):
    """User in API responses (no password)."""
    id: int
    user_name: str
    email: str
    display_name: str | None = None
    roles: list[str] = []


class ToggleRoleRequest(CamelModel):
    is_admin: bool


class ToggleRoleResponse(CamelModel):
    id: int
    user_name: str
    is_admin: bool


class AdminSummary(CamelModel):
    total_users: int
    total_profiles: int
    total_skills: int
    total_sessions: int
    open_sessions: int
    pending_requests: int
    accepted_requests: int
    rejected_requests: int
    total_ratings: int
    average_rating: float
