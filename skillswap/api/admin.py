"""Admin-only routes: user management and summary counts."""
from fastapi import APIRouter, status

from skillswap.api.auth import user_to_response
from skillswap.deps import AdminUser, DbSession
from skillswap.schemas.user import (
    AdminSummary,
    RegisterRequest,
    ToggleRoleRequest,
    ToggleRoleResponse,
    UserResponse,
)
from skillswap.services import admin as admin_service
from skillswap.services import users as users_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
async def list_users(db: DbSession, admin: AdminUser):
    return [user_to_response(u) for u in await users_service.list_users(db)]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def add_user(body: RegisterRequest, db: DbSession, admin: AdminUser):
    """Same rules as self-registration."""
    user = await users_service.create_user(db, body.user_name, body.email, body.password, body.display_name)
    return user_to_response(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: DbSession, admin: AdminUser):
    await users_service.delete_user(db, user_id)
    return None


@router.patch("/users/{user_id}/role", response_model=ToggleRoleResponse)
async def toggle_admin_role(user_id: int, body: ToggleRoleRequest, db: DbSession, admin: AdminUser):
    """Grant or revoke Admin. Repeating the same request changes nothing."""
    user = await users_service.get_user(db, user_id)
    user = await users_service.set_admin(db, user, body.is_admin)
    return ToggleRoleResponse(id=user.id, user_name=user.username, is_admin=user.is_admin)


@router.get("/summary", response_model=AdminSummary)
async def summary(db: DbSession, admin: AdminUser):
    return AdminSummary(**await admin_service.summary(db))
