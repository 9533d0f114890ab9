"""Auth routes: register, login, current user."""
from fastapi import APIRouter

from skillswap.deps import CurrentUser, DbSession
from skillswap.errors import UnauthorizedError
from skillswap.models.user import User
from skillswap.schemas.user import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, UserResponse
from skillswap.services import users as users_service

router = APIRouter(prefix="/auth", tags=["auth"])


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        user_name=user.username,
        email=user.email,
        display_name=user.display_name,
        roles=user.role_names,
    )


@router.post("/register", response_model=RegisterResponse)
async def register(body: RegisterRequest, db: DbSession):
    """Create a new user. 400 with a list of reasons when the username/email is taken or the password is weak."""
    user = await users_service.create_user(db, body.user_name, body.email, body.password, body.display_name)
    return RegisterResponse(user_name=user.username, email=user.email)


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: DbSession):
    """Login with username + password; returns a JWT carrying id, username, roles and profileId."""
    user = await users_service.authenticate(db, body.user_name, body.password)
    if not user:
        raise UnauthorizedError("Invalid username or password")
    token = await users_service.issue_token(db, user)
    return LoginResponse(token=token, roles=user.role_names, user_name=user.username)


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUser):
    """Return the currently authenticated user (requires Bearer token)."""
    return user_to_response(current_user)
