"""Domain errors raised by services and translated to HTTP responses in one place (see main.py)."""
from fastapi import status


class SkillSwapError(Exception):
    """Base class for every error a service may raise on purpose."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str | list[str]):
        self.detail = detail
        super().__init__(detail if isinstance(detail, str) else "; ".join(detail))


class BadRequestError(SkillSwapError):
    """Malformed input, illegal state transition or business-rule violation."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailedError(BadRequestError):
    """Input rejected with a list of human-readable reasons (registration, user creation)."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(errors)


class UnauthorizedError(SkillSwapError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(SkillSwapError):
    """Authenticated, but not the owner/host or missing the required role."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SkillSwapError):
    status_code = status.HTTP_404_NOT_FOUND
