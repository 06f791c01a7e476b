"""Auth service for login."""

from typing import Any, Protocol

import structlog

from datadesk.core.auth.jwt import create_access_token
from datadesk.core.auth.password import verify_password
from datadesk.models import User

logger = structlog.get_logger()


class AuthError(Exception):
    """Raised when authentication fails."""

    pass


class UserLookup(Protocol):
    """Anything that can find a user by email."""

    async def get_by_email(self, email: str) -> User | None:
        """Return the user with this email, if any."""
        ...


class AuthService:
    """Service for authentication operations."""

    def __init__(self, users: UserLookup) -> None:
        """Initialize with a user repository.

        Args:
            users: Repository used to look up accounts.
        """
        self._users = users

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Authenticate user and return an access token.

        Args:
            email: User's email address.
            password: Plain text password.

        Returns:
            Dict with the token, token_type and the user's id, email and role.

        Raises:
            AuthError: If authentication fails.
        """
        user = await self._users.get_by_email(email)
        if not user or not user.password_hash:
            logger.info("login_failed", reason="unknown_user")
            raise AuthError("Invalid email or password")

        if not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=str(user.id))
            raise AuthError("Invalid email or password")

        access_token = create_access_token(
            user_id=str(user.id),
            email=user.email,
            role=user.role,
        )
        logger.info("login_succeeded", user_id=str(user.id), role=user.role)

        return {
            "message": "Login successful",
            "token": access_token,
            "token_type": "bearer",
            "id": str(user.id),
            "email": user.email,
            "role": user.role,
        }
