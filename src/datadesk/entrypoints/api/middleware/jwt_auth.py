"""JWT authentication and the admin gate."""

from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from datadesk.core.auth.jwt import TokenError, decode_token
from datadesk.core.auth.types import UserRole
from datadesk.entrypoints.api.deps import AdminLogRepoDep, UserRepoDep
from datadesk.models import User

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class JwtContext:
    """Claims of a verified access token."""

    user_id: str
    email: str
    role: UserRole


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_jwt(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
) -> JwtContext:
    """Verify JWT token and return context.

    Args:
        request: The current request.
        credentials: Bearer token credentials.

    Returns:
        JwtContext with user info.

    Raises:
        HTTPException: 401 if token is missing or invalid.
    """
    if not credentials:
        raise _unauthorized("Missing authentication token")

    try:
        payload = decode_token(credentials.credentials)
        role = UserRole(payload.role)
    except TokenError as e:
        logger.warning("jwt_validation_failed", error=str(e))
        raise _unauthorized(str(e)) from None
    except ValueError:
        logger.warning("jwt_validation_failed", error="unknown role")
        raise _unauthorized("Invalid token: unknown role") from None

    context = JwtContext(user_id=payload.sub, email=payload.email, role=role)
    request.state.auth = context

    logger.debug("jwt_verified", user_id=context.user_id, role=context.role.value)
    return context


async def require_admin(
    request: Request,
    auth: Annotated[JwtContext, Depends(verify_jwt)],
    users: UserRepoDep,
    admin_logs: AdminLogRepoDep,
) -> User:
    """Admit only current ADMIN users and log the call.

    The role is read from the database, not the token, so a demoted
    admin loses access immediately.

    Raises:
        HTTPException: 401 if the user no longer exists, 403 if not an admin.
    """
    user = await users.get_by_email(auth.email)
    if user is None:
        logger.warning("admin_gate_unknown_user", user_id=auth.user_id)
        raise _unauthorized("User not found")

    if user.role != UserRole.ADMIN.value:
        logger.warning("admin_gate_forbidden", user_id=str(user.id), role=user.role)
        raise HTTPException(status_code=403, detail="This user is not an admin")

    try:
        await admin_logs.record(
            admin_id=user.id,
            action=request.method,
            endpoint=request.url.path,
        )
    except Exception as e:
        logger.error("admin_log_record_failed", user_id=str(user.id), error=str(e))

    request.state.user = user
    return user


RequireAdmin = Annotated[User, Depends(require_admin)]
