"""Authentication: password hashing, JWT tokens and login."""

from datadesk.core.auth.jwt import TokenError, create_access_token, decode_token
from datadesk.core.auth.password import hash_password, verify_password
from datadesk.core.auth.service import AuthError, AuthService
from datadesk.core.auth.types import TokenPayload, UserRole

__all__ = [
    "AuthError",
    "AuthService",
    "TokenError",
    "TokenPayload",
    "UserRole",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
]
