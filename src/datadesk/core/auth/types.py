"""Auth domain types."""

from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    """Account roles."""

    USER = "USER"
    ADMIN = "ADMIN"


class TokenPayload(BaseModel):
    """JWT token payload claims."""

    sub: str  # user_id
    email: str
    role: str
    exp: int  # expiration timestamp
    iat: int  # issued at timestamp
