"""Access tokens for the admin API.

Tokens are HS256-signed and carry the account id, email and role. The
role in a token is informational only; the admin gate re-reads it from
the database on every request.
"""

import os
from datetime import UTC, datetime, timedelta

import jwt

from datadesk.core.auth.types import TokenPayload


class TokenError(Exception):
    """Raised when token validation fails."""

    pass


SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-secret-change-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

REQUIRED_CLAIMS = ("sub", "email", "role", "exp", "iat")


def create_access_token(user_id: str, email: str, role: str) -> str:
    """Sign a token for a logged-in account.

    Lifetime is ACCESS_TOKEN_EXPIRE_MINUTES (a day unless configured).
    """
    issued = datetime.now(UTC)
    claims = TokenPayload(
        sub=user_id,
        email=email,
        role=role,
        exp=int((issued + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)).timestamp()),
        iat=int(issued.timestamp()),
    )
    return jwt.encode(claims.model_dump(), SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    """Verify the signature and expiry of ``token`` and return its claims.

    Raises:
        TokenError: If the token is expired, tampered with, malformed or
            lacks one of REQUIRED_CLAIMS.
    """
    try:
        claims = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired") from None
    except jwt.MissingRequiredClaimError as e:
        raise TokenError(f"Invalid token: missing claim {e.claim}") from None
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}") from None

    return TokenPayload.model_validate({name: claims[name] for name in REQUIRED_CLAIMS})
