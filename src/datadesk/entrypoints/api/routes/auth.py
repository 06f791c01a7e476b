"""Login route."""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, EmailStr, Field

from datadesk.core.auth import AuthError, AuthService
from datadesk.entrypoints.api.deps import UserRepoDep

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Login request body."""

    email: EmailStr
    password: str = Field(..., min_length=6)


@router.post("/login")
async def login(body: LoginRequest, users: UserRepoDep) -> dict[str, Any]:
    """Exchange email and password for an access token."""
    service = AuthService(users)
    try:
        return await service.login(body.email, body.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None
