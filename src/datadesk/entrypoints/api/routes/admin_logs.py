"""Admin log routes."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict

from datadesk.entrypoints.api.deps import AdminLogRepoDep
from datadesk.entrypoints.api.middleware.jwt_auth import RequireAdmin

router = APIRouter(prefix="/admin-logs", tags=["admin-logs"])


class AdminLogCreate(BaseModel):
    """Manually recorded admin log entry."""

    admin_id: UUID
    action: str
    endpoint: str


class AdminLogUpdate(BaseModel):
    """Fields of an entry that may be changed."""

    admin_id: UUID | None = None
    action: str | None = None
    endpoint: str | None = None


class AdminLogResponse(BaseModel):
    """A single admin log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    admin_id: UUID
    action: str
    endpoint: str
    created_at: datetime | None = None


@router.post("", response_model=AdminLogResponse)
async def create_admin_log(
    body: AdminLogCreate, repo: AdminLogRepoDep, admin: RequireAdmin
) -> AdminLogResponse:
    """Record an admin log entry."""
    entry = await repo.record(admin_id=body.admin_id, action=body.action, endpoint=body.endpoint)
    return AdminLogResponse.model_validate(entry)


@router.get("", response_model=list[AdminLogResponse])
async def list_admin_logs(repo: AdminLogRepoDep, admin: RequireAdmin) -> list[AdminLogResponse]:
    """List admin log entries, newest first."""
    return [AdminLogResponse.model_validate(e) for e in await repo.list()]


@router.get("/{log_id}", response_model=AdminLogResponse)
async def get_admin_log(
    log_id: UUID, repo: AdminLogRepoDep, admin: RequireAdmin
) -> AdminLogResponse:
    """Get one admin log entry."""
    entry = await repo.get(log_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Admin log not found")
    return AdminLogResponse.model_validate(entry)


@router.put("/{log_id}", response_model=AdminLogResponse)
async def update_admin_log(
    log_id: UUID, body: AdminLogUpdate, repo: AdminLogRepoDep, admin: RequireAdmin
) -> AdminLogResponse:
    """Update an admin log entry."""
    entry = await repo.update(log_id, body.model_dump(exclude_unset=True))
    if entry is None:
        raise HTTPException(status_code=404, detail="Admin log not found")
    return AdminLogResponse.model_validate(entry)


@router.delete("/{log_id}")
async def delete_admin_log(
    log_id: UUID, repo: AdminLogRepoDep, admin: RequireAdmin
) -> dict[str, str]:
    """Delete an admin log entry."""
    if not await repo.delete(log_id):
        raise HTTPException(status_code=404, detail="Admin log not found")
    return {"message": "Admin log deleted successfully"}
