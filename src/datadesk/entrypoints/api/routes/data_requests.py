"""Data request routes."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from datadesk.adapters.repositories import InvalidSortError
from datadesk.core.query_builder import build_simple_query
from datadesk.entrypoints.api.deps import DataRequestRepoDep, SettingsDep
from datadesk.entrypoints.api.middleware.jwt_auth import RequireAdmin
from datadesk.models import DataRequestStatus
from datadesk.safety import is_select_only

logger = structlog.get_logger()

router = APIRouter(prefix="/data-requests", tags=["data-requests"])


class DataRequestCreate(BaseModel):
    """A new data request."""

    name: str = Field(..., min_length=1)
    nim: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    email: EmailStr
    format: str = Field(..., min_length=1)
    purpose: str = Field(..., min_length=1)
    year_from: int | None = None
    year_to: int | None = None
    table: str | None = None
    columns: str | None = None
    sql_query: str | None = None


class SimpleDataRequestCreate(BaseModel):
    """A data request described by column and filter lists."""

    name: str = Field(..., min_length=1)
    nim: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    email: EmailStr
    format: str = Field(..., min_length=1)
    purpose: str = Field(..., min_length=1)
    select: list[str] = Field(..., min_length=1)
    where: list[str] = Field(default_factory=list)
    order_by: list[str] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=0)


class DataRequestUpdate(BaseModel):
    """Fields an admin may change; omitted fields are left alone."""

    name: str | None = None
    nim: str | None = None
    phone_number: str | None = None
    email: EmailStr | None = None
    format: str | None = None
    purpose: str | None = None
    status: DataRequestStatus | None = None
    year_from: int | None = None
    year_to: int | None = None
    table: str | None = None
    columns: str | None = None
    sql_query: str | None = None


class DataRequestResponse(BaseModel):
    """A stored data request."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    nim: str
    phone_number: str
    email: str
    format: str
    purpose: str
    status: str
    year_from: int | None = None
    year_to: int | None = None
    table: str | None = None
    columns: str | None = None
    sql_query: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DataRequestListResponse(BaseModel):
    """List of data requests."""

    data_requests: list[DataRequestResponse]


def _created(request: Any) -> dict[str, Any]:
    return {
        "message": "Data request created successfully",
        "data": DataRequestResponse.model_validate(request),
    }


@router.post("")
async def create_data_request(
    body: DataRequestCreate, repo: DataRequestRepoDep
) -> dict[str, Any]:
    """Submit a data request. Open to anyone."""
    request = await repo.create(body.model_dump())
    return _created(request)


@router.post("/simple")
async def create_simple_data_request(
    body: SimpleDataRequestCreate,
    repo: DataRequestRepoDep,
    settings: SettingsDep,
) -> dict[str, Any]:
    """Submit a data request whose SQL is built against the fixed table."""
    if not settings.fixed_table:
        raise HTTPException(status_code=500, detail="FIXED_TABLE not set in environment")

    query = build_simple_query(
        settings.fixed_table,
        select=body.select,
        where=body.where,
        order_by=body.order_by,
        limit=body.limit,
    )
    if not is_select_only(query):
        raise HTTPException(status_code=400, detail="Request does not form a single SELECT")

    fields = body.model_dump(include={"name", "nim", "phone_number", "email", "format", "purpose"})
    request = await repo.create({**fields, "table": settings.fixed_table, "sql_query": query})
    return _created(request)


@router.get("", response_model=DataRequestListResponse)
async def list_data_requests(
    repo: DataRequestRepoDep, admin: RequireAdmin
) -> DataRequestListResponse:
    """List every data request."""
    requests = await repo.list()
    return DataRequestListResponse(
        data_requests=[DataRequestResponse.model_validate(r) for r in requests]
    )


@router.get("/filter", response_model=DataRequestListResponse)
async def filter_data_requests(
    repo: DataRequestRepoDep,
    admin: RequireAdmin,
    search_query: str | None = None,
    sort_by: str | None = None,
    page: Annotated[int | None, Query(ge=1)] = None,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> DataRequestListResponse:
    """Search, sort and paginate data requests.

    Args:
        repo: Data request repository.
        admin: The calling admin.
        search_query: Substring of name, NIM or email.
        sort_by: ``"column [ASC|DESC]"``; defaults to newest first.
        page: Page number (1-indexed).
        limit: Number of items per page.
    """
    try:
        requests = await repo.search(search=search_query, sort_by=sort_by, page=page, limit=limit)
    except InvalidSortError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    return DataRequestListResponse(
        data_requests=[DataRequestResponse.model_validate(r) for r in requests]
    )


@router.get("/{request_id}")
async def get_data_request(
    request_id: UUID, repo: DataRequestRepoDep, admin: RequireAdmin
) -> dict[str, DataRequestResponse]:
    """Get one data request."""
    request = await repo.get(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Data request not found")
    return {"data_request": DataRequestResponse.model_validate(request)}


@router.put("/{request_id}")
async def update_data_request(
    request_id: UUID,
    body: DataRequestUpdate,
    repo: DataRequestRepoDep,
    admin: RequireAdmin,
) -> dict[str, Any]:
    """Update a data request, e.g. to move it to ``COMPLETED``."""
    changes = body.model_dump(exclude_unset=True, mode="json")
    request = await repo.update(request_id, changes)
    if request is None:
        raise HTTPException(status_code=404, detail="Data request not found")
    return {
        "message": "Data request updated successfully",
        "data": DataRequestResponse.model_validate(request),
    }


@router.delete("/{request_id}")
async def delete_data_request(
    request_id: UUID, repo: DataRequestRepoDep, admin: RequireAdmin
) -> dict[str, str]:
    """Delete a data request."""
    if not await repo.delete(request_id):
        raise HTTPException(status_code=404, detail="Data request not found")
    return {"message": "Data request deleted successfully"}
